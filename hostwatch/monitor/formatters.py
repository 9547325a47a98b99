"""Pure functions that turn a snapshot + finding into an HTML alert report."""

from __future__ import annotations

from collections.abc import Callable
from html import escape as html_escape

from hostwatch.core.types import (
    AlertFinding,
    AlertReport,
    HostMetadata,
    ResourceSnapshot,
    Thresholds,
)

ReportFormatter = Callable[
    [ResourceSnapshot, AlertFinding, Thresholds, HostMetadata],
    AlertReport,
]

DEFAULT_SUBJECT = "Resources Communication"

# ── Styling ─────────────────────────────────────────────────────

_OK_COLOR = "green"
_ALERT_COLOR = "red"

_CONTAINER_STYLE = "font-family: Arial, sans-serif; line-height: 1.6; color: #333;"
_TABLE_STYLE = "border-collapse: collapse; width: 100%;"


def _status_cell(high: bool, alert_label: str = "HIGH") -> str:
    color = _ALERT_COLOR if high else _OK_COLOR
    label = alert_label if high else "OK"
    return f"<td style='color:{color}; font-weight:bold;'>{label}</td>"


def _row(resource: str, usage: str, status: str) -> str:
    return (
        f"<tr><td>{html_escape(resource)}</td>"
        f"<td>{html_escape(usage)}</td>{status}</tr>"
    )


# ── Formatters ──────────────────────────────────────────────────


def format_resource_rows(
    snapshot: ResourceSnapshot,
    finding: AlertFinding,
) -> list[str]:
    """One table row for CPU, one for RAM, then one per disk."""
    high_disks = set(finding.high_disk_names)
    rows = [
        _row("CPU", f"{snapshot.cpu_percent:.1f}%", _status_cell(finding.cpu_high)),
        _row("RAM", f"{snapshot.ram_percent}%", _status_cell(finding.ram_high)),
    ]
    for disk in snapshot.disks:
        rows.append(_row(
            f"Disk {disk.name}",
            f"{disk.used_percent:.1f}% ({disk.free_gib:.2f} GB Free)",
            _status_cell(disk.name in high_disks, "LOW SPACE"),
        ))
    return rows


def build_alert_report(
    snapshot: ResourceSnapshot,
    finding: AlertFinding,
    thresholds: Thresholds,
    host: HostMetadata,
    subject: str = DEFAULT_SUBJECT,
) -> AlertReport:
    """Render the combined resource report sent to operators."""
    captured = snapshot.captured_at.strftime("%Y-%m-%d %H:%M:%S")
    parts = [
        f"<div style='{_CONTAINER_STYLE}'>",
        "<h2 style='color: #0056b3;'>Resource Report</h2>",
        f"<p><strong>Timestamp:</strong> {captured} UTC<br>",
        f"<strong>Machine:</strong> {html_escape(host.hostname)}<br>",
        f"<strong>User:</strong> {html_escape(host.user)}<br>",
        f"<strong>Ip:</strong> {html_escape(host.ip_address)}</p>",
        f"<table border='1' cellpadding='8' style='{_TABLE_STYLE}'>",
        "<tr style='background-color: #f2f2f2;'>"
        "<th>Resource</th><th>Usage</th><th>Status</th></tr>",
        *format_resource_rows(snapshot, finding),
        "</table>",
        "<p style='font-size: 0.9em;'>Thresholds: "
        f"CPU {thresholds.cpu_percent:g}%, RAM {thresholds.ram_percent:g}%, "
        f"Disk {thresholds.disk_percent:g}%</p>",
        "<p style='font-size: 0.8em; color: #777;'>"
        "This is an automated message from the resource monitor.</p>",
        "</div>",
    ]
    return AlertReport(subject=subject, body="".join(parts))
