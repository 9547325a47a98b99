#!/usr/bin/env python3
"""Monitor entrypoint — wires the stack and runs the daily check loop.

Usage::

    # Run with default config
    python scripts/run.py

    # Custom config file
    python scripts/run.py --config config/settings.yaml

    # Single check, then exit
    python scripts/run.py --once --log-level DEBUG
"""

from __future__ import annotations

import argparse
import asyncio
import signal
import sys

import structlog

from hostwatch.core.config import load_settings
from hostwatch.core.logging import setup_logging
from hostwatch.monitor.factory import create_monitor_stack

logger = structlog.get_logger(__name__)


async def run(args: argparse.Namespace) -> int:
    """Start the scheduler and run until interrupted."""
    settings = load_settings(args.config)
    setup_logging(level=args.log_level, fmt=args.log_format)

    scheduler, check = create_monitor_stack(settings)

    if args.once:
        outcome = await check.run_once()
        logger.info(
            "single_check_done",
            triggered=outcome.finding.triggered,
            notified=outcome.notified,
            suppressed=outcome.suppressed,
        )
        return 0

    logger.info(
        "monitor_starting",
        mail_server=settings.mail.server,
        hour_utc=settings.scheduler.target_hour_utc,
        key_mode=settings.alerts.key_mode.value,
        ledger=settings.alerts.ledger_path or "memory",
    )
    await scheduler.start()

    # ── Wait for shutdown signal ─────────────────────────────────
    stop_event = asyncio.Event()

    def _signal_handler() -> None:
        logger.info("shutdown_signal_received")
        stop_event.set()

    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, _signal_handler)
        except NotImplementedError:
            # Windows: signal handlers not supported on ProactorEventLoop
            pass

    try:
        await stop_event.wait()
    except KeyboardInterrupt:
        logger.info("keyboard_interrupt")

    await scheduler.stop()
    logger.info(
        "monitor_exited",
        checks=scheduler.check_count,
        failed_checks=scheduler.error_count,
    )
    return 0


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Monitor host CPU, memory and disk usage and email on thresholds.",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to settings YAML (default: config/settings.yaml)",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Log level override: DEBUG, INFO, WARNING, ERROR",
    )
    parser.add_argument(
        "--log-format",
        default=None,
        choices=["json", "console"],
        help="Log renderer override",
    )
    parser.add_argument(
        "--once",
        action="store_true",
        help="Run a single check immediately and exit",
    )
    args = parser.parse_args()

    code = asyncio.run(run(args))
    sys.exit(code)


if __name__ == "__main__":
    main()
