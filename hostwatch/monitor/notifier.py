"""Notifiers — per-recipient email delivery with bounded retries."""

from __future__ import annotations

import abc
import asyncio
from collections.abc import Awaitable, Callable

import structlog

from hostwatch.core.config import MailConfig
from hostwatch.core.types import (
    DeliveryReport,
    NotificationRequest,
    RecipientOutcome,
    RetryPolicy,
)
from hostwatch.monitor.transport import MailTransport, SmtpTransport, build_message

logger = structlog.get_logger(__name__)

TransportFactory = Callable[[MailConfig], MailTransport]
SleepFn = Callable[[float], Awaitable[None]]


class Notifier(abc.ABC):
    """Base class for alert delivery."""

    @abc.abstractmethod
    async def send(self, request: NotificationRequest) -> DeliveryReport:
        """Deliver *request* to every recipient.  Never raises on delivery failure."""


class EmailNotifier(Notifier):
    """Sends one HTML email per recipient.

    Recipients are handled in order and in isolation: each gets its own
    retry budget, and exhausting it is logged at critical without stopping
    delivery to the rest.  Every attempt builds a fresh message and a fresh
    transport, which is always closed before the attempt ends.  Blocking
    SMTP I/O runs in a worker thread.
    """

    def __init__(
        self,
        config: MailConfig,
        retry: RetryPolicy | None = None,
        transport_factory: TransportFactory = SmtpTransport,
        sleep: SleepFn = asyncio.sleep,
    ) -> None:
        self._config = config
        self._retry = retry or RetryPolicy()
        self._transport_factory = transport_factory
        self._sleep = sleep

    @property
    def retry_policy(self) -> RetryPolicy:
        return self._retry

    async def send(self, request: NotificationRequest) -> DeliveryReport:
        report = DeliveryReport()
        for recipient in request.recipients:
            outcome = await self._send_to(recipient, request)
            report.outcomes.append(outcome)
        logger.info(
            "notification_dispatched",
            recipients=len(report.outcomes),
            failed=report.failed,
        )
        return report

    async def _send_to(self, recipient: str, request: NotificationRequest) -> RecipientOutcome:
        max_attempts = self._retry.max_attempts
        last_error = ""
        for attempt in range(1, max_attempts + 1):
            try:
                await asyncio.to_thread(self._deliver_once, recipient, request)
            except asyncio.CancelledError:
                raise
            except Exception as exc:
                last_error = f"{type(exc).__name__}: {exc}"
                logger.error(
                    "email_attempt_failed",
                    recipient=recipient,
                    attempt=attempt,
                    max_attempts=max_attempts,
                    error=last_error,
                )
                if attempt < max_attempts:
                    await self._sleep(self._retry.backoff_secs)
                continue

            logger.info("email_sent", recipient=recipient, attempt=attempt)
            return RecipientOutcome(recipient=recipient, succeeded=True, attempts=attempt)

        logger.critical(
            "email_delivery_failed",
            recipient=recipient,
            attempts=max_attempts,
            error=last_error,
        )
        return RecipientOutcome(
            recipient=recipient,
            succeeded=False,
            attempts=max_attempts,
            error=last_error,
        )

    def _deliver_once(self, recipient: str, request: NotificationRequest) -> None:
        message = build_message(self._config, recipient, request.subject, request.body)
        with self._transport_factory(self._config) as transport:
            transport.connect()
            transport.login()
            transport.send(message)
