"""Mail transports — the connect → login → send → close surface."""

from __future__ import annotations

import abc
import smtplib
import ssl
from email.message import EmailMessage
from email.utils import formataddr, make_msgid
from types import TracebackType

from hostwatch.core.config import MailConfig
from hostwatch.monitor.exceptions import TransportError


class MailTransport(abc.ABC):
    """One connection's worth of mail delivery.

    A transport is used for exactly one attempt and then closed; the
    notifier never reuses it across attempts or recipients.  Usable as a
    context manager so ``close()`` always runs.
    """

    @abc.abstractmethod
    def connect(self) -> None:
        """Open the connection (and negotiate TLS if configured)."""

    @abc.abstractmethod
    def login(self) -> None:
        """Authenticate, if credentials are configured."""

    @abc.abstractmethod
    def send(self, message: EmailMessage) -> None:
        """Submit a single message."""

    @abc.abstractmethod
    def close(self) -> None:
        """Disconnect.  Must be safe to call when never connected."""

    def __enter__(self) -> MailTransport:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()


class SmtpTransport(MailTransport):
    """SMTP via stdlib ``smtplib``.

    ``use_ssl`` selects implicit TLS (``SMTP_SSL``, usually port 465);
    otherwise a plain connection is upgraded with STARTTLS when
    ``starttls`` is set.
    """

    def __init__(self, config: MailConfig) -> None:
        self._config = config
        self._client: smtplib.SMTP | None = None

    @property
    def connected(self) -> bool:
        return self._client is not None

    def connect(self) -> None:
        cfg = self._config
        try:
            if cfg.use_ssl:
                client: smtplib.SMTP = smtplib.SMTP_SSL(
                    cfg.server,
                    cfg.port,
                    timeout=cfg.timeout_secs,
                    context=ssl.create_default_context(),
                )
            else:
                client = smtplib.SMTP(cfg.server, cfg.port, timeout=cfg.timeout_secs)
        except (smtplib.SMTPException, OSError) as exc:
            raise TransportError(f"connect to {cfg.server}:{cfg.port} failed: {exc}") from exc

        if not cfg.use_ssl and cfg.starttls:
            try:
                client.starttls(context=ssl.create_default_context())
            except (smtplib.SMTPException, OSError) as exc:
                client.close()
                raise TransportError(f"STARTTLS with {cfg.server} failed: {exc}") from exc
        self._client = client

    def login(self) -> None:
        client = self._require_client()
        username = self._config.username
        if not username:
            return
        try:
            client.login(username, self._config.password.get_secret_value())
        except (smtplib.SMTPException, OSError) as exc:
            raise TransportError(f"authentication as {username} failed: {exc}") from exc

    def send(self, message: EmailMessage) -> None:
        client = self._require_client()
        try:
            refused = client.send_message(message)
        except (smtplib.SMTPException, OSError) as exc:
            raise TransportError(f"send failed: {exc}") from exc
        if refused:
            raise TransportError(f"recipients refused: {sorted(refused)}")

    def close(self) -> None:
        client, self._client = self._client, None
        if client is None:
            return
        try:
            client.quit()
        except (smtplib.SMTPException, OSError) as exc:
            client.close()
            raise TransportError(f"disconnect failed: {exc}") from exc

    def _require_client(self) -> smtplib.SMTP:
        if self._client is None:
            raise TransportError("transport is not connected")
        return self._client


def build_message(
    config: MailConfig,
    recipient: str,
    subject: str,
    html_body: str,
) -> EmailMessage:
    """Build a fresh single-recipient HTML message."""
    msg = EmailMessage()
    msg["From"] = formataddr((config.sender_name, config.sender_email))
    msg["To"] = formataddr((recipient, recipient))
    msg["Subject"] = subject
    msg["Message-ID"] = make_msgid()
    msg.set_content("This message requires an HTML-capable mail client.")
    msg.add_alternative(html_body, subtype="html")
    return msg
