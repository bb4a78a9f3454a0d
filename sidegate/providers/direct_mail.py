"""Direct SMTP submission provider (Gmail-style authenticated session)."""

import asyncio
import smtplib
import ssl
import time
from email.message import EmailMessage
from email.utils import make_msgid, parseaddr

from sidegate.common.logging import logger, mask_email
from sidegate.common.metrics import provider_latency_seconds
from sidegate.common.schemas import DispatchResult, VerificationRequest
from sidegate.providers.errors import translate_failure
from sidegate.providers.templates import otp_subject, render_html, render_text


class DirectMailAdapter:
    """Authenticates to a mail transport and delivers the message itself."""

    name = "direct_mail"

    def __init__(
        self,
        host: str,
        port: int,
        username: str,
        password: str,
        mail_from: str,
        app_name: str,
        use_ssl: bool = False,
        timeout_seconds: float = 15.0,
        service_name: str = "sidegate",
    ) -> None:
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.mail_from = mail_from
        self.app_name = app_name
        self.use_ssl = use_ssl
        self.timeout_seconds = timeout_seconds
        self.service_name = service_name
        self.tls_context = ssl.create_default_context()

    def build_message(self, request: VerificationRequest) -> EmailMessage:
        msg = EmailMessage()
        msg["Subject"] = otp_subject(self.app_name)
        msg["From"] = self.mail_from
        msg["To"] = request.recipient_email
        _, address = parseaddr(self.mail_from)
        msg["Message-ID"] = make_msgid(domain=address.split("@")[1] if "@" in address else None)
        msg.set_content(render_text(request.code, self.app_name))
        msg.add_alternative(render_html(request.code, self.app_name), subtype="html")
        return msg

    def _send(self, msg: EmailMessage) -> None:
        if self.use_ssl:
            server = smtplib.SMTP_SSL(self.host, self.port, timeout=self.timeout_seconds, context=self.tls_context)
        else:
            server = smtplib.SMTP(self.host, self.port, timeout=self.timeout_seconds)
        with server:
            if not self.use_ssl:
                server.starttls(context=self.tls_context)
            server.login(self.username, self.password)
            server.send_message(msg)

    async def dispatch(self, request: VerificationRequest) -> DispatchResult:
        """Submit one message; the Message-ID is the provider reference."""

        msg = self.build_message(request)
        start = time.perf_counter()
        try:
            await asyncio.to_thread(self._send, msg)
        except (smtplib.SMTPException, OSError) as exc:
            error = translate_failure(self.name, exc)
            logger.error(
                "smtp send failed to=%s kind=%s reason=%s",
                mask_email(request.recipient_email),
                error.kind.value,
                error.reason,
            )
            raise error from exc
        finally:
            provider_latency_seconds.labels(service=self.service_name, provider=self.name).observe(
                max(0.0, time.perf_counter() - start)
            )
        message_id = msg["Message-ID"]
        logger.info("email sent to=%s message_id=%s", mask_email(request.recipient_email), message_id)
        return DispatchResult(success=True, provider_reference=message_id)
