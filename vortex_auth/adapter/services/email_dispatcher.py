import logging
import smtplib
import ssl
from email.message import EmailMessage

from vortex_auth.app.services.email_dispatcher import DeliveryError, EmailDispatcher

logger = logging.getLogger(__name__)


class SmtpEmailDispatcher(EmailDispatcher):
    """Delivers over SMTP; implicit TLS when use_tls, STARTTLS when offered otherwise"""

    def __init__(
        self,
        host: str,
        port: int,
        username: str,
        password: str,
        use_tls: bool,
        sender: str,
        app_url: str,
        reset_ttl_hours: int,
        timeout: int = 10,
    ):
        super().__init__(sender, app_url, reset_ttl_hours)
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.use_tls = use_tls
        self.timeout = timeout

    def _connect(self) -> smtplib.SMTP:
        if self.use_tls:
            context = ssl.create_default_context()
            return smtplib.SMTP_SSL(self.host, self.port, context=context, timeout=self.timeout)

        server = smtplib.SMTP(self.host, self.port, timeout=self.timeout)
        server.ehlo()
        if server.has_extn("starttls"):
            server.starttls(context=ssl.create_default_context())
            server.ehlo()
        return server

    def deliver(self, message: EmailMessage) -> None:
        try:
            with self._connect() as server:
                if self.username and self.password:
                    server.login(self.username, self.password)
                server.send_message(message)
        except (smtplib.SMTPException, OSError) as exc:
            raise DeliveryError(f"Failed to send email to {message['To']}: {exc}") from exc

        logger.info(f"Email sent to {message['To']}: {message['Subject']}")


class LogEmailDispatcher(EmailDispatcher):
    """Development sink used when no SMTP host is configured"""

    def deliver(self, message: EmailMessage) -> None:
        logger.info(
            f"Email would be sent to {message['To']}:\n"
            f"Subject: {message['Subject']}\n"
            f"Body: {message.get_content()}"
        )


def create_email_dispatcher(config) -> EmailDispatcher:
    if not config.SMTP_HOST:
        logger.warning("SMTP_HOST not set, emails will be logged instead of sent")
        return LogEmailDispatcher(
            sender=config.SMTP_FROM,
            app_url=config.APP_URL,
            reset_ttl_hours=config.PASSWORD_RESET_TOKEN_EXPIRY,
        )
    return SmtpEmailDispatcher(
        host=config.SMTP_HOST,
        port=config.SMTP_PORT,
        username=config.SMTP_USERNAME,
        password=config.SMTP_PASSWORD,
        use_tls=config.SMTP_TLS,
        sender=config.SMTP_FROM,
        app_url=config.APP_URL,
        reset_ttl_hours=config.PASSWORD_RESET_TOKEN_EXPIRY,
        timeout=config.SMTP_TIMEOUT,
    )
