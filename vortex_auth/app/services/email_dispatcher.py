"""
Outbound email.

The dispatcher renders the welcome and password-reset messages and hands
them to deliver(). Concrete transports live in the adapter layer.
"""

import logging
from abc import ABC, abstractmethod
from email.message import EmailMessage
from typing import Callable

logger = logging.getLogger(__name__)

APP_NAME = "Vortex"

WELCOME_SUBJECT = f"Welcome to {APP_NAME}!"
WELCOME_BODY = """Hello {username},

Welcome to {app_name}! Your account has been successfully created.

You can now log in to your account and start using our services.

If you have any questions, please don't hesitate to contact us.

Best regards,
The {app_name} Team
"""

PASSWORD_RESET_SUBJECT = "Password Reset Request"
PASSWORD_RESET_BODY = """Hello {username},

You have requested a password reset for your account.

Click the following link to reset your password:
{app_url}/auth/reset-password?token={token}

This link will expire in {ttl_hours} hours.

If you did not request this reset, please ignore this email.

Best regards,
The {app_name} Team
"""


class DeliveryError(Exception):
    """The message could not be handed to the mail transport"""


class EmailDispatcher(ABC):
    def __init__(self, sender: str, app_url: str, reset_ttl_hours: int):
        self.sender = sender
        self.app_url = app_url.rstrip("/")
        self.reset_ttl_hours = reset_ttl_hours

    def compose(self, to: str, subject: str, body: str) -> EmailMessage:
        message = EmailMessage()
        message["From"] = self.sender
        message["To"] = to
        message["Subject"] = subject
        message.set_content(body)
        return message

    def render_welcome(self, to: str, username: str) -> EmailMessage:
        body = WELCOME_BODY.format(username=username, app_name=APP_NAME)
        return self.compose(to, WELCOME_SUBJECT, body)

    def render_password_reset(self, to: str, username: str, token: str) -> EmailMessage:
        body = PASSWORD_RESET_BODY.format(
            username=username,
            app_url=self.app_url,
            token=token,
            ttl_hours=self.reset_ttl_hours,
            app_name=APP_NAME,
        )
        return self.compose(to, PASSWORD_RESET_SUBJECT, body)

    def send_welcome(self, to: str, username: str) -> None:
        self.deliver(self.render_welcome(to, username))

    def send_password_reset(self, to: str, username: str, token: str) -> None:
        self.deliver(self.render_password_reset(to, username, token))

    @abstractmethod
    def deliver(self, message: EmailMessage) -> None:
        """Send the message. Raises DeliveryError on failure"""
        pass


def deliver_quietly(send: Callable[..., None], *args) -> None:
    """Run a send in the background: failures are logged, never raised"""
    try:
        send(*args)
    except DeliveryError:
        logger.exception(f"Email delivery failed ({getattr(send, '__name__', 'send')})")
