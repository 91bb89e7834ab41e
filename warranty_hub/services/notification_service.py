# warranty_hub/services/notification_service.py
from html import escape

from warranty_hub.services.mail_client import MailClient
from warranty_hub.utils.settings import NOTIFY_EMAIL
from warranty_hub.utils.logging import get_logger

logger = get_logger(__name__)


class NotificationService:
    """
    Serwis do wysyłania powiadomień e-mail.
    Wywoływany jako background task po odpowiedzi HTTP; błąd wysyłki jest
    tylko logowany i nigdy nie psuje operacji, która go wywołała.
    """

    def __init__(self, mail_client: MailClient | None = None, notify_email: str | None = NOTIFY_EMAIL):
        self.mail_client = mail_client or MailClient()
        self.notify_email = notify_email

    def _deliver(self, to: str | None, subject: str, html: str):
        if not to:
            logger.warning(f"[NOTIFICATION] no recipient for '{subject}', skipped")
            return
        try:
            self.mail_client.send(to=to, subject=subject, html=html)
            logger.info(f"[NOTIFICATION] '{subject}' sent to {to}")
        except Exception as e:
            logger.warning(f"[NOTIFICATION] '{subject}' to {to} failed: {e}")

    def warranty_registered(self, user_name: str, user_email: str, serial: str, product_name: str):
        self._deliver(
            user_email,
            "Warranty registration received",
            (
                f"<p>Hi {escape(user_name)},</p>"
                f"<p>We have received your warranty registration for "
                f"<strong>{escape(product_name)}</strong> (serial {escape(serial)}).</p>"
                f"<p>We will let you know once it has been reviewed.</p>"
            ),
        )
        self._deliver(
            self.notify_email,
            f"New warranty registration: {serial}",
            (
                f"<p>{escape(user_name)} &lt;{escape(user_email)}&gt; registered serial "
                f"<strong>{escape(serial)}</strong> for {escape(product_name)}.</p>"
            ),
        )

    def warranty_status_changed(self, user_name: str, user_email: str, serial: str, status: str):
        verdict = "accepted" if status == "accepted" else "rejected"
        self._deliver(
            user_email,
            f"Your warranty registration was {verdict}",
            (
                f"<p>Hi {escape(user_name)},</p>"
                f"<p>Your warranty registration for serial <strong>{escape(serial)}</strong> "
                f"has been <strong>{verdict}</strong>.</p>"
            ),
        )

    def contact_received(self, name: str, email: str, phone: str, message: str):
        self._deliver(
            self.notify_email,
            f"New contact message from {name}",
            (
                f"<p><strong>{escape(name)}</strong> &lt;{escape(email)}&gt;, {escape(phone)}</p>"
                f"<p>{escape(message)}</p>"
            ),
        )
