"""
Email notifications for sales, returns and low stock.

Messages go to every active admin/owner with an email address. Sending is
gated by the system settings, and a failure never reaches the caller: it is
logged and the request carries on.
"""

import logging
import smtplib
from email.message import EmailMessage
from typing import Any, Dict, List, Optional, Tuple

from simplestore.core.config import get_smtp_settings
from simplestore.domain.interfaces import IUserReader
from simplestore.services.settings_service import SettingsService

logger = logging.getLogger(__name__)

SALE = "sale"
RETURN = "return"
LOW_STOCK = "low_stock"


def build_message(kind: str, details: Dict[str, Any]) -> Tuple[str, str]:
    """Return ``(subject, body)`` for a notification type."""
    if kind == SALE:
        return (
            "New Sale Notification",
            f"A new sale has been recorded with order number "
            f"{details['orderNumber']} for customer {details['customerName']}. "
            f"Total amount: {details['totalAmount']}",
        )
    if kind == RETURN:
        return (
            "New Return Notification",
            f"A new return has been recorded with return number "
            f"{details['returnNumber']} from customer {details['customerName']}. "
            f"Total amount: {details['totalAmount']}",
        )
    if kind == LOW_STOCK:
        return (
            "Low Stock Alert",
            f"Product {details['name']} (Code: {details['code']}) is running low "
            f"on stock. Current stock: {details['stock']}",
        )
    raise ValueError(f"Unknown notification type: {kind}")


class NotificationService:
    def __init__(
        self,
        user_repo: IUserReader,
        settings_service: SettingsService,
        smtp_settings: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.user_repo = user_repo
        self.settings_service = settings_service
        self.smtp = smtp_settings or get_smtp_settings()

    def is_enabled(self, kind: str) -> bool:
        if not self.settings_service.notifications_enabled():
            return False
        if kind == LOW_STOCK:
            return self.settings_service.stock_alerts_enabled()
        return True

    def notify(self, kind: str, details: Dict[str, Any]) -> bool:
        """Send a notification; returns True when a message was handed to SMTP."""
        try:
            if not self.is_enabled(kind):
                logger.debug(
                    "Notification disabled by settings",
                    extra={"context": {"type": kind}},
                )
                return False

            recipients = self.user_repo.list_notification_recipients()
            if not recipients:
                logger.info(
                    "No notification recipients", extra={"context": {"type": kind}}
                )
                return False

            subject, body = build_message(kind, details)
            if not self.smtp.get("host"):
                logger.info(
                    f"SMTP not configured, notification not sent: {subject}",
                    extra={"context": {"type": kind, "recipients": len(recipients)}},
                )
                return False

            self._send(recipients, subject, body)
            logger.info(
                "Notification sent",
                extra={"context": {"type": kind, "recipients": len(recipients)}},
            )
            return True
        except Exception as e:
            logger.error(
                f"Failed to send email notification: {e}",
                extra={"context": {"type": kind}},
                exc_info=True,
            )
            return False

    def _send(self, recipients: List[str], subject: str, body: str) -> None:
        message = EmailMessage()
        message["From"] = self.smtp["sender"]
        message["To"] = ", ".join(recipients)
        message["Subject"] = subject
        message.set_content(body)

        with smtplib.SMTP(self.smtp["host"], self.smtp["port"], timeout=10) as smtp:
            if self.smtp.get("starttls"):
                smtp.starttls()
            if self.smtp.get("user"):
                smtp.login(self.smtp["user"], self.smtp["password"])
            smtp.send_message(message)
