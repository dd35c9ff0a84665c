# mye_backend/services/notifications.py
# Уведомления покупателю о смене статуса заказа.
# Отправляются после коммита фоновой задачей: максимум один раз, без гарантии доставки.
# Ошибка отправки только логируется и не влияет на ответ и транзакцию.
import logging
import smtplib
from dataclasses import dataclass
from email.message import EmailMessage
from typing import Optional

from mye_backend.core.config import Settings
from mye_backend.services.order_status import display_name

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StatusChangeEvent:
    order_id: int
    order_number: str
    email: Optional[str]
    old_status: str
    new_status: str


class Notifier:
    """Интерфейс канала уведомлений."""

    def send_status_change(self, event: StatusChangeEvent) -> None:
        raise NotImplementedError


class LoggingNotifier(Notifier):
    """Канал по умолчанию: пишет уведомление в лог."""

    def send_status_change(self, event: StatusChangeEvent) -> None:
        logger.info(
            '📧 Notification to %s: order #%s status changed from "%s" to "%s"',
            event.email,
            event.order_number,
            display_name(event.old_status),
            display_name(event.new_status),
        )


class SmtpNotifier(Notifier):
    def __init__(
        self,
        host: str,
        port: int,
        sender: str,
        user: str = "",
        password: str = "",
        security: str = "starttls",
        timeout: float = 10,
    ):
        self.host = host
        self.port = port
        self.sender = sender
        self.user = user
        self.password = password
        self.security = security
        self.timeout = timeout

    def connect(self) -> smtplib.SMTP:
        if self.security == "ssl":
            return smtplib.SMTP_SSL(self.host, self.port, timeout=self.timeout)
        smtp = smtplib.SMTP(self.host, self.port, timeout=self.timeout)
        if self.security == "starttls":
            try:
                smtp.starttls()
            except Exception:
                smtp.close()
                raise
        return smtp

    def build_message(self, event: StatusChangeEvent) -> EmailMessage:
        msg = EmailMessage()
        msg["From"] = self.sender
        msg["To"] = event.email
        msg["Subject"] = f"Sipariş Durumu Güncellendi - #{event.order_number}"
        msg.set_content(
            f"Sipariş numaranız: #{event.order_number}\n"
            f"Eski durum: {display_name(event.old_status)}\n"
            f"Yeni durum: {display_name(event.new_status)}\n"
        )
        return msg

    def send_status_change(self, event: StatusChangeEvent) -> None:
        with self.connect() as smtp:
            if self.user:
                smtp.login(self.user, self.password)
            smtp.send_message(self.build_message(event))


def notifier_from_settings(settings: Settings) -> Notifier:
    if settings.SMTP_HOST:
        return SmtpNotifier(
            host=settings.SMTP_HOST,
            port=settings.SMTP_PORT,
            sender=settings.SMTP_FROM,
            user=settings.SMTP_USER,
            password=settings.SMTP_PASSWORD,
            security=settings.SMTP_SECURITY,
        )
    return LoggingNotifier()


def dispatch_status_change(notifier: Notifier, event: StatusChangeEvent) -> None:
    """Фоновая задача: одна попытка отправки, исключения не выходят наружу."""
    if not event.email:
        logger.info("Order #%s has no customer email, notification skipped", event.order_number)
        return
    try:
        notifier.send_status_change(event)
    except Exception:
        logger.exception("Error sending status change notification for order #%s", event.order_number)
