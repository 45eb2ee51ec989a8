"""
Notification Service

Outbound email for admin notifications and password resets. The notifier is
built once at startup by ``build_notifier`` and its readiness is fixed at
construction: an unconfigured notifier reports ``NOT_CONFIGURED`` and every
send returns ``DeliveryResult.SKIPPED``. Sends never raise; failures are
logged and reported as ``DeliveryResult.FAILED`` so request handlers can
dispatch them as fire-and-forget background tasks.
"""
import logging
import smtplib
from datetime import datetime
from email.mime.text import MIMEText
from enum import Enum
from typing import Iterable, List, Optional, Sequence, Tuple

from jinja2 import Environment, PackageLoader, select_autoescape

from careerforge.core.config import Settings

logger = logging.getLogger(__name__)


class NotifierStatus(str, Enum):
    READY = "ready"
    NOT_CONFIGURED = "not_configured"


class DeliveryResult(str, Enum):
    SENT = "sent"
    SKIPPED = "skipped"
    FAILED = "failed"


def _get_env() -> Environment:
    return Environment(
        loader=PackageLoader("careerforge", "templates/email"),
        autoescape=select_autoescape(["html", "xml"]),
    )


def _timestamp() -> str:
    return datetime.now().strftime("%Y-%m-%d %H:%M:%S")


class EmailNotifier:
    def __init__(
        self,
        smtp_host: str,
        smtp_port: int,
        username: Optional[str],
        password: Optional[str],
        admin_email: Optional[str],
        sender_name: str = "CareerForge",
    ):
        self.smtp_host = smtp_host
        self.smtp_port = smtp_port
        self.username = username
        self.password = password
        self.admin_email = admin_email
        self.sender_name = sender_name
        self.env = _get_env()
        self.status = NotifierStatus.READY if (username and password) else NotifierStatus.NOT_CONFIGURED

    @property
    def ready(self) -> bool:
        return self.status is NotifierStatus.READY

    def send(self, to: Optional[str], subject: str, html: str) -> DeliveryResult:
        if not self.ready or not to:
            logger.debug("Email notifier not ready, skipping: %s", subject)
            return DeliveryResult.SKIPPED

        msg = MIMEText(html, "html")
        msg["Subject"] = subject
        msg["From"] = f'"{self.sender_name}" <{self.username}>'
        msg["To"] = to

        try:
            with smtplib.SMTP(self.smtp_host, self.smtp_port, timeout=10) as server:
                server.starttls()
                server.login(self.username, self.password)
                server.sendmail(self.username, [to], msg.as_string())
        except (smtplib.SMTPException, OSError) as e:
            logger.error("Failed to send email '%s': %s", subject, e)
            return DeliveryResult.FAILED

        logger.info("Notification sent: %s", subject)
        return DeliveryResult.SENT

    def _notify_admin(self, subject: str, heading: str, color: str, rows: Sequence[Tuple[str, str]]) -> DeliveryResult:
        html = self.env.get_template("base.html").render(heading=heading, color=color, rows=rows)
        return self.send(self.admin_email, subject, html)

    def user_registered(self, user) -> DeliveryResult:
        return self._notify_admin(
            "New User Registration - CareerForge",
            "New User Registration",
            "#2563eb",
            [("Name", user.name), ("Email", user.email), ("Registered At", _timestamp())],
        )

    def user_login(self, user) -> DeliveryResult:
        return self._notify_admin(
            "User Login - CareerForge",
            "User Login Detected",
            "#059669",
            [("Name", user.name), ("Email", user.email), ("Login Time", _timestamp())],
        )

    def profile_updated(self, user, updated_fields: Iterable[str]) -> DeliveryResult:
        return self._notify_admin(
            "Profile Update - CareerForge",
            "User Profile Updated",
            "#d97706",
            [
                ("User Name", user.name),
                ("User Email", user.email),
                ("Updated Fields", ", ".join(updated_fields)),
                ("Updated At", _timestamp()),
            ],
        )

    def resume_created(self, user, resume_title: str) -> DeliveryResult:
        return self._notify_admin(
            "New Resume Created - CareerForge",
            "New Resume Created",
            "#7c3aed",
            [
                ("User Name", user.name),
                ("User Email", user.email),
                ("Resume Title", resume_title),
                ("Created At", _timestamp()),
            ],
        )

    def resume_updated(self, user, resume_title: str, updated_sections: Optional[List[str]] = None) -> DeliveryResult:
        rows = [("User Name", user.name), ("User Email", user.email), ("Resume Title", resume_title)]
        if updated_sections:
            rows.append(("Updated Sections", ", ".join(updated_sections)))
        rows.append(("Updated At", _timestamp()))
        return self._notify_admin("Resume Updated - CareerForge", "Resume Updated", "#dc2626", rows)

    def resume_deleted(self, user, resume_title: str) -> DeliveryResult:
        return self._notify_admin(
            "Resume Deleted - CareerForge",
            "Resume Deleted",
            "#991b1b",
            [
                ("User Name", user.name),
                ("User Email", user.email),
                ("Deleted Resume", resume_title),
                ("Deleted At", _timestamp()),
            ],
        )

    def password_reset(self, user, reset_url: str, minutes: int) -> DeliveryResult:
        html = self.env.get_template("password_reset.html").render(name=user.name, reset_url=reset_url, minutes=minutes)
        return self.send(user.email, "Reset your password - CareerForge", html)


def build_notifier(settings: Settings) -> EmailNotifier:
    notifier = EmailNotifier(
        smtp_host=settings.SMTP_HOST,
        smtp_port=settings.SMTP_PORT,
        username=settings.GMAIL_USER or None,
        password=settings.GMAIL_APP_PASSWORD or None,
        admin_email=settings.ADMIN_EMAIL or None,
    )
    if notifier.ready:
        logger.info("Email notifier ready (smtp %s:%s)", settings.SMTP_HOST, settings.SMTP_PORT)
    else:
        logger.warning("Email notifier not configured; notifications will be skipped")
    return notifier
