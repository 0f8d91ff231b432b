from __future__ import annotations

import logging
import smtplib
from datetime import datetime
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from html import escape
from typing import Optional

from skill_swap.config import settings

logger = logging.getLogger(__name__)


def is_email_enabled() -> bool:
    """Return True when outbound email is configured and switched on."""
    return bool(
        settings.EMAIL_NOTIFICATIONS_ENABLED
        and settings.SMTP_SERVER
        and settings.EMAIL_FROM
    )


def _open_smtp():
    if settings.SMTP_USE_SSL:
        return smtplib.SMTP_SSL(
            settings.SMTP_SERVER,
            settings.SMTP_PORT,
            timeout=settings.SMTP_TIMEOUT_SECONDS,
        )
    return smtplib.SMTP(
        settings.SMTP_SERVER,
        settings.SMTP_PORT,
        timeout=settings.SMTP_TIMEOUT_SECONDS,
    )


def send_email(
    *,
    to_email: str,
    subject: str,
    body_text: str,
    body_html: Optional[str] = None,
) -> bool:
    """
    Send one message over SMTP.

    Returns True on success. Disabled/unconfigured email and SMTP failures
    are logged and reported as False; this never raises.
    """
    if not is_email_enabled():
        logger.debug("Email disabled, skipping '%s' to '%s'", subject, to_email)
        return False

    from_email = settings.EMAIL_FROM
    msg = MIMEMultipart("alternative")
    msg["From"] = from_email
    msg["To"] = to_email
    msg["Subject"] = subject
    msg.attach(MIMEText(body_text, "plain", "utf-8"))
    if body_html:
        msg.attach(MIMEText(body_html, "html", "utf-8"))

    try:
        with _open_smtp() as server:
            if settings.SMTP_USE_TLS and not settings.SMTP_USE_SSL:
                server.starttls()
            if settings.EMAIL_PASSWORD:
                server.login(settings.SMTP_USERNAME or from_email, settings.EMAIL_PASSWORD)
            server.sendmail(from_email, [to_email], msg.as_string())
        return True
    except Exception as exc:
        logger.warning("Email send failed for '%s': %s", to_email, exc)
        return False


def send_meeting_invite(
    *,
    organizer_name: str,
    attendee_email: str,
    attendee_name: Optional[str],
    title: str,
    meeting_link: str,
    description: Optional[str] = None,
    scheduled_at: Optional[datetime] = None,
    duration: int = 60,
) -> bool:
    """Email a meeting link to the attendee. False when nothing was sent."""
    greeting = (attendee_name or "there").strip() or "there"
    when = scheduled_at.strftime("%Y-%m-%d %H:%M UTC") if scheduled_at else "To be agreed"

    body_text = (
        f"Hi {greeting},\n\n"
        f"{organizer_name} invited you to a Skill Swap meeting.\n\n"
        f"Title: {title}\n"
        f"Description: {description or 'N/A'}\n"
        f"Date & Time: {when}\n"
        f"Duration: {duration} minutes\n"
        f"Join: {meeting_link}\n\n"
        "This meeting was scheduled through Skill Swap."
    )
    body_html = (
        "<h2>You're invited to a Skill Swap meeting</h2>"
        f"<p><strong>{escape(title)}</strong></p>"
        f"<p>Organized by: {escape(organizer_name)}</p>"
        f"<p>Description: {escape(description or 'N/A')}</p>"
        f"<p>Date &amp; Time: {escape(when)}</p>"
        f"<p>Duration: {duration} minutes</p>"
        f"<p><a href=\"{escape(meeting_link)}\">Join meeting</a></p>"
    )

    return send_email(
        to_email=attendee_email,
        subject=f"Meeting invite: {title}",
        body_text=body_text,
        body_html=body_html,
    )
