"""Utility helpers for delivering generated articles by email."""

from __future__ import annotations

import asyncio
import smtplib
import ssl
from email.message import EmailMessage
from email.utils import make_msgid
from typing import Any, Mapping

from app.config.settings import settings


class EmailServiceError(RuntimeError):
    """Raised when the email service cannot deliver a message."""


def render_article_text(article: Mapping[str, Any]) -> str:
    """Render a stored article as a plain-text email body."""

    title = str(article.get("title") or "Untitled article")
    parts = [f"{title}\n{'=' * len(title)}"]
    introduction = article.get("introduction")
    if introduction:
        parts.append(str(introduction))
    for section in article.get("sections") or []:
        heading = str(section.get("heading", "")).strip()
        if heading:
            parts.append(f"{heading}\n{'-' * len(heading)}")
        content = section.get("content")
        if content:
            parts.append(str(content))
    conclusion = article.get("conclusion")
    if conclusion:
        parts.append(f"Conclusion\n----------\n{conclusion}")
    word_count = article.get("wordCount")
    if word_count:
        parts.append(f"({word_count} words)")
    return "\n\n".join(parts) + "\n"


async def send_email(
    *,
    recipient: str,
    subject: str,
    body: str,
) -> str:
    """Send a plain text email with the configured SMTP provider.

    Returns the generated ``Message-ID`` header.
    """

    mail_settings = settings.mail
    if not mail_settings.is_configured():
        raise EmailServiceError("SMTP settings are not configured.")

    message = EmailMessage()
    message["From"] = mail_settings.sender
    message["To"] = recipient
    message["Subject"] = subject
    message_id = make_msgid()
    message["Message-ID"] = message_id
    message.set_content(body)

    password = (
        mail_settings.password.get_secret_value()
        if mail_settings.password is not None
        else None
    )

    def _send_sync() -> None:
        context = ssl.create_default_context()
        if mail_settings.use_ssl:
            with smtplib.SMTP_SSL(
                mail_settings.host,
                mail_settings.port,
                context=context,
            ) as client:
                if mail_settings.username and password:
                    client.login(mail_settings.username, password)
                client.send_message(message)
            return

        with smtplib.SMTP(mail_settings.host, mail_settings.port) as client:
            if mail_settings.use_tls:
                client.starttls(context=context)
            if mail_settings.username and password:
                client.login(mail_settings.username, password)
            client.send_message(message)

    try:
        await asyncio.to_thread(_send_sync)
    except (smtplib.SMTPException, OSError) as exc:  # pragma: no cover - network errors
        raise EmailServiceError(f"Failed to send email: {exc}") from exc

    return message_id


__all__ = ["EmailServiceError", "render_article_text", "send_email"]
