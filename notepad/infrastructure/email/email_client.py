"""
Envío de correos transaccionales: SendGrid (API HTTP v3) o SMTP.

El proveedor se elige con `MAIL_PROVIDER`. No hay reintentos: un fallo se
reporta de inmediato como `DeliveryError`.
"""
import html
import logging
import smtplib
from email.message import EmailMessage

import requests

from notepad.core.config import settings
from notepad.core.exceptions import DeliveryError

_log = logging.getLogger("notepad.email")

NOTE_SUBJECT_PREFIX = "Your Note: "


def _send_sendgrid(to_email: str, subject: str, html_body: str, text_body: str) -> None:
    if not settings.sendgrid_api_key or not settings.sendgrid_from_email:
        raise DeliveryError("SendGrid no configurado. Define SENDGRID_API_KEY/SENDGRID_FROM_EMAIL en .env")

    payload = {
        "personalizations": [{"to": [{"email": to_email}]}],
        "from": {"email": settings.sendgrid_from_email},
        "subject": subject,
        # text/plain debe ir antes que text/html
        "content": [
            {"type": "text/plain", "value": text_body},
            {"type": "text/html", "value": html_body},
        ],
    }
    try:
        r = requests.post(
            settings.sendgrid_api_url,
            json=payload,
            headers={"Authorization": f"Bearer {settings.sendgrid_api_key}"},
            timeout=settings.mail_timeout_seconds,
        )
    except requests.RequestException as e:
        raise DeliveryError(f"Failed to send email: {e}") from e
    if not 200 <= r.status_code < 300:
        _log.error("SendGrid rechazó el envío status=%s body=%s", r.status_code, r.text[:500])
        raise DeliveryError(f"Failed to send email. Status code: {r.status_code}")


def _send_smtp(to_email: str, subject: str, html_body: str, text_body: str) -> None:
    if not settings.smtp_host:
        raise DeliveryError("SMTP no configurado. Define SMTP_HOST/SMTP_USER/SMTP_PASS en .env")

    msg = EmailMessage()
    msg["From"] = settings.smtp_from_email or settings.smtp_user or ""
    msg["To"] = to_email
    msg["Subject"] = subject
    msg.set_content(text_body)
    msg.add_alternative(html_body, subtype="html")

    timeout = settings.mail_timeout_seconds
    try:
        # Conexión STARTTLS por defecto (587)
        if settings.smtp_use_tls:
            with smtplib.SMTP(settings.smtp_host, settings.smtp_port, timeout=timeout) as server:
                server.starttls()
                if settings.smtp_user and settings.smtp_pass:
                    server.login(settings.smtp_user, settings.smtp_pass)
                server.send_message(msg)
        else:
            with smtplib.SMTP_SSL(settings.smtp_host, settings.smtp_port, timeout=timeout) as server:
                if settings.smtp_user and settings.smtp_pass:
                    server.login(settings.smtp_user, settings.smtp_pass)
                server.send_message(msg)
    except (smtplib.SMTPException, OSError) as e:
        raise DeliveryError(f"Failed to send email: {e}") from e


def send_email(to_email: str, subject: str, html_body: str, text_body: str) -> None:
    if settings.mail_provider == "smtp":
        _send_smtp(to_email, subject, html_body, text_body)
    else:
        _send_sendgrid(to_email, subject, html_body, text_body)
    _log.info("Correo enviado a %s via %s", to_email, settings.mail_provider)


def build_note_email(title: str, content: str) -> tuple[str, str, str]:
    """Devuelve (subject, html, text) para compartir una nota."""
    subject = f"{NOTE_SUBJECT_PREFIX}{title}"
    safe_title = html.escape(title)
    safe_content = html.escape(content or "")
    body = f"""<!DOCTYPE html>
<html>
<head><meta charset="UTF-8"><title>Your Note</title></head>
<body style="font-family:Arial,sans-serif;line-height:1.6;color:#333">
  <div style="max-width:600px;margin:0 auto;padding:20px">
    <div style="background:#f8f9fa;padding:20px;text-align:center;border-radius:5px">
      <h1>Your Note from Notepad App</h1>
    </div>
    <div style="background:#fff;padding:20px;border:1px solid #dee2e6;border-radius:5px;margin-top:20px">
      <div style="color:#007bff;font-size:24px;font-weight:bold;margin-bottom:15px">{safe_title}</div>
      <div style="font-size:16px;white-space:pre-wrap">{safe_content}</div>
    </div>
    <p style="text-align:center;margin-top:20px;color:#6c757d;font-size:14px">This email was sent from your Notepad Application.</p>
  </div>
</body>
</html>
"""
    text = f"{title}\n\n{content or ''}\n\n-- Sent from your Notepad Application."
    return subject, body, text


def send_note_email(to_email: str, title: str, content: str) -> None:
    subject, body, text = build_note_email(title, content)
    send_email(to_email, subject, body, text)
