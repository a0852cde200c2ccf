"""
Admissions Email (Resend)

Two messages are sent after a successful submission:
- an acknowledgement to the first guardian email on the form
- a notification to the admissions office (when ``admissions_notify_email`` is set)

All applicant-supplied text is HTML-escaped before it is placed in a template.
Sending is best-effort: helpers return False instead of raising.
"""

import asyncio
import logging
from html import escape

import resend

from app.core.config import settings

logger = logging.getLogger(__name__)

resend.api_key = settings.resend_api_key

_PAGE = """<!DOCTYPE html>
<html>
<head>
    <style>
        body {{ font-family: system-ui, -apple-system, sans-serif; line-height: 1.6; color: #1f2937; }}
        .container {{ max-width: 600px; margin: 0 auto; padding: 40px 20px; }}
        .header {{ color: #1a365d; margin-bottom: 24px; }}
        .info {{ background-color: #eff6ff; border: 1px solid #3b82f6; padding: 16px; border-radius: 8px; margin: 16px 0; }}
        .footer {{ margin-top: 40px; padding-top: 20px; border-top: 1px solid #e5e7eb; color: #6b7280; font-size: 14px; }}
    </style>
</head>
<body>
    <div class="container">
        <h1 class="header">{title}</h1>
        {body}
    </div>
</body>
</html>
"""


def _page(title: str, body: str) -> str:
    """Wrap an already-escaped body in the shared layout."""
    return _PAGE.format(title=escape(title), body=body)


async def send_email(to_email: str, subject: str, html_content: str) -> bool:
    """
    Send one HTML email through Resend.

    Without an API key (local development) the subject is logged and the
    send is reported as successful.

    Returns:
        True if Resend accepted the message
    """
    if not resend.api_key:
        logger.warning(f"RESEND_API_KEY not set, not sending: {subject}")
        return True

    params: resend.Emails.SendParams = {
        "from": settings.email_from,
        "to": [to_email],
        "subject": subject,
        "html": html_content,
    }
    try:
        # resend's client is synchronous
        sent = await asyncio.to_thread(resend.Emails.send, params)
    except Exception as e:
        logger.error(f"Resend rejected email '{subject}': {e}")
        return False

    logger.info(f"Email sent, id: {sent['id']}")
    return True


async def send_application_received(
    to_email: str,
    guardian_name: str,
    learner_name: str,
    grade_applying: str,
    year: str,
    application_id: int,
) -> bool:
    """Acknowledge a submitted application to the guardian."""
    greeting = escape(guardian_name) if guardian_name else "Parent/Guardian"
    learner = escape(learner_name)

    body = f"""
        <p>Hello {greeting},</p>
        <p>Thank you for applying to {escape(settings.school_name)}. We have received the
        admission application for <strong>{learner}</strong>
        ({escape(grade_applying)}, {escape(year)}).</p>
        <div class="info">
            Your application reference number is <strong>{application_id}</strong>.
            Please quote it in any correspondence with the admissions office.
        </div>
        <p>Supporting documents can still be uploaded from the application form.</p>
        <div class="footer">
            <p>If you didn't submit this application, please contact the admissions office.</p>
        </div>
    """

    return await send_email(
        to_email=to_email,
        subject=f"Application received: {learner} (ref {application_id})",
        html_content=_page("Application Received", body),
    )


async def send_admissions_office_notification(
    to_email: str,
    surname: str,
    learner_name: str,
    grade_applying: str,
    year: str,
    application_id: int,
) -> bool:
    """Tell the admissions office a new application is waiting."""
    body = f"""
        <div class="info">
            <p><strong>Reference:</strong> {application_id}</p>
            <p><strong>Learner:</strong> {escape(f"{learner_name} {surname}".strip())}</p>
            <p><strong>Grade applying for:</strong> {escape(grade_applying)} ({escape(year)})</p>
        </div>
        <p>The application is pending review. Supporting documents may still be uploading.</p>
    """

    return await send_email(
        to_email=to_email,
        subject=f"New admission application #{application_id}",
        html_content=_page("New Admission Application", body),
    )
