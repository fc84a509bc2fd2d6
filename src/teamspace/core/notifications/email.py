"""Invitation email delivery using the Resend API."""

import asyncio
import html
from concurrent.futures import ThreadPoolExecutor

import resend

from src.teamspace.core.config import get_settings
from src.teamspace.core.logging import get_logger

logger = get_logger(__name__)

_email_executor = ThreadPoolExecutor(max_workers=4, thread_name_prefix="email_sender")

_BODY_STYLE = (
    "font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif; "
    "line-height: 1.6; color: #333; max-width: 600px; margin: 0 auto; padding: 20px;"
)
_BUTTON_STYLE = (
    "background-color: #2563eb; color: white; padding: 12px 24px; "
    "text-decoration: none; border-radius: 6px; display: inline-block; font-weight: 500;"
)

_ROLE_LABELS = {
    "admin": "an admin",
    "member": "a member",
    "client": "a client",
}


def build_invitation_url(token: str) -> str:
    return f"{get_settings().app_url}/signup?token={token}"


async def send_invitation_email(
    to: str,
    token: str,
    business_name: str,
    inviter_name: str,
    role: str,
) -> bool:
    """Send an invitation link for a business.

    Delivery failure never invalidates the invitation; the caller can resend.
    The Resend client is synchronous, so the call runs on a small thread pool
    and only this coroutine waits for it.

    Args:
        to: Recipient email address
        token: Plaintext invitation token, included in the link only
        business_name: Business the invitee will join
        inviter_name: Display name of the inviting user
        role: Role the invitation grants

    Returns:
        True if the email was sent (or logged without an API key), False on error
    """
    settings = get_settings()
    invite_url = build_invitation_url(token)

    if not settings.resend_api_key:
        logger.warning(
            "RESEND_API_KEY not set - invitation email not sent",
            to=to if settings.log_user_emails else None,
            email_type="invitation",
        )
        return True

    resend.api_key = settings.resend_api_key

    def _send() -> None:
        resend.Emails.send(
            {
                "from": settings.email_from,
                "to": [to],
                "subject": f"You've been invited to join {business_name}",
                "html": _get_invitation_email_html(
                    business_name,
                    inviter_name,
                    role,
                    invite_url,
                    settings.invitation_expire_days,
                ),
            }
        )

    loop = asyncio.get_running_loop()
    try:
        await asyncio.wait_for(
            loop.run_in_executor(_email_executor, _send),
            timeout=settings.email_send_timeout_seconds,
        )
        logger.info("Invitation email sent", role=role)
        return True
    except TimeoutError:
        logger.error("Email send timed out", timeout=settings.email_send_timeout_seconds)
        return False
    except Exception as e:
        logger.error("Failed to send invitation email", error=str(e))
        return False


def _get_invitation_email_html(
    business_name: str,
    inviter_name: str,
    role: str,
    invite_url: str,
    expire_days: int,
) -> str:
    safe_business = html.escape(business_name)
    safe_inviter = html.escape(inviter_name)
    role_label = _ROLE_LABELS.get(role, "a member")
    return f"""<!DOCTYPE html>
<html>
<head>
    <meta charset="utf-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
</head>
<body style="{_BODY_STYLE}">
    <h1 style="color: #2563eb; margin-bottom: 24px;">Join {safe_business}</h1>
    <p>{safe_inviter} has invited you to join <strong>{safe_business}</strong>
    as {role_label}.</p>
    <p style="margin: 32px 0;">
        <a href="{invite_url}" style="{_BUTTON_STYLE}">Create your account</a>
    </p>
    <p style="color: #666; font-size: 14px;">
        This invitation expires in {expire_days} days and can be used once.
    </p>
</body>
</html>"""
