"""Notification utilities - email."""

from src.teamspace.core.notifications.email import (
    build_invitation_url,
    send_invitation_email,
)

__all__ = [
    "build_invitation_url",
    "send_invitation_email",
]
