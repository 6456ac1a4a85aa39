"""Endpoints and defaults for the email, chat-ops and messaging connectors."""

from __future__ import annotations

SENDGRID_API_URL = "https://api.sendgrid.com/v3/mail/send"
SENDGRID_TIMEOUT = 30.0

SLACK_POST_MESSAGE_URL = "https://slack.com/api/chat.postMessage"
SLACK_TIMEOUT = 10.0

# Lower-cased substrings that route an error report to the critical channel
SLACK_CRITICAL_PATTERNS = (
    "token is expired",
    "token has expired",
    "signature has expired",
)

WHATSAPP_PREFIX = "whatsapp:"

__all__ = [
    "SENDGRID_API_URL",
    "SENDGRID_TIMEOUT",
    "SLACK_POST_MESSAGE_URL",
    "SLACK_TIMEOUT",
    "SLACK_CRITICAL_PATTERNS",
    "WHATSAPP_PREFIX",
]
