"""Transactional email connectors."""

from .sendgrid import SendgridMailer, SmtpConfig

__all__ = ["SendgridMailer", "SmtpConfig"]
