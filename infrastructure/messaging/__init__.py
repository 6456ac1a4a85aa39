"""SMS/WhatsApp messaging connectors."""

from .twilio import TwilioConfig, TwilioMessenger

__all__ = ["TwilioConfig", "TwilioMessenger"]
