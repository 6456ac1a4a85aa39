"""SMS and WhatsApp delivery using Twilio."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Iterable

from requests import RequestException
from twilio.base.exceptions import TwilioException
from twilio.rest import Client

from config.notifications import WHATSAPP_PREFIX
from core.exceptions import ConfigurationError, ProviderError
from core.utils.env import get_bool_env, get_env

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class TwilioConfig:
    account_sid: str
    auth_token: str
    from_number: str = ""
    whatsapp: bool = False

    @classmethod
    def from_env(cls) -> "TwilioConfig":
        return cls(
            account_sid=get_env("TWILIO_ACCOUNT_SID", required=True) or "",
            auth_token=get_env("TWILIO_AUTH_TOKEN", required=True) or "",
            from_number=get_env("TWILIO_PHONE_NUMBER", default="") or "",
            whatsapp=get_bool_env("TWILIO_WHATSAPP"),
        )


def _whatsapp_address(number: str) -> str:
    if number.startswith(WHATSAPP_PREFIX):
        return number
    return f"{WHATSAPP_PREFIX}{number}"


class TwilioMessenger:
    """Send text messages to one or many recipients."""

    def __init__(self, config: TwilioConfig, *, client: Any | None = None) -> None:
        if not config.account_sid:
            raise ConfigurationError("Twilio account SID not set", key="account_sid")
        if not config.auth_token:
            raise ConfigurationError("Twilio auth token not set", key="auth_token")

        self._config = config
        self._client = client or Client(config.account_sid, config.auth_token)

    def _address(self, number: str) -> str:
        return _whatsapp_address(number) if self._config.whatsapp else number

    async def send_message(self, to_number: str, body: str) -> str:
        """Send ``body`` to ``to_number`` and return the Twilio message SID."""

        try:
            message = await asyncio.to_thread(
                self._client.messages.create,
                body=body,
                from_=self._address(self._config.from_number),
                to=self._address(to_number),
            )
        except TwilioException as exc:
            logger.error("Twilio error sending to %s: %s", to_number, exc)
            raise ProviderError(str(exc), provider="twilio", original_error=exc) from exc
        except RequestException as exc:
            logger.error("Twilio transport error sending to %s: %s", to_number, exc)
            raise ProviderError(f"failed to reach Twilio: {exc}", provider="twilio", original_error=exc) from exc

        logger.info("Message sent to %s (sid=%s, status=%s)", to_number, message.sid, getattr(message, "status", None))
        return message.sid

    async def send_many_messages(self, to_numbers: Iterable[str], body: str) -> dict[str, str]:
        """Send ``body`` to each number in turn; return ``{number: error}`` for failures."""

        failures: dict[str, str] = {}
        for number in to_numbers:
            try:
                await self.send_message(number, body)
            except ProviderError as exc:
                failures[number] = exc.message

        if failures:
            logger.warning("Failed to deliver message to %d recipient(s)", len(failures))
        return failures


__all__ = ["TwilioConfig", "TwilioMessenger"]
