"""Post operational errors and panics to Slack channels."""

from __future__ import annotations

import json
import logging
import traceback
from dataclasses import dataclass
from datetime import UTC, datetime
from http import HTTPStatus
from typing import Any

import httpx

from config.notifications import SLACK_CRITICAL_PATTERNS, SLACK_POST_MESSAGE_URL, SLACK_TIMEOUT
from core.exceptions import ConfigurationError, ProviderError
from core.utils.env import get_bool_env, get_env

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SlackConfig:
    token: str
    channel_id: str
    critical_channel_id: str
    only_panics: bool = False
    debug: bool = False
    timeout: float = SLACK_TIMEOUT
    json_error_field: str = "error"
    json_message_field: str = "message"
    critical_patterns: tuple[str, ...] = SLACK_CRITICAL_PATTERNS

    @classmethod
    def from_env(cls) -> "SlackConfig":
        return cls(
            token=get_env("SLACK_TOKEN", required=True) or "",
            channel_id=get_env("SLACK_CHANNEL_ID", required=True) or "",
            critical_channel_id=get_env("SLACK_CRITICAL_CHANNEL_ID", required=True) or "",
            only_panics=get_bool_env("SLACK_ONLY_PANICS"),
            debug=get_bool_env("SLACK_DEBUG"),
        )

    def validate(self) -> None:
        for key in ("token", "channel_id", "critical_channel_id"):
            if not getattr(self, key):
                raise ConfigurationError(f"Slack {key} is required", key=key)


def _now() -> str:
    return datetime.now(UTC).isoformat(timespec="seconds")


class SlackReporter:
    """Format error/panic reports and deliver them through ``chat.postMessage``."""

    def __init__(
        self,
        config: SlackConfig,
        *,
        client: httpx.AsyncClient | None = None,
        api_url: str = SLACK_POST_MESSAGE_URL,
    ) -> None:
        config.validate()
        self._config = config
        self._client = client
        self._api_url = api_url

    @property
    def config(self) -> SlackConfig:
        return self._config

    def is_critical(self, text: str) -> bool:
        lowered = (text or "").lower()
        return any(pattern.lower() in lowered for pattern in self._config.critical_patterns)

    def _channel(self, critical: bool) -> str:
        return self._config.critical_channel_id if critical else self._config.channel_id

    async def post_message(self, text: str, *, critical: bool = False) -> None:
        await self._post({"channel": self._channel(critical), "text": text, "unfurl_links": True})

    async def post_image(
        self,
        image_url: str,
        alt_text: str,
        *,
        title: str | None = None,
        critical: bool = False,
    ) -> None:
        block: dict[str, Any] = {"type": "image", "image_url": image_url, "alt_text": alt_text}
        if title:
            block["title"] = {"type": "plain_text", "text": title}
        await self._post(
            {
                "channel": self._channel(critical),
                "text": title or alt_text,
                "blocks": [block],
            }
        )

    async def report_panic(self, exc: BaseException, path: str, method: str) -> None:
        stack = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
        error = f"{type(exc).__name__}: {exc}"
        message = (
            "*PANIC CAPTURED* :skull:\n"
            f"*Route:* `{path}`\n"
            f"*Method:* `{method}`\n"
            f"*Error:* `{error}`\n"
            f"*Time:* `{_now()}`\n"
            f"*Stack:* ```{stack}```"
        )
        await self.post_message(message, critical=self.is_critical(error))

    async def report_error(self, status_code: int, body: bytes | str, path: str, method: str) -> None:
        error = self.extract_error(status_code, body)
        message = (
            "*:warning: ERROR CAPTURED*\n"
            f"• *Route:* `{path}`\n"
            f"• *Method:* `{method}`\n"
            f"• *Status:* {status_code}\n"
            f"• *Error:* ```{error}```\n"
            f"• *Time:* `{_now()}`"
        )
        await self.post_message(message, critical=self.is_critical(error))

    def extract_error(self, status_code: int, body: bytes | str) -> str:
        """Pick the JSON error field, then the message field, then the raw body."""

        text = body.decode("utf-8", errors="replace") if isinstance(body, bytes) else (body or "")
        try:
            parsed = json.loads(text)
        except ValueError:
            parsed = None

        if isinstance(parsed, dict):
            for field_name in (self._config.json_error_field, self._config.json_message_field):
                value = parsed.get(field_name)
                if value is not None:
                    return str(value)

        if text:
            return text
        try:
            return HTTPStatus(status_code).phrase
        except ValueError:
            return str(status_code)

    async def _post(self, payload: dict[str, Any]) -> None:
        if self._config.debug:
            logger.info("Debug mode - Slack message to %s: %s", payload["channel"], payload.get("text"))
            return

        headers = {"Authorization": f"Bearer {self._config.token}"}
        owns_client = self._client is None
        client = self._client or httpx.AsyncClient(timeout=self._config.timeout)
        try:
            response = await client.post(self._api_url, headers=headers, json=payload)
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.error("Error sending to Slack: %s", exc)
            raise ProviderError("Failed to post Slack message", provider="slack", original_error=exc) from exc
        finally:
            if owns_client:
                await client.aclose()

        if not isinstance(data, dict) or not data.get("ok"):
            error = data.get("error", "unknown") if isinstance(data, dict) else "unknown"
            logger.error("Slack rejected message: %s", error)
            raise ProviderError(f"Slack API error: {error}", provider="slack")


__all__ = ["SlackConfig", "SlackReporter"]
