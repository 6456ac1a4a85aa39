"""Templated transactional email over the SendGrid v3 API."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

import httpx
from jinja2 import Environment, FileSystemLoader, TemplateError, TemplateNotFound, select_autoescape

from config.notifications import SENDGRID_API_URL, SENDGRID_TIMEOUT
from core.exceptions import ConfigurationError, NotFoundError, ProviderError, ValidationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SmtpConfig:
    """Sender identity; ``email``/``sender`` become the From address and name."""

    email: str
    password: str = ""
    host: str = ""
    port: str = ""
    sender: str = ""


class SendgridMailer:
    """Render HTML templates from an assets directory and deliver them via SendGrid."""

    def __init__(
        self,
        assets_directory: str | Path,
        smtp: SmtpConfig,
        api_key: str,
        *,
        client: httpx.AsyncClient | None = None,
        api_url: str = SENDGRID_API_URL,
    ) -> None:
        if not api_key:
            raise ConfigurationError("SendGrid API key must be provided", key="api_key")

        self._assets_directory = Path(assets_directory)
        self._smtp = smtp
        self._api_key = api_key
        self._client = client
        self._api_url = api_url
        self._env = Environment(
            loader=FileSystemLoader(str(self._assets_directory)),
            autoescape=select_autoescape(["html", "xml"]),
        )

    def render_template(self, placeholders: Mapping[str, Any], template_name: str) -> str:
        """Render ``template_name`` from the assets directory with ``placeholders``."""

        try:
            template = self._env.get_template(template_name)
        except TemplateNotFound as exc:
            raise NotFoundError(
                f"Email template not found: {template_name}",
                resource=str(self._assets_directory / template_name),
            ) from exc
        except TemplateError as exc:
            raise ValidationError(f"Invalid email template {template_name}: {exc}", field="template") from exc

        try:
            return template.render(**placeholders)
        except TemplateError as exc:
            raise ValidationError(f"Failed to render email template {template_name}: {exc}", field="template") from exc

    def _build_payload(
        self,
        html_content: str,
        email: str,
        title: str,
        receiver: str,
        plain_text_content: str,
    ) -> dict[str, Any]:
        sender: dict[str, str] = {"email": self._smtp.email}
        if self._smtp.sender:
            sender["name"] = self._smtp.sender

        recipient: dict[str, str] = {"email": email}
        if receiver:
            recipient["name"] = receiver

        content = []
        if plain_text_content:
            content.append({"type": "text/plain", "value": plain_text_content})
        if html_content:
            content.append({"type": "text/html", "value": html_content})

        return {
            "from": sender,
            "personalizations": [{"to": [recipient], "subject": title}],
            "subject": title,
            "content": content,
        }

    async def send(
        self,
        html_content: str,
        email: str,
        title: str,
        receiver: str,
        plain_text_content: str = "",
    ) -> None:
        """Send one email to ``email``; raises ``ProviderError`` when delivery fails."""

        payload = self._build_payload(html_content, email, title, receiver, plain_text_content)
        headers = {"Authorization": f"Bearer {self._api_key}"}

        owns_client = self._client is None
        client = self._client or httpx.AsyncClient(timeout=SENDGRID_TIMEOUT)
        try:
            response = await client.post(self._api_url, headers=headers, json=payload)
        except httpx.HTTPError as exc:
            logger.error("SendGrid request failed for %s: %s", email, exc)
            raise ProviderError(f"failed to send email: {exc}", provider="sendgrid", original_error=exc) from exc
        finally:
            if owns_client:
                await client.aclose()

        if response.status_code >= 400:
            logger.error(
                "SendGrid rejected email to %s: status=%s body=%s",
                email,
                response.status_code,
                response.text,
            )
            raise ProviderError(
                f"email delivery failed, status code: {response.status_code}",
                provider="sendgrid",
            )

        logger.info("Email sent to %s (message_id=%s)", email, response.headers.get("X-Message-Id"))


__all__ = ["SendgridMailer", "SmtpConfig"]
