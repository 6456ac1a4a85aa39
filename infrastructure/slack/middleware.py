"""ASGI middleware that reports failed requests and unhandled exceptions to Slack."""

from __future__ import annotations

import logging
from typing import Awaitable

from starlette.types import ASGIApp, Message, Receive, Scope, Send

from core.exceptions import ServiceError

from .reporter import SlackReporter

logger = logging.getLogger(__name__)


class SlackErrorMiddleware:
    """Record each HTTP response; report status >= 400 and re-raise exceptions after reporting.

    Usage with FastAPI::

        app.add_middleware(SlackErrorMiddleware, reporter=SlackReporter(SlackConfig.from_env()))
    """

    def __init__(self, app: ASGIApp, reporter: SlackReporter) -> None:
        self.app = app
        self.reporter = reporter

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        path = scope.get("path", "")
        method = scope.get("method", "")
        status_code = 0
        body_chunks: list[bytes] = []

        async def recording_send(message: Message) -> None:
            nonlocal status_code
            if message["type"] == "http.response.start":
                status_code = int(message["status"])
            elif message["type"] == "http.response.body" and status_code >= 400:
                body_chunks.append(message.get("body", b""))
            await send(message)

        try:
            await self.app(scope, receive, recording_send)
        except Exception as exc:
            await self._safely(self.reporter.report_panic(exc, path, method))
            raise

        if self.reporter.config.only_panics:
            return

        if status_code >= 400:
            await self._safely(self.reporter.report_error(status_code, b"".join(body_chunks), path, method))

    async def _safely(self, report: Awaitable[None]) -> None:
        try:
            await report
        except ServiceError as exc:
            logger.error("Failed to report to Slack: %s", exc)


__all__ = ["SlackErrorMiddleware"]
