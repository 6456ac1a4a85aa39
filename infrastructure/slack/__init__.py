"""Chat-ops error reporting."""

from .middleware import SlackErrorMiddleware
from .reporter import SlackConfig, SlackReporter

__all__ = ["SlackConfig", "SlackErrorMiddleware", "SlackReporter"]
