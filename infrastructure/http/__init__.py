"""Generic HTTP helpers."""

from .client import HttpResponse, make_http_request

__all__ = ["HttpResponse", "make_http_request"]
