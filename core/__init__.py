"""Shared exceptions, logging and helpers for the connectors."""
