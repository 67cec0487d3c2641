"""Observability: structured logging and metrics hooks for notionlog."""

from __future__ import annotations

from .logger import StructuredFormatter, configure_redaction, get_logger, set_level
from .metrics import MetricsHook, NoopMetricsHook

__all__ = [
    "MetricsHook",
    "NoopMetricsHook",
    "StructuredFormatter",
    "configure_redaction",
    "get_logger",
    "set_level",
]
