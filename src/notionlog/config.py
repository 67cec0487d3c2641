"""Configuration for notionlog.

:class:`NotionlogConfig` captures every tuneable knob of the fetch pipeline.
Instances are passed to both :class:`NotionlogClient` and
:class:`AsyncNotionlogClient`.  :meth:`NotionlogConfig.from_env` builds one
from the environment the blog build runs in.
"""

from __future__ import annotations

import dataclasses
import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

ENV_TOKEN = "NOTION_TOKEN"
ENV_PAGE_ID = "NOTION_PAGE_ID"
ENV_VERSION = "NOTION_VERSION"

DEFAULT_RETRY_STATUSES: frozenset[int] = frozenset({429, 502, 503, 504})
"""Transient upstream statuses worth another attempt."""


@dataclass
class NotionlogConfig:
    """Complete configuration for a notionlog client.

    Parameters
    ----------
    token:
        Notion integration token.  Never logged.
    page_id:
        Root page (or full-page database) the blog is sourced from.  Any
        form accepted by :func:`notionlog.ids.normalize_id`.
    notion_version:
        Value of the ``Notion-Version`` header.
    base_url:
        API root URL.  Override for proxy or testing environments.
    retry_max_attempts:
        Total attempts per request, the first one included.
    retry_base_delay:
        Delay (seconds) before the first retry; doubled on every attempt.
    retry_max_delay:
        Upper cap (seconds) on the computed delay.
    retry_jitter:
        Scale each delay randomly to 50-100 % of its value.
    retry_statuses:
        HTTP statuses that are retried.  Everything else fails at once.
    retry_network_errors:
        Also retry timeouts and connection failures.
    timeout_seconds:
        HTTP request timeout in seconds.
    http_proxy:
        Optional HTTP/HTTPS proxy URL.
    max_depth:
        How deep the block walk descends below the root page when looking
        for child pages and inline databases.
    accept_status:
        Status values a post must carry to survive :func:`filter_posts`.
    post_types:
        Type values a post must carry to survive :func:`filter_posts`.
    resolve_people:
        Look up ``people`` members that arrive without a name.
    debug_dump_payload:
        Write the (redacted) request/response pair to *stderr*.
    """

    # ── Core ────────────────────────────────────────────────────────────
    token: str = ""

    page_id: str = ""

    notion_version: str = "2022-06-28"

    base_url: str = "https://api.notion.com/v1"

    # ── Retry ───────────────────────────────────────────────────────────
    retry_max_attempts: int = 3

    retry_base_delay: float = 0.5

    retry_max_delay: float = 8.0

    retry_jitter: bool = False

    retry_statuses: frozenset[int] = field(
        default_factory=lambda: DEFAULT_RETRY_STATUSES,
    )

    retry_network_errors: bool = False

    # ── HTTP ────────────────────────────────────────────────────────────
    timeout_seconds: float = 30.0

    http_proxy: str | None = None

    # ── Pipeline ────────────────────────────────────────────────────────
    max_depth: int = 3

    accept_status: tuple[str, ...] = ("Public",)

    post_types: tuple[str, ...] = ("Post",)

    resolve_people: bool = True

    # ── Observability ──────────────────────────────────────────────────
    metrics: Any | None = None

    debug_dump_payload: bool = False

    def __post_init__(self) -> None:
        from urllib.parse import urlparse

        parsed = urlparse(self.base_url)
        if parsed.scheme == "http" and parsed.hostname not in (
            "localhost",
            "127.0.0.1",
            "::1",
        ):
            raise ValueError(
                f"base_url uses insecure HTTP for non-local host '{parsed.hostname}'. "
                "Use HTTPS to protect your API token, or target localhost for testing."
            )

        if self.retry_max_attempts < 1:
            raise ValueError(f"retry_max_attempts must be >= 1, got {self.retry_max_attempts}")
        if self.retry_base_delay < 0:
            raise ValueError(f"retry_base_delay must be >= 0, got {self.retry_base_delay}")
        if self.retry_max_delay < 0:
            raise ValueError(f"retry_max_delay must be >= 0, got {self.retry_max_delay}")
        if self.timeout_seconds <= 0:
            raise ValueError(f"timeout_seconds must be > 0, got {self.timeout_seconds}")
        if self.max_depth < 0:
            raise ValueError(f"max_depth must be >= 0, got {self.max_depth}")

        self.retry_statuses = frozenset(self.retry_statuses)
        self.accept_status = tuple(self.accept_status)
        self.post_types = tuple(self.post_types)

    @classmethod
    def from_env(
        cls,
        environ: Mapping[str, str] | None = None,
        **overrides: Any,
    ) -> NotionlogConfig:
        """Build a config from ``NOTION_TOKEN``, ``NOTION_PAGE_ID`` and
        ``NOTION_VERSION``.

        Explicit *overrides* win over the environment; empty override
        values are ignored so CLI flags that were not given fall through.
        """
        env = os.environ if environ is None else environ
        values: dict[str, Any] = {
            "token": env.get(ENV_TOKEN, ""),
            "page_id": env.get(ENV_PAGE_ID, ""),
        }
        if env.get(ENV_VERSION):
            values["notion_version"] = env[ENV_VERSION]
        values.update({k: v for k, v in overrides.items() if v not in (None, "")})
        return cls(**values)

    def __repr__(self) -> str:
        """Mask the token to prevent accidental credential leakage."""
        parts: list[str] = []
        for f in dataclasses.fields(self):
            val = getattr(self, f.name)
            if f.name == "token":
                masked = f"...{val[-4:]}" if len(val) >= 8 else "****"
                parts.append(f"token='{masked}'")
            else:
                parts.append(f"{f.name}={val!r}")
        return f"NotionlogConfig({', '.join(parts)})"
