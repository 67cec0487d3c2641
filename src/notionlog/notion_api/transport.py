"""Sync and async HTTP transports for the Notion API.

Request lifecycle:

1. Send the request with auth, version and JSON headers.
2. On ``2xx`` return the parsed JSON body.
3. On a status in ``config.retry_statuses`` wait (``Retry-After`` for
   ``429``, exponential backoff otherwise) and try again.
4. On any other ``4xx``/``5xx`` raise the matching typed error at once.
5. On timeouts and connection errors retry only when
   ``config.retry_network_errors`` is set.
6. When the attempts run out raise :class:`NotionlogRetryExhaustedError`.

Both transports share the decision helpers below; they differ only in how
they send and how they sleep.
"""

from __future__ import annotations

import asyncio
import json as _json
import sys
import time
from collections.abc import AsyncIterator, Iterator
from typing import Any

import httpx

from notionlog.config import NotionlogConfig
from notionlog.errors import (
    NotionlogAuthError,
    NotionlogNetworkError,
    NotionlogNotFoundError,
    NotionlogPermissionError,
    NotionlogRetryExhaustedError,
    NotionlogServerError,
    NotionlogValidationError,
)
from notionlog.observability import NoopMetricsHook, get_logger
from notionlog.utils.redact import redact

from .retries import RETRYABLE_EXCEPTIONS, compute_backoff, should_retry

log = get_logger("notionlog.transport")

PAGE_SIZE = 100


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _parse_retry_after(response: httpx.Response) -> float | None:
    """The ``Retry-After`` header as seconds, or ``None``."""
    raw = response.headers.get("retry-after")
    if raw is None:
        return None
    try:
        return float(raw)
    except ValueError:
        return None


def _raise_for_status(response: httpx.Response, method: str, path: str) -> None:
    """Raise the typed error for a status that will not be retried."""
    status = response.status_code
    try:
        body = response.json()
    except ValueError:
        body = {}
    if not isinstance(body, dict):
        body = {}

    notion_message = body.get("message") or response.text[:500]
    context = {"status_code": status, "notion_code": body.get("code", ""), "path": path}
    operation = f"{method} {path}"

    if status == 401:
        raise NotionlogAuthError(
            message=f"Authentication failed on {operation}: {notion_message}",
            context=context,
        )
    if status == 403:
        raise NotionlogPermissionError(
            message=f"Permission denied on {operation}: {notion_message}",
            context={**context, "operation": operation},
        )
    if status == 404:
        raise NotionlogNotFoundError(
            message=f"Resource not found on {operation}: {notion_message}",
            context=context,
        )
    if status >= 500:
        raise NotionlogServerError(
            message=f"Server error {status} on {operation}: {notion_message}",
            context=context,
        )
    raise NotionlogValidationError(
        message=f"Client error {status} on {operation}: {notion_message}",
        context=context,
    )


def _json_body(response: httpx.Response) -> dict:
    if response.status_code == 204 or not response.content:
        return {}
    result: dict = response.json()
    return result


def _dump_payload(config: NotionlogConfig, method: str, response: httpx.Response, payload: Any) -> None:
    """Write a redacted request/response pair to stderr when enabled."""
    if not config.debug_dump_payload:
        return
    try:
        body: Any = response.json()
    except ValueError:
        body = response.text[:1000]
    dump = {
        "method": method,
        "url": str(response.url),
        "request_body": payload,
        "response_status": response.status_code,
        "response_body": body,
    }
    print(_json.dumps(redact(dump, config.token), indent=2, default=str), file=sys.stderr)


def _network_retry_delay(
    config: NotionlogConfig,
    metrics: Any,
    method: str,
    path: str,
    exc: Exception,
    attempt: int,
) -> float:
    """Delay before retrying after a transport exception.

    Raises :class:`NotionlogNetworkError` when no retry is allowed.
    """
    metrics.increment(
        "notionlog.requests_total",
        tags={"method": method, "path": path, "status": "error"},
    )
    if should_retry(
        None, exc, attempt, config.retry_max_attempts,
        config.retry_statuses, config.retry_network_errors,
    ):
        delay = compute_backoff(
            attempt,
            base=config.retry_base_delay,
            maximum=config.retry_max_delay,
            jitter=config.retry_jitter,
        )
        log.warning(
            "Network error, retrying",
            extra={"extra_fields": {
                "op": "request", "method": method, "path": path,
                "attempt": attempt + 1, "delay_ms": round(delay * 1000), "error": str(exc),
            }},
        )
        metrics.increment(
            "notionlog.retries_total",
            tags={"method": method, "path": path, "reason": "network_error"},
        )
        return delay
    raise NotionlogNetworkError(
        message=f"Network error on {method} {path}: {exc}",
        context={"path": path, "attempt": attempt + 1},
        cause=exc,
    ) from exc


def _status_retry_delay(
    config: NotionlogConfig,
    metrics: Any,
    method: str,
    path: str,
    response: httpx.Response,
    attempt: int,
) -> float | None:
    """Delay before retrying after an unsuccessful response.

    Raises the typed error for statuses that are not retried; returns
    ``None`` when the status is retryable but the attempts are used up.
    """
    status = response.status_code
    if status not in config.retry_statuses:
        _raise_for_status(response, method, path)

    if not should_retry(
        status, None, attempt, config.retry_max_attempts, config.retry_statuses,
    ):
        return None

    retry_after = _parse_retry_after(response) if status == 429 else None
    delay = compute_backoff(
        attempt,
        base=config.retry_base_delay,
        maximum=config.retry_max_delay,
        jitter=config.retry_jitter,
        retry_after=retry_after,
    )
    reason = "rate_limited" if status == 429 else "server_error"
    log.warning(
        "Transient Notion error, retrying",
        extra={"extra_fields": {
            "op": "request", "method": method, "path": path, "status_code": status,
            "attempt": attempt + 1, "delay_ms": round(delay * 1000),
        }},
    )
    metrics.increment(
        "notionlog.retries_total",
        tags={"method": method, "path": path, "reason": reason},
    )
    return delay


def _exhausted(
    method: str,
    path: str,
    attempts: int,
    last_status: int | None,
) -> NotionlogRetryExhaustedError:
    log.error(
        "Retries exhausted",
        extra={"extra_fields": {
            "op": "request", "method": method, "path": path,
            "attempts": attempts, "last_status_code": last_status,
        }},
    )
    return NotionlogRetryExhaustedError(
        message=(
            f"All {attempts} attempts exhausted for {method} {path} "
            f"(last status: {last_status})"
        ),
        context={"attempts": attempts, "last_status_code": last_status},
    )


def _record(metrics: Any, method: str, path: str, status: int, elapsed_ms: float) -> None:
    tags = {"method": method, "path": path, "status": str(status)}
    metrics.increment("notionlog.requests_total", tags=tags)
    metrics.timing("notionlog.request_duration_ms", elapsed_ms, tags=tags)


def _with_cursor(method: str, kwargs: dict[str, Any], cursor: str | None) -> dict[str, Any]:
    """Copy *kwargs* with ``page_size``/``start_cursor`` in the right place.

    ``POST`` endpoints (database queries) take them in the JSON body, ``GET``
    endpoints (block children) as query parameters.
    """
    key = "json" if method.upper() in ("POST", "PATCH") else "params"
    page: dict[str, Any] = dict(kwargs.get(key) or {})
    page["page_size"] = PAGE_SIZE
    if cursor is not None:
        page["start_cursor"] = cursor
    else:
        page.pop("start_cursor", None)
    return {**kwargs, key: page}


def _next_cursor(data: dict) -> str | None:
    if not data.get("has_more", False):
        return None
    return data.get("next_cursor")


def _client_options(config: NotionlogConfig) -> dict[str, Any]:
    return {
        "base_url": config.base_url,
        "headers": {
            "Authorization": f"Bearer {config.token}",
            "Notion-Version": config.notion_version,
            "Content-Type": "application/json",
        },
        "timeout": httpx.Timeout(config.timeout_seconds),
        "proxy": config.http_proxy,
    }


# ---------------------------------------------------------------------------
# Sync transport
# ---------------------------------------------------------------------------

class NotionTransport:
    """Synchronous HTTP transport with auth and retry.

    Parameters
    ----------
    config:
        A :class:`NotionlogConfig` controlling all transport behaviour.
    """

    def __init__(self, config: NotionlogConfig) -> None:
        self._config = config
        self._metrics = config.metrics if config.metrics is not None else NoopMetricsHook()
        self._client = httpx.Client(**_client_options(config))

    def request(self, method: str, path: str, **kwargs: Any) -> dict:
        """Execute a request against the Notion API.

        Parameters
        ----------
        method:
            HTTP method.
        path:
            Path relative to ``base_url`` (e.g. ``/pages/<id>``).
        **kwargs:
            Forwarded to :meth:`httpx.Client.request` (``json=``,
            ``params=``, ``headers=``).

        Returns
        -------
        dict
            Parsed JSON response body.

        Raises
        ------
        NotionlogAuthError, NotionlogPermissionError, NotionlogNotFoundError
            On 401, 403 and 404.
        NotionlogValidationError
            On other non-retried 4xx responses.
        NotionlogServerError
            On 5xx responses outside ``retry_statuses``.
        NotionlogRetryExhaustedError
            When every attempt returned a retryable status.
        NotionlogNetworkError
            On transport failures that are not (or no longer) retried.
        """
        max_attempts = self._config.retry_max_attempts
        last_status: int | None = None

        for attempt in range(max_attempts):
            t0 = time.monotonic()
            try:
                response = self._client.request(method, path, **kwargs)
            except RETRYABLE_EXCEPTIONS as exc:
                delay = _network_retry_delay(
                    self._config, self._metrics, method, path, exc, attempt,
                )
                time.sleep(delay)
                continue

            last_status = response.status_code
            _record(self._metrics, method, path, last_status, (time.monotonic() - t0) * 1000)
            _dump_payload(self._config, method, response, kwargs.get("json"))

            if response.is_success:
                return _json_body(response)

            delay_or_none = _status_retry_delay(
                self._config, self._metrics, method, path, response, attempt,
            )
            if delay_or_none is None:
                break
            time.sleep(delay_or_none)

        raise _exhausted(method, path, max_attempts, last_status)

    def paginate(self, path: str, method: str = "GET", **kwargs: Any) -> Iterator[dict]:
        """Yield every item of a paginated list endpoint.

        Follows ``next_cursor`` while ``has_more`` is true.
        """
        cursor: str | None = None
        while True:
            data = self.request(method, path, **_with_cursor(method, kwargs, cursor))
            yield from data.get("results", [])
            cursor = _next_cursor(data)
            if cursor is None:
                break

    def close(self) -> None:
        """Close the underlying HTTP client."""
        self._client.close()

    def __enter__(self) -> NotionTransport:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()


# ---------------------------------------------------------------------------
# Async transport
# ---------------------------------------------------------------------------

class AsyncNotionTransport:
    """Asynchronous twin of :class:`NotionTransport`.

    Uses ``httpx.AsyncClient`` and ``asyncio.sleep``; the retry semantics
    are identical.
    """

    def __init__(self, config: NotionlogConfig) -> None:
        self._config = config
        self._metrics = config.metrics if config.metrics is not None else NoopMetricsHook()
        self._client = httpx.AsyncClient(**_client_options(config))

    async def request(self, method: str, path: str, **kwargs: Any) -> dict:
        """See :meth:`NotionTransport.request`."""
        max_attempts = self._config.retry_max_attempts
        last_status: int | None = None

        for attempt in range(max_attempts):
            t0 = time.monotonic()
            try:
                response = await self._client.request(method, path, **kwargs)
            except RETRYABLE_EXCEPTIONS as exc:
                delay = _network_retry_delay(
                    self._config, self._metrics, method, path, exc, attempt,
                )
                await asyncio.sleep(delay)
                continue

            last_status = response.status_code
            _record(self._metrics, method, path, last_status, (time.monotonic() - t0) * 1000)
            _dump_payload(self._config, method, response, kwargs.get("json"))

            if response.is_success:
                return _json_body(response)

            delay_or_none = _status_retry_delay(
                self._config, self._metrics, method, path, response, attempt,
            )
            if delay_or_none is None:
                break
            await asyncio.sleep(delay_or_none)

        raise _exhausted(method, path, max_attempts, last_status)

    async def paginate(self, path: str, method: str = "GET", **kwargs: Any) -> AsyncIterator[dict]:
        """See :meth:`NotionTransport.paginate`."""
        cursor: str | None = None
        while True:
            data = await self.request(method, path, **_with_cursor(method, kwargs, cursor))
            for item in data.get("results", []):
                yield item
            cursor = _next_cursor(data)
            if cursor is None:
                break

    async def close(self) -> None:
        """Close the underlying async HTTP client."""
        await self._client.aclose()

    async def __aenter__(self) -> AsyncNotionTransport:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.close()
