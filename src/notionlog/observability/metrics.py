"""Metrics hook protocol and the no-op default.

The transport and the pipeline report counters and timings through a
:class:`MetricsHook`.  Pass any object satisfying the protocol as
``NotionlogConfig(metrics=...)`` to forward them to StatsD, Prometheus or
similar; by default a :class:`NoopMetricsHook` discards everything.

Emitted names:

* ``notionlog.requests_total``          -- counter, tagged with status
* ``notionlog.retries_total``           -- counter, tagged with reason
* ``notionlog.request_duration_ms``     -- timing
* ``notionlog.posts_fetched``           -- gauge, records in the last run
* ``notionlog.pipeline_failures_total`` -- counter, tagged with error code
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class MetricsHook(Protocol):
    """Protocol any metrics backend must satisfy.

    *tags* keys and values are strings.
    """

    def increment(
        self,
        name: str,
        value: int = 1,
        tags: dict[str, str] | None = None,
    ) -> None:
        """Increment a counter."""
        ...

    def timing(
        self,
        name: str,
        ms: float,
        tags: dict[str, str] | None = None,
    ) -> None:
        """Record a duration in milliseconds."""
        ...

    def gauge(
        self,
        name: str,
        value: float,
        tags: dict[str, str] | None = None,
    ) -> None:
        """Set a gauge to an absolute value."""
        ...


class NoopMetricsHook:
    """Discard every data point."""

    __slots__ = ()

    def increment(
        self,
        name: str,
        value: int = 1,
        tags: dict[str, str] | None = None,
    ) -> None:
        pass

    def timing(
        self,
        name: str,
        ms: float,
        tags: dict[str, str] | None = None,
    ) -> None:
        pass

    def gauge(
        self,
        name: str,
        value: float,
        tags: dict[str, str] | None = None,
    ) -> None:
        pass
