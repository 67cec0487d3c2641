"""Error hierarchy for notionlog.

Every error raised by the package inherits from :class:`NotionlogError` and
carries a machine-readable ``code`` (from :class:`ErrorCode`), a
human-readable ``message``, an optional structured ``context`` dict, and an
optional ``cause`` (the chained exception).

The pipeline entry points (:meth:`NotionlogClient.get_posts`) catch these
errors and return an empty list; the individual steps let them propagate.
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Machine-readable error codes."""

    VALIDATION_ERROR = "VALIDATION_ERROR"
    AUTH_ERROR = "AUTH_ERROR"
    PERMISSION_ERROR = "PERMISSION_ERROR"
    NOT_FOUND = "NOT_FOUND"
    RETRY_EXHAUSTED = "RETRY_EXHAUSTED"
    NETWORK_ERROR = "NETWORK_ERROR"
    SERVER_ERROR = "SERVER_ERROR"
    SCHEMA_ERROR = "SCHEMA_ERROR"


class NotionlogError(Exception):
    """Base exception for all notionlog errors.

    Each subclass pins its :class:`ErrorCode` in the ``code`` class
    attribute.

    Parameters
    ----------
    message:
        A developer-friendly description of what went wrong.
    context:
        Structured diagnostic detail.  Keys are documented per subclass.
    cause:
        The underlying exception, if this error wraps another.
    """

    code: str = ErrorCode.VALIDATION_ERROR

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        self.message: str = message
        self.context: dict[str, Any] = context or {}
        self.cause: Exception | None = cause
        super().__init__(message)
        if cause is not None:
            self.__cause__ = cause

    def __repr__(self) -> str:
        ctx = f", context={self.context!r}" if self.context else ""
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r}{ctx})"


class NotionlogValidationError(NotionlogError):
    """A request or an argument was rejected (HTTP 400, malformed page id).

    Context keys: ``status_code``, ``notion_code``, ``value``.
    """

    code = ErrorCode.VALIDATION_ERROR


class NotionlogAuthError(NotionlogError):
    """HTTP 401: the integration token is invalid or expired."""

    code = ErrorCode.AUTH_ERROR


class NotionlogPermissionError(NotionlogError):
    """HTTP 403: the integration has not been shared with the page.

    Context keys: ``status_code``, ``operation``.
    """

    code = ErrorCode.PERMISSION_ERROR


class NotionlogNotFoundError(NotionlogError):
    """HTTP 404: the page, block or database does not exist or is not shared.

    Context keys: ``status_code``, ``path``.
    """

    code = ErrorCode.NOT_FOUND


class NotionlogRetryExhaustedError(NotionlogError):
    """Every attempt at a retryable request failed.

    Context keys: ``attempts``, ``last_status_code``.
    """

    code = ErrorCode.RETRY_EXHAUSTED


class NotionlogNetworkError(NotionlogError):
    """A transport-level failure occurred (timeout, DNS, connection reset).

    Context keys: ``path``, ``attempt``.
    """

    code = ErrorCode.NETWORK_ERROR


class NotionlogServerError(NotionlogError):
    """A 5xx response outside the configured retry statuses.

    Context keys: ``status_code``, ``path``.
    """

    code = ErrorCode.SERVER_ERROR


class NotionlogSchemaError(NotionlogError):
    """The root page holds no collection, or the collection has no schema.

    Context keys: ``page_id``, ``object``.
    """

    code = ErrorCode.SCHEMA_ERROR
