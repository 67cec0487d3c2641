"""Token redaction for debug dumps and structured log fields.

:func:`redact` returns a deep copy in which

* values under sensitive keys (``authorization``, ``token``, ``secret``, ...)
  are masked,
* ``Bearer <token>`` fragments are masked wherever they appear,
* the exact integration token, when supplied, is scrubbed from every string.

The caller's data is never mutated.
"""

from __future__ import annotations

import copy
import re
from typing import Any

_SENSITIVE_KEY_PATTERNS: frozenset[str] = frozenset({
    "token",
    "secret",
    "password",
    "authorization",
    "cookie",
    "api_key",
})

_BEARER_RE = re.compile(r"(Bearer\s+)\S+")


def _mask(value: str, token: str | None) -> str:
    if token and token in value:
        suffix = token[-4:] if len(token) >= 8 else ""
        value = value.replace(token, f"<redacted:...{suffix}>" if suffix else "<redacted>")
    return _BEARER_RE.sub(lambda m: f"{m.group(1)}<redacted>", value)


def _is_sensitive(key: Any) -> bool:
    if not isinstance(key, str):
        return False
    key_lower = key.lower()
    return any(pat in key_lower for pat in _SENSITIVE_KEY_PATTERNS)


def _redact_value(value: Any, token: str | None) -> Any:
    if isinstance(value, dict):
        return {
            k: ("<redacted>" if _is_sensitive(k) else _redact_value(v, token))
            for k, v in value.items()
        }
    if isinstance(value, list):
        return [_redact_value(item, token) for item in value]
    if isinstance(value, str):
        return _mask(value, token)
    return value


def redact(payload: dict, token: str | None = None) -> dict:
    """Return a deep copy of *payload* with credentials removed.

    Examples
    --------
    >>> redact({"Authorization": "Bearer ntn_abc123"})
    {'Authorization': '<redacted>'}
    >>> redact({"msg": "sent Bearer ntn_abc123"})
    {'msg': 'sent Bearer <redacted>'}
    """
    return _redact_value(copy.deepcopy(payload), token)
