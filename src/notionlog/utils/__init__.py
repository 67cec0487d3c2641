from .dates import parse_datetime, to_iso
from .redact import redact

__all__ = [
    "parse_datetime",
    "redact",
    "to_iso",
]
