"""
Immutable log record and structured field coercion.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Literal, Mapping, Union

Level = Literal["info", "warn", "error"]
FieldValue = Union[str, int, float, bool]
Fields = Mapping[str, FieldValue]

LEVELS: tuple[str, ...] = ("info", "warn", "error")
RESERVED_KEYS = frozenset({"timestamp", "level", "message", "service"})

_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1


def clean_text(text: str) -> str:
    """Replace lone surrogates (e.g. from ``surrogateescape``) with backslash escapes."""
    try:
        text.encode("utf-8")
        return text
    except UnicodeEncodeError:
        return text.encode("utf-8", "backslashreplace").decode("utf-8")


def coerce_value(value: Any) -> FieldValue:
    """Reduce an arbitrary value to a string, number or boolean.

    Never raises: anything that is not already encodable falls back to its
    textual form, and objects whose ``__str__`` fails are described by type.
    Text is always valid UTF-8.
    """
    if isinstance(value, (bool, float)):
        return value
    if isinstance(value, str):
        return clean_text(value)
    if isinstance(value, int):
        if _INT64_MIN <= value <= _INT64_MAX:
            return value
        return str(value)
    try:
        return clean_text(str(value))
    except Exception:
        return f"<unprintable {type(value).__name__}>"


def coerce_fields(fields: Mapping[Any, Any] | None) -> dict[str, FieldValue]:
    if not fields:
        return {}
    return {str(coerce_value(k)): coerce_value(v) for k, v in fields.items()}


@dataclass(frozen=True)
class LogRecord:
    """A single emitted log event."""

    timestamp: str
    level: Level
    message: str
    service: str
    fields: Fields = field(default_factory=dict)

    def __post_init__(self) -> None:
        # Freeze the field mapping so sinks cannot mutate a shared record.
        object.__setattr__(self, "fields", MappingProxyType(dict(self.fields)))

    def to_dict(self) -> dict[str, FieldValue]:
        """Flat mapping of every field plus the reserved keys (reserved keys win)."""
        payload: dict[str, FieldValue] = dict(self.fields)
        payload.update(
            timestamp=self.timestamp,
            level=self.level,
            message=self.message,
            service=self.service,
        )
        return payload
