"""Field classifier: picks timestamp, level and message out of a record.

Priority order: timestamp, level, message, then the ordinary fields sorted by
key. A candidate is only promoted when its value has the right type (and, for
timestamps, actually parses); otherwise it stays an ordinary field.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime

from structy.config import Config
from structy.values import Object, String, Value

DEFAULT_TIMESTAMP_FIELDS = ("time", "timestamp")
LEVEL_FIELD = "level"
MESSAGE_FIELDS = ("message", "msg")

LEVEL_WIDTH = 5

# fromisoformat before 3.11 only takes 3 or 6 fractional digits
_FRACTION_RE = re.compile(r"(?<=\d{2}:\d{2}:\d{2})[.,](\d+)")

LEVEL_TOKENS = {
    "trace": "TRACE",
    "debug": "DEBUG",
    "info": " INFO",
    "warn": " WARN",
    "error": "ERROR",
    "fatal": "FATAL",
}


@dataclass(frozen=True)
class Field:
    key: str
    value: Value
    highlighted: bool = False


@dataclass(frozen=True)
class RenderPlan:
    timestamp: str | None = None
    level: str | None = None
    level_name: str | None = None
    message: str | None = None
    fields: tuple[Field, ...] = ()


def is_timestamp(text: str) -> bool:
    """True if *text* is an ISO-8601 date-time (a bare date does not count)."""
    if len(text) <= 10 or text[10] not in "Tt ":
        return False
    candidate = _FRACTION_RE.sub(lambda m: "." + m.group(1)[:6].ljust(6, "0"), text, count=1)
    if candidate[-1] in "Zz":
        candidate = candidate[:-1] + "+00:00"
    try:
        datetime.fromisoformat(candidate)
    except ValueError:
        return False
    return True


def level_token(raw: str) -> str:
    """Map a level name to its fixed-width token, e.g. "info" → " INFO"."""
    known = LEVEL_TOKENS.get(raw.lower())
    if known:
        return known
    return raw[:LEVEL_WIDTH].rjust(LEVEL_WIDTH)


def _timestamp_candidates(config: Config) -> tuple[str, ...]:
    if config.timestamp_field:
        return (config.timestamp_field,)
    return DEFAULT_TIMESTAMP_FIELDS


def classify(obj: Object, config: Config) -> RenderPlan:
    """Partition an object's fields into a rendering plan.

    The object itself is left untouched; promoted keys are only removed from
    a working copy.
    """
    pool = dict(obj.fields)
    timestamp = level = level_name = message = None

    for key in _timestamp_candidates(config):
        value = pool.get(key)
        if isinstance(value, String) and is_timestamp(value.value):
            timestamp = value.value
            del pool[key]
            break

    if not config.disable_level:
        value = pool.get(LEVEL_FIELD)
        if isinstance(value, String):
            token = level_token(value.value)
            # blank tokens mean "no level": keep the field so nothing is lost
            if token.strip():
                level = token
                level_name = value.value.lower()
                del pool[LEVEL_FIELD]

    for key in MESSAGE_FIELDS:
        value = pool.get(key)
        if isinstance(value, String):
            message = value.value
            del pool[key]
            break

    fields = tuple(
        Field(key, pool[key], key in config.highlight_fields)
        for key in sorted(pool)
    )
    return RenderPlan(
        timestamp=timestamp,
        level=level,
        level_name=level_name,
        message=message,
        fields=fields,
    )


def ordinary_fields(obj: Object, config: Config) -> tuple[Field, ...]:
    """All fields as ordinary ones, sorted; used for nested objects."""
    return tuple(
        Field(key, obj.fields[key], key in config.highlight_fields)
        for key in sorted(obj.fields)
    )
