"""Value model for parsed records: one frozen dataclass per JSON variant."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Mapping, Union


@dataclass(frozen=True)
class Null:
    pass


@dataclass(frozen=True)
class Bool:
    value: bool


@dataclass(frozen=True)
class Number:
    """A numeric literal kept as its source text so IDs never lose precision."""

    text: str


@dataclass(frozen=True)
class String:
    value: str


@dataclass(frozen=True)
class Array:
    items: tuple[Value, ...] = ()


@dataclass(frozen=True)
class Object:
    fields: Mapping[str, Value] = field(default_factory=dict)


Value = Union[Null, Bool, Number, String, Array, Object]

NULL = Null()


def from_python(obj: Any) -> Value:
    """Convert a decoded JSON tree into the value model.

    Numbers must already be wrapped in :class:`Number` (see the parser's
    decoder hooks); plain ``int``/``float`` are rejected so a lossy float
    never sneaks in.
    """
    if obj is None:
        return NULL
    # bool before anything numeric: bool is an int subclass
    if isinstance(obj, bool):
        return Bool(obj)
    if isinstance(obj, Number):
        return obj
    if isinstance(obj, str):
        return String(obj)
    if isinstance(obj, list):
        return Array(tuple(from_python(item) for item in obj))
    if isinstance(obj, dict):
        return Object({key: from_python(val) for key, val in obj.items()})
    raise TypeError(f"Cannot convert {type(obj).__name__} to a Value")


def to_json(value: Value) -> str:
    """Serialize to compact JSON with sorted keys and original number text."""
    if isinstance(value, Null):
        return "null"
    if isinstance(value, Bool):
        return "true" if value.value else "false"
    if isinstance(value, Number):
        return value.text
    if isinstance(value, String):
        return json.dumps(value.value, ensure_ascii=False)
    if isinstance(value, Array):
        return "[" + ",".join(to_json(item) for item in value.items) + "]"
    if isinstance(value, Object):
        parts = [
            f"{json.dumps(key, ensure_ascii=False)}:{to_json(value.fields[key])}"
            for key in sorted(value.fields)
        ]
        return "{" + ",".join(parts) + "}"
    raise TypeError(f"Not a Value: {type(value).__name__}")
