"""Renderer: turns a Value into one human-readable line.

Composite values expand into ``[a b]`` / ``key=value`` form until
``config.parse_depth`` is reached, after which they are printed as compact
JSON. Only the line's top-level object gets timestamp/level/message
promotion.
"""

from __future__ import annotations

import json
import logging

from structy import colors
from structy.classifier import Field, classify, ordinary_fields
from structy.config import Config
from structy.parser import MalformedInput, parse_line
from structy.values import Array, Bool, Null, Number, Object, String, Value, to_json

logger = logging.getLogger(__name__)


def _is_expanded(value: Value, depth: int, config: Config) -> bool:
    return isinstance(value, (Array, Object)) and depth < config.parse_depth


def render(value: Value, depth: int, config: Config) -> str:
    """Render *value* found at nesting level *depth* (0 = the whole line)."""
    if isinstance(value, Null):
        return "null"
    if isinstance(value, Bool):
        return "true" if value.value else "false"
    if isinstance(value, Number):
        return value.text
    if isinstance(value, String):
        # quoted when nested so "17" and 17 stay distinguishable
        if depth == 0:
            return value.value
        return json.dumps(value.value, ensure_ascii=False)
    if isinstance(value, Array):
        if depth >= config.parse_depth:
            return to_json(value)
        return "[" + " ".join(render(item, depth + 1, config) for item in value.items) + "]"
    if isinstance(value, Object):
        if depth >= config.parse_depth:
            return to_json(value)
        return _render_fields(ordinary_fields(value, config), depth, config)
    raise TypeError(f"Not a Value: {type(value).__name__}")


def _render_field(field: Field, depth: int, config: Config) -> str:
    text = render(field.value, depth + 1, config)
    if not _is_expanded(field.value, depth + 1, config):
        text = colors.color_value(text, config)
    return f"{colors.color_key(field.key, config)}={text}"


def _render_fields(fields: tuple[Field, ...], depth: int, config: Config) -> str:
    buf = ""
    for field in fields:
        buf += _render_field(field, depth, config) + " "
    return buf[:-1]


def format_value(value: Value, config: Config) -> str:
    """Assemble the output line for a parsed record."""
    if not isinstance(value, Object):
        return render(value, 0, config)

    plan = classify(value, config)
    buf = ""
    if plan.timestamp is not None:
        buf += "[" + colors.color_timestamp(plan.timestamp, config) + "] "
    if plan.level is not None:
        buf += colors.color_level(plan.level, plan.level_name, config) + ": "
    if plan.message is not None:
        buf += plan.message + " "
    buf += _render_fields(plan.fields, 0, config)
    if buf.endswith(" "):
        buf = buf[:-1]
    return buf


class Formatter:
    """Parses and renders lines with a fixed Config."""

    def __init__(self, config: Config | None = None):
        self.config = config or Config()

    def reformat(self, line: str) -> str:
        """Parse and render one line. Raises MalformedInput."""
        value = parse_line(line)
        try:
            return format_value(value, self.config)
        except RecursionError as exc:
            raise MalformedInput("nesting too deep", line) from exc

    def reformat_or_raw(self, line: str) -> str:
        """Like reformat, but hands back *line* untouched if it can't be parsed."""
        try:
            return self.reformat(line)
        except MalformedInput as exc:
            logger.debug("Passing line through unformatted: %s", exc.reason)
            return line
