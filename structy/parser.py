"""Line parser: strict JSON first, logfmt ``key=value`` tokens as fallback.

Detection order:
  1. Strict JSON of the trimmed line (any JSON value, not just objects)
  2. logfmt tokens, each ``key=value``, folded into an Object
  3. Neither → MalformedInput

Duplicate logfmt keys are last-write-wins: tokens are folded into the object
in a single pass, so a later occurrence overwrites an earlier one.
"""

from __future__ import annotations

import json
import logging
import re

from structy.values import Number, Object, String, Value, from_python

logger = logging.getLogger(__name__)

# key: anything but whitespace, '=' or '"'; value: the rest of the token
_TOKEN_RE = re.compile(r'^(?P<key>[^\s="]+)=(?P<value>.*)$', re.DOTALL)

# a complete double-quoted span with backslash escapes
_QUOTED_RE = re.compile(r'^"(?P<inner>(?:[^"\\]|\\.)*)"$', re.DOTALL)

_BACKSLASH_RE = re.compile(r"\\(.)", re.DOTALL)


class MalformedInput(ValueError):
    """Raised when a line is neither strict JSON nor a logfmt record.

    ``reason`` names the sub-case; the underlying error, if any, is chained
    as ``__cause__``.
    """

    def __init__(self, reason: str, line: str):
        super().__init__(f"{reason}: {line!r}")
        self.reason = reason
        self.line = line


# ---------------------------------------------------------------------------
# JSON
# ---------------------------------------------------------------------------


def _reject_constant(name: str):
    raise ValueError(f"Non-standard JSON constant {name}")


def decode_json(text: str):
    """Strict json.loads that keeps number literals verbatim as Number."""
    return json.loads(
        text,
        parse_int=Number,
        parse_float=Number,
        parse_constant=_reject_constant,
    )


# ---------------------------------------------------------------------------
# logfmt
# ---------------------------------------------------------------------------


def split_tokens(line: str) -> list[str]:
    """Split on whitespace runs that are outside double-quoted spans.

    Raises MalformedInput if a quoted span is never closed.
    """
    tokens: list[str] = []
    current: list[str] = []
    in_quotes = False
    escaped = False

    for ch in line:
        if escaped:
            current.append(ch)
            escaped = False
        elif ch == "\\" and in_quotes:
            current.append(ch)
            escaped = True
        elif ch == '"':
            current.append(ch)
            in_quotes = not in_quotes
        elif ch.isspace() and not in_quotes:
            if current:
                tokens.append("".join(current))
                current = []
        else:
            current.append(ch)

    if in_quotes:
        raise MalformedInput("unterminated quoted value", line)
    if current:
        tokens.append("".join(current))
    return tokens


def _unescape(inner: str) -> str:
    """Decode JSON-style escapes; a stray backslash just escapes the next char."""
    try:
        return json.loads(f'"{inner}"', strict=False)
    except ValueError:
        return _BACKSLASH_RE.sub(r"\1", inner)


def parse_logfmt_value(raw: str) -> Value:
    """Quoted → String, JSON scalar → that scalar, anything else → String."""
    quoted = _QUOTED_RE.match(raw)
    if quoted:
        return String(_unescape(quoted.group("inner")))

    try:
        decoded = decode_json(raw)
    except ValueError:
        return String(raw)

    if decoded is None or isinstance(decoded, (bool, Number)):
        return from_python(decoded)
    # strings, arrays and objects stay as the raw token text
    return String(raw)


def parse_logfmt(line: str) -> Object:
    """Parse a whole logfmt line into an Object.

    Raises MalformedInput if any token is not ``key=value``.
    """
    fields: dict[str, Value] = {}
    for token in split_tokens(line):
        match = _TOKEN_RE.match(token)
        if not match:
            raise MalformedInput(f"token {token!r} is not key=value", line)
        fields[match.group("key")] = parse_logfmt_value(match.group("value"))

    if not fields:
        raise MalformedInput("no key=value tokens", line)
    return Object(fields)


# ---------------------------------------------------------------------------
# Auto-detect entry point
# ---------------------------------------------------------------------------


def parse_line(line: str) -> Value:
    """Parse one record, trying JSON first and logfmt second.

    A blank line yields an empty Object. Raises MalformedInput otherwise when
    neither format applies; the JSON syntax error is chained as the cause.
    """
    stripped = line.strip()
    if not stripped:
        return Object({})

    try:
        return from_python(decode_json(stripped))
    except RecursionError as exc:
        raise MalformedInput("nesting too deep", line) from exc
    except ValueError as exc:
        json_error = exc

    logger.debug("Not JSON (%s), trying logfmt", json_error)
    try:
        return parse_logfmt(stripped)
    except MalformedInput as exc:
        logger.debug("Not logfmt either: %s", exc.reason)
        raise exc from json_error
