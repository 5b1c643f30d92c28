"""Shared pytest fixtures for the structy test suite."""

from __future__ import annotations

import pytest

from structy.config import Config


@pytest.fixture()
def plain_config() -> Config:
    """Config with colors off, as used by the literal-output scenarios."""
    return Config(disable_colors=True)


@pytest.fixture()
def color_config() -> Config:
    """Config with colors on and a highlighted ``user`` field."""
    return Config(highlight_fields=frozenset({"user"}))


@pytest.fixture()
def clean_env(monkeypatch) -> None:
    """Remove any STRUCTY_* variables leaking in from the caller's shell."""
    for name in (
        "STRUCTY_CONFIG",
        "STRUCTY_NO_COLORS",
        "STRUCTY_NO_LEVEL",
        "STRUCTY_PARSE_DEPTH",
        "STRUCTY_TIMESTAMP_PROP",
        "STRUCTY_HIGHLIGHT_PROPS",
    ):
        monkeypatch.delenv(name, raising=False)
