"""ANSI colorization for keys, values, timestamps and level tokens.

Every function takes the Config explicitly and is the identity when colors
are disabled.
"""

from structy.config import Config

# ANSI SGR sequences
DIM_UNDERLINE = "\033[2;4m"
HIGHLIGHT_UNDERLINE = "\033[33;4m"  # yellow
VALUE = "\033[97m"                  # bright white
TIMESTAMP = "\033[1;34m"            # bold blue
RESET = "\033[0m"

LEVEL_COLORS = {
    "trace": "",
    "debug": "\033[32m",  # green
    "info": "\033[36m",   # cyan
    "warn": "\033[33m",   # yellow
    "error": "\033[31m",  # red
    "fatal": "\033[31m",  # red
}


def _wrap(code: str, text: str) -> str:
    if not code:
        return text
    return f"{code}{text}{RESET}"


def color_key(key: str, config: Config) -> str:
    if config.disable_colors:
        return key
    if key in config.highlight_fields:
        return _wrap(HIGHLIGHT_UNDERLINE, key)
    return _wrap(DIM_UNDERLINE, key)


def color_value(text: str, config: Config) -> str:
    if config.disable_colors:
        return text
    return _wrap(VALUE, text)


def color_timestamp(text: str, config: Config) -> str:
    if config.disable_colors:
        return text
    return _wrap(TIMESTAMP, text)


def color_level(token: str, level_name: str | None, config: Config) -> str:
    """Color a level token by its lowercased name; unknown levels stay plain."""
    if config.disable_colors or not level_name:
        return token
    return _wrap(LEVEL_COLORS.get(level_name.lower(), ""), token)
