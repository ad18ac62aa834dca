"""
This module contains values that are permitted to be tweaked by the system environment, for
example the default link color or the spacing added to derive a line height. Constants do NOT
belong in this module. Constants are values that should not be altered without making a code
change (e.g. the bidi control characters). Constants go into `./constants.py`.
"""

import os
from dataclasses import dataclass

from markupruns.logger import trace_logger
from markupruns.markup.styles import parse_hex_color
from markupruns.markup.utils.constants import (
    DEFAULT_FONT_SIZE,
    DEFAULT_LINK_COLOR,
    DEFAULT_LINK_COLOR_HEX,
    LINE_HEIGHT_BUFFER_DEFAULT,
    MAX_LIST_INDENT_LEVEL_DEFAULT,
)


@dataclass
class ENVConfig:
    """class for configuring environment parameters"""

    def _get_string(self, var: str, default_value: str = "") -> str:
        """attempt to get the value of var from the os environment; if not present return the
        default_value"""
        return os.environ.get(var, default_value)

    def _get_int(self, var: str, default_value: int) -> int:
        if value := self._get_string(var):
            return int(value)
        return default_value

    def _get_float(self, var: str, default_value: float) -> float:
        if value := self._get_string(var):
            return float(value)
        return default_value

    @property
    def DEFAULT_FONT_SIZE(self) -> float:
        """font size in points used when the caller does not provide one"""
        return self._get_float("MARKUPRUNS_DEFAULT_FONT_SIZE", DEFAULT_FONT_SIZE)

    @property
    def LINE_HEIGHT_BUFFER(self) -> float:
        """spacing added to a fragment's font size to get its minimum line height"""
        return self._get_float("MARKUPRUNS_LINE_HEIGHT_BUFFER", LINE_HEIGHT_BUFFER_DEFAULT)

    @property
    def LINK_COLOR(self) -> int:
        """ARGB color given to links that have no color of their own

        Read from a "#RRGGBB" or "#RGB" string. An unparseable value falls back to the default.
        """
        value = self._get_string("MARKUPRUNS_LINK_COLOR", DEFAULT_LINK_COLOR_HEX)
        if color := parse_hex_color(value):
            return color
        trace_logger.detail(f"Ignoring unparseable MARKUPRUNS_LINK_COLOR {value!r}")  # type: ignore
        return DEFAULT_LINK_COLOR

    @property
    def MAX_LIST_INDENT_LEVEL(self) -> int:
        """deepest list nesting that still adds indentation; deeper items share that indent"""
        return self._get_int("MARKUPRUNS_MAX_LIST_INDENT_LEVEL", MAX_LIST_INDENT_LEVEL_DEFAULT)


env_config = ENVConfig()
