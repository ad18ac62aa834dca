"""Per-tag style overrides read from a JSON-like "tag styles" string.

The caller supplies overrides as text shaped like a JSON object keyed by tag name:

    {"strong": {"color": "#CC0000", "fontWeight": "900"}, "a": {"textDecorationLine": "none"}}

Only the two-level tag -> property structure is read, with a small lenient scanner rather than
a JSON parser, so single-quoted strings and trailing garbage are tolerated. A missing or
malformed value for any property resolves to that property's "unset" sentinel; nothing here
raises on bad input.
"""

from __future__ import annotations

import math
import re
from typing import Dict, Iterator, Mapping, Tuple

from markupruns.documents.segments import TagStyle
from markupruns.logger import trace_logger
from markupruns.nlp.patterns import ASCII_WHITESPACE
from markupruns.utils import lazyproperty

_HEX_RGB_RE = re.compile(r"[0-9a-fA-F]{6}")
_NUMERIC_CHARS = frozenset("0123456789.-")
_QUOTES = "\"'"

# ------------------------------------------------------------------------------------------------
# VALUE PARSERS
# ------------------------------------------------------------------------------------------------


def parse_hex_color(color_str: str) -> int:
    """ARGB int with full opacity for a "#RRGGBB" or "#RGB" color string.

    Returns 0 (unset) for anything else, e.g. "red", "#12345", or "#GGGGGG".

    Example
    -------
    "#abc" -> 0xFFAABBCC
    """
    color_str = color_str.strip()
    if not color_str.startswith("#"):
        return 0

    hex_digits = color_str[1:]
    if len(hex_digits) == 3:
        hex_digits = "".join(digit * 2 for digit in hex_digits)

    if not _HEX_RGB_RE.fullmatch(hex_digits):
        return 0

    return 0xFF000000 | int(hex_digits, 16)


def _skip_ws(text: str, idx: int) -> int:
    while idx < len(text) and text[idx] in ASCII_WHITESPACE:
        idx += 1
    return idx


def _string_end(text: str, quote_idx: int) -> int:
    """Index just past the string literal opened by the quote at `quote_idx`.

    A backslash escapes the character after it. An unterminated string runs to end of text.
    """
    quote = text[quote_idx]
    idx = quote_idx + 1
    while idx < len(text):
        char = text[idx]
        if char == "\\":
            idx += 2
            continue
        if char == quote:
            return idx + 1
        idx += 1
    return len(text)


def _block_end(text: str, open_idx: int) -> int:
    """Index just past the "}" matching the "{" at `open_idx`, -1 when unbalanced.

    Braces inside quoted strings do not count.
    """
    depth = 0
    idx = open_idx
    while idx < len(text):
        char = text[idx]
        if char in _QUOTES:
            idx = _string_end(text, idx)
            continue
        if char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return idx + 1
        idx += 1
    return -1


def _iter_members(obj_text: str) -> Iterator[Tuple[str, int]]:
    """Generate (key, value-index) for each top-level member of the object in `obj_text`.

    `value-index` is the position of the first non-whitespace character of the member value.
    Text without enclosing braces is read as the body of an object.
    """
    start = _skip_ws(obj_text, 0)
    base_depth = 1 if obj_text.startswith("{", start) else 0
    depth = 0
    idx = start

    while idx < len(obj_text):
        char = obj_text[idx]

        if char in _QUOTES:
            end = _string_end(obj_text, idx)
            after = _skip_ws(obj_text, end)
            if depth == base_depth and obj_text.startswith(":", after):
                value_idx = _skip_ws(obj_text, after + 1)
                yield obj_text[idx + 1 : end - 1], value_idx
                idx = value_idx
                continue
            idx = end
            continue

        if char in "{[":
            depth += 1
        elif char in "}]":
            depth -= 1
        idx += 1


def _member_value_idx(obj_text: str, key: str) -> int:
    """Index of the value of top-level member `key` in `obj_text`, -1 when absent."""
    for member_key, value_idx in _iter_members(obj_text):
        if member_key == key:
            return value_idx
    return -1


def get_string_value_from_style_obj(style_obj: str, key: str) -> str:
    """The quoted-string value of `key` in `style_obj`, "" when absent or not a string."""
    value_idx = _member_value_idx(style_obj, key)
    if value_idx < 0 or value_idx >= len(style_obj) or style_obj[value_idx] not in _QUOTES:
        return ""
    end = _string_end(style_obj, value_idx)
    if style_obj[end - 1] != style_obj[value_idx] or end - value_idx < 2:
        return ""
    return style_obj[value_idx + 1 : end - 1]


def get_numeric_value_from_style_obj(style_obj: str, key: str) -> float:
    """The bare numeric value of `key` in `style_obj`, NaN when absent or not a number.

    Only the leading run of digits, "." and "-" is read, so `14px` reads as 14.0 and a quoted
    `"14"` is not a number.
    """
    value_idx = _member_value_idx(style_obj, key)
    if value_idx < 0:
        return math.nan

    end = value_idx
    while end < len(style_obj) and style_obj[end] in _NUMERIC_CHARS:
        end += 1

    try:
        return float(style_obj[value_idx:end])
    except ValueError:
        return math.nan


# ------------------------------------------------------------------------------------------------
# TAG STYLES
# ------------------------------------------------------------------------------------------------


def _iter_tag_blocks(tag_styles: str) -> Iterator[Tuple[str, str]]:
    """Generate (tag-name, style-object-text) for each tag configured in `tag_styles`."""
    for key, value_idx in _iter_members(tag_styles):
        if not tag_styles.startswith("{", value_idx):
            continue
        end = _block_end(tag_styles, value_idx)
        if end < 0:
            trace_logger.detail(  # type: ignore
                f"Unbalanced braces in tag style for {key!r}, ignoring it"
            )
            continue
        yield key, tag_styles[value_idx:end]


def _tag_style_from_block(style_obj: str) -> TagStyle:
    color = 0
    if color_value := get_string_value_from_style_obj(style_obj, "color"):
        color = parse_hex_color(color_value)
        if not color:
            trace_logger.detail(f"Unparseable color {color_value!r} in tag style")  # type: ignore

    return TagStyle(
        color=color,
        font_size=get_numeric_value_from_style_obj(style_obj, "fontSize"),
        font_weight=get_string_value_from_style_obj(style_obj, "fontWeight"),
        font_style=get_string_value_from_style_obj(style_obj, "fontStyle"),
        text_decoration_line=get_string_value_from_style_obj(style_obj, "textDecorationLine"),
    )


def get_style_from_tag_styles(tag_styles: str, tag_name: str) -> TagStyle:
    """The `TagStyle` configured for `tag_name` in `tag_styles`.

    All fields are unset when the tag isn't configured or its style block is malformed.
    """
    if not tag_styles or not tag_name:
        return TagStyle()
    for key, style_obj in _iter_tag_blocks(tag_styles):
        if key == tag_name:
            return _tag_style_from_block(style_obj)
    return TagStyle()


class TagStyleSheet:
    """Memoizing lookup of `TagStyle` by tag name over one tag-styles string.

    The string is scanned once, on first lookup, no matter how many segments are resolved.
    """

    def __init__(self, tag_styles: str | None):
        self._tag_styles = tag_styles or ""
        self._styles: Dict[str, TagStyle] = {}

    def style_for(self, tag_name: str) -> TagStyle:
        """Overrides for `tag_name`, all-unset when there are none."""
        if not tag_name or not self._tag_styles:
            return TagStyle()
        if tag_name not in self._styles:
            style_obj = self._blocks.get(tag_name)
            self._styles[tag_name] = (
                TagStyle() if style_obj is None else _tag_style_from_block(style_obj)
            )
        return self._styles[tag_name]

    @lazyproperty
    def _blocks(self) -> Mapping[str, str]:
        """Style-object text by tag name; the first block wins when a tag is repeated."""
        blocks: Dict[str, str] = {}
        for key, style_obj in _iter_tag_blocks(self._tag_styles):
            blocks.setdefault(key, style_obj)
        return blocks
