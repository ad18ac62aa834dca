"""Domain model shared by the markup parser and the fragment builder.

A markup string flows through three shapes:

- `Segment` - a run of text sharing one style, direction, and link state, produced by the
  segment parser in document order.
- `Fragment` - a segment after visual-attribute resolution (font size, line height, weight,
  decoration, color), ready for a layout service.
- `ParseResult` - the fragments of one parse plus the link-URL list aligned with them and the
  flattened accessibility label.
"""

from __future__ import annotations

import dataclasses as dc
import enum
import math
from typing import NamedTuple, Optional, Tuple

from markupruns.utils import lazyproperty


class WritingDirection(enum.Enum):
    """Base writing direction of a run of text."""

    NATURAL = "natural"
    LEFT_TO_RIGHT = "ltr"
    RIGHT_TO_LEFT = "rtl"


class ListKind(enum.Enum):
    ORDERED = "ordered"
    UNORDERED = "unordered"


class TextDecoration(enum.Enum):
    NONE = "none"
    UNDERLINE = "underline"
    STRIKETHROUGH = "line-through"
    UNDERLINE_STRIKETHROUGH = "underline line-through"

    @classmethod
    def from_flags(cls, underline: bool, strikethrough: bool) -> TextDecoration:
        """The single decoration value combining `underline` and `strikethrough`."""
        if underline and strikethrough:
            return cls.UNDERLINE_STRIKETHROUGH
        if underline:
            return cls.UNDERLINE
        if strikethrough:
            return cls.STRIKETHROUGH
        return cls.NONE


class FontWeight(enum.Enum):
    NORMAL = "normal"
    BOLD = "bold"


class FontStyle(enum.Enum):
    NORMAL = "normal"
    ITALIC = "italic"


class Segment(NamedTuple):
    """A run of text with the style it was found in.

    The text is as accumulated by the parser: whitespace is not yet normalized because
    whether a leading space is significant depends on what preceded the segment, which is
    recorded in `follows_inline_element`.
    """

    text: str
    font_scale: float = 1.0
    is_bold: bool = False
    is_italic: bool = False
    is_underline: bool = False
    is_strikethrough: bool = False
    is_link: bool = False
    follows_inline_element: bool = False
    parent_tag: str = ""
    """Innermost inline-formatting tag enclosing the text, "" when there is none."""
    link_url: str = ""
    writing_direction: WritingDirection = WritingDirection.NATURAL
    is_bdi_isolated: bool = False
    is_bdo_override: bool = False


@dc.dataclass
class ListContext:
    """State of one open `<ol>` or `<ul>` element."""

    kind: ListKind
    nesting_level: int
    item_counter: int = 0


@dc.dataclass(frozen=True)
class TagStyle:
    """Visual overrides configured for one tag name.

    Each field has an "unset" sentinel: 0 for `color`, NaN for `font_size`, and "" for the
    string fields.
    """

    color: int = 0
    font_size: float = math.nan
    font_weight: str = ""
    font_style: str = ""
    text_decoration_line: str = ""

    @property
    def has_font_size(self) -> bool:
        return not math.isnan(self.font_size) and self.font_size > 0


@dc.dataclass(frozen=True)
class BaseTextStyle:
    """Caller-supplied styling that applies to the whole parse unless a tag overrides it."""

    font_size: float
    font_size_multiplier: float = 1.0
    allow_font_scaling: bool = True
    max_font_size_multiplier: float = 0.0
    line_height: float = math.nan
    font_weight: str = ""
    font_family: str = ""
    font_style: str = ""
    letter_spacing: float = math.nan
    color: int = 0

    @property
    def effective_multiplier(self) -> float:
        """Font-size multiplier after applying the scaling switch and the max-multiplier cap.

        A non-positive or NaN multiplier is treated as 1.0.
        """
        if not self.allow_font_scaling:
            return 1.0
        multiplier = self.font_size_multiplier
        if math.isnan(multiplier) or multiplier <= 0:
            multiplier = 1.0
        cap = self.max_font_size_multiplier
        if not math.isnan(cap) and cap > 0:
            multiplier = min(multiplier, cap)
        return multiplier


@dc.dataclass(frozen=True)
class Fragment:
    """A run of normalized text with fully resolved visual attributes."""

    text: str
    font_size: float
    line_height: float
    font_weight: FontWeight = FontWeight.NORMAL
    font_style: FontStyle = FontStyle.NORMAL
    font_family: str = ""
    letter_spacing: float = math.nan
    text_decoration: TextDecoration = TextDecoration.NONE
    color: Optional[int] = None
    """ARGB color, None when no color attribute applies."""
    allow_font_scaling: bool = True
    writing_direction: WritingDirection = WritingDirection.NATURAL
    is_bdi_isolated: bool = False
    is_bdo_override: bool = False
    link_url: str = ""

    @property
    def is_link(self) -> bool:
        return bool(self.link_url)


@dc.dataclass(frozen=True)
class ParseResult:
    """Outcome of a single parse call.

    `link_urls` is positionally aligned with `fragments`; an entry is "" when the fragment at
    that index is not a link.
    """

    fragments: Tuple[Fragment, ...] = ()
    link_urls: Tuple[str, ...] = ()
    accessibility_label: str = ""

    @lazyproperty
    def text(self) -> str:
        """The visible text, all fragment texts concatenated in order."""
        return "".join(f.text for f in self.fragments)

    @property
    def is_empty(self) -> bool:
        return not self.fragments
