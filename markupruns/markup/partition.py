# pyright: reportPrivateUsage=false

"""Provides `parse()` and `strip_to_plain_text()`."""

from __future__ import annotations

import math
from typing import List, Optional

from markupruns.cleaners.core import clean_plain_text, normalize_whitespace
from markupruns.documents.segments import BaseTextStyle, ParseResult, Segment
from markupruns.logger import trace_logger
from markupruns.markup.builder import build_fragments
from markupruns.markup.parser import parse_markup_to_segments
from markupruns.markup.utils.config import env_config
from markupruns.utils import lazyproperty

__all__ = ["normalize_whitespace", "parse", "strip_to_plain_text"]


def parse(
    markup: Optional[str] = None,
    *,
    base_font_size: Optional[float] = None,
    font_size_multiplier: float = 1.0,
    allow_font_scaling: bool = True,
    max_font_size_multiplier: float = 0.0,
    line_height: float = math.nan,
    font_weight: str = "",
    font_family: str = "",
    font_style: str = "",
    letter_spacing: float = math.nan,
    color: int = 0,
    tag_styles: str = "",
) -> ParseResult:
    """Parses markup into styled text fragments ready for layout.

    Markup source
    -------------
    markup
        The markup string, a safe subset of HTML that has already been sanitized. None is
        treated as "" and produces an empty result.

    Base style parameters
    ---------------------
    base_font_size
        Font size of body text before heading scale and the multiplier are applied. Defaults to
        the configured default font size.
    font_size_multiplier
        Accessibility text-size multiplier. Ignored when `allow_font_scaling` is False.
    allow_font_scaling
        When False, fonts are not scaled by `font_size_multiplier`.
    max_font_size_multiplier
        Upper limit for `font_size_multiplier`. 0 (or NaN) means no limit.
    line_height
        Requested line height. Each fragment gets at least its font size plus a small spacing
        buffer. NaN means "automatic".
    font_weight, font_family, font_style
        Base font attributes applied where a tag doesn't set its own, "" for none.
    letter_spacing
        Letter spacing carried on every fragment, NaN for none.
    color
        Base text color as an ARGB int, 0 for none.

    Per-tag overrides
    -----------------
    tag_styles
        A JSON-like object keyed by tag name giving `color`, `fontSize`, `fontWeight`,
        `fontStyle` and `textDecorationLine` overrides for text directly inside that tag, e.g.
        `{"a": {"color": "#CC0000", "textDecorationLine": "none"}}`. Malformed entries are
        ignored.
    """
    opts = MarkupOptions(
        markup=markup,
        base_font_size=base_font_size,
        font_size_multiplier=font_size_multiplier,
        allow_font_scaling=allow_font_scaling,
        max_font_size_multiplier=max_font_size_multiplier,
        line_height=line_height,
        font_weight=font_weight,
        font_family=font_family,
        font_style=font_style,
        letter_spacing=letter_spacing,
        color=color,
        tag_styles=tag_styles,
    )

    return _MarkupRenderer.render(opts)


def strip_to_plain_text(markup: Optional[str]) -> str:
    """The text of `markup` with all styling discarded.

    List markers and paragraph breaks are kept, whitespace is normalized, and leading and
    trailing whitespace is removed. Used where styled text can't be shown or isn't needed, like
    notifications and search indexing.
    """
    if not markup:
        return ""
    segments = parse_markup_to_segments(normalize_whitespace(markup))
    return clean_plain_text("".join(segment.text for segment in segments))


class MarkupOptions:
    """Encapsulates parse option validation, computation, and application of defaults."""

    def __init__(
        self,
        *,
        markup: Optional[str],
        base_font_size: Optional[float],
        font_size_multiplier: float,
        allow_font_scaling: bool,
        max_font_size_multiplier: float,
        line_height: float,
        font_weight: str,
        font_family: str,
        font_style: str,
        letter_spacing: float,
        color: int,
        tag_styles: str,
    ):
        self._markup = markup
        self._base_font_size = base_font_size
        self._font_size_multiplier = font_size_multiplier
        self._allow_font_scaling = allow_font_scaling
        self._max_font_size_multiplier = max_font_size_multiplier
        self._line_height = line_height
        self._font_weight = font_weight
        self._font_family = font_family
        self._font_style = font_style
        self._letter_spacing = letter_spacing
        self._color = color
        self._tag_styles = tag_styles

    @lazyproperty
    def markup_text(self) -> str:
        """The markup with insignificant source-formatting whitespace removed."""
        return normalize_whitespace(self._markup or "")

    @lazyproperty
    def base_style(self) -> BaseTextStyle:
        """Caller styling with defaults applied."""
        return BaseTextStyle(
            font_size=(
                env_config.DEFAULT_FONT_SIZE
                if self._base_font_size is None
                else self._base_font_size
            ),
            font_size_multiplier=self._font_size_multiplier,
            allow_font_scaling=self._allow_font_scaling,
            max_font_size_multiplier=self._max_font_size_multiplier,
            line_height=self._line_height,
            font_weight=self._font_weight or "",
            font_family=self._font_family or "",
            font_style=self._font_style or "",
            letter_spacing=self._letter_spacing,
            color=self._color or 0,
        )

    @lazyproperty
    def tag_styles(self) -> str:
        return self._tag_styles or ""


class _MarkupRenderer:
    """Render markup into a `ParseResult`."""

    def __init__(self, opts: MarkupOptions):
        self._opts = opts

    @classmethod
    def render(cls, opts: MarkupOptions) -> ParseResult:
        """Styled fragments, link URLs and accessibility label for the markup in `opts`."""
        return cls(opts)._render()

    def _render(self) -> ParseResult:
        # -- nothing to parse, nip that edge-case in the bud here --
        if not self._opts.markup_text:
            return ParseResult()

        segments = self._segments
        trace_logger.detail(f"Parsed markup into {len(segments)} segments")  # type: ignore
        result = build_fragments(segments, self._opts.base_style, self._opts.tag_styles)
        if result.is_empty:
            trace_logger.detail("Markup has no visible text")  # type: ignore
        return result

    @lazyproperty
    def _segments(self) -> List[Segment]:
        return parse_markup_to_segments(self._opts.markup_text)
