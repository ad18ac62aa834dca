"""Resolves parsed `Segment`s into `Fragment`s carrying their final visual attributes.

Each segment's style flags are combined with the caller's base style and any per-tag overrides
to produce concrete font size, line height, weight, style, decoration and color. Segment text is
whitespace-normalized here, not in the parser, because whether a leading space is significant
depends on the segment that precedes it.
"""

from __future__ import annotations

import math
from types import MappingProxyType
from typing import Iterator, List, Mapping, Optional, Sequence, Tuple

from markupruns.cleaners.core import is_paragraph_break, normalize_segment_text
from markupruns.documents.segments import (
    BaseTextStyle,
    FontStyle,
    FontWeight,
    Fragment,
    ParseResult,
    Segment,
    TagStyle,
    TextDecoration,
)
from markupruns.logger import trace_logger
from markupruns.markup.styles import TagStyleSheet
from markupruns.markup.utils.config import env_config
from markupruns.markup.utils.constants import BOLD_FONT_WEIGHTS
from markupruns.nlp.patterns import ASCII_WHITESPACE, UNPAUSED_LIST_ITEM_BREAK_RE

# -- (underline, strikethrough) for each recognized `textDecorationLine` override, matched
# -- exactly; any other value leaves the segment's own decoration in place
_TEXT_DECORATION_OVERRIDES: Mapping[str, Tuple[bool, bool]] = MappingProxyType(
    {
        "none": (False, False),
        "underline": (True, False),
        "line-through": (False, True),
        "underline line-through": (True, True),
        "line-through underline": (True, True),
    }
)


def build_accessibility_label(text: str) -> str:
    """`text` with a pause (".") added before each list item that doesn't already follow one.

    A list item is a line starting with a number or a bullet. The period goes at the end of the
    line before it unless that line already ends with terminal punctuation.

    Example
    -------
    "Steps\\n1. Mix\\n2. Bake." -> "Steps.\\n1. Mix.\\n2. Bake."
    """
    return UNPAUSED_LIST_ITEM_BREAK_RE.sub(".", text)


class FragmentBuilder:
    """Builds the `ParseResult` for one segment list.

    Use `FragmentBuilder.build()` rather than instantiating directly.
    """

    def __init__(self, segments: Sequence[Segment], base_style: BaseTextStyle, tag_styles: str):
        self._segments = segments
        self._base_style = base_style
        self._style_sheet = TagStyleSheet(tag_styles)
        self._multiplier = base_style.effective_multiplier
        self._line_height_buffer = env_config.LINE_HEIGHT_BUFFER
        self._link_color = env_config.LINK_COLOR

    @classmethod
    def build(
        cls, segments: Sequence[Segment], base_style: BaseTextStyle, tag_styles: str = ""
    ) -> ParseResult:
        builder = cls(segments, base_style, tag_styles)
        fragments: List[Fragment] = []
        link_urls: List[str] = []
        for fragment, link_url in builder._iter_fragments():
            fragments.append(fragment)
            link_urls.append(link_url)

        result = ParseResult(
            fragments=tuple(fragments),
            link_urls=tuple(link_urls),
            accessibility_label=build_accessibility_label("".join(f.text for f in fragments)),
        )
        trace_logger.detail(  # type: ignore
            f"Built {len(fragments)} fragments from {len(segments)} segments"
        )
        return result

    def _iter_fragments(self) -> Iterator[Tuple[Fragment, str]]:
        """Generate (fragment, link-url) pairs for the segments that have visible text."""
        segments = list(self._segments)

        # -- trailing paragraph breaks produce no visible or accessible output --
        while segments and is_paragraph_break(segments[-1].text):
            segments.pop()

        last_idx = len(segments) - 1
        for idx, segment in enumerate(segments):
            text = normalize_segment_text(
                segment.text,
                newlines_only=is_paragraph_break(segment.text),
                preserve_leading_space=segment.follows_inline_element,
            )
            if idx == last_idx:
                text = text.rstrip(ASCII_WHITESPACE)
            if not text:
                continue

            yield self._resolve_fragment(segment, text), segment.link_url

    def _resolve_fragment(self, segment: Segment, text: str) -> Fragment:
        base_style = self._base_style
        tag_style = self._style_sheet.style_for(segment.parent_tag)
        font_size = self._font_size(segment, tag_style)

        return Fragment(
            text=text,
            font_size=font_size,
            line_height=self._line_height(font_size),
            font_weight=self._font_weight(segment, tag_style),
            font_style=self._font_style(segment, tag_style),
            font_family=base_style.font_family,
            letter_spacing=base_style.letter_spacing,
            text_decoration=self._text_decoration(segment, tag_style),
            color=self._color(segment, tag_style),
            allow_font_scaling=base_style.allow_font_scaling,
            writing_direction=segment.writing_direction,
            is_bdi_isolated=segment.is_bdi_isolated,
            is_bdo_override=segment.is_bdo_override,
            link_url=segment.link_url,
        )

    def _font_size(self, segment: Segment, tag_style: TagStyle) -> float:
        """A tag-style size replaces the base size and heading scale but is still multiplied."""
        if tag_style.has_font_size:
            return tag_style.font_size * self._multiplier
        return self._base_style.font_size * segment.font_scale * self._multiplier

    def _line_height(self, font_size: float) -> float:
        min_line_height = font_size + self._line_height_buffer
        line_height = self._base_style.line_height
        if math.isnan(line_height) or line_height <= 0:
            return min_line_height
        return max(line_height, min_line_height)

    def _font_weight(self, segment: Segment, tag_style: TagStyle) -> FontWeight:
        is_bold = segment.is_bold
        if tag_style.font_weight:
            is_bold = tag_style.font_weight in BOLD_FONT_WEIGHTS
        if is_bold or self._base_style.font_weight in BOLD_FONT_WEIGHTS:
            return FontWeight.BOLD
        return FontWeight.NORMAL

    def _font_style(self, segment: Segment, tag_style: TagStyle) -> FontStyle:
        is_italic = segment.is_italic
        if tag_style.font_style:
            is_italic = tag_style.font_style == "italic"
        if is_italic or self._base_style.font_style == "italic":
            return FontStyle.ITALIC
        return FontStyle.NORMAL

    def _text_decoration(self, segment: Segment, tag_style: TagStyle) -> TextDecoration:
        underline, strikethrough = _TEXT_DECORATION_OVERRIDES.get(
            tag_style.text_decoration_line, (segment.is_underline, segment.is_strikethrough)
        )
        return TextDecoration.from_flags(underline, strikethrough)

    def _color(self, segment: Segment, tag_style: TagStyle) -> Optional[int]:
        if tag_style.color:
            return tag_style.color
        if segment.is_link:
            return self._link_color
        return self._base_style.color or None


def build_fragments(
    segments: Sequence[Segment], base_style: BaseTextStyle, tag_styles: str = ""
) -> ParseResult:
    """`ParseResult` for `segments` styled with `base_style` and per-tag `tag_styles`.

    An empty segment list, or one holding nothing but paragraph breaks, produces an empty result.
    """
    if not segments:
        return ParseResult()
    return FragmentBuilder.build(segments, base_style, tag_styles)
