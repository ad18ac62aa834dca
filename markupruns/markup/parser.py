# pyright: reportPrivateUsage=false

"""Provides the segment parser used by `parse()` and `strip_to_plain_text()`.

The parser is a single left-to-right scan of the (whitespace-normalized) markup. It does not
build a tree. Instead it keeps a few explicit stacks that are pushed and popped as tags open and
close, and it emits a `Segment` each time a style-affecting boundary is crossed.

PRINCIPLES

- _A segment is a run of uniformly styled text._ Every opening or closing formatting tag ends the
  segment under construction ("flushes" it) so the text on either side can carry different
  styles. A flush with no accumulated text emits nothing.

- _Style belongs to the open element._ Each open element is a frame on the element stack and the
  frame records the style in effect inside it, derived from its parent frame plus its own tag.
  Closing an element restores the style of its parent by popping the frame; nothing is
  recomputed from scratch.

- _Links are tracked separately from style._ An anchor pushes its URL onto the link stack only
  when its `href` is present and passes the URL-scheme allowlist, and its frame remembers whether
  it did so. Closing a paragraph-like element clears all link state, so a stray unclosed `<a>`
  can't make unrelated text that follows clickable.

- _Malformed markup degrades, it never fails._ Unknown tags are ignored, a close tag with no
  open counterpart pops nothing, a stack is never popped when empty, and an unterminated tag
  discards the rest of the input rather than showing it as text.

Elements and their effect

- `<p>`, `<div>`, `<h1>`..`<h6>` are paragraph elements. Opening one flushes; closing one appends
  a newline, flushes, and pops every element down to and including the matching open element.
- Inline formatting elements (`<b>`, `<i>`, `<a>`, `<span>`, `<bdi>` ...) flush on open and on
  close. A segment flushed by an inline close is marked `follows_inline_element` on the *next*
  segment, which tells the fragment builder a leading space there is significant.
- `<br>` and `<hr>` append a newline without flushing.
- `<ol>`, `<ul>` and `<li>` add list markers ("1. ", "• ") and indentation to the text itself and
  a period after the text of each item, for a natural pause when the text is read aloud.
  Whitespace at the start of an item is dropped and the period goes ahead of any trailing
  whitespace, so pretty-printed items read the same as compact ones.
- `<bdi>` and `<bdo>` wrap their text in Unicode bidi control characters in addition to setting
  the direction of their segments.
- The content of `<script>` and `<style>` and of `<!-- -->` comments is skipped.
"""

from __future__ import annotations

import dataclasses as dc
import html
import re
from typing import Iterable, List, NamedTuple, Optional

from typing_extensions import TypeAlias

from markupruns.documents.segments import ListContext, ListKind, Segment
from markupruns.logger import logger, trace_logger
from markupruns.markup.direction import DirectionContext
from markupruns.markup.tags import (
    ANCHOR_TAG,
    BOLD_TAGS,
    ISOLATE_TAG,
    ITALIC_TAGS,
    LINE_BREAK_TAGS,
    LIST_TAGS,
    OVERRIDE_TAG,
    PARAGRAPH_TAGS,
    RAW_TEXT_TAGS,
    STRIKETHROUGH_TAGS,
    UNDERLINE_TAGS,
    get_heading_scale,
    is_heading_tag,
    is_inline_formatting_tag,
)
from markupruns.markup.utils.config import env_config
from markupruns.markup.utils.constants import (
    ALLOWED_URL_SCHEME_PREFIXES,
    BULLET,
    FIRST_STRONG_ISOLATE,
    LEFT_TO_RIGHT_OVERRIDE,
    LIST_INDENT,
    POP_DIRECTIONAL_FORMATTING,
    POP_DIRECTIONAL_ISOLATE,
    RIGHT_TO_LEFT_OVERRIDE,
)
from markupruns.nlp.patterns import (
    ASCII_WHITESPACE,
    DIR_ATTRIBUTE_RE,
    HREF_ATTRIBUTE_RE,
    SENTENCE_TERMINATORS,
    URL_IGNORED_CHARS_RE,
)
from markupruns.utils import lazyproperty

# -- the optional "/" of a closing tag and the tag name, e.g. ("/", "p") for "/p" --
_TAG_NAME_RE = re.compile(r"\s*(/?)\s*([^\s/>]*)")

# ------------------------------------------------------------------------------------------------
# ATTRIBUTES AND URLS
# ------------------------------------------------------------------------------------------------


def _attribute_value(pattern: re.Pattern[str], tag_source: str) -> str:
    match = pattern.search(tag_source)
    if match is None:
        return ""
    return next((group for group in match.groups() if group is not None), "")


def is_allowed_url_scheme(url: str) -> bool:
    """True when `url` is safe to record as a link target.

    Allowed are `http://`, `https://`, `mailto:` and `tel:` URLs, and URLs with no scheme at all
    (relative like `/docs` or `page.html`, fragment-only like `#top`). Any other scheme, notably
    `javascript:`, `vbscript:` and `data:`, is rejected. Comparison is case-insensitive and
    ignores leading whitespace and tab/newline characters anywhere in the URL, as a browser does.
    """
    url = URL_IGNORED_CHARS_RE.sub("", url).lstrip(ASCII_WHITESPACE).lower()

    if url.startswith(ALLOWED_URL_SCHEME_PREFIXES):
        return True

    if not url or url[0] in "/#":
        return True

    # -- no scheme when there is no colon or the colon is in the path, like "a/b:c" --
    colon_idx = url.find(":")
    if colon_idx < 0:
        return True
    slash_idx = url.find("/")
    return 0 <= slash_idx < colon_idx


def extract_href_url(tag_source: str) -> str:
    """The link target in the `href` attribute of `tag_source`, "" when absent or disallowed.

    `tag_source` is the text between "<" and ">" of a start tag, like `a href="/docs"`. Character
    references in the value are decoded.
    """
    url = html.unescape(_attribute_value(HREF_ATTRIBUTE_RE, tag_source))
    if not url:
        return ""
    if not is_allowed_url_scheme(url):
        logger.debug(f"Rejected link URL with disallowed scheme: {url!r}")
        return ""
    return url


def extract_dir_attr(tag_source: str) -> str:
    """Value of the `dir` attribute in `tag_source`, "" when there is none."""
    return _attribute_value(DIR_ATTRIBUTE_RE, tag_source).strip(ASCII_WHITESPACE)


def extract_link_urls_from_segments(segments: Iterable[Segment]) -> List[str]:
    """The link URL of each segment in order, "" for a segment that is not a link."""
    return [segment.link_url for segment in segments]


def _parse_tag_name(tag_source: str) -> tuple[str, bool]:
    """(lowercased tag name, is-closing-tag) for the text between "<" and ">" of a tag."""
    match = _TAG_NAME_RE.match(tag_source)
    assert match is not None
    return match.group(2).lower(), bool(match.group(1))


def _lookahead_text(markup: str, start: int, tag: str) -> str:
    """Text content from `start` up to the close tag of the `tag` element open at `start`.

    Nested elements of the same name are counted so their close tag does not end the scan early.
    Used to resolve `dir="auto"`, so only the text outside tags is collected.
    """
    tag_re = re.compile(rf"<(/?){re.escape(tag)}(?=[\s/>]|$)", re.IGNORECASE)
    parts: List[str] = []
    depth = 0
    pos = start

    while pos < len(markup):
        lt_idx = markup.find("<", pos)
        if lt_idx < 0:
            parts.append(markup[pos:])
            break
        parts.append(markup[pos:lt_idx])

        if match := tag_re.match(markup, lt_idx):
            if match.group(1):
                if depth == 0:
                    break
                depth -= 1
            else:
                depth += 1

        gt_idx = markup.find(">", lt_idx)
        if gt_idx < 0:
            break
        pos = gt_idx + 1

    return html.unescape("".join(parts))


# ------------------------------------------------------------------------------------------------
# PARSER STATE
# ------------------------------------------------------------------------------------------------


class _InheritedStyle(NamedTuple):
    """Style in effect inside an open element, the product of it and all its ancestors."""

    font_scale: float = 1.0
    is_bold: bool = False
    is_italic: bool = False
    is_underline: bool = False
    is_strikethrough: bool = False
    parent_tag: str = ""
    in_anchor: bool = False

    def with_tag(self, tag: str) -> _InheritedStyle:
        """The style inside a `tag` element that is a child of an element with this style."""
        font_scale, is_bold = self.font_scale, self.is_bold
        if is_heading_tag(tag):
            font_scale, is_bold = get_heading_scale(tag), True

        return _InheritedStyle(
            font_scale=font_scale,
            is_bold=is_bold or tag in BOLD_TAGS,
            is_italic=self.is_italic or tag in ITALIC_TAGS,
            is_underline=self.is_underline or tag in UNDERLINE_TAGS,
            is_strikethrough=self.is_strikethrough or tag in STRIKETHROUGH_TAGS,
            parent_tag=tag if is_inline_formatting_tag(tag) else self.parent_tag,
            in_anchor=self.in_anchor or tag == ANCHOR_TAG,
        )


@dc.dataclass
class _ElementFrame:
    """An open element on the element stack."""

    tag: str
    style: _InheritedStyle
    pushed_link: bool = False
    """True when this element is an anchor that pushed its URL onto the link stack."""


_ElementStack: TypeAlias = List[_ElementFrame]

_ROOT_STYLE = _InheritedStyle()


class SegmentParser:
    """Scans markup into `Segment`s.

    Not intended to be instantiated directly, use `SegmentParser.iter_segments()` or
    `parse_markup_to_segments()`. A parser instance parses its markup once; the segments are
    cached.
    """

    def __init__(self, markup: str):
        self._markup = markup
        self._segments: List[Segment] = []
        self._parts: List[str] = []
        self._at_item_start = False
        self._elements: _ElementStack = []
        self._lists: List[ListContext] = []
        self._link_urls: List[str] = []
        self._direction = DirectionContext()
        self._follows_inline = False
        self._max_indent_level = env_config.MAX_LIST_INDENT_LEVEL

    @classmethod
    def iter_segments(cls, markup: str) -> Iterable[Segment]:
        return iter(cls(markup).segments)

    @lazyproperty
    def segments(self) -> List[Segment]:
        """All segments of the markup, in document order."""
        markup = self._markup
        pos = 0

        while pos < len(markup):
            lt_idx = markup.find("<", pos)
            if lt_idx < 0:
                self._append_text(markup[pos:])
                break
            if lt_idx > pos:
                self._append_text(markup[pos:lt_idx])

            if markup.startswith("<!--", lt_idx):
                comment_end = markup.find("-->", lt_idx + 4)
                if comment_end < 0:
                    trace_logger.detail(  # type: ignore
                        "Unterminated comment, discarding rest of markup"
                    )
                    break
                pos = comment_end + 3
                continue

            gt_idx = markup.find(">", lt_idx + 1)
            if gt_idx < 0:
                trace_logger.detail(  # type: ignore
                    f"Unterminated tag at offset {lt_idx}, discarding rest of markup"
                )
                break

            pos = self._process_tag(markup[lt_idx + 1 : gt_idx], gt_idx + 1)

        self._flush()
        if depth := self._direction.depth:
            trace_logger.detail(f"{depth} elements left open at end of markup")  # type: ignore
        return self._segments

    # -- tag dispatch -------------------------------

    def _process_tag(self, tag_source: str, end: int) -> int:
        """Apply the tag whose source is `tag_source`, return the position to resume scanning.

        `end` is the position just past the tag's ">".
        """
        tag, is_closing = _parse_tag_name(tag_source)

        if tag in RAW_TEXT_TAGS:
            return end if is_closing else self._skip_raw_text(tag, end)

        if tag in LINE_BREAK_TAGS:
            self._emit("\n")
        elif tag in PARAGRAPH_TAGS:
            if is_closing:
                self._close_paragraph(tag)
            else:
                self._open_paragraph(tag, tag_source, end)
        elif is_inline_formatting_tag(tag):
            if is_closing:
                self._close_inline(tag)
            else:
                self._open_inline(tag, tag_source, end)
        elif tag == "li":
            if is_closing:
                self._close_list_item()
            else:
                self._open_list_item()
        elif tag in LIST_TAGS:
            if is_closing:
                self._close_list()
            else:
                self._open_list(ListKind.ORDERED if tag == "ol" else ListKind.UNORDERED)

        return end

    def _skip_raw_text(self, tag: str, start: int) -> int:
        """Position just past the close tag of the raw-text `tag` element whose content starts at
        `start`, end of markup when it is never closed."""
        markup = self._markup
        close_match = re.compile(rf"</{tag}(?=[\s/>]|$)", re.IGNORECASE).search(markup, start)
        if close_match is not None:
            gt_idx = markup.find(">", close_match.end())
            if gt_idx >= 0:
                return gt_idx + 1
        trace_logger.detail(  # type: ignore
            f"Unterminated <{tag}> element, discarding rest of markup"
        )
        return len(markup)

    # -- paragraphs -------------------------------

    def _open_paragraph(self, tag: str, tag_source: str, end: int) -> None:
        self._flush()
        dir_attr = extract_dir_attr(tag_source)
        lookahead_text = (
            _lookahead_text(self._markup, end, tag) if dir_attr.lower() == "auto" else ""
        )
        self._push_element(tag, dir_attr, lookahead_text)

    def _close_paragraph(self, tag: str) -> None:
        self._emit("\n")
        self._flush()

        # -- pop everything still open inside the paragraph along with the paragraph itself --
        if any(frame.tag == tag for frame in self._elements):
            while self._elements:
                frame = self._elements.pop()
                self._direction.exit_element(frame.tag)
                if frame.tag == tag:
                    break

        # -- an unclosed `<a>` does not extend its link past the end of the paragraph --
        self._link_urls.clear()
        for frame in self._elements:
            frame.pushed_link = False

    # -- inline formatting -------------------------------

    def _open_inline(self, tag: str, tag_source: str, end: int) -> None:
        self._flush()

        pushed_link = False
        if tag == ANCHOR_TAG and (url := extract_href_url(tag_source)):
            self._link_urls.append(url)
            pushed_link = True

        dir_attr = extract_dir_attr(tag_source)
        needs_detection = dir_attr.lower() == "auto" or (not dir_attr and tag == ISOLATE_TAG)
        lookahead_text = _lookahead_text(self._markup, end, tag) if needs_detection else ""
        self._push_element(tag, dir_attr, lookahead_text, pushed_link)

        if tag == ISOLATE_TAG:
            self._emit(FIRST_STRONG_ISOLATE)
        elif tag == OVERRIDE_TAG:
            # -- `<bdo>` without an explicit direction has no directional effect --
            direction = dir_attr.lower()
            if direction == "rtl":
                self._emit(RIGHT_TO_LEFT_OVERRIDE)
            elif direction == "ltr":
                self._emit(LEFT_TO_RIGHT_OVERRIDE)

    def _close_inline(self, tag: str) -> None:
        if tag == ISOLATE_TAG:
            self._emit(POP_DIRECTIONAL_ISOLATE)
        elif tag == OVERRIDE_TAG:
            # -- a PDF with no override to end is ignored by text layout --
            self._emit(POP_DIRECTIONAL_FORMATTING)

        self._flush(closing_inline=True)

        if not self._elements or self._elements[-1].tag != tag:
            return

        frame = self._elements.pop()
        if frame.pushed_link and self._link_urls:
            self._link_urls.pop()
        self._direction.exit_element(tag)

    # -- lists -------------------------------

    def _open_list(self, kind: ListKind) -> None:
        self._lists.append(ListContext(kind=kind, nesting_level=len(self._lists) + 1))

    def _close_list(self) -> None:
        if self._lists:
            self._lists.pop()
        if not self._lists:
            self._emit("\n")
            self._flush()

    def _open_list_item(self) -> None:
        last_char = self._last_char
        if last_char and last_char != "\n":
            self._emit("\n")

        if not self._lists:
            self._emit(f"{BULLET} ")
        else:
            current_list = self._lists[-1]
            current_list.item_counter += 1
            indent_level = min(current_list.nesting_level - 1, self._max_indent_level)
            self._emit(LIST_INDENT * indent_level)
            self._emit(
                f"{current_list.item_counter}. "
                if current_list.kind is ListKind.ORDERED
                else f"{BULLET} "
            )

        # -- source indentation at the start of the item belongs to the marker's space --
        self._at_item_start = True

    def _close_list_item(self) -> None:
        """Add a period after the item text, ahead of any whitespace that trails it."""
        if self._at_item_start:
            return

        trailing_whitespace = self._pop_trailing_whitespace()
        last_char = self._last_char
        if (
            last_char
            and last_char not in ASCII_WHITESPACE
            and last_char not in SENTENCE_TERMINATORS
        ):
            self._emit(".")
        self._emit(trailing_whitespace)

    # -- segment accumulation -------------------------------

    def _append_text(self, text: str) -> None:
        text = html.unescape(text)
        if self._at_item_start:
            text = text.lstrip(ASCII_WHITESPACE)
        self._emit(text)

    def _emit(self, text: str) -> None:
        """Add `text` to the segment under construction."""
        if not text:
            return
        self._parts.append(text)
        self._at_item_start = False

    def _pop_trailing_whitespace(self) -> str:
        """Remove and return the whitespace run at the end of the buffer, "" when there is none.

        Only the trailing parts are touched, so this stays cheap however long the buffer is.
        """
        parts = self._parts
        tail: List[str] = []
        while parts:
            part = parts.pop()
            content = part.rstrip(ASCII_WHITESPACE)
            tail.append(part[len(content) :])
            if content:
                parts.append(content)
                break
        return "".join(reversed(tail))

    def _flush(self, closing_inline: bool = False) -> None:
        """Emit the accumulated text as a segment with the style currently in effect.

        `closing_inline` is recorded on the next segment as its `follows_inline_element`.
        """
        if self._parts:
            style = self._style
            link_url = self._link_urls[-1] if self._link_urls else ""
            self._segments.append(
                Segment(
                    text="".join(self._parts),
                    font_scale=style.font_scale,
                    is_bold=style.is_bold,
                    is_italic=style.is_italic,
                    # -- an anchor is underlined only while a link is in effect --
                    is_underline=style.is_underline or (style.in_anchor and bool(link_url)),
                    is_strikethrough=style.is_strikethrough,
                    is_link=bool(link_url),
                    follows_inline_element=self._follows_inline,
                    parent_tag=style.parent_tag,
                    link_url=link_url,
                    writing_direction=self._direction.effective_direction,
                    is_bdi_isolated=self._direction.is_isolated,
                    is_bdo_override=self._direction.is_override,
                )
            )
            self._parts = []
        self._follows_inline = closing_inline

    def _push_element(
        self, tag: str, dir_attr: str, lookahead_text: str, pushed_link: bool = False
    ) -> None:
        self._elements.append(_ElementFrame(tag, self._style.with_tag(tag), pushed_link))
        self._direction.enter_element(tag, dir_attr, lookahead_text)

    @property
    def _last_char(self) -> Optional[str]:
        """Most recently emitted character, in the buffer or else the last segment, if any.

        Empty text is never buffered, so the last part holds the last character.
        """
        if self._parts:
            return self._parts[-1][-1]
        if self._segments:
            return self._segments[-1].text[-1]
        return None

    @property
    def _style(self) -> _InheritedStyle:
        return self._elements[-1].style if self._elements else _ROOT_STYLE


def parse_markup_to_segments(markup: str) -> List[Segment]:
    """Styled text segments of `markup`, in document order.

    `markup` is expected to be whitespace-normalized already, see `normalize_whitespace()`.
    """
    if not markup:
        return []
    return list(SegmentParser.iter_segments(markup))
