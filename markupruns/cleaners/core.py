"""Whitespace handling for markup source, segment text, and plain-text output."""

from __future__ import annotations

import re

from markupruns.markup.tags import is_block_level_tag
from markupruns.nlp.patterns import ASCII_WHITESPACE, ASCII_WHITESPACE_RE

_WHITESPACE_OR_WORD_RE = re.compile(r"[ \t\n\r\f\v]+|[^ \t\n\r\f\v]+")


def _closing_tag_name(markup: str, lt_idx: int) -> str:
    """Lowercased name of the closing tag starting at `lt_idx`, "" when it's not a closing tag."""
    if not markup.startswith("</", lt_idx):
        return ""
    start = end = lt_idx + 2
    while end < len(markup) and markup[end] != ">" and markup[end] not in ASCII_WHITESPACE:
        end += 1
    return markup[start:end].lower()


def normalize_whitespace(markup: str) -> str:
    """Remove source-formatting whitespace that has no effect on the rendered text.

    - Whitespace before the first tag or text is removed.
    - A whitespace run that directly follows the closing tag of a block-level element (like
      `</p>` or `</li>`) is removed.
    - All other whitespace, in particular whitespace next to inline content, is kept as is.

    For example:
      "\n  <p>Hello <b>world</b></p>\n  <p>again</p>\n"
    becomes:
      "<p>Hello <b>world</b></p><p>again</p>"

    This is a purely textual pass, it does not check that tags are balanced. Normalizing
    already-normalized markup leaves it unchanged.
    """
    if not markup:
        return ""

    result: list[str] = []
    before_first_tag = True
    after_block_close = False
    closing_tag = ""

    for idx, char in enumerate(markup):
        is_space = char in ASCII_WHITESPACE

        if before_first_tag and is_space:
            continue

        if char == "<":
            before_first_tag = False
            after_block_close = False
            closing_tag = _closing_tag_name(markup, idx)
        elif char == ">":
            after_block_close = bool(closing_tag) and is_block_level_tag(closing_tag)
            closing_tag = ""
        elif after_block_close and is_space:
            continue
        else:
            before_first_tag = False
            after_block_close = False

        result.append(char)

    return "".join(result)


def is_paragraph_break(text: str) -> bool:
    """True when `text` is whitespace only and contains at least one newline.

    A whitespace run with no newline, like the " " in `<b>a</b> <i>b</i>`, is not a break; it
    is the space between two words.
    """
    return "\n" in text and all(char in ASCII_WHITESPACE for char in text)


def normalize_segment_text(
    text: str, newlines_only: bool = False, preserve_leading_space: bool = False
) -> str:
    """`text` of a single segment with whitespace normalized for display.

    When `newlines_only` is True (the segment is a paragraph break), only the newlines of
    `text` are kept. Otherwise:

    - a whitespace run containing a newline becomes a single "\\n" (a paragraph break),
    - any other whitespace run becomes a single space,
    - leading whitespace is dropped, unless `preserve_leading_space` is True, in which case
      it is normalized like any other run. This keeps the space in `<b>bold</b> text`.

    Trailing whitespace is kept; the text that follows may be in the next segment.
    """
    if newlines_only:
        return "".join(char for char in text if char == "\n")

    parts: list[str] = []
    has_content = preserve_leading_space

    for match in _WHITESPACE_OR_WORD_RE.finditer(text):
        token = match.group()
        if token[0] in ASCII_WHITESPACE:
            if has_content:
                parts.append("\n" if "\n" in token else " ")
        else:
            parts.append(token)
            has_content = True

    return "".join(parts)


def clean_plain_text(text: str) -> str:
    """Whitespace-normalized plain text for non-visual use.

    Every whitespace run containing a newline becomes one newline, every other run becomes one
    space, and leading and trailing whitespace is removed. Non-breaking spaces, like the
    indentation of a nested list item, are not collapsed but become ordinary spaces.

    Example
    -------
    "  Title\\n\\n  Body\\xa0text \\n" -> "Title\\nBody text"
    """
    text = ASCII_WHITESPACE_RE.sub(
        lambda m: "\n" if "\n" in m.group() else " ", text.strip(ASCII_WHITESPACE)
    )
    return text.replace("\xa0", " ")
