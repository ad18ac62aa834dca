"""Tag classification tables.

Tag names are expected lowercased and stripped of attributes, e.g. "h1", not "<H1 dir=rtl>".
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Final, FrozenSet, Mapping

# -- elements that introduce a paragraph-like break; whitespace next to them is insignificant --
BLOCK_LEVEL_TAGS: Final[FrozenSet[str]] = frozenset(
    (
        "p",
        "div",
        "h1",
        "h2",
        "h3",
        "h4",
        "h5",
        "h6",
        # -- lists --
        "ul",
        "ol",
        "li",
        # -- quote, preformatted, rule, line-break --
        "blockquote",
        "pre",
        "hr",
        "br",
        # -- table --
        "table",
        "thead",
        "tbody",
        "tfoot",
        "tr",
        "th",
        "td",
        # -- sectioning --
        "header",
        "footer",
        "section",
        "article",
        "nav",
        "aside",
    )
)

# -- elements that change the style of a run of text without breaking the flow --
INLINE_FORMATTING_TAGS: Final[FrozenSet[str]] = frozenset(
    (
        "strong",
        "b",
        "em",
        "i",
        "u",
        "s",
        "mark",
        "small",
        "sub",
        "sup",
        "code",
        "span",
        "a",
        # -- bidirectional isolate and override --
        "bdi",
        "bdo",
    )
)

# -- elements that start and end a styled paragraph: flush on open, newline + flush on close --
PARAGRAPH_TAGS: Final[FrozenSet[str]] = frozenset(("p", "div", "h1", "h2", "h3", "h4", "h5", "h6"))

HEADING_SCALES: Final[Mapping[str, float]] = MappingProxyType(
    {"h1": 2.0, "h2": 1.5, "h3": 1.17, "h4": 1.0, "h5": 0.83, "h6": 0.67}
)

BOLD_TAGS: Final[FrozenSet[str]] = frozenset(("strong", "b"))
ITALIC_TAGS: Final[FrozenSet[str]] = frozenset(("em", "i"))
UNDERLINE_TAGS: Final[FrozenSet[str]] = frozenset(("u",))
STRIKETHROUGH_TAGS: Final[FrozenSet[str]] = frozenset(("s",))
LIST_TAGS: Final[FrozenSet[str]] = frozenset(("ol", "ul"))
LINE_BREAK_TAGS: Final[FrozenSet[str]] = frozenset(("br", "hr"))

# -- elements whose content is never text, skipped wholesale up to their closing tag --
RAW_TEXT_TAGS: Final[FrozenSet[str]] = frozenset(("script", "style"))

ANCHOR_TAG: Final[str] = "a"
ISOLATE_TAG: Final[str] = "bdi"
OVERRIDE_TAG: Final[str] = "bdo"


def is_block_level_tag(tag: str) -> bool:
    return tag in BLOCK_LEVEL_TAGS


def is_inline_formatting_tag(tag: str) -> bool:
    return tag in INLINE_FORMATTING_TAGS


def is_heading_tag(tag: str) -> bool:
    return tag in HEADING_SCALES


def get_heading_scale(tag: str) -> float:
    """Font-size scale factor for heading `tag`, 1.0 for any tag that is not a heading."""
    return HEADING_SCALES.get(tag, 1.0)
