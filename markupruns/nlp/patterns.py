"""Character classes and regular expressions used while scanning markup."""

import re
from typing import Final, FrozenSet, List, Tuple

# -- only ASCII whitespace is "insignificant" in markup source; U+00A0 and friends are content --
ASCII_WHITESPACE: Final[str] = " \t\n\r\f\v"
ASCII_WHITESPACE_RE = re.compile(r"[ \t\n\r\f\v]+")

# -- characters after which a list item or narrated line already has a natural pause --
SENTENCE_TERMINATORS: Final[FrozenSet[str]] = frozenset(".!?:;")

# -- code-point ranges (inclusive) with inherent right-to-left directionality --
STRONG_RTL_RANGES: Final[List[Tuple[int, int]]] = [
    (0x0590, 0x05FF),  # -- Hebrew --
    (0x0600, 0x06FF),  # -- Arabic --
    (0x0700, 0x074F),  # -- Syriac --
    (0x0750, 0x077F),  # -- Arabic Supplement --
    (0x0780, 0x07BF),  # -- Thaana --
    (0x07C0, 0x07FF),  # -- N'Ko --
    (0x08A0, 0x08FF),  # -- Arabic Extended-A --
    (0xFB1D, 0xFB4F),  # -- Hebrew presentation forms --
    (0xFB50, 0xFDFF),  # -- Arabic Presentation Forms-A --
    (0xFE70, 0xFEFF),  # -- Arabic Presentation Forms-B --
]

# -- code-point ranges (inclusive) with inherent left-to-right directionality --
STRONG_LTR_RANGES: Final[List[Tuple[int, int]]] = [
    (0x0041, 0x005A),  # -- A-Z --
    (0x0061, 0x007A),  # -- a-z --
    (0x00C0, 0x024F),  # -- Latin-1 letters, Latin Extended-A/B --
    (0x0370, 0x03FF),  # -- Greek --
    (0x0400, 0x04FF),  # -- Cyrillic --
    (0x10A0, 0x10FF),  # -- Georgian --
    (0x1E00, 0x1EFF),  # -- Latin Extended Additional --
]

# -- an attribute in the source of a start-tag, e.g. the `href="..."` in `a href="..."`. The
# -- name must start the tag source or follow whitespace so `data-href` is not `href`. The value
# -- may be double-quoted, single-quoted, or bare.
ATTRIBUTE_PATTERN = r"""(?:^|[\s/]){name}\s*=\s*(?:"([^"]*)"|'([^']*)'|([^\s"'>]+))"""
HREF_ATTRIBUTE_RE = re.compile(ATTRIBUTE_PATTERN.format(name="href"), re.IGNORECASE)
DIR_ATTRIBUTE_RE = re.compile(ATTRIBUTE_PATTERN.format(name="dir"), re.IGNORECASE)

# -- characters a browser silently drops from anywhere in a URL before resolving its scheme --
URL_IGNORED_CHARS_RE = re.compile(r"[\t\n\r]")

# -- the point between a line that lacks terminal punctuation and a following list item line
# -- ("1. ", "• "), possibly indented with non-breaking spaces
UNPAUSED_LIST_ITEM_BREAK_RE = re.compile(r"(?<=[^\s.!?:;])(?=\n\xa0*[0-9•])")
