"""Writing-direction tracking for nested elements.

Direction is inferred the way a browser does for `dir="auto"`: from the first character with
strong directionality. This is the "first strong character" heuristic only, not the Unicode
Bidirectional Algorithm (UAX #9). Mixed-direction text is not reordered here; the runs keep
their logical order and the bidi control characters injected by the parser are left to the
text layout service.
"""

from __future__ import annotations

from typing import List, Union

from markupruns.documents.segments import WritingDirection
from markupruns.markup.tags import ISOLATE_TAG, OVERRIDE_TAG
from markupruns.nlp.patterns import STRONG_LTR_RANGES, STRONG_RTL_RANGES


def is_strong_rtl(codepoint: int) -> bool:
    return any(start <= codepoint <= end for start, end in STRONG_RTL_RANGES)


def is_strong_ltr(codepoint: int) -> bool:
    return any(start <= codepoint <= end for start, end in STRONG_LTR_RANGES)


def detect_direction_from_text(text: Union[str, bytes]) -> WritingDirection:
    """Direction of the first strongly-directional character in `text`.

    `text` may be a `str` or UTF-8 `bytes`. Bytes are decoded leniently: an invalid or
    truncated sequence is skipped and scanning continues. Neutral characters (digits,
    punctuation, whitespace, symbols, scripts not classified) are skipped. Text without any
    strong character is left-to-right.
    """
    if isinstance(text, (bytes, bytearray)):
        text = bytes(text).decode("utf-8", errors="ignore")

    for char in text:
        codepoint = ord(char)
        if is_strong_rtl(codepoint):
            return WritingDirection.RIGHT_TO_LEFT
        if is_strong_ltr(codepoint):
            return WritingDirection.LEFT_TO_RIGHT

    return WritingDirection.LEFT_TO_RIGHT


def parse_direction_attribute(dir_attr: str) -> WritingDirection:
    """The direction named by a `dir` attribute value.

    "auto" and any unrecognized value produce NATURAL (inherit), "auto" needs the element text
    and is resolved by `DirectionContext.enter_element()`.
    """
    value = dir_attr.lower()
    if value == "rtl":
        return WritingDirection.RIGHT_TO_LEFT
    if value == "ltr":
        return WritingDirection.LEFT_TO_RIGHT
    return WritingDirection.NATURAL


class DirectionContext:
    """Tracks the writing direction in effect as elements are entered and exited.

    Each `enter_element()` saves the direction in effect and must be mirrored by an
    `exit_element()` that restores it. `<bdi>` establishes an isolation scope and defaults to
    `dir="auto"`. `<bdo>` establishes an override scope but changes direction only when it
    carries an explicit `dir`.
    """

    def __init__(self):
        self._current = WritingDirection.NATURAL
        self._saved_directions: List[WritingDirection] = []
        self._isolate_flags: List[bool] = []
        self._override_flags: List[bool] = []
        self._isolation_depth = 0
        self._override_depth = 0

    @property
    def depth(self) -> int:
        """Number of elements entered and not yet exited."""
        return len(self._saved_directions)

    @property
    def effective_direction(self) -> WritingDirection:
        return self._current

    @property
    def is_isolated(self) -> bool:
        """True when inside at least one `<bdi>` element."""
        return self._isolation_depth > 0

    @property
    def is_override(self) -> bool:
        """True when inside at least one `<bdo>` element."""
        return self._override_depth > 0

    def enter_element(self, tag: str, dir_attr: str = "", lookahead_text: str = "") -> None:
        """Enter element `tag`, adopting the direction named by its `dir` attribute if any.

        `lookahead_text` is the element's text content; it is only consulted for `dir="auto"`
        (explicit, or implied by `<bdi>`). When it is empty the direction is left unchanged.
        """
        is_isolate = tag == ISOLATE_TAG
        is_override = tag == OVERRIDE_TAG

        self._saved_directions.append(self._current)
        self._isolate_flags.append(is_isolate)
        self._override_flags.append(is_override)
        if is_isolate:
            self._isolation_depth += 1
        if is_override:
            self._override_depth += 1

        value = dir_attr.lower()
        if value in ("rtl", "ltr"):
            self._current = parse_direction_attribute(value)
        elif value == "auto" or (not value and is_isolate):
            if lookahead_text:
                self._current = detect_direction_from_text(lookahead_text)
        # -- anything else, including `<bdo>` without `dir`, inherits the current direction --

    def exit_element(self, tag: str) -> None:
        """Exit the most recently entered element, restoring the direction saved on entry.

        `tag` is accepted for symmetry with `enter_element()`; the stack is strictly LIFO. Exiting
        with nothing entered is a no-op.
        """
        if not self._saved_directions:
            return

        if self._isolate_flags.pop():
            self._isolation_depth -= 1
        if self._override_flags.pop():
            self._override_depth -= 1
        self._current = self._saved_directions.pop()
