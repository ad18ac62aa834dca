"""Test suite for `markupruns.documents.segments` module."""

from __future__ import annotations

import math

import pytest

from markupruns.documents.segments import (
    BaseTextStyle,
    Fragment,
    ListContext,
    ListKind,
    ParseResult,
    Segment,
    TagStyle,
    TextDecoration,
    WritingDirection,
)


@pytest.mark.parametrize(
    ("underline", "strikethrough", "expected_value"),
    [
        (False, False, TextDecoration.NONE),
        (True, False, TextDecoration.UNDERLINE),
        (False, True, TextDecoration.STRIKETHROUGH),
        (True, True, TextDecoration.UNDERLINE_STRIKETHROUGH),
    ],
)
def test_text_decoration_combines_underline_and_strikethrough(
    underline: bool, strikethrough: bool, expected_value: TextDecoration
):
    assert TextDecoration.from_flags(underline, strikethrough) is expected_value


class DescribeSegment:
    """Unit-test suite for `markupruns.documents.segments.Segment`."""

    def it_has_plain_unlinked_left_to_right_neutral_defaults(self):
        segment = Segment("text")

        assert segment.font_scale == 1.0
        assert not any(
            (
                segment.is_bold,
                segment.is_italic,
                segment.is_underline,
                segment.is_strikethrough,
                segment.is_link,
                segment.follows_inline_element,
                segment.is_bdi_isolated,
                segment.is_bdo_override,
            )
        )
        assert segment.parent_tag == ""
        assert segment.link_url == ""
        assert segment.writing_direction is WritingDirection.NATURAL

    def it_is_immutable(self):
        segment = Segment("text")

        with pytest.raises(AttributeError):
            segment.text = "other"  # pyright: ignore[reportAttributeAccessIssue]


class DescribeListContext:
    """Unit-test suite for `markupruns.documents.segments.ListContext`."""

    def it_starts_counting_items_from_zero(self):
        list_context = ListContext(kind=ListKind.ORDERED, nesting_level=1)

        assert list_context.item_counter == 0
        list_context.item_counter += 1
        assert list_context.item_counter == 1


class DescribeTagStyle:
    """Unit-test suite for `markupruns.documents.segments.TagStyle`."""

    def it_is_all_unset_by_default(self):
        tag_style = TagStyle()

        assert tag_style.color == 0
        assert math.isnan(tag_style.font_size)
        assert tag_style.font_weight == ""
        assert tag_style.font_style == ""
        assert tag_style.text_decoration_line == ""

    @pytest.mark.parametrize(
        ("font_size", "expected_value"),
        [(18.0, True), (0.5, True), (0.0, False), (-4.0, False), (math.nan, False)],
    )
    def it_knows_whether_it_sets_a_font_size(self, font_size: float, expected_value: bool):
        assert TagStyle(font_size=font_size).has_font_size is expected_value


class DescribeBaseTextStyle:
    """Unit-test suite for `markupruns.documents.segments.BaseTextStyle`."""

    @pytest.mark.parametrize(
        ("allow_font_scaling", "multiplier", "max_multiplier", "expected_value"),
        [
            # -- the multiplier applies as-is when there is no cap --
            (True, 2.0, 0.0, 2.0),
            (True, 2.0, math.nan, 2.0),
            # -- a positive cap limits it --
            (True, 2.0, 1.5, 1.5),
            (True, 1.2, 1.5, 1.2),
            # -- scaling disabled ignores the multiplier entirely --
            (False, 2.0, 0.0, 1.0),
            (False, 0.5, 3.0, 1.0),
            # -- a meaningless multiplier is no scaling --
            (True, 0.0, 0.0, 1.0),
            (True, -1.0, 0.0, 1.0),
            (True, math.nan, 0.0, 1.0),
        ],
    )
    def it_computes_the_effective_font_size_multiplier(
        self,
        allow_font_scaling: bool,
        multiplier: float,
        max_multiplier: float,
        expected_value: float,
    ):
        base_style = BaseTextStyle(
            font_size=14.0,
            font_size_multiplier=multiplier,
            allow_font_scaling=allow_font_scaling,
            max_font_size_multiplier=max_multiplier,
        )

        assert base_style.effective_multiplier == expected_value


class DescribeFragment:
    """Unit-test suite for `markupruns.documents.segments.Fragment`."""

    @pytest.mark.parametrize(("link_url", "expected_value"), [("/docs", True), ("", False)])
    def it_knows_whether_it_is_a_link(self, link_url: str, expected_value: bool):
        fragment = Fragment(text="x", font_size=14.0, line_height=18.0, link_url=link_url)
        assert fragment.is_link is expected_value


class DescribeParseResult:
    """Unit-test suite for `markupruns.documents.segments.ParseResult`."""

    def it_is_empty_by_default(self):
        result = ParseResult()

        assert result.is_empty
        assert result.fragments == ()
        assert result.link_urls == ()
        assert result.accessibility_label == ""
        assert result.text == ""

    def it_provides_the_visible_text_of_all_its_fragments(self):
        result = ParseResult(
            fragments=(
                Fragment(text="Title\n", font_size=28.0, line_height=32.0),
                Fragment(text="Body", font_size=14.0, line_height=18.0),
            ),
            link_urls=("", ""),
            accessibility_label="Title\nBody",
        )

        assert not result.is_empty
        assert result.text == "Title\nBody"
