"""Test suite for `markupruns.markup.utils.config` module."""

from __future__ import annotations

import pytest

from markupruns.logger import DETAIL
from markupruns.markup.utils.config import ENVConfig, env_config

ENV_VARS = (
    "MARKUPRUNS_DEFAULT_FONT_SIZE",
    "MARKUPRUNS_LINE_HEIGHT_BUFFER",
    "MARKUPRUNS_LINK_COLOR",
    "MARKUPRUNS_MAX_LIST_INDENT_LEVEL",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch):
    for var in ENV_VARS:
        monkeypatch.delenv(var, raising=False)


def test_env_config_provides_defaults_when_nothing_is_configured():
    assert env_config.DEFAULT_FONT_SIZE == 14.0
    assert env_config.LINE_HEIGHT_BUFFER == 4.0
    assert env_config.LINK_COLOR == 0xFF007AFF
    assert env_config.MAX_LIST_INDENT_LEVEL == 100


@pytest.mark.parametrize(
    ("var", "value", "attr", "expected_value"),
    [
        ("MARKUPRUNS_DEFAULT_FONT_SIZE", "17.5", "DEFAULT_FONT_SIZE", 17.5),
        ("MARKUPRUNS_LINE_HEIGHT_BUFFER", "0", "LINE_HEIGHT_BUFFER", 0.0),
        ("MARKUPRUNS_LINK_COLOR", "#ff0000", "LINK_COLOR", 0xFFFF0000),
        ("MARKUPRUNS_LINK_COLOR", "#0f0", "LINK_COLOR", 0xFF00FF00),
        ("MARKUPRUNS_MAX_LIST_INDENT_LEVEL", "3", "MAX_LIST_INDENT_LEVEL", 3),
    ],
)
def test_env_config_reads_values_from_the_environment(
    monkeypatch: pytest.MonkeyPatch, var: str, value: str, attr: str, expected_value: float
):
    monkeypatch.setenv(var, value)

    assert getattr(ENVConfig(), attr) == expected_value


def test_env_config_uses_the_default_for_an_empty_value(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("MARKUPRUNS_DEFAULT_FONT_SIZE", "")

    assert env_config.DEFAULT_FONT_SIZE == 14.0


def test_env_config_falls_back_to_the_default_link_color_when_unparseable(
    monkeypatch: pytest.MonkeyPatch, caplog: pytest.LogCaptureFixture
):
    monkeypatch.setenv("MARKUPRUNS_LINK_COLOR", "blue")

    with caplog.at_level(DETAIL, logger="markupruns.trace"):
        link_color = env_config.LINK_COLOR

    assert link_color == 0xFF007AFF
    assert "Ignoring unparseable MARKUPRUNS_LINK_COLOR 'blue'" in caplog.text


def test_env_config_raises_on_a_malformed_number(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("MARKUPRUNS_MAX_LIST_INDENT_LEVEL", "many")

    with pytest.raises(ValueError):
        env_config.MAX_LIST_INDENT_LEVEL
