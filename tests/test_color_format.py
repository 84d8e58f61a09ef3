"""Тесты преобразования цветовых строк."""

import pytest

from utils.color_format import css_to_rgb, hex_to_rgb, rgb_to_css, rgb_to_hex


def test_hex_is_lowercase_and_zero_padded() -> None:
    assert rgb_to_hex(0, 10, 255) == "#000aff"


def test_css_string_format() -> None:
    assert rgb_to_css(248, 0, 16) == "rgb(248, 0, 16)"


def test_parsers_accept_own_output() -> None:
    assert hex_to_rgb(rgb_to_hex(1, 2, 3)) == (1, 2, 3)
    assert css_to_rgb(rgb_to_css(200, 100, 0)) == (200, 100, 0)
    assert hex_to_rgb("#A1B2C3") == (161, 178, 195)


@pytest.mark.parametrize("value", ["a1b2c3", "#12345", "#GGGGGG", ""])
def test_hex_to_rgb_rejects_malformed(value: str) -> None:
    with pytest.raises(ValueError):
        hex_to_rgb(value)


@pytest.mark.parametrize("value", ["rgb(1, 2)", "rgb(256, 0, 0)", "#ffffff"])
def test_css_to_rgb_rejects_malformed(value: str) -> None:
    with pytest.raises(ValueError):
        css_to_rgb(value)


@pytest.mark.parametrize("helper", [rgb_to_hex, rgb_to_css, hex_to_rgb, css_to_rgb])
def test_helpers_are_documented(helper) -> None:
    assert helper.__doc__ and helper.__doc__.strip()
