"""
Модуль: `utils/color_format.py`.
Назначение: Преобразование цветов между RGB-кортежами, HEX и CSS-строками.
"""

import re

_HEX_PATTERN = re.compile(r"^#([0-9a-fA-F]{2})([0-9a-fA-F]{2})([0-9a-fA-F]{2})$")
_CSS_PATTERN = re.compile(r"^rgb\(\s*(\d{1,3})\s*,\s*(\d{1,3})\s*,\s*(\d{1,3})\s*\)$")


def rgb_to_hex(r: int, g: int, b: int) -> str:
    """Возвращает HEX-код вида #rrggbb (нижний регистр)."""
    return f"#{r:02x}{g:02x}{b:02x}"


def rgb_to_css(r: int, g: int, b: int) -> str:
    """Возвращает CSS-строку вида rgb(r, g, b)."""
    return f"rgb({r}, {g}, {b})"


def hex_to_rgb(color: str) -> tuple[int, int, int]:
    """Преобразует HEX-цвет вида #RRGGBB в RGB-кортеж."""
    match = _HEX_PATTERN.match(color.strip())
    if not match:
        raise ValueError(f"Некорректный HEX-цвет: {color!r}")
    r, g, b = (int(part, 16) for part in match.groups())
    return r, g, b


def css_to_rgb(color: str) -> tuple[int, int, int]:
    """Разбирает строку вида rgb(r, g, b)."""
    match = _CSS_PATTERN.match(color.strip())
    if not match:
        raise ValueError(f"Некорректная строка rgb(): {color!r}")
    r, g, b = (int(part) for part in match.groups())
    if max(r, g, b) > 255:
        raise ValueError(f"Значение канала вне диапазона 0..255: {color!r}")
    return r, g, b
