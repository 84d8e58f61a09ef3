"""
Программа: «Paleta» – веб-приложение для работы с цветовыми палитрами.
Модуль: utils/color_picker.py – выбор цвета отдельного пикселя.

Назначение модуля:
- Расчёт размера превью, в которое вписывается изображение для выбора цвета.
- Чтение цвета пикселя по координатам (исходным или координатам превью).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import numpy as np
from PIL import Image

from utils.color_format import rgb_to_css, rgb_to_hex

logger = logging.getLogger(__name__)

PREVIEW_MAX_WIDTH = 400
PREVIEW_MAX_HEIGHT = 300


class PickError(ValueError):
    """Координаты не попадают в изображение."""


@dataclass(frozen=True)
class PickedColor:
    rgb: str
    hex: str
    alpha: int

    def to_dict(self) -> dict[str, Any]:
        return {"rgb": self.rgb, "hex": self.hex, "alpha": self.alpha}


def fit_preview_size(
    width: int,
    height: int,
    max_width: int = PREVIEW_MAX_WIDTH,
    max_height: int = PREVIEW_MAX_HEIGHT,
) -> tuple[int, int]:
    """Вписывает изображение в превью: сначала по ширине, затем по высоте."""
    new_width, new_height = float(width), float(height)

    if new_width > max_width:
        new_height = new_height * max_width / new_width
        new_width = max_width
    if new_height > max_height:
        new_width = new_width * max_height / new_height
        new_height = max_height

    return max(1, int(new_width)), max(1, int(new_height))


def pick_color(
    grid: np.ndarray,
    x: int,
    y: int,
    preview_size: tuple[int, int] | None = None,
) -> PickedColor:
    """Возвращает цвет пикселя (x, y).

    Если передан preview_size, изображение сначала масштабируется до этого
    размера, а координаты считаются координатами превью.
    """
    if preview_size is not None and preview_size != (grid.shape[1], grid.shape[0]):
        image = Image.fromarray(np.ascontiguousarray(grid))
        grid = np.array(image.resize(preview_size, Image.Resampling.BILINEAR), dtype=np.uint8)

    height, width = grid.shape[:2]
    if not (0 <= x < width and 0 <= y < height):
        raise PickError(f"Точка ({x}, {y}) вне изображения {width}x{height}")

    r, g, b, a = (int(channel) for channel in grid[y, x])
    logger.debug("Выбран пиксель (%s, %s): #%02x%02x%02x", x, y, r, g, b)
    return PickedColor(rgb=rgb_to_css(r, g, b), hex=rgb_to_hex(r, g, b), alpha=a)
