"""
Программа: «Paleta» – веб-приложение для работы с цветовыми палитрами.
Модуль: utils/image_processor.py – обработка изображений.

Назначение модуля:
- Декодирование изображения в сетку RGBA-пикселей (декодер подключаемый).
- Уменьшение изображения до рабочего размера с сохранением пропорций.
- Квантование цветов, подсчёт частот и выбор доминирующих цветов.
"""

from __future__ import annotations

import asyncio
import io
import logging
import os
from dataclasses import dataclass, replace
from typing import Any, Mapping, Protocol

import numpy as np
from PIL import Image, ImageOps, UnidentifiedImageError

from utils.color_format import rgb_to_css, rgb_to_hex

logger = logging.getLogger(__name__)

PixelGrid = np.ndarray


class DecodeError(Exception):
    """Изображение не удалось загрузить или декодировать."""


@dataclass(frozen=True)
class ExtractionSettings:
    """Параметры извлечения доминирующих цветов."""

    max_dimension: int = 150
    quantization_step: int = 8
    sample_stride: int = 4
    alpha_threshold: int = 128
    top_n: int = 10

    def __post_init__(self) -> None:
        if self.max_dimension < 1:
            raise ValueError("max_dimension must be at least 1")
        if not 1 <= self.quantization_step <= 255:
            raise ValueError("quantization_step must be in range 1..255")
        if self.sample_stride < 1:
            raise ValueError("sample_stride must be at least 1")
        if not 0 <= self.alpha_threshold <= 256:
            raise ValueError("alpha_threshold must be in range 0..256")
        if self.top_n < 1:
            raise ValueError("top_n must be at least 1")

    @classmethod
    def from_mapping(cls, config: Mapping[str, Any]) -> "ExtractionSettings":
        """Собирает настройки из конфигурации Flask (ключи COLOR_*)."""
        defaults = cls()
        return cls(
            max_dimension=int(config.get("COLOR_MAX_DIMENSION", defaults.max_dimension)),
            quantization_step=int(config.get("COLOR_QUANTIZATION_STEP", defaults.quantization_step)),
            sample_stride=int(config.get("COLOR_SAMPLE_STRIDE", defaults.sample_stride)),
            alpha_threshold=int(config.get("COLOR_ALPHA_THRESHOLD", defaults.alpha_threshold)),
            top_n=int(config.get("COLOR_TOP_N", defaults.top_n)),
        )

    def with_overrides(self, **overrides: int | None) -> "ExtractionSettings":
        """Возвращает копию настроек, заменяя только переданные (не None) значения."""
        changes = {key: value for key, value in overrides.items() if value is not None}
        return replace(self, **changes) if changes else self


@dataclass(frozen=True)
class DominantColor:
    """Доминирующий цвет: CSS-строка, HEX-код и число попаданий."""

    rgb: str
    hex: str
    count: int

    @classmethod
    def from_channels(cls, r: int, g: int, b: int, count: int) -> "DominantColor":
        return cls(rgb=rgb_to_css(r, g, b), hex=rgb_to_hex(r, g, b), count=count)

    def to_dict(self) -> dict[str, Any]:
        return {"rgb": self.rgb, "hex": self.hex, "count": self.count}


class ImageDecoder(Protocol):
    """Декодер: превращает байты изображения в сетку RGBA-пикселей."""

    def decode(self, data: bytes) -> PixelGrid:
        ...


class PillowDecoder:
    """Декодер на базе Pillow."""

    def __init__(self, max_pixels: int | None = None):
        self.max_pixels = max_pixels

    def decode(self, data: bytes) -> PixelGrid:
        if not data:
            raise DecodeError("Пустые данные изображения")

        try:
            with Image.open(io.BytesIO(data)) as image:
                return self.decode_image(image)
        except (UnidentifiedImageError, OSError, ValueError, Image.DecompressionBombError) as exc:
            raise DecodeError(f"Не удалось декодировать изображение: {exc}") from exc

    def decode_image(self, image: Image.Image) -> PixelGrid:
        """Приводит уже открытое изображение к сетке пикселей с учётом EXIF-ориентации."""
        width, height = image.size
        if self.max_pixels and width * height > self.max_pixels:
            raise DecodeError(f"Изображение слишком большое по разрешению: {width}x{height}")

        try:
            # Браузер учитывает EXIF-ориентацию при отрисовке, делаем так же
            oriented = ImageOps.exif_transpose(image)
            rgba = oriented.convert("RGBA")
        except (OSError, ValueError) as exc:
            raise DecodeError(f"Не удалось декодировать изображение: {exc}") from exc

        logger.debug("Изображение декодировано, размер: %sx%s", rgba.width, rgba.height)
        return np.array(rgba, dtype=np.uint8)


def _grid_from_array(array: np.ndarray) -> PixelGrid:
    if array.ndim != 3 or array.shape[2] not in (3, 4):
        raise DecodeError(f"Ожидалась сетка пикселей (H, W, 3|4), получено {array.shape}")

    if array.dtype != np.uint8:
        raise DecodeError(f"Ожидались 8-битные каналы (uint8), получено {array.dtype}")

    grid = array
    if grid.shape[2] == 3:
        alpha = np.full(grid.shape[:2] + (1,), 255, dtype=np.uint8)
        grid = np.concatenate([grid, alpha], axis=2)
    return grid


def load_pixel_grid(source: Any, decoder: ImageDecoder | None = None) -> PixelGrid:
    """Приводит источник изображения к сетке RGBA-пикселей.

    Поддерживаются байты, путь к файлу, бинарный файловый объект,
    объект PIL.Image и готовый numpy-массив.
    """
    decoder = decoder or PillowDecoder()

    if isinstance(source, np.ndarray):
        return _grid_from_array(source)

    if isinstance(source, Image.Image):
        pillow = decoder if isinstance(decoder, PillowDecoder) else PillowDecoder()
        return pillow.decode_image(source)

    if isinstance(source, (bytes, bytearray, memoryview)):
        data = bytes(source)
    elif isinstance(source, (str, os.PathLike)):
        try:
            with open(source, "rb") as fh:
                data = fh.read()
        except OSError as exc:
            raise DecodeError(f"Не удалось прочитать файл изображения: {exc}") from exc
    elif hasattr(source, "read"):
        try:
            data = source.read()
        except OSError as exc:
            raise DecodeError(f"Не удалось прочитать поток изображения: {exc}") from exc
    else:
        raise TypeError(f"Неподдерживаемый источник изображения: {type(source).__name__}")

    grid = decoder.decode(data)
    if not isinstance(grid, np.ndarray):
        raise DecodeError("Декодер вернул не сетку пикселей")
    return _grid_from_array(grid)


def fit_dimensions(width: int, height: int, max_dimension: int) -> tuple[int, int]:
    """Вписывает размер в max_dimension по длинной стороне, никогда не увеличивая."""
    longest = max(width, height)
    if longest <= max_dimension:
        return width, height

    # Целочисленное деление отбрасывает дробную часть, как при установке размеров canvas
    new_width = max(1, width * max_dimension // longest)
    new_height = max(1, height * max_dimension // longest)
    return new_width, new_height


def downscale(grid: PixelGrid, max_dimension: int) -> PixelGrid:
    """Уменьшает сетку пикселей сглаживающим ресемплингом."""
    height, width = grid.shape[:2]
    if width == 0 or height == 0:
        return grid

    new_width, new_height = fit_dimensions(width, height, max_dimension)
    if (new_width, new_height) == (width, height):
        return grid

    image = Image.fromarray(np.ascontiguousarray(grid))
    resized = image.resize((new_width, new_height), Image.Resampling.BILINEAR)
    logger.debug("Изображение уменьшено с %sx%s до %sx%s", width, height, new_width, new_height)
    return np.array(resized, dtype=np.uint8)


def quantize_channels(channels: np.ndarray, step: int) -> np.ndarray:
    """Округляет каналы к ближайшему кратному step (половина вверх) в пределах 0..255."""
    values = np.asarray(channels, dtype=np.int32)
    ceiling = (255 // step) * step
    return np.minimum((values + step // 2) // step * step, ceiling)


def count_colors(grid: PixelGrid, settings: ExtractionSettings | None = None) -> list[DominantColor]:
    """Подсчитывает квантованные цвета и возвращает top_n самых частых."""
    settings = settings or ExtractionSettings()

    samples = grid.reshape(-1, 4)[:: settings.sample_stride]
    alpha = samples[:, 3].astype(np.int16)
    visible = samples[alpha >= settings.alpha_threshold]
    if len(visible) == 0:
        return []

    quantized = quantize_channels(visible[:, :3], settings.quantization_step)
    keys = (quantized[:, 0] << 16) | (quantized[:, 1] << 8) | quantized[:, 2]

    unique_keys, first_seen, counts = np.unique(keys, return_index=True, return_counts=True)
    # Сначала по убыванию частоты, при равенстве по первому появлению при обходе
    order = np.lexsort((first_seen, -counts))[: settings.top_n]

    return [
        DominantColor.from_channels(
            int(unique_keys[i] >> 16) & 0xFF,
            int(unique_keys[i] >> 8) & 0xFF,
            int(unique_keys[i]) & 0xFF,
            int(counts[i]),
        )
        for i in order
    ]


def extract_dominant_colors(
    source: Any,
    settings: ExtractionSettings | None = None,
    decoder: ImageDecoder | None = None,
) -> list[DominantColor]:
    """Извлекает доминирующие цвета изображения.

    Возвращает список DominantColor по убыванию частоты (не длиннее top_n).
    Пустой список означает, что в изображении нет непрозрачных пикселей.
    При ошибке декодирования выбрасывает DecodeError.
    """
    settings = settings or ExtractionSettings()
    grid = load_pixel_grid(source, decoder)
    return _compute(grid, settings)


async def extract_dominant_colors_async(
    source: Any,
    settings: ExtractionSettings | None = None,
    decoder: ImageDecoder | None = None,
) -> list[DominantColor]:
    """Асинхронный вариант: декодирование выполняется в отдельном потоке."""
    settings = settings or ExtractionSettings()
    grid = await asyncio.to_thread(load_pixel_grid, source, decoder)
    return _compute(grid, settings)


def _compute(grid: PixelGrid, settings: ExtractionSettings) -> list[DominantColor]:
    working = downscale(grid, settings.max_dimension)
    colors = count_colors(working, settings)
    logger.debug("Найдено доминирующих цветов: %s", len(colors))
    return colors
