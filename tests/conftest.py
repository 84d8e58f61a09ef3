"""Общие фикстуры тестов."""

from __future__ import annotations

import io

import numpy as np
import pytest
from PIL import Image

from app import create_app


class StaticDecoder:
    """Декодер-заглушка: возвращает заранее подготовленную сетку пикселей."""

    def __init__(self, grid: np.ndarray):
        self.grid = grid
        self.calls: list[bytes] = []

    def decode(self, data: bytes) -> np.ndarray:
        self.calls.append(data)
        return self.grid


def solid_grid(width: int, height: int, rgba: tuple[int, int, int, int]) -> np.ndarray:
    grid = np.empty((height, width, 4), dtype=np.uint8)
    grid[:, :] = rgba
    return grid


def encode_png(image: Image.Image) -> bytes:
    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def app():
    return create_app({"TESTING": True})


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def red_png() -> bytes:
    return encode_png(Image.new("RGBA", (8, 8), (255, 0, 0, 255)))


@pytest.fixture
def transparent_png() -> bytes:
    return encode_png(Image.new("RGBA", (12, 12), (40, 80, 120, 0)))
