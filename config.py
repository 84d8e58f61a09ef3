"""
Программа: «Paleta» – веб-приложение для работы с цветовыми палитрами.
Модуль: config.py – конфигурация приложения.

Назначение модуля:
- Определение параметров извлечения доминирующих цветов и выбора цвета пикселя.
- Настройка ограничений загрузки файлов (размер, разрешение, допустимые расширения).
- Настройка CORS и уровня логирования.
"""

import os


def _get_env_bool(name: str, default: bool = False) -> bool:
    """Преобразует переменную окружения в bool."""
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _get_env_int(name: str, default: int) -> int:
    """Преобразует переменную окружения в int."""
    value = os.environ.get(name)
    if value is None:
        return default
    try:
        return int(value.strip())
    except ValueError:
        return default


def _get_env_list(name: str, default: list[str] | None = None) -> list[str]:
    """Преобразует переменную окружения вида 'a,b,c' в список."""
    value = os.environ.get(name)
    if value is None:
        return list(default or [])
    return [item.strip() for item in value.split(",") if item.strip()]


class Config:
    """Базовая конфигурация приложения."""

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").strip().upper() or "INFO"

    CORS_ENABLED = _get_env_bool("CORS_ENABLED", default=False)
    CORS_ORIGINS = _get_env_list(
        "CORS_ORIGINS",
        default=[
            "http://127.0.0.1:5000",
            "http://localhost:5000",
        ],
    )

    MAX_CONTENT_LENGTH = _get_env_int("MAX_CONTENT_LENGTH", 16 * 1024 * 1024)
    ALLOWED_EXTENSIONS = {"png", "jpg", "jpeg", "webp", "gif", "bmp"}
    MAX_IMAGE_PIXELS = _get_env_int("MAX_IMAGE_PIXELS", 20_000_000)

    # Параметры извлечения доминирующих цветов
    COLOR_MAX_DIMENSION = _get_env_int("COLOR_MAX_DIMENSION", 150)
    COLOR_QUANTIZATION_STEP = _get_env_int("COLOR_QUANTIZATION_STEP", 8)
    COLOR_SAMPLE_STRIDE = _get_env_int("COLOR_SAMPLE_STRIDE", 4)
    COLOR_ALPHA_THRESHOLD = _get_env_int("COLOR_ALPHA_THRESHOLD", 128)
    COLOR_TOP_N = _get_env_int("COLOR_TOP_N", 10)

    # Размер превью для выбора цвета кликом
    PICKER_MAX_WIDTH = _get_env_int("PICKER_MAX_WIDTH", 400)
    PICKER_MAX_HEIGHT = _get_env_int("PICKER_MAX_HEIGHT", 300)

    @staticmethod
    def allowed_file(filename: str) -> bool:
        """Проверяет расширение загружаемого файла."""
        return (
            "." in filename
            and filename.rsplit(".", 1)[1].lower() in Config.ALLOWED_EXTENSIONS
        )
