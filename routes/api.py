"""
Программа: «Paleta» – веб-приложение для работы с цветовыми палитрами.
Модуль: routes/api.py – REST-подобные API-маршруты.

Назначение модуля:
- Обработка загрузки изображения и извлечение доминирующих цветов.
- Выбор цвета отдельного пикселя по координатам клика.
- Файлы не сохраняются: изображение обрабатывается в памяти в рамках запроса.
"""

from flask import current_app, jsonify, request

from config import Config
from utils.color_picker import PickError, fit_preview_size, pick_color
from utils.image_processor import (
    DecodeError,
    ExtractionSettings,
    PillowDecoder,
    extract_dominant_colors,
    load_pixel_grid,
)

SETTINGS_FIELDS = (
    "max_dimension",
    "quantization_step",
    "sample_stride",
    "alpha_threshold",
    "top_n",
)


class _BadRequest(Exception):
    pass


def _api_error(message: str, status: int = 400):
    return jsonify({"success": False, "error": message}), status


def _allowed_file(filename: str) -> bool:
    return Config.allowed_file(filename)


def _read_uploaded_image() -> bytes:
    if "image" not in request.files:
        raise _BadRequest("Файл не был загружен")

    file = request.files["image"]

    # Проверяем, что пользователь действительно выбрал файл
    if file.filename == "":
        raise _BadRequest("Файл не выбран")

    if not _allowed_file(file.filename):
        raise _BadRequest("Недопустимый тип файла")

    return file.read()


def _form_int(name: str, required: bool = False) -> int | None:
    raw_value = request.form.get(name)
    if raw_value is None or raw_value.strip() == "":
        if required:
            raise _BadRequest(f"Не передан параметр {name}")
        return None
    try:
        return int(raw_value)
    except ValueError:
        raise _BadRequest(f"Параметр {name} должен быть целым числом") from None


def _extraction_settings() -> ExtractionSettings:
    base = ExtractionSettings.from_mapping(current_app.config)
    overrides = {name: _form_int(name) for name in SETTINGS_FIELDS}
    try:
        return base.with_overrides(**overrides)
    except ValueError as exc:
        raise _BadRequest(f"Некорректные параметры извлечения: {exc}") from exc


def _decoder() -> PillowDecoder:
    return PillowDecoder(max_pixels=current_app.config["MAX_IMAGE_PIXELS"])


def register_routes(app):
    @app.route("/api/extract", methods=["POST"])
    def extract_colors():
        """Извлекает доминирующие цвета загруженного изображения."""
        try:
            data = _read_uploaded_image()
            settings = _extraction_settings()
        except _BadRequest as exc:
            return _api_error(str(exc), 400)

        try:
            colors = extract_dominant_colors(data, settings, decoder=_decoder())
        except DecodeError as exc:
            current_app.logger.warning("Не удалось декодировать изображение: %s", exc)
            return _api_error("Файл не является корректным изображением", 400)
        except Exception:
            current_app.logger.exception("Ошибка извлечения цветов из изображения")
            return _api_error("Не удалось извлечь цвета из изображения", 500)

        return jsonify(
            {
                "success": True,
                "colors": [color.to_dict() for color in colors],
            }
        )

    @app.route("/api/pick", methods=["POST"])
    def pick_pixel_color():
        """Возвращает цвет пикселя по координатам клика."""
        try:
            data = _read_uploaded_image()
            x = _form_int("x", required=True)
            y = _form_int("y", required=True)
        except _BadRequest as exc:
            return _api_error(str(exc), 400)

        use_preview = request.form.get("preview", "").strip().lower() in {"1", "true", "yes", "on"}

        try:
            grid = load_pixel_grid(data, decoder=_decoder())
            preview_size = None
            if use_preview:
                preview_size = fit_preview_size(
                    grid.shape[1],
                    grid.shape[0],
                    current_app.config["PICKER_MAX_WIDTH"],
                    current_app.config["PICKER_MAX_HEIGHT"],
                )
            color = pick_color(grid, x, y, preview_size=preview_size)
        except DecodeError as exc:
            current_app.logger.warning("Не удалось декодировать изображение: %s", exc)
            return _api_error("Файл не является корректным изображением", 400)
        except PickError as exc:
            return _api_error(str(exc), 400)
        except Exception:
            current_app.logger.exception("Ошибка выбора цвета пикселя")
            return _api_error("Внутренняя ошибка сервера", 500)

        return jsonify({"success": True, "color": color.to_dict()})
