"""Тесты API-маршрутов извлечения и выбора цвета."""

from __future__ import annotations

import io

import pytest
from PIL import Image

from app import create_app
from conftest import encode_png


def _upload(client, path: str, data: bytes, filename: str = "image.png", **fields):
    form = {"image": (io.BytesIO(data), filename)}
    form.update({key: str(value) for key, value in fields.items()})
    return client.post(path, data=form, content_type="multipart/form-data")


def test_healthz_sets_security_headers(client) -> None:
    response = client.get("/healthz")

    assert response.status_code == 200
    assert response.get_json() == {"status": "ok"}
    assert response.headers["X-Content-Type-Options"] == "nosniff"


def test_extract_returns_ranked_colors(client, red_png: bytes) -> None:
    response = _upload(client, "/api/extract", red_png, sample_stride=1)

    assert response.status_code == 200
    assert response.get_json() == {
        "success": True,
        "colors": [{"rgb": "rgb(248, 0, 0)", "hex": "#f80000", "count": 64}],
    }


def test_extract_respects_top_n_override(client) -> None:
    image = Image.new("RGB", (4, 1))
    for x, color in enumerate([(0, 0, 0), (80, 80, 80), (160, 160, 160), (240, 240, 240)]):
        image.putpixel((x, 0), color)

    response = _upload(client, "/api/extract", encode_png(image), sample_stride=1, top_n=2)

    colors = response.get_json()["colors"]
    assert [c["hex"] for c in colors] == ["#000000", "#505050"]


def test_extract_transparent_image_is_empty_success(client, transparent_png: bytes) -> None:
    response = _upload(client, "/api/extract", transparent_png)

    assert response.status_code == 200
    assert response.get_json() == {"success": True, "colors": []}


def test_extract_invalid_image_is_decode_error(client) -> None:
    response = _upload(client, "/api/extract", b"not really a png")

    assert response.status_code == 400
    assert response.get_json() == {
        "success": False,
        "error": "Файл не является корректным изображением",
    }


def test_extract_requires_file(client) -> None:
    response = client.post("/api/extract", data={}, content_type="multipart/form-data")

    assert response.status_code == 400
    assert response.get_json()["error"] == "Файл не был загружен"


def test_extract_rejects_extension(client, red_png: bytes) -> None:
    response = _upload(client, "/api/extract", red_png, filename="notes.txt")

    assert response.status_code == 400
    assert response.get_json()["error"] == "Недопустимый тип файла"


@pytest.mark.parametrize(("field", "value"), [("quantization_step", 0), ("top_n", "many")])
def test_extract_rejects_bad_settings(client, red_png: bytes, field: str, value) -> None:
    response = _upload(client, "/api/extract", red_png, **{field: value})

    assert response.status_code == 400
    assert response.get_json()["success"] is False


def test_pick_returns_pixel_color(client) -> None:
    image = Image.new("RGBA", (5, 5), (0, 0, 0, 255))
    image.putpixel((4, 1), (171, 205, 239, 255))

    response = _upload(client, "/api/pick", encode_png(image), x=4, y=1)

    assert response.status_code == 200
    assert response.get_json() == {
        "success": True,
        "color": {"rgb": "rgb(171, 205, 239)", "hex": "#abcdef", "alpha": 255},
    }


def test_pick_in_preview_coordinates(client) -> None:
    png = encode_png(Image.new("RGB", (800, 600), (10, 20, 30)))

    inside = _upload(client, "/api/pick", png, x=399, y=299, preview="1")
    outside = _upload(client, "/api/pick", png, x=500, y=10, preview="1")

    assert inside.get_json()["color"]["hex"] == "#0a141e"
    assert outside.status_code == 400


def test_pick_requires_coordinates(client, red_png: bytes) -> None:
    response = _upload(client, "/api/pick", red_png, x=1)

    assert response.status_code == 400
    assert response.get_json()["error"] == "Не передан параметр y"


def test_pick_out_of_bounds(client, red_png: bytes) -> None:
    response = _upload(client, "/api/pick", red_png, x=8, y=0)

    assert response.status_code == 400


def test_repeated_uploads_are_independent(client, red_png: bytes) -> None:
    responses = [_upload(client, "/api/extract", red_png) for _ in range(50)]

    assert {response.status_code for response in responses} == {200}
    assert len({response.get_data() for response in responses}) == 1


def test_oversized_upload_returns_413(red_png: bytes) -> None:
    client = create_app({"TESTING": True, "MAX_CONTENT_LENGTH": 16}).test_client()

    response = _upload(client, "/api/extract", red_png)

    assert response.status_code == 413
    assert response.get_json()["success"] is False
