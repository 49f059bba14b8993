"""
Общие фикстуры тестов.

Тесты не требуют установленного Tesseract: pytesseract подменяется
через unittest.mock. Тесты с настоящим Tesseract помечены integration.
"""

import base64
import io
import json

import pytest
from PIL import Image

from tesseract_api.config import Settings
from tesseract_api.services.ocr_processor import OcrProcessor

CATALOG = [
    {"key": "eng", "displayName": "English"},
    {"key": "fra", "displayName": "French"},
    {"key": "spa", "displayName": "Spanish"},
]


@pytest.fixture
def catalog_file(tmp_path):
    path = tmp_path / "languages.json"
    path.write_text(json.dumps(CATALOG), encoding="utf-8")
    return path


@pytest.fixture
def temp_dir(tmp_path):
    """Временная папка сервиса (не создаётся заранее)."""
    return tmp_path / "scratch"


@pytest.fixture
def settings(catalog_file, temp_dir):
    return Settings(
        _env_file=None,
        temp_dir=temp_dir,
        languages_file=catalog_file,
        installed_languages={"eng", "fra"},
        max_file_size_bytes=10_000,
        ocr_timeout_seconds=5,
    )


@pytest.fixture
def processor(settings):
    return OcrProcessor.from_settings(settings)


@pytest.fixture
def png_bytes():
    buffer = io.BytesIO()
    Image.new("RGB", (20, 20), "white").save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def png_base64(png_bytes):
    return base64.b64encode(png_bytes).decode("ascii")
