"""
Конфигурация Tesseract API.

Все значения читаются из .env файла (или переменных окружения)
с префиксом TESSERACT_. Для локального запуска достаточно дефолтов.

Экземпляр Settings создаётся один раз при старте приложения и
передаётся в сервисы явно (см. tesseract_api.main.create_app).

Документация по параметрам: .env.example
"""

import json
from pathlib import Path
from typing import Annotated, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from tesseract_api.schemas import OcrEngineMode, PageSegmentationMode

# Каталог языков, поставляемый вместе с пакетом
DEFAULT_LANGUAGES_FILE = Path(__file__).parent / "data" / "languages.json"


class Settings(BaseSettings):
    """
    Настройки Tesseract API.

    Читает переменные с префиксом TESSERACT_ из .env файла.
    После создания объект неизменяем.
    """

    model_config = SettingsConfigDict(
        env_prefix="TESSERACT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    # --- Сервер ---
    port: int = 8000

    # --- Лимиты ---
    # Декодированное изображение >= лимита отклоняется с 400
    max_file_size_bytes: int = Field(default=5_000_000, gt=0)

    # --- Временные файлы ---
    temp_dir: Path = Path("tmp")

    # --- Tesseract ---
    # Папка tessdata; None — путь по умолчанию самого Tesseract
    install_full_path: Optional[Path] = None
    # Ключи установленных языков: JSON список или "eng,fra,deu"
    installed_languages: Annotated[frozenset[str], NoDecode] = frozenset({"eng"})
    languages_file: Path = DEFAULT_LANGUAGES_FILE

    ocr_psm: PageSegmentationMode = PageSegmentationMode.AUTO
    ocr_oem: OcrEngineMode = OcrEngineMode.DEFAULT
    ocr_timeout_seconds: float = Field(default=30.0, gt=0)

    @field_validator("ocr_psm", "ocr_oem", mode="before")
    @classmethod
    def _parse_mode(cls, value):
        # Из окружения режимы приходят строкой: "3"
        if isinstance(value, str):
            return int(value.strip())
        return value

    @field_validator("ocr_psm")
    @classmethod
    def _check_psm(cls, value: PageSegmentationMode) -> PageSegmentationMode:
        # --psm 0 только определяет ориентацию, текста не будет
        if value == PageSegmentationMode.OSD_ONLY:
            raise ValueError("ocr_psm=0 (только OSD) не подходит для распознавания текста")
        return value

    @field_validator("installed_languages", mode="before")
    @classmethod
    def _parse_installed_languages(cls, value):
        if isinstance(value, str):
            value = value.strip()
            if value.startswith("["):
                value = json.loads(value)
            else:
                value = value.split(",")
        return frozenset(key.strip() for key in value if key.strip())

    @field_validator("installed_languages")
    @classmethod
    def _check_language_keys(cls, value: frozenset[str]) -> frozenset[str]:
        bad_keys = sorted(key for key in value if len(key) != 3)
        if bad_keys:
            raise ValueError(f"ключи языков должны состоять из 3 символов: {bad_keys}")
        return value
