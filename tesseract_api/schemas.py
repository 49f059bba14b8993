"""
Схемы данных Tesseract API.

Включает:
    - Перечисления режимов Tesseract (PSM, OEM)
    - Pydantic модели для API (язык, результат, health, обёртка ответа)
    - Внутренние dataclass'ы для пайплайна обработки
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


# =============================================================================
# Режимы Tesseract
# =============================================================================


class PageSegmentationMode(IntEnum):
    """
    Режим сегментации страницы (--psm).

    Значения совпадают с кодами, которые ожидает Tesseract.
    """

    OSD_ONLY = 0
    AUTO_OSD = 1
    AUTO_ONLY = 2
    AUTO = 3
    SINGLE_COLUMN = 4
    SINGLE_BLOCK_VERT_TEXT = 5
    SINGLE_BLOCK = 6
    SINGLE_LINE = 7
    SINGLE_WORD = 8
    CIRCLE_WORD = 9
    SINGLE_CHAR = 10
    SPARSE_TEXT = 11
    SPARSE_TEXT_OSD = 12
    RAW_LINE = 13


class OcrEngineMode(IntEnum):
    """Режим движка распознавания (--oem)."""

    TESSERACT_ONLY = 0
    LSTM_ONLY = 1
    TESSERACT_LSTM_COMBINED = 2
    DEFAULT = 3


# =============================================================================
# Pydantic модели для API
# =============================================================================


class ApiModel(BaseModel):
    """Базовая модель API: поля в snake_case, JSON в camelCase."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class LanguageDescriptor(ApiModel):
    """
    Язык из каталога.

    Attributes:
        key: трёхбуквенный код Tesseract ("eng", "rus")
        display_name: название для отображения
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    key: str = Field(min_length=3, max_length=3)
    display_name: str


class ScanResult(ApiModel):
    """
    Результат распознавания для клиента.

    Attributes:
        raw_text: текст как его вернул Tesseract
        cleaned_text: текст после нормализации
        language_key: ключ языка, с которым выполнялось распознавание
    """

    raw_text: str
    cleaned_text: str
    language_key: str


class TesseractInfo(ApiModel):
    available: bool
    version: str


class LanguagesInfo(ApiModel):
    """
    Состояние языков.

    Attributes:
        installed: ключи из конфигурации, найденные в каталоге
        missing: ключи, для которых Tesseract не нашёл traineddata
    """

    installed: list[str] = []
    missing: list[str] = []


class HealthStatus(ApiModel):
    """Ответ проверки работоспособности."""

    status: str
    service: str
    version: str
    cpu_count: Optional[int] = None
    tesseract: TesseractInfo
    languages: LanguagesInfo
    config: dict


T = TypeVar("T")


class WrappedResponse(ApiModel, Generic[T]):
    """
    Единая обёртка всех ответов API.

    Attributes:
        code: HTTP статус ответа
        message: сообщение (обязательно для ошибок)
        data: полезная нагрузка (для ошибок всегда None)
    """

    code: int = Field(ge=100, le=599)
    message: Optional[str] = None
    data: Optional[T] = None

    @model_validator(mode="after")
    def _check_error_envelope(self):
        if self.code >= 400:
            if not self.message:
                raise ValueError("ответ с ошибкой должен содержать message")
            if self.data is not None:
                raise ValueError("ответ с ошибкой не может содержать data")
        return self

    @classmethod
    def ok(cls, data, code: int = 200) -> "WrappedResponse":
        return cls(code=code, data=data)

    @classmethod
    def error(cls, code: int, message: str) -> "WrappedResponse":
        return cls(code=code, message=message)


# =============================================================================
# Внутренние dataclass'ы для пайплайна
# =============================================================================


@dataclass(frozen=True)
class Base64Payload:
    """
    Разобранная base64 строка из тела запроса.

    Attributes:
        content: base64 данные без префикса data-URI
        extension: расширение из MIME типа (None если префикса не было)
        mime_type: MIME тип из data-URI
    """

    content: str
    extension: Optional[str] = None
    mime_type: Optional[str] = None


@dataclass(frozen=True)
class OcrResult:
    """
    Результат распознавания одного изображения.

    Attributes:
        raw_text: текст как его вернул Tesseract
        cleaned_text: нормализованный текст
        language: язык, с которым выполнялось распознавание
    """

    raw_text: str
    cleaned_text: str
    language: LanguageDescriptor

    def to_scan_result(self) -> ScanResult:
        return ScanResult(
            raw_text=self.raw_text,
            cleaned_text=self.cleaned_text,
            language_key=self.language.key,
        )
