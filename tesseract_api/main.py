"""
Tesseract API — FastAPI приложение для распознавания текста на изображениях.

Эндпоинты:
    GET  /tesseract/ping, /tesseract/health — проверка работоспособности
    GET  /tesseract/languages — установленные языки
    POST /tesseract/scanImageBase64?languageKey=eng — распознавание base64 изображения

Все ответы обёрнуты в {code, message, data}.

Запуск:
    uvicorn tesseract_api.main:app --host 0.0.0.0 --port 8000
"""

import json
import logging
import os
from typing import Optional

from fastapi import APIRouter, FastAPI, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from tesseract_api import __version__
from tesseract_api.config import Settings
from tesseract_api.errors import PayloadTooLargeError, ValidationError
from tesseract_api.schemas import (
    HealthStatus,
    LanguageDescriptor,
    LanguagesInfo,
    OcrEngineMode,
    PageSegmentationMode,
    ScanResult,
    TesseractInfo,
    WrappedResponse,
)
from tesseract_api.services.ocr_processor import OcrProcessor

# Настройка логгера
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [Tesseract-API] %(message)s",
    datefmt="%H:%M:%S",
)
logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = "Internal error."

# Запас на префикс data-URI и кавычки в теле запроса
BODY_OVERHEAD_BYTES = 4096

# Разбивка base64 на строки по 76 символов с CRLF (MIME): 78 байт на 76 символов данных
MIME_LINE_CHARS = 76
MIME_LINE_BYTES = 78


class UnicodeJSONResponse(JSONResponse):
    """JSON ответ с нормальным отображением не-ASCII текста (без \\uXXXX экранирования)."""

    def render(self, content) -> bytes:
        return json.dumps(
            content,
            ensure_ascii=False,
            allow_nan=False,
            indent=None,
            separators=(",", ":"),
        ).encode("utf-8")


def _envelope_response(envelope: WrappedResponse) -> UnicodeJSONResponse:
    return UnicodeJSONResponse(
        status_code=envelope.code,
        content=envelope.model_dump(mode="json", by_alias=True),
    )


def _error_response(code: int, message: str) -> UnicodeJSONResponse:
    return _envelope_response(WrappedResponse.error(code, message))


router = APIRouter(prefix="/tesseract", tags=["tesseract"])


@router.get("/ping", response_model=WrappedResponse[HealthStatus])
@router.get("/health", response_model=WrappedResponse[HealthStatus])
async def health_check(request: Request):
    """
    Проверка работоспособности сервиса.

    Проверяет доступность Tesseract и наличие traineddata
    для установленных языков, возвращает текущую конфигурацию.
    """
    processor: OcrProcessor = request.app.state.processor

    try:
        health = await run_in_threadpool(_build_health_status, processor)
    except Exception as e:
        logger.exception(f"Ошибка health check: {e}")
        return _error_response(500, INTERNAL_ERROR_MESSAGE)

    return _envelope_response(WrappedResponse[HealthStatus].ok(health))


@router.get("/languages", response_model=WrappedResponse[list[LanguageDescriptor]])
async def get_languages(request: Request):
    """Языки, установленные на сервере (в порядке каталога)."""
    processor: OcrProcessor = request.app.state.processor

    try:
        languages = processor.catalog.list_installed()
    except Exception as e:
        logger.exception(f"Ошибка получения языков: {e}")
        return _error_response(500, INTERNAL_ERROR_MESSAGE)

    return _envelope_response(WrappedResponse[list[LanguageDescriptor]].ok(languages))


@router.post(
    "/scanImageBase64",
    response_model=WrappedResponse[ScanResult],
    openapi_extra={
        "requestBody": {
            "required": True,
            "content": {
                "text/plain": {
                    "schema": {
                        "type": "string",
                        "description": "base64 строка или data:image/png;base64,...",
                    }
                }
            },
        }
    },
)
async def scan_image_base64(
    request: Request,
    language_key: str = Query(
        default="eng",
        alias="languageKey",
        description="Трёхбуквенный ключ языка",
    ),
    page_seg_mode: Optional[int] = Query(
        default=None,
        alias="pageSegMode",
        ge=int(PageSegmentationMode.AUTO_OSD),
        le=int(max(PageSegmentationMode)),
        description="Режим сегментации Tesseract (--psm, 1..13)",
    ),
    engine_mode: Optional[int] = Query(
        default=None,
        alias="engineMode",
        ge=0,
        le=int(max(OcrEngineMode)),
        description="Режим движка Tesseract (--oem)",
    ),
):
    """
    Распознаёт текст на изображении.

    Тело запроса — base64 строка изображения (или data-URI).
    Язык и размер проверяются до записи временного файла.
    """
    processor: OcrProcessor = request.app.state.processor

    try:
        # Дешёвые проверки до чтения тела
        processor.resolve_language(language_key)
        body = await _read_body(request, processor.settings.max_file_size_bytes)

        result = await run_in_threadpool(
            processor.scan_base64,
            body,
            language_key,
            PageSegmentationMode(page_seg_mode) if page_seg_mode is not None else None,
            OcrEngineMode(engine_mode) if engine_mode is not None else None,
        )
    except ValidationError as e:
        logger.warning(f"Запрос отклонён: {e}")
        return _error_response(e.status_code, str(e))
    except Exception as e:
        logger.exception(f"Ошибка распознавания изображения: {e}")
        return _error_response(500, INTERNAL_ERROR_MESSAGE)

    return _envelope_response(WrappedResponse[ScanResult].ok(result.to_scan_result()))


async def _read_body(request: Request, max_file_size_bytes: int) -> str:
    """
    Читает тело запроса с ограничением длины.

    base64 увеличивает размер в 4/3 раза, разбивка на строки (MIME)
    добавляет CRLF на каждые 76 символов. Тело длиннее этого предела
    (+ запас на префикс) не может декодироваться в допустимое
    изображение, и чтение прерывается. Точный размер проверяется
    позже, в OcrProcessor.scan_base64.

    Raises:
        PayloadTooLargeError: тело превышает предел
        ValidationError: тело не является текстом
    """
    max_body_bytes = (
        max_file_size_bytes * 4 // 3 * MIME_LINE_BYTES // MIME_LINE_CHARS
        + BODY_OVERHEAD_BYTES
    )

    content_length = request.headers.get("content-length")
    if content_length and content_length.isdigit() and int(content_length) > max_body_bytes:
        raise PayloadTooLargeError(int(content_length) * 3 // 4, max_file_size_bytes)

    chunks = []
    received = 0
    async for chunk in request.stream():
        received += len(chunk)
        if received > max_body_bytes:
            raise PayloadTooLargeError(received * 3 // 4, max_file_size_bytes)
        chunks.append(chunk)

    try:
        return b"".join(chunks).decode("utf-8")
    except UnicodeDecodeError as e:
        raise ValidationError("Тело запроса должно быть base64 строкой.") from e


def _build_health_status(processor: OcrProcessor) -> HealthStatus:
    settings = processor.settings
    installed = [language.key for language in processor.catalog.list_installed()]

    # Проверяем доступность Tesseract
    tesseract_ok = False
    try:
        tesseract_version = processor.engine.version()
        tesseract_ok = True
    except Exception as e:
        tesseract_version = f"error: {e}"

    # Языки без traineddata
    missing: list[str] = []
    if tesseract_ok:
        try:
            available = set(processor.engine.available_languages())
            missing = [key for key in installed if key not in available]
        except Exception as e:
            logger.warning(f"Не удалось получить список traineddata: {e}")

    return HealthStatus(
        status="ok" if tesseract_ok and not missing else "degraded",
        service="tesseract-api",
        version=__version__,
        cpu_count=os.cpu_count(),
        tesseract=TesseractInfo(available=tesseract_ok, version=tesseract_version),
        languages=LanguagesInfo(installed=installed, missing=missing),
        config={
            "max_file_size_bytes": settings.max_file_size_bytes,
            "ocr_psm": int(settings.ocr_psm),
            "ocr_oem": int(settings.ocr_oem),
            "ocr_timeout_seconds": settings.ocr_timeout_seconds,
        },
    )


async def _request_validation_handler(request: Request, exc: RequestValidationError):
    """Ошибки валидации параметров FastAPI в общей обёртке."""
    details = "; ".join(
        f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
        for error in exc.errors()
    )
    logger.warning(f"Некорректные параметры запроса: {details}")
    return _error_response(400, f"Некорректные параметры запроса: {details}")


def create_app(
    settings: Optional[Settings] = None,
    processor: Optional[OcrProcessor] = None,
) -> FastAPI:
    """
    Создаёт FastAPI приложение.

    Каталог языков читается здесь же: повреждённый каталог
    останавливает запуск сервиса.

    Args:
        settings: настройки (по умолчанию из окружения / .env)
        processor: готовый процессор (для тестов)

    Returns:
        FastAPI: приложение
    """
    settings = settings or (processor.settings if processor else Settings())
    processor = processor or OcrProcessor.from_settings(settings)

    app = FastAPI(
        title="Tesseract API",
        description="Распознавание текста на изображениях (Tesseract OCR)",
        version=__version__,
        default_response_class=UnicodeJSONResponse,
    )
    app.state.settings = settings
    app.state.processor = processor

    app.include_router(router)
    app.add_exception_handler(RequestValidationError, _request_validation_handler)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    port = app.state.settings.port
    logger.info(f"Запуск Tesseract API на порту {port}")
    logger.info(f"CPU ядер: {os.cpu_count()}")

    uvicorn.run(
        app,
        host="0.0.0.0",
        port=port,
        log_level="info",
    )
