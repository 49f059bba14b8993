"""
Процессор OCR — координация пайплайна распознавания изображения.

Пайплайн одного запроса:
    1. Проверка языка (до любой работы с файлами)
    2. Оценка размера по длине base64 строки
    3. Декодирование + точная проверка размера
    4. Определение расширения (data-URI или сигнатура изображения)
    5. Временный файл -> Tesseract -> удаление файла
    6. Нормализация текста и сборка OcrResult

Все проверки, которые могут отклонить запрос, выполняются до записи
временного файла.
"""

import logging
import time
from typing import Optional

from tesseract_api.config import Settings
from tesseract_api.errors import InvalidBase64Error, PayloadTooLargeError, UnknownLanguageError
from tesseract_api.schemas import LanguageDescriptor, OcrEngineMode, OcrResult, PageSegmentationMode
from tesseract_api.services.base64_utils import decode_base64, estimate_decoded_size, parse_base64
from tesseract_api.services.language_catalog import LanguageCatalog
from tesseract_api.services.ocr_engine import TesseractEngine, detect_extension
from tesseract_api.services.temp_files import TempFileManager
from tesseract_api.services.text_cleaner import shape

logger = logging.getLogger(__name__)


class OcrProcessor:
    """
    Распознавание base64 изображений.

    Args:
        settings: настройки сервиса
        catalog: каталог языков
        engine: адаптер Tesseract
        temp_files: менеджер временных файлов
    """

    def __init__(
        self,
        settings: Settings,
        catalog: LanguageCatalog,
        engine: TesseractEngine,
        temp_files: TempFileManager,
    ):
        self.settings = settings
        self.catalog = catalog
        self.engine = engine
        self.temp_files = temp_files

    @classmethod
    def from_settings(cls, settings: Settings) -> "OcrProcessor":
        """Собирает процессор и его зависимости из настроек (каталог читается сразу)."""
        return cls(
            settings=settings,
            catalog=LanguageCatalog.from_file(
                settings.languages_file,
                settings.installed_languages,
            ),
            engine=TesseractEngine(
                install_full_path=settings.install_full_path,
                timeout_seconds=settings.ocr_timeout_seconds,
            ),
            temp_files=TempFileManager(settings.temp_dir),
        )

    def resolve_language(self, language_key: str) -> LanguageDescriptor:
        """
        Ищет установленный язык.

        Raises:
            UnknownLanguageError: ключ неизвестен или язык не установлен
        """
        language = self.catalog.lookup(language_key)
        if language is None:
            raise UnknownLanguageError(language_key)
        return language

    def _check_size(self, size_bytes: int) -> None:
        if size_bytes >= self.settings.max_file_size_bytes:
            raise PayloadTooLargeError(size_bytes, self.settings.max_file_size_bytes)

    def scan_base64(
        self,
        body: str,
        language_key: str,
        page_seg_mode: Optional[PageSegmentationMode] = None,
        engine_mode: Optional[OcrEngineMode] = None,
    ) -> OcrResult:
        """
        Распознаёт текст на изображении из base64 строки.

        Args:
            body: base64 строка или data-URI
            language_key: трёхбуквенный ключ языка
            page_seg_mode: режим сегментации (по умолчанию из настроек)
            engine_mode: режим движка (по умолчанию из настроек)

        Returns:
            OcrResult: сырой и нормализованный текст + язык

        Raises:
            UnknownLanguageError, PayloadTooLargeError, InvalidBase64Error:
                запрос отклонён до записи файла
            OcrEngineFailure: ошибка Tesseract
        """
        total_start = time.perf_counter()

        # 1. Язык
        language = self.resolve_language(language_key)

        # 2. Оценка размера без декодирования
        payload = parse_base64(body)
        estimated_size = estimate_decoded_size(payload.content)
        self._check_size(estimated_size)

        # 3. Декодирование + точный размер
        decode_start = time.perf_counter()
        image_bytes = decode_base64(payload.content)
        if not image_bytes:
            raise InvalidBase64Error("Пустое изображение: тело запроса не содержит данных.")
        self._check_size(len(image_bytes))
        decode_duration = int((time.perf_counter() - decode_start) * 1000)

        # 4. Расширение временного файла
        extension = payload.extension or detect_extension(image_bytes)

        page_seg_mode = page_seg_mode if page_seg_mode is not None else self.settings.ocr_psm
        engine_mode = engine_mode if engine_mode is not None else self.settings.ocr_oem

        logger.info(
            f"Изображение: {len(image_bytes)} байт, .{extension}, "
            f"язык {language.key}, psm {int(page_seg_mode)}, oem {int(engine_mode)}"
        )

        # 5. OCR через временный файл
        ocr_start = time.perf_counter()
        with self.temp_files.temp_file(image_bytes, extension) as path:
            raw_text = self.engine.recognize(path, language, page_seg_mode, engine_mode)
        ocr_duration = int((time.perf_counter() - ocr_start) * 1000)

        # 6. Результат
        result = shape(raw_text, language)

        total_duration = int((time.perf_counter() - total_start) * 1000)
        logger.info(
            f"OCR завершён: {len(result.cleaned_text)} симв. "
            f"(decode {decode_duration}ms, OCR {ocr_duration}ms, итого {total_duration}ms)"
        )

        return result
