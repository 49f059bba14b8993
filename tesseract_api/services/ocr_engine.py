"""
Адаптер Tesseract OCR.

Единственная точка интеграции с Tesseract (через pytesseract):
    - распознавание текста из файла изображения
    - определение формата изображения по содержимому (Pillow)
    - версия Tesseract и список доступных traineddata для health check

Любая ошибка Tesseract пробрасывается как OcrEngineFailure.
"""

import io
import logging
import shlex
from pathlib import Path
from typing import Optional

import pytesseract
from PIL import Image, UnidentifiedImageError

from tesseract_api.errors import OcrEngineFailure, OcrTimeoutError
from tesseract_api.schemas import LanguageDescriptor, OcrEngineMode, PageSegmentationMode

logger = logging.getLogger(__name__)

# Расширение для содержимого, которое Pillow не распознал.
# Tesseract (Leptonica) определяет формат по содержимому, а не по имени файла.
DEFAULT_EXTENSION = "img"

_FORMAT_EXTENSIONS = {
    "JPEG": "jpg",
    "TIFF": "tif",
    "JPEG2000": "jp2",
}


def detect_extension(data: bytes) -> str:
    """
    Определяет расширение файла по сигнатуре изображения.

    Args:
        data: содержимое изображения

    Returns:
        str: расширение без точки ("png", "jpg", ...) или DEFAULT_EXTENSION

    Raises:
        OcrEngineFailure: изображение превышает лимит пикселей Pillow
    """
    try:
        with Image.open(io.BytesIO(data)) as image:
            image_format = image.format
    except UnidentifiedImageError:
        logger.warning("Формат изображения не распознан, файл передаётся Tesseract как есть")
        return DEFAULT_EXTENSION
    except Image.DecompressionBombError as e:
        raise OcrEngineFailure(f"Изображение слишком большое по числу пикселей: {e}") from e

    if not image_format:
        return DEFAULT_EXTENSION
    return _FORMAT_EXTENSIONS.get(image_format, image_format.lower())


class TesseractEngine:
    """
    Вызов Tesseract с настройками сервиса.

    Args:
        install_full_path: папка tessdata (None — путь Tesseract по умолчанию)
        timeout_seconds: максимальное время одного распознавания
    """

    def __init__(self, install_full_path: Optional[Path] = None, timeout_seconds: float = 30.0):
        self.install_full_path = install_full_path
        self.timeout_seconds = timeout_seconds

    def _tessdata_config(self) -> str:
        if self.install_full_path is None:
            return ""
        return f"--tessdata-dir {shlex.quote(str(self.install_full_path))}"

    def build_config(
        self,
        page_seg_mode: PageSegmentationMode,
        engine_mode: OcrEngineMode,
    ) -> str:
        """Строка параметров командной строки Tesseract."""
        config = f"--oem {int(engine_mode)} --psm {int(page_seg_mode)}"
        tessdata = self._tessdata_config()
        if tessdata:
            config = f"{config} {tessdata}"
        return config

    def recognize(
        self,
        file_path: Path,
        language: LanguageDescriptor,
        page_seg_mode: PageSegmentationMode,
        engine_mode: OcrEngineMode,
    ) -> str:
        """
        Распознаёт текст в файле изображения.

        Args:
            file_path: путь к изображению
            language: язык распознавания
            page_seg_mode: режим сегментации (--psm)
            engine_mode: режим движка (--oem)

        Returns:
            str: текст как его вернул Tesseract

        Raises:
            OcrTimeoutError: превышено время распознавания
            OcrEngineFailure: любая другая ошибка Tesseract
        """
        config = self.build_config(page_seg_mode, engine_mode)

        try:
            return pytesseract.image_to_string(
                str(file_path),
                lang=language.key,
                config=config,
                timeout=self.timeout_seconds,
            )
        except pytesseract.TesseractNotFoundError as e:
            raise OcrEngineFailure("Tesseract не установлен или отсутствует в PATH") from e
        except pytesseract.TesseractError as e:
            raise OcrEngineFailure(f"Ошибка Tesseract ({e.status}): {e.message}") from e
        except RuntimeError as e:
            # pytesseract сообщает о таймауте через RuntimeError
            if "timeout" in str(e).lower():
                raise OcrTimeoutError(
                    f"Tesseract не ответил за {self.timeout_seconds} секунд"
                ) from e
            raise OcrEngineFailure(f"Ошибка Tesseract: {e}") from e
        except OSError as e:
            raise OcrEngineFailure(f"Не удалось прочитать изображение {file_path}: {e}") from e

    def version(self) -> str:
        """Версия Tesseract (TesseractNotFoundError если бинарника нет)."""
        return pytesseract.get_tesseract_version().public

    def available_languages(self) -> list[str]:
        """Языки, для которых в tessdata есть traineddata."""
        return pytesseract.get_languages(config=self._tessdata_config())
