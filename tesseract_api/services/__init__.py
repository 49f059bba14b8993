"""
Сервисы Tesseract API.

Модули:
    - language_catalog: каталог языков и фильтр установленных
    - base64_utils: разбор data-URI, оценка размера, декодирование
    - temp_files: временные файлы с гарантированным удалением
    - ocr_engine: вызов Tesseract
    - text_cleaner: нормализация распознанного текста
    - ocr_processor: координация пайплайна
"""

from tesseract_api.services.language_catalog import LanguageCatalog
from tesseract_api.services.ocr_engine import TesseractEngine, detect_extension
from tesseract_api.services.ocr_processor import OcrProcessor
from tesseract_api.services.temp_files import TempFileManager, ensure_dir
from tesseract_api.services.text_cleaner import clean_text, shape

__all__ = [
    "OcrProcessor",
    "LanguageCatalog",
    "TesseractEngine",
    "TempFileManager",
    "detect_extension",
    "ensure_dir",
    "clean_text",
    "shape",
]
