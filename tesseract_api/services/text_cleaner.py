"""
Нормализация текста после OCR.

Правила clean_text (применяются по порядку):
    1. \\r\\n, \\r и \\f (разделитель страниц Tesseract) -> \\n
    2. Табуляция и Unicode пробелы (NBSP и т.п.) -> пробел
    3. Удаляются остальные управляющие и непечатаемые символы
       (категории Cc, Cf, Co, Cs, Cn), кроме \\n
    4. Подряд идущие пробелы -> один пробел, строки обрезаются
    5. Три и более переноса строки подряд -> одна пустая строка
    6. Обрезка всего текста
"""

import re
import unicodedata

from tesseract_api.schemas import LanguageDescriptor, OcrResult

_NEWLINES_RE = re.compile(r"\r\n|\r|\f")
_SPACES_RE = re.compile(r" {2,}")
_BLANK_LINES_RE = re.compile(r"\n{3,}")

_REMOVED_CATEGORIES = {"Cc", "Cf", "Co", "Cs", "Cn"}


def _normalize_char(char: str) -> str:
    if char == "\n":
        return char
    if char == "\t":
        return " "

    category = unicodedata.category(char)
    if category == "Zs":
        return " "
    # Разделители строк/абзацев Unicode (Zl, Zp)
    if category in ("Zl", "Zp"):
        return "\n"
    if category in _REMOVED_CATEGORIES:
        return ""
    return char


def clean_text(raw_text: str) -> str:
    """
    Приводит текст от Tesseract к читаемому виду.

    Args:
        raw_text: текст как его вернул Tesseract

    Returns:
        str: нормализованный текст
    """
    text = _NEWLINES_RE.sub("\n", raw_text)
    text = "".join(_normalize_char(char) for char in text)
    text = _SPACES_RE.sub(" ", text)
    text = "\n".join(line.strip() for line in text.split("\n"))
    text = _BLANK_LINES_RE.sub("\n\n", text)
    return text.strip()


def shape(raw_text: str, language: LanguageDescriptor) -> OcrResult:
    """Собирает OcrResult из сырого текста."""
    return OcrResult(
        raw_text=raw_text,
        cleaned_text=clean_text(raw_text),
        language=language,
    )
