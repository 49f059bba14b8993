"""
Разбор и декодирование base64 изображений.

Поддерживаются два формата тела запроса:
    - чистая base64 строка: "iVBORw0KGgo..."
    - data-URI: "data:image/png;base64,iVBORw0KGgo..."

Размер проверяется в два этапа: сначала оценка по длине строки
(без декодирования), затем точный размер декодированных байт.
"""

import base64
import binascii
import re
from typing import Optional

from tesseract_api.errors import InvalidBase64Error
from tesseract_api.schemas import Base64Payload

_DATA_URI_RE = re.compile(
    r"^data:(?P<mime>[\w.+-]+/[\w.+-]+)?(?P<params>(;[\w.+-]+=[\w.+-]+)*);base64,",
    re.IGNORECASE,
)
_WHITESPACE_RE = re.compile(r"\s+")

# Подтипы MIME, расширение которых отличается от самого подтипа
_MIME_EXTENSIONS = {
    "jpeg": "jpg",
    "pjpeg": "jpg",
    "x-ms-bmp": "bmp",
    "x-portable-anymap": "pnm",
    "x-portable-bitmap": "pbm",
    "x-portable-graymap": "pgm",
    "x-portable-pixmap": "ppm",
}


def parse_base64(value: str) -> Base64Payload:
    """
    Отделяет base64 данные от префикса data-URI.

    Args:
        value: тело запроса как есть

    Returns:
        Base64Payload: данные + расширение/MIME (если был префикс)
    """
    value = value.strip()
    # Некоторые клиенты отправляют тело как JSON строку
    if len(value) >= 2 and value[0] == value[-1] == '"':
        value = value[1:-1].strip()

    match = _DATA_URI_RE.match(value)
    if not match:
        return Base64Payload(content=value)

    mime_type = match.group("mime")
    mime_type = mime_type.lower() if mime_type else None
    return Base64Payload(
        content=value[match.end():],
        extension=extension_from_mime(mime_type),
        mime_type=mime_type,
    )


def extension_from_mime(mime_type: Optional[str]) -> Optional[str]:
    """
    Расширение файла по MIME типу: image/jpeg -> jpg, image/svg+xml -> svg.

    Returns:
        str или None, если MIME тип не указан
    """
    if not mime_type or "/" not in mime_type:
        return None

    subtype = mime_type.split("/", 1)[1].split("+", 1)[0].lower()
    if not subtype:
        return None
    return _MIME_EXTENSIONS.get(subtype, subtype)


def estimate_decoded_size(content: str) -> int:
    """
    Размер декодированных данных по длине base64 строки.

    Байты не декодируются: каждые 4 символа дают 3 байта,
    символы '=' в конце уменьшают результат. Пробелы и переносы
    строк (base64 с разбивкой на строки) не считаются.

    Args:
        content: base64 данные без префикса

    Returns:
        int: ожидаемый размер в байтах
    """
    length = len(content) - sum(1 for char in content if char.isspace())
    if length <= 0:
        return 0

    content = content.rstrip()
    padding = 0
    if content.endswith("=="):
        padding = 2
    elif content.endswith("="):
        padding = 1

    return max(length * 3 // 4 - padding, 0)


def decode_base64(content: str) -> bytes:
    """
    Строго декодирует base64.

    Допускаются переносы строк внутри данных, отсутствующий padding
    и URL-safe алфавит ('-' и '_').

    Args:
        content: base64 данные без префикса

    Returns:
        bytes: декодированное содержимое

    Raises:
        InvalidBase64Error: строка не является корректным base64
    """
    compact = _WHITESPACE_RE.sub("", content)
    if "-" in compact or "_" in compact:
        compact = compact.replace("-", "+").replace("_", "/")

    missing_padding = -len(compact) % 4
    if missing_padding == 3:
        raise InvalidBase64Error("Некорректная base64 строка: неверная длина.")
    compact += "=" * missing_padding

    try:
        return base64.b64decode(compact, validate=True)
    except (binascii.Error, ValueError) as e:
        raise InvalidBase64Error(f"Некорректная base64 строка: {e}") from e
