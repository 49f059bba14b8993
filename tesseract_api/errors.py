"""
Ошибки Tesseract API.

Иерархия:
    ServiceError
        ValidationError (400) — некорректный запрос, до любой работы с файлами
            UnknownLanguageError
            PayloadTooLargeError
            InvalidBase64Error
        OcrEngineFailure (500) — ошибка Tesseract
            OcrTimeoutError
        InternalError (500) — каталог, файловая система
            CatalogError

HTTP слой отдаёт клиенту сообщение только для ValidationError,
для остальных — общий "Internal error." (детали пишутся в лог).
"""


class ServiceError(Exception):
    """Базовая ошибка сервиса."""

    status_code = 500


class ValidationError(ServiceError):
    """Запрос отклонён при валидации."""

    status_code = 400


class UnknownLanguageError(ValidationError):
    def __init__(self, language_key: str):
        self.language_key = language_key
        super().__init__(f'languageKey "{language_key}" не существует или не установлен.')


class PayloadTooLargeError(ValidationError):
    def __init__(self, size_bytes: int, max_size_bytes: int):
        self.size_bytes = size_bytes
        self.max_size_bytes = max_size_bytes
        super().__init__(
            f"base64 строка (изображение) слишком большая, "
            f"максимум {max_size_bytes // 1000} kb."
        )


class InvalidBase64Error(ValidationError):
    """Тело запроса не является корректной base64 строкой."""


class OcrEngineFailure(ServiceError):
    """Tesseract не смог обработать изображение."""


class OcrTimeoutError(OcrEngineFailure):
    """Tesseract не уложился в отведённое время."""


class InternalError(ServiceError):
    """Внутренняя ошибка сервиса."""


class CatalogError(InternalError):
    """Каталог языков отсутствует или повреждён."""
