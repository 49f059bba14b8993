"""
Каталог языков Tesseract.

Каталог — JSON массив объектов {"key": "eng", "displayName": "English"},
поставляется вместе с пакетом (data/languages.json) или задаётся через
TESSERACT_LANGUAGES_FILE.

Каталог читается один раз при старте приложения: повреждённый файл
роняет запуск, а не первый запрос. Для перечитывания есть reload().
"""

import logging
from pathlib import Path
from typing import Iterable, Optional

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from tesseract_api.errors import CatalogError
from tesseract_api.schemas import LanguageDescriptor

logger = logging.getLogger(__name__)

_catalog_adapter = TypeAdapter(list[LanguageDescriptor])


def load_catalog(path: Path) -> list[LanguageDescriptor]:
    """
    Читает и валидирует файл каталога.

    Args:
        path: путь к JSON файлу каталога

    Returns:
        list[LanguageDescriptor]: языки в порядке файла

    Raises:
        CatalogError: файл отсутствует, невалиден или содержит дубли ключей
    """
    try:
        raw = Path(path).read_bytes()
    except OSError as e:
        raise CatalogError(f"Не удалось прочитать каталог языков {path}: {e}") from e

    try:
        languages = _catalog_adapter.validate_json(raw)
    except PydanticValidationError as e:
        raise CatalogError(f"Каталог языков {path} повреждён: {e}") from e

    seen: set[str] = set()
    for language in languages:
        if language.key in seen:
            raise CatalogError(f"Дублирующийся ключ языка в каталоге {path}: {language.key}")
        seen.add(language.key)

    return languages


class LanguageCatalog:
    """
    Каталог языков с фильтром по установленным.

    Все методы только читают загруженные данные, поэтому объект
    безопасно разделять между запросами.
    """

    def __init__(
        self,
        languages: Iterable[LanguageDescriptor],
        installed: Iterable[str],
        path: Optional[Path] = None,
    ):
        self._path = path
        self._installed = frozenset(installed)
        self._set_languages(list(languages))

    @classmethod
    def from_file(cls, path: Path, installed: Iterable[str]) -> "LanguageCatalog":
        return cls(load_catalog(path), installed, path=path)

    def _set_languages(self, languages: list[LanguageDescriptor]) -> None:
        self._all = tuple(languages)
        self._by_key = {language.key: language for language in languages}
        self._installed_list = tuple(
            language for language in languages if language.key in self._installed
        )

        unknown = sorted(self._installed.difference(self._by_key))
        if unknown:
            logger.warning(f"Установленные языки отсутствуют в каталоге: {unknown}")

        logger.info(
            f"Каталог языков: {len(self._all)} всего, "
            f"установлено {[language.key for language in self._installed_list]}"
        )

    def reload(self) -> None:
        """
        Перечитывает каталог из файла.

        При ошибке остаётся активным ранее загруженный каталог,
        а CatalogError пробрасывается вызывающему.
        """
        if self._path is None:
            raise CatalogError("Каталог создан без файла, перечитывать нечего")
        self._set_languages(load_catalog(self._path))

    def list_all(self) -> list[LanguageDescriptor]:
        return list(self._all)

    def list_installed(self) -> list[LanguageDescriptor]:
        """Установленные языки в порядке каталога."""
        return list(self._installed_list)

    def lookup(self, key: str) -> Optional[LanguageDescriptor]:
        """
        Ищет установленный язык по трёхбуквенному ключу.

        Args:
            key: ключ языка ("eng")

        Returns:
            LanguageDescriptor или None, если ключ не из 3 символов,
            отсутствует в каталоге или язык не установлен
        """
        if len(key) != 3 or key not in self._installed:
            return None
        return self._by_key.get(key)
