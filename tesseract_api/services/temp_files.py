"""
Временные файлы для передачи изображения в Tesseract.

Имя файла: <UTC время>_<uuid4>.<расширение> — время для удобства
отладки, uuid4 для уникальности при параллельных запросах.
Файл удаляется при выходе из temp_file() на любом пути.
"""

import logging
import os
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path

logger = logging.getLogger(__name__)


def ensure_dir(path: Path) -> bool:
    """
    Создаёт папку, если её нет.

    Args:
        path: путь к папке (относительный или абсолютный)

    Returns:
        bool: True если папка была создана
    """
    path = Path(path)
    if path.is_dir():
        return False

    try:
        path.mkdir(parents=True)
    except FileExistsError:
        # Создана параллельным запросом
        if path.is_dir():
            return False
        raise

    logger.info(f"Создана папка для временных файлов: {path.resolve()}")
    return True


class TempFileManager:
    """Выдаёт уникальные пути во временной папке и гарантирует удаление файлов."""

    def __init__(self, temp_dir: Path):
        self.temp_dir = Path(temp_dir)

    def new_temp_path(self, extension: str) -> Path:
        """
        Уникальный абсолютный путь во временной папке.

        Args:
            extension: расширение без точки

        Returns:
            Path: абсолютный путь (файл не создаётся)
        """
        timestamp = datetime.now(timezone.utc).strftime("%Y%m%d%H%M%S%f")
        filename = f"{timestamp}_{uuid.uuid4().hex}.{extension.lstrip('.')}"
        return (self.temp_dir / filename).absolute()

    @contextmanager
    def temp_file(self, data: bytes, extension: str) -> Iterator[Path]:
        """
        Записывает данные во временный файл и удаляет его после использования.

        Пример:
            with manager.temp_file(image_bytes, "png") as path:
                text = engine.recognize(path, ...)

        Args:
            data: содержимое файла
            extension: расширение без точки

        Yields:
            Path: путь к записанному файлу
        """
        ensure_dir(self.temp_dir)
        path = self.new_temp_path(extension)

        try:
            path.write_bytes(data)
            logger.debug(f"Временный файл записан: {path} ({len(data)} байт)")
            yield path
        finally:
            self.delete(path)

    def delete(self, path: Path) -> bool:
        """
        Удаляет файл, отсутствие файла ошибкой не считается.

        Returns:
            bool: True если файл был удалён
        """
        try:
            os.remove(path)
        except FileNotFoundError:
            return False

        logger.debug(f"Временный файл удалён: {path}")
        return True
