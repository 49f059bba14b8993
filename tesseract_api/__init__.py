"""
Tesseract API — HTTP сервис распознавания текста на изображениях.

Принимает изображение в base64 (или data-URI), передаёт его Tesseract
через временный файл и возвращает сырой и нормализованный текст.
"""

__version__ = "1.0.0"
