"""Запись готового коллажа в PNG без перезаписи существующих файлов."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable

from PIL import Image

log = logging.getLogger(__name__)

OUTPUT_STEM = "collage"
OUTPUT_SUFFIX = ".png"


def default_output_dir() -> Path:
    """Каталог «Загрузки» текущего пользователя.

    Raises:
        FileNotFoundError: если домашний каталог или «Загрузки» не найдены.
    """
    try:
        home = Path.home()
    except RuntimeError as exc:
        raise FileNotFoundError("Не удалось определить домашний каталог") from exc
    downloads = home / "Downloads"
    if not downloads.is_dir():
        raise FileNotFoundError(f"Каталог загрузок не найден: {downloads}")
    return downloads


def next_output_path(directory: Path) -> Path:
    """Первый свободный `collage_<n>.png`, начиная с n = 0."""
    num = 0
    candidate = directory / f"{OUTPUT_STEM}_{num}{OUTPUT_SUFFIX}"
    while candidate.exists():
        num += 1
        candidate = directory / f"{OUTPUT_STEM}_{num}{OUTPUT_SUFFIX}"
    return candidate


class OutputService:
    def __init__(self, directory_provider: Callable[[], Path] = default_output_dir) -> None:
        self._directory_provider = directory_provider

    def save(self, image: Image.Image) -> Path:
        """Сохраняет изображение как PNG и возвращает путь к файлу."""
        directory = Path(self._directory_provider())
        if not directory.is_dir():
            raise FileNotFoundError(f"Каталог для сохранения не найден: {directory}")
        path = next_output_path(directory)
        log.info("Saving the output image to %s", path)
        image.save(path, format="PNG")
        return path
