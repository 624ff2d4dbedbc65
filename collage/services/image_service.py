"""Загрузка изображений с диска: явный список файлов или обход каталога.

Источник (`PathListSource` / `DirectorySource`) решает, какие файлы читать и
как реагировать на ошибки; `ImageService` декодирует отдельный файл.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Union

from PIL import Image, UnidentifiedImageError

from collage.models.collage_model import CollageCancelled
from collage.models.image_model import ImageData

log = logging.getLogger(__name__)

# 100 MB
LARGE_BATCH_BYTES = 100_000_000
LARGE_BATCH_PROMPT = "Суммарный размер файлов {size_mb:.1f} MB превышает 100 MB. Продолжить? [y/N] "

ConfirmCallback = Callable[[str], bool]


def is_affirmative(answer: Optional[str]) -> bool:
    """`y` / `yes` в любом регистре — согласие, всё остальное — отказ."""
    if answer is None:
        return False
    return answer.strip().lower() in ("y", "yes")


def _refuse(_message: str) -> bool:
    return False


class ImageService:
    def load_image(self, file_path: str | Path) -> ImageData:
        """Загружает изображение с диска и возвращает его вместе с метаданными.

        Args:
            file_path: Путь до файла изображения.

        Returns:
            `ImageData` c `PIL.Image.Image` (в режиме RGBA), размерами, режимом и размером файла.

        Raises:
            FileNotFoundError: если путь не существует или не указывает на файл.
            ValueError: если файл не распознан как изображение.
        """
        path = Path(file_path)
        if not path.exists() or not path.is_file():
            raise FileNotFoundError(f"Файл не найден: {path}")

        try:
            with Image.open(path) as src:
                pil_image = src.convert("RGBA")
        except UnidentifiedImageError as exc:
            raise ValueError(f"Файл не является изображением: {path}") from exc
        except (OSError, Image.DecompressionBombError) as exc:
            # truncated data or over the Pillow pixel limit
            raise ValueError(f"Не удалось декодировать изображение: {path}") from exc

        width, height = pil_image.size
        try:
            size_bytes: Optional[int] = path.stat().st_size
        except OSError:
            size_bytes = None

        return ImageData(
            path=path,
            pil_image=pil_image,
            width=width,
            height=height,
            mode=pil_image.mode,
            size_bytes=size_bytes,
        )

    def load_images(
        self,
        source: Union["PathListSource", "DirectorySource"],
        confirm: ConfirmCallback = _refuse,
    ) -> List[ImageData]:
        """Загружает все изображения источника в исходном порядке.

        Raises:
            ValueError: если не удалось получить ни одного изображения.
            CollageCancelled: пользователь отказался от большого пакета.
        """
        log.info("Opening images")
        images = source.collect(self, confirm)
        if not images:
            raise ValueError("Не найдено ни одного изображения")
        log.info("Loaded %d image(s)", len(images))
        return images


@dataclass(frozen=True)
class PathListSource:
    """Явный список путей; любой нечитаемый файл прерывает работу."""
    paths: Sequence[Path]

    def collect(self, service: ImageService, confirm: ConfirmCallback) -> List[ImageData]:
        return [service.load_image(path) for path in self.paths]


@dataclass(frozen=True)
class DirectorySource:
    """Рекурсивный обход каталога.

    Все элементы сортируются по полному пути; то, что не декодируется
    (каталоги, не-изображения), молча пропускается. Если суммарный размер
    элементов больше `size_limit`, требуется подтверждение пользователя.
    """
    root: Path
    size_limit: int = LARGE_BATCH_BYTES

    def entries(self) -> List[Path]:
        if not self.root.is_dir():
            raise FileNotFoundError(f"Каталог не найден: {self.root}")
        return sorted(self.root.rglob("*"), key=str)

    def collect(self, service: ImageService, confirm: ConfirmCallback) -> List[ImageData]:
        entries = self.entries()
        total = sum(_entry_size(entry) for entry in entries)
        log.info("Found %d entries in %s, %d bytes total", len(entries), self.root, total)

        if total > self.size_limit:
            message = LARGE_BATCH_PROMPT.format(size_mb=total / 1_000_000)
            if not confirm(message):
                raise CollageCancelled("Операция отменена пользователем")

        images: List[ImageData] = []
        for entry in entries:
            try:
                images.append(service.load_image(entry))
            except (FileNotFoundError, ValueError):
                log.debug("Skipping %s: not an image", entry)
        return images


def _entry_size(entry: Path) -> int:
    # dangling symlinks and unreadable entries count as empty
    try:
        return entry.stat().st_size
    except OSError:
        return 0


def resolve_source(paths: Sequence[Path]) -> Union[PathListSource, DirectorySource]:
    """Один путь-каталог включает режим обхода, иначе — явный список."""
    if len(paths) == 1 and Path(paths[0]).is_dir():
        return DirectorySource(Path(paths[0]))
    return PathListSource(tuple(Path(p) for p in paths))
