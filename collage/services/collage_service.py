from __future__ import annotations

import logging
from typing import List, Sequence, Tuple

import numpy as np
from PIL import Image

from collage.models.collage_model import CollageOptions, Orientation
from collage.models.image_model import ImageData

log = logging.getLogger(__name__)

Size = Tuple[int, int]

# Catmull-Rom: bicubic kernel with a = -0.5
RESAMPLE = Image.Resampling.BICUBIC


class CollageService:
    def resolve_target_size(self, options: CollageOptions, images: Sequence[ImageData]) -> Size:
        """
        Общий размер для всех изображений.
        Не заданная ширина/высота берётся у первого изображения.
        """
        if not images:
            raise ValueError("Нет изображений для коллажа")
        first = images[0]
        width = options.width if options.width is not None else first.width
        height = options.height if options.height is not None else first.height
        return width, height

    def normalize(self, image: Image.Image, target: Size, options: CollageOptions) -> Image.Image:
        """
        Приводит изображение к целевому размеру.
        Без сохранения пропорций — точное растяжение до target.
        С сохранением: portrait фиксирует ширину, landscape — высоту;
        вторая сторона выводится из пропорций (float32, отбрасывание дробной части).
        """
        width, height = target
        if options.preserve_aspect_ratio:
            src_w, src_h = image.size
            aspect = np.float32(src_w) / np.float32(src_h)
            if options.orientation is Orientation.LANDSCAPE:
                width = int(np.float32(height) * aspect)
            else:
                height = int(np.float32(width) / aspect)
            if width <= 0 or height <= 0:
                raise ValueError(f"Слишком вытянутое изображение: {src_w}x{src_h} -> {width}x{height}")
        return image.resize((width, height), RESAMPLE)

    def canvas_size(self, images: Sequence[Image.Image], target: Size, options: CollageOptions) -> Size:
        """
        Размер холста: сумма размеров вдоль оси раскладки + промежутки + поля,
        поперёк оси — целевой размер + поля.
        """
        n = len(images)
        if n == 0:
            raise ValueError("Нет изображений для коллажа")
        gaps = options.spacing * (n - 1)
        if options.orientation is Orientation.LANDSCAPE:
            w = sum(img.width for img in images) + gaps + 2 * options.left_margin
            h = target[1] + 2 * options.top_margin
        else:
            w = target[0] + 2 * options.left_margin
            h = sum(img.height for img in images) + gaps + 2 * options.top_margin
        return w, h

    def offsets(self, images: Sequence[Image.Image], options: CollageOptions) -> List[Tuple[int, int]]:
        """Левый верхний угол каждого изображения на холсте, в исходном порядке."""
        x, y = options.left_margin, options.top_margin
        result: List[Tuple[int, int]] = []
        for img in images:
            result.append((x, y))
            if options.orientation is Orientation.LANDSCAPE:
                x += img.width + options.spacing
            else:
                y += img.height + options.spacing
        return result

    def compose(self, images: Sequence[Image.Image], target: Size, options: CollageOptions) -> Image.Image:
        """
        Заливает холст цветом фона и копирует изображения по вычисленным смещениям.
        Пиксели перезаписываются целиком (включая альфу), без смешивания.
        """
        log.info("Calculating the size of the output image")
        canvas_w, canvas_h = self.canvas_size(images, target, options)

        log.info("Creating the blank output image with color #%02x%02x%02x", *options.background)
        canvas = np.empty((canvas_h, canvas_w, 4), dtype=np.uint8)
        canvas[:, :] = options.background_rgba

        log.info("Copying the images to the output image")
        for img, (x, y) in zip(images, self.offsets(images, options)):
            w, h = img.size
            if x + w > canvas_w or y + h > canvas_h:
                raise RuntimeError(
                    f"Изображение {w}x{h} в ({x}, {y}) не помещается на холст {canvas_w}x{canvas_h}"
                )
            rgba = img if img.mode == "RGBA" else img.convert("RGBA")
            canvas[y:y + h, x:x + w] = np.asarray(rgba, dtype=np.uint8)

        return Image.fromarray(canvas)

    def build(self, options: CollageOptions, images: Sequence[ImageData]) -> Image.Image:
        """Полный конвейер: целевой размер -> масштабирование -> сборка холста."""
        log.info("Setting the global image dimensions")
        target = self.resolve_target_size(options, images)

        log.info("Resizing images to %dx%d", *target)
        resized = [self.normalize(item.pil_image, target, options) for item in images]
        return self.compose(resized, target, options)
