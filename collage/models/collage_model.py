"""Параметры коллажа: ориентация, отступы, цвет фона, политика масштабирования.

`CollageOptions` собирается один раз из пользовательского ввода (CLI или форма
в окне) и дальше только читается.
"""
from __future__ import annotations

import string
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Iterable, Mapping, Optional, Sequence, Tuple, Union

Rgb = Tuple[int, int, int]
Rgba = Tuple[int, int, int, int]

DEFAULT_SPACING = 20
DEFAULT_COLOR = "#ffffff"


class Orientation(str, Enum):
    """Portrait — изображения в столбик, Landscape — в ряд."""
    PORTRAIT = "portrait"
    LANDSCAPE = "landscape"


class CollageCancelled(Exception):
    """Пользователь отказался продолжать (подтверждение большого пакета)."""


def parse_hex_color(text: str) -> Rgb:
    """Разбирает цвет вида `#RRGGBB` или `RRGGBB`.

    Raises:
        ValueError: длина не 6 символов (без `#`) или есть не-hex символы.
    """
    code = text[1:] if text.startswith("#") else text
    if len(code) != 6:
        raise ValueError(f"Неверная длина hex-кода цвета: {text!r}")
    # int(..., 16) допускает знак, пробелы и "_", поэтому проверяем алфавит явно
    if not all(ch in string.hexdigits for ch in code):
        raise ValueError(f"Неверный hex-код цвета: {text!r}")
    return int(code[0:2], 16), int(code[2:4], 16), int(code[4:6], 16)


def _non_negative(name: str, value: int) -> int:
    value = int(value)
    if value < 0:
        raise ValueError(f"{name} не может быть отрицательным: {value}")
    return value


def _optional_size(name: str, value: Optional[int]) -> Optional[int]:
    if value is None:
        return None
    value = int(value)
    if value <= 0:
        raise ValueError(f"{name} должна быть положительной: {value}")
    return value


@dataclass(frozen=True)
class CollageOptions:
    """Неизменяемая конфигурация коллажа.

    Fields:
        sources: Пути к изображениям или один путь к каталогу.
        width: Целевая ширина; None — ширина первого изображения.
        height: Целевая высота; None — высота первого изображения.
        orientation: Столбик или ряд.
        top_margin: Отступ сверху и снизу, px.
        left_margin: Отступ слева и справа, px.
        spacing: Промежуток между соседними изображениями, px.
        background: Цвет фона (R, G, B), альфа всегда 255.
        preserve_aspect_ratio: Сохранять пропорции вместо растяжения.
    """
    sources: Tuple[Path, ...] = ()
    width: Optional[int] = None
    height: Optional[int] = None
    orientation: Orientation = Orientation.PORTRAIT
    top_margin: int = 0
    left_margin: int = 0
    spacing: int = DEFAULT_SPACING
    background: Rgb = (255, 255, 255)
    preserve_aspect_ratio: bool = False

    @classmethod
    def from_values(
        cls,
        sources: Iterable[Union[str, Path]] = (),
        width: Optional[int] = None,
        height: Optional[int] = None,
        orientation: Union[str, Orientation] = Orientation.PORTRAIT,
        top_margin: int = 0,
        left_margin: int = 0,
        spacing: int = DEFAULT_SPACING,
        color: str = DEFAULT_COLOR,
        preserve_aspect_ratio: bool = False,
    ) -> "CollageOptions":
        """Проверяет и преобразует «сырые» значения пользователя.

        Raises:
            ValueError: неизвестная ориентация, неверный цвет, отрицательные
                отступы или неположительные размеры.
        """
        try:
            orient = Orientation(orientation)
        except ValueError as exc:
            raise ValueError(f"Неизвестная ориентация: {orientation!r}") from exc

        return cls(
            sources=tuple(Path(p) for p in sources),
            width=_optional_size("Ширина", width),
            height=_optional_size("Высота", height),
            orientation=orient,
            top_margin=_non_negative("Верхний отступ", top_margin),
            left_margin=_non_negative("Левый отступ", left_margin),
            spacing=_non_negative("Промежуток", spacing),
            background=parse_hex_color(color),
            preserve_aspect_ratio=bool(preserve_aspect_ratio),
        )

    @property
    def background_rgba(self) -> Rgba:
        r, g, b = self.background
        return r, g, b, 255


def _optional_int(text: object) -> Optional[int]:
    text = str(text).strip()
    return int(text) if text else None


def options_from_form(sources: Sequence[Path], values: Mapping[str, object]) -> CollageOptions:
    """Собирает `CollageOptions` из строковых значений формы.

    Raises:
        ValueError: нечисловые поля или ошибки проверки `CollageOptions`.
    """
    try:
        width = _optional_int(values["width"])
        height = _optional_int(values["height"])
        top = _optional_int(values["top_margin"]) or 0
        left = _optional_int(values["left_margin"]) or 0
        spacing = _optional_int(values["spacing"])
    except ValueError as exc:
        raise ValueError("Размеры и отступы должны быть целыми числами") from exc

    return CollageOptions.from_values(
        sources=sources,
        width=width,
        height=height,
        orientation=str(values["orientation"]),
        top_margin=top,
        left_margin=left,
        spacing=spacing if spacing is not None else DEFAULT_SPACING,
        color=str(values["color"]).strip(),
        preserve_aspect_ratio=bool(values["preserve_aspect_ratio"]),
    )
