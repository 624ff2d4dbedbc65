"""Точки входа: командная строка (`collage`) и окно (`collage-gui`)."""
from __future__ import annotations

import argparse
import logging
import sys
from functools import partial
from pathlib import Path
from typing import Callable, List, Optional

from collage.models.collage_model import DEFAULT_COLOR, DEFAULT_SPACING, CollageCancelled, CollageOptions, Orientation
from collage.services.collage_service import CollageService
from collage.services.image_service import ConfirmCallback, ImageService, is_affirmative, resolve_source
from collage.services.output_service import OutputService, default_output_dir

__version__ = "0.1.0"

log = logging.getLogger(__name__)


def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    # -h is taken by --height, so help is long-form only
    p = argparse.ArgumentParser(
        prog="collage",
        description="Собирает изображения в один столбец (portrait) или ряд (landscape).",
        add_help=False,
    )
    p.add_argument("paths", nargs="+", type=Path, help="Пути к изображениям или один каталог для обхода.")
    p.add_argument("-w", "--width", type=int, help="Ширина изображений; по умолчанию ширина первого.")
    p.add_argument("-h", "--height", type=int, help="Высота изображений; по умолчанию высота первого.")
    p.add_argument(
        "-o", "--orientation",
        choices=[o.value for o in Orientation],
        default=Orientation.PORTRAIT.value,
    )
    p.add_argument("-t", "--top", type=int, default=0, help="Отступ сверху и снизу, px.")
    p.add_argument("-l", "--left", type=int, default=0, help="Отступ слева и справа, px.")
    p.add_argument("-s", "--spacing", type=int, default=DEFAULT_SPACING, help="Промежуток между изображениями, px.")
    p.add_argument("-c", "--color", default=DEFAULT_COLOR, help="Цвет фона, #RRGGBB.")
    p.add_argument("-p", "--preserve", action="store_true", help="Сохранять пропорции изображений.")
    p.add_argument("-d", "--output-dir", type=Path, help="Каталог для результата; по умолчанию ~/Downloads.")
    p.add_argument("-v", "--verbose", action="count", default=0, help="Подробный лог (-vv для отладки).")
    p.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    p.add_argument("--help", action="help", help="Показать справку и выйти.")
    return p.parse_args(argv)


def setup_logging(verbosity: int) -> None:
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(asctime)s - %(levelname)s - %(message)s")


def prompt_confirm(message: str) -> bool:
    """Спрашивает подтверждение в терминале; EOF считается отказом."""
    try:
        answer = input(message)
    except EOFError:
        return False
    return is_affirmative(answer)


def run(
    options: CollageOptions,
    confirm: ConfirmCallback = prompt_confirm,
    directory_provider: Callable[[], Path] = default_output_dir,
) -> Path:
    """Загружает изображения, собирает коллаж и сохраняет его.

    Returns:
        Путь к записанному PNG.

    Raises:
        CollageCancelled: пользователь отказался от большого пакета.
        OSError, ValueError, RuntimeError: фатальные ошибки конвейера.
    """
    images = ImageService().load_images(resolve_source(options.sources), confirm)
    canvas = CollageService().build(options, images)
    return OutputService(directory_provider).save(canvas)


def main(argv: Optional[List[str]] = None) -> int:
    args = _parse_args(argv)
    setup_logging(args.verbose)

    provider: Callable[[], Path] = default_output_dir
    if args.output_dir is not None:
        provider = partial(Path, args.output_dir)

    try:
        options = CollageOptions.from_values(
            sources=args.paths,
            width=args.width,
            height=args.height,
            orientation=args.orientation,
            top_margin=args.top,
            left_margin=args.left,
            spacing=args.spacing,
            color=args.color,
            preserve_aspect_ratio=args.preserve,
        )
        out_path = run(options, confirm=prompt_confirm, directory_provider=provider)
    except CollageCancelled as exc:
        log.info("%s", exc)
        return 0
    except (OSError, ValueError, RuntimeError) as exc:
        print(f"Ошибка: {exc}", file=sys.stderr)
        return 1

    print(out_path)
    return 0


def gui() -> None:
    """Создаёт и запускает главное окно приложения."""
    from collage.app import CollageApp

    app = CollageApp()
    app.mainloop()


if __name__ == "__main__":
    raise SystemExit(main())
