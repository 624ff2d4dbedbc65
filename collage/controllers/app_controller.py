"""Контроллер окна: связывает UI с сервисами загрузки, сборки и сохранения.

Компоненты UI ничего не знают друг о друге и общаются через контроллер.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from tkinter import filedialog, messagebox, TclError
from typing import List, Optional

import customtkinter as ctk
from PIL import Image

from collage.models.collage_model import CollageCancelled, options_from_form
from collage.services.collage_service import CollageService
from collage.services.image_service import ImageService, resolve_source
from collage.services.output_service import OutputService
from collage.ui.image_viewer import ImageViewer
from collage.ui.sidebar import Sidebar
from collage.ui.bottom_bar import BottomBar

log = logging.getLogger(__name__)


@dataclass
class AppController:
    """Связывает элементы UI с прикладной логикой.

    Ответственности:
    - Выбор источников (файлы или каталог).
    - Сборка коллажа через `ImageService` и `CollageService`.
    - Сохранение результата через `OutputService`.
    - Синхронизация масштаба предпросмотра.
    """
    viewer: ImageViewer
    sidebar: Sidebar
    bottom: BottomBar
    window: ctk.CTk

    _image_service: ImageService = field(default_factory=ImageService)
    _collage_service: CollageService = field(default_factory=CollageService)
    _output_service: OutputService = field(default_factory=OutputService)
    _sources: List[Path] = field(default_factory=list)
    _collage: Optional[Image.Image] = None

    def bind_events(self) -> None:
        self.sidebar.on_add_files = self._handle_add_files
        self.sidebar.on_add_folder = self._handle_add_folder
        self.sidebar.on_clear = self._handle_clear
        self.sidebar.on_build = self._handle_build

        self.viewer.on_zoom_change = self._handle_viewer_zoom_changed

        self.bottom.on_zoom_change = self._handle_zoom_change
        self.bottom.on_zoom_preset = self._handle_zoom_change
        self.bottom.on_zoom_fit = self._handle_zoom_fit
        self.bottom.on_save = self._handle_save

        # keyboard shortcuts
        self.window.bind("<Control-Return>", lambda _event: self._handle_build())
        self.window.bind("<Control-s>", lambda _event: self._handle_save())

        self.sidebar.set_sources(self._sources)

    # ---- Handlers ----
    def _handle_add_files(self) -> None:
        try:
            file_paths = filedialog.askopenfilenames(
                title="Выберите изображения",
                filetypes=(
                    ("Images", "*.png *.jpg *.jpeg *.bmp *.gif *.tiff *.webp"),
                    ("All files", "*.*"),
                ),
            )
        except TclError:
            # Silent fail if dialog cannot open
            return

        if not file_paths:
            return
        # a folder cannot be mixed with explicit files
        if len(self._sources) == 1 and self._sources[0].is_dir():
            self._sources = []
        self._sources.extend(Path(p) for p in file_paths)
        self.sidebar.set_sources(self._sources)

    def _handle_add_folder(self) -> None:
        try:
            folder = filedialog.askdirectory(title="Выберите папку с изображениями")
        except TclError:
            return

        if not folder:
            return
        self._sources = [Path(folder)]
        self.sidebar.set_sources(self._sources)

    def _handle_clear(self) -> None:
        self._sources = []
        self._collage = None
        self.sidebar.set_sources(self._sources)
        self.viewer.set_image(None)
        self.bottom.set_save_enabled(False)
        self.bottom.set_status("Добавьте изображения")

    def _handle_build(self) -> None:
        try:
            options = options_from_form(self._sources, self.sidebar.get_form_values())
            images = self._image_service.load_images(resolve_source(options.sources), self._confirm)
            self._collage = self._collage_service.build(options, images)
        except CollageCancelled:
            self.bottom.set_status("Отменено")
            return
        except (OSError, ValueError, RuntimeError) as exc:
            log.warning("Collage build failed: %s", exc)
            self.bottom.set_status(f"Ошибка: {exc}")
            return

        self.viewer.set_image(self._collage)
        self.bottom.set_zoom_percent(self.viewer.get_zoom_percent())
        self.bottom.set_save_enabled(True)
        w, h = self._collage.size
        self.bottom.set_status(f"{len(images)} изобр., {w}×{h} px")

    def _handle_save(self) -> None:
        if self._collage is None:
            return
        try:
            path = self._output_service.save(self._collage)
        except OSError as exc:
            self.bottom.set_status(f"Ошибка: {exc}")
            return
        self.bottom.set_status(f"Сохранено: {path}")

    def _handle_zoom_change(self, zoom_percent: int) -> None:
        self.viewer.set_zoom_percent(zoom_percent)

    def _handle_viewer_zoom_changed(self, zoom_percent: int) -> None:
        # Sync slider when user zooms with mouse wheel
        self.bottom.set_zoom_percent(zoom_percent)

    def _handle_zoom_fit(self) -> None:
        self.viewer.set_zoom_to_fit()
        self.bottom.set_zoom_percent(self.viewer.get_zoom_percent())

    # ---- Helpers ----
    def _confirm(self, message: str) -> bool:
        return bool(messagebox.askyesno("Большой пакет", message, parent=self.window))
