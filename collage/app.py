"""Главное окно: предпросмотр слева, параметры справа, статус и сохранение снизу."""
import customtkinter as ctk

from collage.controllers.app_controller import AppController
from collage.ui.image_viewer import ImageViewer
from collage.ui.sidebar import Sidebar
from collage.ui.bottom_bar import BottomBar


class CollageApp(ctk.CTk):
    def __init__(self) -> None:
        super().__init__()
        ctk.set_appearance_mode("system")
        ctk.set_default_color_theme("blue")

        self.title("Collage")
        self.minsize(1000, 640)

        self._viewer = ImageViewer(self)
        self._sidebar = Sidebar(self)
        self._bottom = BottomBar(self)
        self._build_layout()

        self._controller = AppController(viewer=self._viewer, sidebar=self._sidebar, bottom=self._bottom, window=self)
        self._controller.bind_events()

    def _build_layout(self) -> None:
        # preview stretches, sidebar keeps its width
        self.grid_columnconfigure(0, weight=1)
        self.grid_columnconfigure(1, weight=0)
        self.grid_rowconfigure(0, weight=1)
        self.grid_rowconfigure(1, weight=0)

        self._viewer.grid(row=0, column=0, sticky="nsew", padx=(12, 6), pady=(12, 6))
        self._sidebar.grid(row=0, column=1, sticky="ns", padx=(6, 12), pady=(12, 6))
        self._bottom.grid(row=1, column=0, columnspan=2, sticky="ew", padx=12, pady=(0, 12))
