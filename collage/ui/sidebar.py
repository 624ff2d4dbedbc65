"""Боковая панель: выбор источников и параметры коллажа.

Параметры отдаются «как есть» (строки из полей ввода) через `get_form_values`,
события — через `on_*`.
"""
from __future__ import annotations

from pathlib import Path
from typing import Callable, Dict, Optional, Sequence

import customtkinter as ctk

from collage.models.collage_model import DEFAULT_COLOR, DEFAULT_SPACING, Orientation

_ORIENTATION_LABELS = {"Столбик": Orientation.PORTRAIT.value, "Ряд": Orientation.LANDSCAPE.value}


class Sidebar(ctk.CTkFrame):
    """Панель инструментов с блоками: источники, размер, раскладка, сборка."""
    def __init__(self, master: ctk.CTk, **kwargs) -> None:
        super().__init__(master, width=280, **kwargs)

        self.grid_columnconfigure(0, weight=1)
        self.grid_columnconfigure(1, weight=1)

        # Callbacks
        self.on_add_files: Optional[Callable[[], None]] = None
        self.on_add_folder: Optional[Callable[[], None]] = None
        self.on_clear: Optional[Callable[[], None]] = None
        self.on_build: Optional[Callable[[], None]] = None

        # Sources
        self._title = ctk.CTkLabel(self, text="Изображения", font=ctk.CTkFont(size=16, weight="bold"))
        self._title.grid(row=0, column=0, columnspan=2, padx=8, pady=(8, 4), sticky="w")

        self._add_files_btn = ctk.CTkButton(self, text="Добавить файлы…", command=self._emit_add_files)
        self._add_files_btn.grid(row=1, column=0, padx=(8, 4), pady=(0, 6), sticky="ew")
        self._add_folder_btn = ctk.CTkButton(self, text="Папка…", command=self._emit_add_folder)
        self._add_folder_btn.grid(row=1, column=1, padx=(4, 8), pady=(0, 6), sticky="ew")

        self._sources_box = ctk.CTkTextbox(self, height=140, wrap="none")
        self._sources_box.grid(row=2, column=0, columnspan=2, padx=8, pady=(0, 4), sticky="nsew")
        self._sources_box.configure(state="disabled")

        self._clear_btn = ctk.CTkButton(self, text="Очистить список", command=self._emit_clear)
        self._clear_btn.grid(row=3, column=0, columnspan=2, padx=8, pady=(0, 12), sticky="ew")

        # Size
        self._size_title = ctk.CTkLabel(self, text="Размер", font=ctk.CTkFont(size=16, weight="bold"))
        self._size_title.grid(row=4, column=0, columnspan=2, padx=8, pady=(8, 4), sticky="w")

        self._width_val = ctk.StringVar(value="")
        self._height_val = ctk.StringVar(value="")
        self._add_entry(5, "Ширина (пусто — как у первого):", self._width_val)
        self._add_entry(6, "Высота (пусто — как у первого):", self._height_val)

        self._preserve_val = ctk.BooleanVar(value=False)
        self._preserve_cb = ctk.CTkCheckBox(self, text="Сохранять пропорции", variable=self._preserve_val)
        self._preserve_cb.grid(row=7, column=0, columnspan=2, padx=8, pady=(4, 10), sticky="w")

        # Layout
        self._layout_title = ctk.CTkLabel(self, text="Раскладка", font=ctk.CTkFont(size=16, weight="bold"))
        self._layout_title.grid(row=8, column=0, columnspan=2, padx=8, pady=(8, 4), sticky="w")

        self._orientation = ctk.CTkSegmentedButton(self, values=list(_ORIENTATION_LABELS))
        self._orientation.set("Столбик")
        self._orientation.grid(row=9, column=0, columnspan=2, padx=8, pady=(0, 6), sticky="ew")

        self._top_val = ctk.StringVar(value="0")
        self._left_val = ctk.StringVar(value="0")
        self._spacing_val = ctk.StringVar(value=str(DEFAULT_SPACING))
        self._color_val = ctk.StringVar(value=DEFAULT_COLOR)
        self._add_entry(10, "Отступ сверху/снизу:", self._top_val)
        self._add_entry(11, "Отступ слева/справа:", self._left_val)
        self._add_entry(12, "Промежуток:", self._spacing_val)
        self._add_entry(13, "Цвет фона:", self._color_val)

        # filler
        self.grid_rowconfigure(99, weight=1)

        self._build_btn = ctk.CTkButton(self, text="Собрать коллаж", command=self._emit_build)
        self._build_btn.grid(row=100, column=0, columnspan=2, padx=8, pady=(8, 8), sticky="ew")

    # ---- Public API ----
    def set_sources(self, sources: Sequence[Path]) -> None:
        self._sources_box.configure(state="normal")
        self._sources_box.delete("1.0", "end")
        self._sources_box.insert("1.0", "\n".join(str(p) for p in sources) if sources else "—")
        self._sources_box.configure(state="disabled")

    def get_form_values(self) -> Dict[str, object]:
        """Текущие значения полей без проверки (строки как введены)."""
        return {
            "width": self._width_val.get(),
            "height": self._height_val.get(),
            "orientation": _ORIENTATION_LABELS.get(self._orientation.get(), Orientation.PORTRAIT.value),
            "top_margin": self._top_val.get(),
            "left_margin": self._left_val.get(),
            "spacing": self._spacing_val.get(),
            "color": self._color_val.get(),
            "preserve_aspect_ratio": bool(self._preserve_val.get()),
        }

    # ---- Internals ----
    def _add_entry(self, row: int, label: str, var: ctk.StringVar) -> None:
        ctk.CTkLabel(self, text=label, anchor="w").grid(row=row, column=0, padx=8, pady=(0, 4), sticky="w")
        ctk.CTkEntry(self, textvariable=var, width=90).grid(row=row, column=1, padx=8, pady=(0, 4), sticky="e")

    def _emit_add_files(self) -> None:
        if self.on_add_files:
            self.on_add_files()

    def _emit_add_folder(self) -> None:
        if self.on_add_folder:
            self.on_add_folder()

    def _emit_clear(self) -> None:
        if self.on_clear:
            self.on_clear()

    def _emit_build(self) -> None:
        if self.on_build:
            self.on_build()
