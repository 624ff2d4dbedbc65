from pathlib import Path

import pytest
from PIL import Image

from collage.services import output_service
from collage.services.output_service import OutputService, default_output_dir, next_output_path


def test_next_output_path_starts_at_zero(out_dir):
    assert next_output_path(out_dir) == out_dir / "collage_0.png"


def test_next_output_path_skips_existing(out_dir):
    (out_dir / "collage_0.png").touch()
    (out_dir / "collage_1.png").touch()
    assert next_output_path(out_dir) == out_dir / "collage_2.png"


def test_next_output_path_takes_first_gap(out_dir):
    (out_dir / "collage_0.png").touch()
    (out_dir / "collage_2.png").touch()
    assert next_output_path(out_dir) == out_dir / "collage_1.png"


def test_save_writes_png_and_never_overwrites(out_dir):
    service = OutputService(lambda: out_dir)
    first = service.save(Image.new("RGBA", (3, 2), (1, 2, 3, 255)))
    second = service.save(Image.new("RGBA", (3, 2)))

    assert first.name == "collage_0.png"
    assert second.name == "collage_1.png"
    with Image.open(first) as img:
        assert img.format == "PNG"
        assert img.size == (3, 2)
        assert img.convert("RGBA").getpixel((0, 0)) == (1, 2, 3, 255)


def test_save_missing_directory(tmp_path):
    service = OutputService(lambda: tmp_path / "missing")
    with pytest.raises(FileNotFoundError):
        service.save(Image.new("RGBA", (1, 1)))


def test_default_output_dir_uses_downloads(tmp_path, monkeypatch):
    monkeypatch.setattr(output_service.Path, "home", classmethod(lambda cls: tmp_path))
    with pytest.raises(FileNotFoundError):
        default_output_dir()
    (tmp_path / "Downloads").mkdir()
    assert default_output_dir() == tmp_path / "Downloads"
