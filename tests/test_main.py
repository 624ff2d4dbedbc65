import builtins

import pytest
from PIL import Image

from collage.main import main, prompt_confirm, run
from collage.models.collage_model import CollageCancelled, CollageOptions


def _outputs(out_dir):
    return sorted(p.name for p in out_dir.iterdir())


def test_two_red_images_portrait(make_image, out_dir):
    a = make_image("a.png", size=(100, 100), color=(255, 0, 0))
    b = make_image("b.png", size=(100, 100), color=(255, 0, 0))

    code = main([str(a), str(b), "-s", "10", "-d", str(out_dir)])

    assert code == 0
    assert _outputs(out_dir) == ["collage_0.png"]
    with Image.open(out_dir / "collage_0.png") as img:
        img = img.convert("RGBA")
        assert img.size == (100, 210)
        assert img.getpixel((0, 0)) == (255, 0, 0, 255)
        assert img.getpixel((0, 100)) == (255, 255, 255, 255)
        assert img.getpixel((0, 110)) == (255, 0, 0, 255)


def test_second_run_picks_next_name(make_image, out_dir):
    a = make_image("a.png")
    (out_dir / "collage_0.png").touch()
    (out_dir / "collage_1.png").touch()
    assert main([str(a), "-d", str(out_dir)]) == 0
    assert "collage_2.png" in _outputs(out_dir)


def test_landscape_preserve_flags(make_image, out_dir):
    wide = make_image("wide.png", size=(200, 100))
    code = main([str(wide), "-o", "landscape", "-p", "-h", "50", "-d", str(out_dir)])
    assert code == 0
    with Image.open(out_dir / "collage_0.png") as img:
        assert img.size == (100, 50)


def test_margins_and_color(make_image, out_dir):
    a = make_image("a.png", size=(10, 10), color=(0, 0, 0))
    code = main([str(a), "-t", "3", "-l", "4", "-c", "00ff00", "-w", "20", "-d", str(out_dir)])
    assert code == 0
    with Image.open(out_dir / "collage_0.png") as img:
        img = img.convert("RGBA")
        assert img.size == (28, 16)
        assert img.getpixel((0, 0)) == (0, 255, 0, 255)
        assert img.getpixel((4, 3)) == (0, 0, 0, 255)


def test_invalid_color_fails_without_output(make_image, out_dir, capsys):
    a = make_image("a.png")
    assert main([str(a), "-c", "#12345", "-d", str(out_dir)]) == 1
    assert _outputs(out_dir) == []
    assert "Ошибка" in capsys.readouterr().err


def test_missing_input_fails_without_output(make_image, tmp_path, out_dir):
    a = make_image("a.png")
    assert main([str(a), str(tmp_path / "missing.png"), "-d", str(out_dir)]) == 1
    assert _outputs(out_dir) == []


def test_undecodable_input_fails(tmp_path, out_dir):
    bad = tmp_path / "bad.jpg"
    bad.write_text("garbage")
    assert main([str(bad), "-d", str(out_dir)]) == 1
    assert _outputs(out_dir) == []


def test_missing_output_dir_fails(make_image, tmp_path):
    a = make_image("a.png")
    assert main([str(a), "-d", str(tmp_path / "nowhere")]) == 1


def test_directory_without_images_fails(tmp_path, out_dir):
    root = tmp_path / "docs"
    root.mkdir()
    (root / "a.txt").write_text("x")
    assert main([str(root), "-d", str(out_dir)]) == 1
    assert _outputs(out_dir) == []


def test_directory_mode_uses_sorted_order(make_image, tmp_path, out_dir):
    root = tmp_path / "photos"
    make_image("b.png", size=(10, 10), color=(0, 0, 255), directory=root)
    make_image("a.png", size=(10, 10), color=(255, 0, 0), directory=root)
    (root / "notes.txt").write_text("skip me")

    assert main([str(root), "-s", "0", "-d", str(out_dir)]) == 0
    with Image.open(out_dir / "collage_0.png") as img:
        img = img.convert("RGBA")
        assert img.size == (10, 20)
        assert img.getpixel((5, 5)) == (255, 0, 0, 255)
        assert img.getpixel((5, 15)) == (0, 0, 255, 255)


def _big_directory(make_image, tmp_path):
    root = tmp_path / "big"
    make_image("a.png", directory=root)
    # sparse file: 101 MB on the size counter without writing the bytes
    with open(root / "b.png", "wb") as fh:
        fh.truncate(101_000_000)
    return root


def test_large_directory_declined(make_image, tmp_path, out_dir, monkeypatch):
    root = _big_directory(make_image, tmp_path)
    prompts = []

    def fake_input(message):
        prompts.append(message)
        return "n"

    monkeypatch.setattr(builtins, "input", fake_input)
    assert main([str(root), "-d", str(out_dir)]) == 0
    assert len(prompts) == 1
    assert _outputs(out_dir) == []


def test_large_directory_empty_answer_cancels(make_image, tmp_path, out_dir, monkeypatch):
    root = _big_directory(make_image, tmp_path)
    monkeypatch.setattr(builtins, "input", lambda _message: "")
    assert main([str(root), "-d", str(out_dir)]) == 0
    assert _outputs(out_dir) == []


def test_large_directory_accepted(make_image, tmp_path, out_dir, monkeypatch):
    root = _big_directory(make_image, tmp_path)
    monkeypatch.setattr(builtins, "input", lambda _message: "YES")
    assert main([str(root), "-d", str(out_dir)]) == 0
    assert _outputs(out_dir) == ["collage_0.png"]


def test_prompt_confirm_eof_is_refusal(monkeypatch):
    def eof(_message):
        raise EOFError

    monkeypatch.setattr(builtins, "input", eof)
    assert prompt_confirm("?") is False


def test_run_with_injected_collaborators(make_image, out_dir):
    a = make_image("a.png", size=(20, 10))
    options = CollageOptions.from_values(sources=[a], spacing=0)
    path = run(options, confirm=lambda _m: False, directory_provider=lambda: out_dir)
    assert path == out_dir / "collage_0.png"


def test_run_propagates_cancellation(make_image, tmp_path, out_dir):
    root = _big_directory(make_image, tmp_path)
    options = CollageOptions.from_values(sources=[root])
    with pytest.raises(CollageCancelled):
        run(options, confirm=lambda _m: False, directory_provider=lambda: out_dir)


def test_usage_error_exits_2():
    with pytest.raises(SystemExit) as exc:
        main(["a.png", "-o", "diagonal"])
    assert exc.value.code == 2


def test_oversized_input_reports_error(make_image, out_dir, monkeypatch, capsys):
    huge = make_image("huge.png", size=(30, 30))
    monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 100)
    assert main([str(huge), "-d", str(out_dir)]) == 1
    assert _outputs(out_dir) == []
    assert "Ошибка" in capsys.readouterr().err


def test_directory_with_dangling_symlink(make_image, tmp_path, out_dir):
    root = tmp_path / "photos"
    make_image("a.png", directory=root)
    (root / "dangling.png").symlink_to(root / "gone.png")
    assert main([str(root), "-d", str(out_dir)]) == 0
    assert _outputs(out_dir) == ["collage_0.png"]
