"""
Tests for the font registry.

Run with: python -m pytest tests/test_fonts.py -v
"""

import threading

import pytest
from PIL import ImageFont

from photomark.core.fonts import FontHandle, FontRegistry, system_font_paths


def test_first_loadable_path_wins(font_file, tmp_path):
    missing = tmp_path / "missing.ttf"
    broken = tmp_path / "broken.ttf"
    broken.write_bytes(b"this is not a font")

    registry = FontRegistry.from_paths([("Arial", [missing, broken, font_file])])

    assert "Arial" in registry
    assert len(registry) == 1
    assert registry.lookup("Arial").path == str(font_file)


def test_family_without_loadable_file_is_skipped(font_file, tmp_path):
    registry = FontRegistry.from_paths([
        ("Arial", [tmp_path / "nope.ttf"]),
        ("Default", [font_file]),
    ])
    assert registry.families == ["Default"]


def test_lookup_exact_then_arial_then_default(font_file):
    exact = FontHandle.load("Georgia", font_file)
    arial = FontHandle.load("Arial", font_file)
    default = FontHandle.load("Default", font_file)

    registry = FontRegistry({"Georgia": exact, "Arial": arial, "Default": default})
    assert registry.lookup("Georgia") is exact
    assert registry.lookup("Verdana") is arial

    registry = FontRegistry({"Georgia": exact, "Default": default})
    assert registry.lookup("Verdana") is default

    registry = FontRegistry({"Georgia": exact})
    assert registry.lookup("Verdana") is None


def test_empty_registry():
    registry = FontRegistry()
    assert not registry
    assert registry.lookup("Arial") is None


def test_load_rejects_non_font(tmp_path):
    bogus = tmp_path / "bogus.ttf"
    bogus.write_bytes(b"\x00" * 64)
    with pytest.raises(OSError):
        FontHandle.load("Arial", bogus)
    with pytest.raises(OSError):
        FontHandle.load("Arial", tmp_path / "absent.ttf")


def test_sized_fonts_are_cached(registry):
    handle = registry.lookup("Arial")
    font = handle.font(24.0)
    assert isinstance(font, ImageFont.FreeTypeFont)
    assert handle.font(24.0) is font
    assert handle.font(36.0) is not font


def test_shared_handle_across_threads(registry):
    handle = registry.lookup("Arial")
    fonts = []

    def worker():
        fonts.append(handle.font(18.0))

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(fonts) == 8
    assert all(f is fonts[0] for f in fonts)


@pytest.mark.parametrize("platform, arial_first", [
    ("win32", "C:/Windows/Fonts/arial.ttf"),
    ("darwin", "/System/Library/Fonts/Arial.ttf"),
    ("linux", "/usr/share/fonts/truetype/liberation/LiberationSans-Regular.ttf"),
])
def test_system_font_paths(platform, arial_first):
    table = dict(system_font_paths(platform))
    assert set(table) == {"Arial", "Default"}
    assert table["Arial"][0] == arial_first


def test_linux_default_prefers_dejavu():
    table = dict(system_font_paths("linux"))
    assert table["Default"] == [
        "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
        "/usr/share/fonts/truetype/liberation/LiberationSans-Regular.ttf",
    ]


def test_open_on_unknown_platform_is_empty():
    assert len(FontRegistry.open(platform="plan9")) == 0


@pytest.mark.parametrize("size", [float("nan"), float("inf"), float("-inf")])
def test_non_finite_size_rejected(registry, size):
    with pytest.raises(ValueError):
        registry.lookup("Arial").font(size)
