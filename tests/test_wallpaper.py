"""
Tests for wallpaper selection, copying and the .fehbg launcher.
"""

import os
from pathlib import Path

from dotfiles_installer.lib.assets import copy_contents
from dotfiles_installer.lib.wallpaper import display_running, find_wallpaper, install_wallpaper, write_fehbg


def test_prefers_wallpapers_directory(dotfiles: Path) -> None:
    (dotfiles / "top.jpg").write_bytes(b"jpg")
    (dotfiles / "wallpapers" / "a.WebP").write_bytes(b"webp")
    (dotfiles / "wallpapers" / "0.txt").write_text("not an image")

    assert find_wallpaper(dotfiles) == dotfiles / "wallpapers" / "a.WebP"


def test_falls_back_to_top_level(tmp_path: Path) -> None:
    (tmp_path / "wallpapers").mkdir()
    (tmp_path / "README.md").write_text("")
    (tmp_path / "Bg.JPEG").write_bytes(b"jpeg")

    assert find_wallpaper(tmp_path) == tmp_path / "Bg.JPEG"


def test_no_wallpaper(tmp_path: Path) -> None:
    assert find_wallpaper(tmp_path) is None


def test_install_and_fehbg(tmp_path: Path, dotfiles: Path, home: Path) -> None:
    target = install_wallpaper(dotfiles / "wallpapers" / "b.PNG", home / "Pictures" / "wallpapers")
    fehbg = home / ".fehbg"
    fehbg.write_text("stale")

    write_fehbg(fehbg, target)

    assert target.read_bytes() == b"png"
    assert fehbg.read_text() == f'#!/bin/sh\nfeh --bg-fill "{target}"\n'
    assert os.access(fehbg, os.X_OK)


def test_display_from_environment(no_commands: list) -> None:
    assert display_running({"DISPLAY": ":0"})
    assert no_commands == []


def test_display_probe_via_pgrep(no_commands: list) -> None:
    assert not display_running({})
    assert no_commands == [["pgrep", "-x", "Xorg"], ["pgrep", "-x", "X"]]


def test_copy_contents_recursive(tmp_path: Path) -> None:
    src = tmp_path / "FiraCode"
    (src / "ttf").mkdir(parents=True)
    (src / "ttf" / "FiraCode-Regular.ttf").write_bytes(b"font")
    dst = tmp_path / "fonts"

    assert copy_contents(src, dst) == 1
    assert (dst / "ttf" / "FiraCode-Regular.ttf").read_bytes() == b"font"


def test_copy_contents_missing_source_copies_nothing(tmp_path: Path) -> None:
    assert copy_contents(tmp_path / "missing", tmp_path / "dst") == 0
    assert not (tmp_path / "dst").exists()
