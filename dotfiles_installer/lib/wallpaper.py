from __future__ import annotations

import logging
import os
import shutil
import stat
from pathlib import Path
from typing import TYPE_CHECKING, Mapping, Optional

from .command import run_cmd

if TYPE_CHECKING:
    from .identity import UserIdentity

logger = logging.getLogger(__name__)

IMAGE_EXTENSIONS = {".png", ".jpg", ".jpeg", ".webp"}


def _first_image(directory: Path) -> Optional[Path]:
    if not directory.is_dir():
        return None
    for p in sorted(directory.iterdir(), key=lambda c: c.name):
        if p.is_file() and p.suffix.lower() in IMAGE_EXTENSIONS:
            return p
    return None


def find_wallpaper(dotfiles_dir: Path) -> Optional[Path]:
    """First image under wallpapers/, else the first image at the top level."""
    return _first_image(dotfiles_dir / "wallpapers") or _first_image(dotfiles_dir)


def display_running(environ: Optional[Mapping[str, str]] = None) -> bool:
    env = os.environ if environ is None else environ
    if env.get("DISPLAY"):
        return True
    for name in ("Xorg", "X"):
        if run_cmd(["pgrep", "-x", name], check=False).returncode == 0:
            return True
    return False


def fehbg_script(wallpaper: Path) -> str:
    return f'#!/bin/sh\nfeh --bg-fill "{wallpaper}"\n'


def write_fehbg(path: Path, wallpaper: Path, *, dry_run: bool = False) -> None:
    """(Re)write the wallpaper launcher script and mark it executable."""

    if dry_run:
        logger.info("Would write %s", path)
        return
    path.write_text(fehbg_script(wallpaper), encoding="utf-8")
    path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)


def install_wallpaper(
    source: Path,
    wallpaper_dir: Path,
    *,
    dry_run: bool = False,
) -> Path:
    target = wallpaper_dir / source.name
    if dry_run:
        logger.info("Would copy %s -> %s", source, target)
        return target
    wallpaper_dir.mkdir(parents=True, exist_ok=True)
    shutil.copy2(source, target)
    return target


def apply_wallpaper(wallpaper: Path, *, user: "UserIdentity | None" = None, dry_run: bool = False) -> bool:
    r = run_cmd(["feh", "--bg-fill", str(wallpaper)], check=False, user=user, dry_run=dry_run)
    if r.returncode != 0:
        logger.warning("Could not set wallpaper immediately (X may not be running)")
        return False
    return True
