from __future__ import annotations

import logging
import shutil
from pathlib import Path

logger = logging.getLogger(__name__)


def copy_tree(src: Path, dst: Path, *, dry_run: bool = False) -> int:
    """Copy the contents of src into dst, returning the number of files copied."""

    if not src.is_dir():
        raise FileNotFoundError(str(src))

    if dry_run:
        logger.info("Would copy tree %s -> %s", src, dst)
        return 0

    copied = 0
    dst.mkdir(parents=True, exist_ok=True)
    for item in sorted(src.rglob("*")):
        rel = item.relative_to(src)
        out = dst / rel
        if item.is_dir():
            out.mkdir(parents=True, exist_ok=True)
        else:
            out.parent.mkdir(parents=True, exist_ok=True)
            shutil.copy2(item, out)
            copied += 1
    return copied


def copy_contents(src: Path, dst: Path, *, dry_run: bool = False) -> int:
    """Best-effort copy_tree: any failure counts as nothing copied."""

    try:
        return copy_tree(src, dst, dry_run=dry_run)
    except OSError as e:
        logger.warning("Could not copy %s -> %s: %s", src, dst, e)
        return 0
