from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional, Sequence

logger = logging.getLogger(__name__)


def has_line(lines: Sequence[str], marker: str) -> bool:
    want = marker.strip()
    return any(line.strip() == want for line in lines)


def insert_guarded(
    lines: Sequence[str],
    *,
    marker: str,
    directive: Sequence[str],
    anchor: Optional[str] = None,
) -> Optional[List[str]]:
    """Return a new line list containing `directive`, or None if `marker` is already present.

    The directive goes right after the first line equal to `anchor`; without an
    anchor match it is appended at the end, separated by a blank line.
    """

    if has_line(lines, marker):
        return None

    out = list(lines)
    if anchor is not None:
        for i, line in enumerate(out):
            if line.strip() == anchor.strip():
                out[i + 1:i + 1] = [marker]
                return out

    if out and out[-1].strip():
        out.append("")
    out.extend(directive)
    return out


def ensure_directive(
    path: Path,
    *,
    marker: str,
    directive: Sequence[str],
    anchor: Optional[str] = None,
    dry_run: bool = False,
) -> bool:
    """Apply insert_guarded to a file. Returns True when the file changed (or would)."""

    text = path.read_text(encoding="utf-8")
    updated = insert_guarded(text.splitlines(), marker=marker, directive=directive, anchor=anchor)
    if updated is None:
        logger.debug("%s already contains %r", path, marker)
        return False

    if dry_run:
        logger.info("Would add %r to %s", marker, path)
        return True

    path.write_text("\n".join(updated) + "\n", encoding="utf-8")
    logger.info("Added %r to %s", marker, path)
    return True
