"""Idempotent symlink convergence.

Every declared LinkSpec is driven to the same end state: `destination` is a
symlink whose target is `source`. Conflicting content is renamed aside first,
and a destination that is already correct is left untouched.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

logger = logging.getLogger(__name__)

BACKUP_SUFFIX = ".backup"


class LinkKind(Enum):
    DIRECTORY = "directory"
    FILE = "file"
    SCRIPT = "script"


class DestinationState(Enum):
    ABSENT = "absent"
    SYMLINK_CORRECT = "symlink-correct"
    SYMLINK_STALE = "symlink-stale"
    REAL = "real-file-or-dir"


class LinkStatus(Enum):
    CREATED = "Created"
    CREATED_DRYRUN = "Created (Not executed)"
    REPLACED = "Replaced (backed up)"
    REPLACED_DRYRUN = "Replaced (Not executed)"
    ALREADY_CORRECT = "Already linked"
    SKIPPED_NO_SOURCE = "Skipped (source not found)"
    FAILED = "Skipped (error)"


_APPLIED = {
    LinkStatus.CREATED,
    LinkStatus.CREATED_DRYRUN,
    LinkStatus.REPLACED,
    LinkStatus.REPLACED_DRYRUN,
}


@dataclass(frozen=True)
class LinkSpec:
    source: Path
    destination: Path
    kind: LinkKind

    def source_present(self) -> bool:
        if self.kind is LinkKind.DIRECTORY:
            return self.source.is_dir()
        return self.source.is_file()


@dataclass(frozen=True)
class LinkResult:
    spec: LinkSpec
    status: LinkStatus
    backup: Optional[Path] = None
    error: Optional[str] = None

    @property
    def applied(self) -> bool:
        return self.status in _APPLIED

    def to_dict(self) -> Dict[str, Any]:
        return {
            "source": str(self.spec.source),
            "destination": str(self.spec.destination),
            "status": self.status.value,
            "backup": str(self.backup) if self.backup else None,
            "error": self.error,
        }


def _points_at(link: Path, source: Path) -> bool:
    target = Path(os.readlink(link))
    if not target.is_absolute():
        target = link.parent / target
    if os.path.normpath(target) == os.path.normpath(source):
        return True
    try:
        return target.resolve() == source.resolve()
    except RuntimeError:
        # symlink loop
        return False


def inspect_destination(spec: LinkSpec) -> DestinationState:
    dst = spec.destination
    if dst.is_symlink():
        return DestinationState.SYMLINK_CORRECT if _points_at(dst, spec.source) else DestinationState.SYMLINK_STALE
    if dst.exists():
        return DestinationState.REAL
    return DestinationState.ABSENT


def backup_path_for(destination: Path) -> Path:
    """First free backup name: `<dst>.backup`, then `<dst>.backup.1`, ..."""

    candidate = destination.with_name(destination.name + BACKUP_SUFFIX)
    n = 1
    while candidate.exists() or candidate.is_symlink():
        candidate = destination.with_name(f"{destination.name}{BACKUP_SUFFIX}.{n}")
        n += 1
    return candidate


def converge(spec: LinkSpec, *, dry_run: bool = False) -> LinkResult:
    """Make spec.destination a symlink to spec.source. Never raises."""

    if not spec.source_present():
        return LinkResult(spec=spec, status=LinkStatus.SKIPPED_NO_SOURCE)

    try:
        state = inspect_destination(spec)
        if state is DestinationState.SYMLINK_CORRECT:
            return LinkResult(spec=spec, status=LinkStatus.ALREADY_CORRECT)

        if state is DestinationState.ABSENT:
            if dry_run:
                return LinkResult(spec=spec, status=LinkStatus.CREATED_DRYRUN)
            spec.destination.parent.mkdir(parents=True, exist_ok=True)
            spec.destination.symlink_to(spec.source)
            return LinkResult(spec=spec, status=LinkStatus.CREATED)

        backup = backup_path_for(spec.destination)
        if dry_run:
            return LinkResult(spec=spec, status=LinkStatus.REPLACED_DRYRUN, backup=backup)
        spec.destination.rename(backup)
        spec.destination.symlink_to(spec.source)
        return LinkResult(spec=spec, status=LinkStatus.REPLACED, backup=backup)
    except OSError as e:
        logger.warning("Could not link %s -> %s: %s", spec.destination, spec.source, e)
        return LinkResult(spec=spec, status=LinkStatus.FAILED, error=str(e))


def expand_scripts(source_dir: Path, destination_dir: Path) -> List[LinkSpec]:
    """One FILE spec per regular file directly under source_dir."""

    if not source_dir.is_dir():
        return []
    return [
        LinkSpec(source=p, destination=destination_dir / p.name, kind=LinkKind.FILE)
        for p in sorted(source_dir.iterdir())
        if p.is_file()
    ]


def build_link_specs(entries: Iterable[Dict[str, Any]], *, dotfiles_dir: Path, home: Path) -> List[LinkSpec]:
    """Turn manifest entries into concrete specs, fanning out script directories."""

    specs: List[LinkSpec] = []
    for entry in entries:
        kind = LinkKind(str(entry.get("kind", "file")))
        source = dotfiles_dir / str(entry["source"])
        destination = home / str(entry["destination"])
        if kind is LinkKind.SCRIPT:
            specs.extend(expand_scripts(source, destination))
        else:
            specs.append(LinkSpec(source=source, destination=destination, kind=kind))
    return specs


def log_link_result(result: LinkResult) -> None:
    dst = result.spec.destination
    if result.status is LinkStatus.ALREADY_CORRECT:
        logger.info("%s already linked", dst)
    elif result.status in (LinkStatus.REPLACED, LinkStatus.REPLACED_DRYRUN):
        logger.warning("%s exists, backing up to %s", dst, result.backup)
        logger.info("%s: %s", result.status.value, dst)
    elif result.status in (LinkStatus.CREATED, LinkStatus.CREATED_DRYRUN):
        logger.info("%s: %s", result.status.value, dst)
    elif result.status is LinkStatus.SKIPPED_NO_SOURCE:
        logger.debug("No source for %s (%s), skipping", dst, result.spec.source)
