from __future__ import annotations

import logging
import shutil
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from .command import run_cmd

if TYPE_CHECKING:
    from .identity import UserIdentity

logger = logging.getLogger(__name__)


class PackageOutcome(Enum):
    ALREADY_PRESENT = "already-present"
    INSTALLED = "installed"
    FAILED_SKIPPED = "failed-skipped"


class AudioStack(Enum):
    PIPEWIRE = "pipewire"
    PULSEAUDIO = "pulseaudio"
    NONE = "none"


def dnf_update(*, dry_run: bool = False) -> bool:
    r = run_cmd(["dnf", "update", "-y"], check=False, dry_run=dry_run)
    return r.returncode == 0


def dnf_is_installed(package: str) -> bool:
    """Return True if dnf reports the package as installed.

    A non-zero exit (not installed, unknown name, dnf missing) is simply False.
    The query is read-only and also runs in dry-run mode.
    """
    r = run_cmd(["dnf", "list", "installed", package], check=False)
    return r.returncode == 0


def dnf_install(package: str, *, dry_run: bool = False) -> bool:
    r = run_cmd(["dnf", "install", "-y", package], check=False, dry_run=dry_run)
    return r.returncode == 0


def ensure_installed(package: str, *, dry_run: bool = False) -> PackageOutcome:
    if dnf_is_installed(package):
        logger.info("%s already installed", package)
        return PackageOutcome.ALREADY_PRESENT

    if dnf_install(package, dry_run=dry_run):
        return PackageOutcome.INSTALLED

    logger.warning("Could not install %s (not available or failed), skipping", package)
    return PackageOutcome.FAILED_SKIPPED


def catalog_packages(manifest: Dict[str, Any], extra: Optional[List[str]] = None) -> List[str]:
    """Flatten the unconditional package groups, keeping order and dropping duplicates."""

    groups = manifest.get("groups") or {}
    if not isinstance(groups, dict):
        raise ValueError("packages manifest: groups must be a mapping")

    out: List[str] = []
    for pkgs in groups.values():
        for p in pkgs or []:
            name = str(p).strip()
            if name and name not in out:
                out.append(name)
    for name in extra or []:
        if name not in out:
            out.append(name)
    return out


def select_audio_stack(*, pipewire_running: bool, pactl_present: bool) -> AudioStack:
    if pipewire_running:
        return AudioStack.PIPEWIRE
    if not pactl_present:
        return AudioStack.PULSEAUDIO
    return AudioStack.NONE


def pipewire_running(user: "UserIdentity | None" = None) -> bool:
    r = run_cmd(["systemctl", "--user", "is-active", "--quiet", "pipewire"], check=False, user=user)
    if r.returncode == 0:
        return True
    return run_cmd(["pgrep", "-x", "pipewire"], check=False).returncode == 0


def detect_audio_stack(user: "UserIdentity | None" = None) -> AudioStack:
    return select_audio_stack(
        pipewire_running=pipewire_running(user),
        pactl_present=shutil.which("pactl") is not None,
    )


def audio_stack_packages(manifest: Dict[str, Any], stack: AudioStack) -> List[str]:
    if stack is AudioStack.NONE:
        return []
    stacks = manifest.get("audio_stacks") or {}
    return [str(p) for p in stacks.get(stack.value) or []]
