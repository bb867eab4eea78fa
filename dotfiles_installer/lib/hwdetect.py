from __future__ import annotations

import logging
import re
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Sequence, Tuple

from .command import run_cmd

logger = logging.getLogger(__name__)

BACKLIGHT_ROOT = Path("/sys/class/backlight")

# Priority order matters: the first vendor with a matching keyword wins.
_VENDOR_KEYWORDS: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("intel", ("intel",)),
    ("amd", ("amd", "ati", "radeon")),
    ("nvidia", ("nvidia",)),
)

_PREFERRED_BACKLIGHT = {
    "intel": ("intel_backlight", "acpi_video0"),
    "amd": ("amdgpu_bl0", "acpi_video0"),
    "nvidia": ("acpi_video0",),
    "unknown": (),
}

_DISPLAY_CLASSES = ("vga", "3d", "display")


@dataclass(frozen=True)
class HardwareProfile:
    chipset: str
    device: Optional[str]
    method: str

    def to_dict(self) -> dict:
        return {"chipset": self.chipset, "device": self.device, "method": self.method}


def _keyword_pattern(keywords: Sequence[str]) -> re.Pattern:
    return re.compile(r"\b(" + "|".join(re.escape(k) for k in keywords) + r")\b", re.IGNORECASE)


_VENDOR_PATTERNS = [(vendor, _keyword_pattern(kws)) for vendor, kws in _VENDOR_KEYWORDS]


def classify_chipset(text: str) -> str:
    for vendor, pattern in _VENDOR_PATTERNS:
        if pattern.search(text):
            return vendor
    return "unknown"


def list_display_devices(*, dry_run: bool = False) -> List[str]:
    """Display-class lines from lspci (empty when lspci is unavailable)."""

    r = run_cmd(["lspci"], check=False, dry_run=dry_run)
    if r.returncode != 0:
        return []
    return [ln for ln in r.stdout.splitlines() if any(c in ln.lower() for c in _DISPLAY_CLASSES)]


def list_backlight_devices(root: Path = BACKLIGHT_ROOT) -> List[str]:
    try:
        return sorted(p.name for p in root.iterdir())
    except OSError:
        return []


def _pick_backlight(chipset: str, root: Path) -> Optional[str]:
    for name in _PREFERRED_BACKLIGHT.get(chipset, ()):
        if (root / name).is_dir():
            return name
    devices = list_backlight_devices(root)
    return devices[0] if devices else None


def detect_graphics(
    display_lines: Iterable[str],
    *,
    backlight_root: Path = BACKLIGHT_ROOT,
    which: Callable[[str], Optional[str]] = shutil.which,
) -> HardwareProfile:
    """Classify the graphics chipset and choose a brightness control method.

    Never raises: an unrecognized vendor with no backlight devices still yields
    a usable (generic brightnessctl) profile.
    """

    chipset = classify_chipset("\n".join(display_lines))

    if chipset == "nvidia" and not (backlight_root / "acpi_video0").is_dir() and which("xbacklight"):
        profile = HardwareProfile(chipset=chipset, device=None, method="xbacklight")
    else:
        profile = HardwareProfile(
            chipset=chipset,
            device=_pick_backlight(chipset, backlight_root),
            method="brightnessctl",
        )

    if chipset == "unknown":
        logger.warning("Could not detect graphics chipset, using default")
    else:
        logger.info("Detected %s graphics", chipset)

    if profile.device:
        logger.info("Brightness device: %s", profile.device)
    elif profile.method != "xbacklight":
        logger.warning("No backlight device found, brightness control may not work")

    return profile
