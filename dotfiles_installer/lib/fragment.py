from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from .hwdetect import HardwareProfile

logger = logging.getLogger(__name__)

FRAGMENT_NAME = "audio-brightness.conf"

_BRIGHTNESS_DEVICE = """\
# Brightness control (Intel/AMD/NVIDIA via brightnessctl)
bindsym XF86MonBrightnessUp exec --no-startup-id brightnessctl -d {device} set +10%
bindsym XF86MonBrightnessDown exec --no-startup-id brightnessctl -d {device} set 10%-"""

_BRIGHTNESS_XBACKLIGHT = """\
# Brightness control (NVIDIA via xbacklight)
bindsym XF86MonBrightnessUp exec --no-startup-id xbacklight -inc 10
bindsym XF86MonBrightnessDown exec --no-startup-id xbacklight -dec 10"""

_BRIGHTNESS_GENERIC = """\
# Brightness control (generic)
bindsym XF86MonBrightnessUp exec --no-startup-id brightnessctl set +10%
bindsym XF86MonBrightnessDown exec --no-startup-id brightnessctl set 10%-"""

_VOLUME = """\
# Volume control (PulseAudio/PipeWire via pactl)
set $refresh_i3status killall -SIGUSR1 i3status
bindsym XF86AudioRaiseVolume exec --no-startup-id pactl set-sink-volume @DEFAULT_SINK@ +10% && $refresh_i3status
bindsym XF86AudioLowerVolume exec --no-startup-id pactl set-sink-volume @DEFAULT_SINK@ -10% && $refresh_i3status
bindsym XF86AudioMute exec --no-startup-id pactl set-sink-mute @DEFAULT_SINK@ toggle && $refresh_i3status
bindsym XF86AudioMicMute exec --no-startup-id pactl set-source-mute @DEFAULT_SOURCE@ toggle && $refresh_i3status"""


@dataclass(frozen=True)
class GeneratedFragment:
    path: Path
    text: str


def _brightness_block(profile: HardwareProfile) -> str:
    if profile.method == "brightnessctl" and profile.device:
        return _BRIGHTNESS_DEVICE.format(device=profile.device)
    if profile.method == "xbacklight":
        return _BRIGHTNESS_XBACKLIGHT
    return _BRIGHTNESS_GENERIC


def render_fragment(profile: HardwareProfile) -> str:
    header = "\n".join(
        [
            "# Auto-generated brightness and volume control configuration",
            f"# Graphics: {profile.chipset}",
            f"# Brightness device: {profile.device or 'auto'}",
        ]
    )
    return f"{header}\n\n{_brightness_block(profile)}\n\n{_VOLUME}\n"


def write_fragment(fragment: GeneratedFragment, *, dry_run: bool = False) -> None:
    """Write the fragment, replacing whatever was there."""

    if dry_run:
        logger.info("Would write %s", fragment.path)
        return
    fragment.path.parent.mkdir(parents=True, exist_ok=True)
    fragment.path.write_text(fragment.text, encoding="utf-8")
    logger.info("Configuration saved to: %s", fragment.path)
