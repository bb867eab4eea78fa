"""
Tests for brightness/volume fragment rendering.
"""

from pathlib import Path

from dotfiles_installer.lib.fragment import GeneratedFragment, render_fragment, write_fragment
from dotfiles_installer.lib.hwdetect import HardwareProfile


def test_device_specific_brightnessctl() -> None:
    text = render_fragment(HardwareProfile(chipset="intel", device="intel_backlight", method="brightnessctl"))

    assert text.startswith("# Auto-generated brightness and volume control configuration\n")
    assert "# Graphics: intel\n" in text
    assert "# Brightness device: intel_backlight\n" in text
    assert "brightnessctl -d intel_backlight set +10%" in text
    assert "brightnessctl -d intel_backlight set 10%-" in text


def test_xbacklight_template() -> None:
    text = render_fragment(HardwareProfile(chipset="nvidia", device=None, method="xbacklight"))

    assert "xbacklight -inc 10" in text
    assert "xbacklight -dec 10" in text
    assert "brightnessctl" not in text
    assert "# Brightness device: auto\n" in text


def test_generic_template_without_device() -> None:
    text = render_fragment(HardwareProfile(chipset="unknown", device=None, method="brightnessctl"))

    assert "# Brightness control (generic)" in text
    assert "brightnessctl set +10%" in text
    assert " -d " not in text


def test_volume_bindings_always_present() -> None:
    text = render_fragment(HardwareProfile(chipset="amd", device="amdgpu_bl0", method="brightnessctl"))

    assert "set $refresh_i3status killall -SIGUSR1 i3status" in text
    assert "@DEFAULT_SINK@ +10% && $refresh_i3status" in text
    assert "set-source-mute @DEFAULT_SOURCE@ toggle" in text
    assert text.endswith("\n")


def test_write_fragment_overwrites(tmp_path: Path) -> None:
    path = tmp_path / "i3" / "audio-brightness.conf"
    write_fragment(GeneratedFragment(path=path, text="old\n"))
    write_fragment(GeneratedFragment(path=path, text="new\n"))

    assert path.read_text() == "new\n"


def test_write_fragment_dry_run(tmp_path: Path) -> None:
    path = tmp_path / "audio-brightness.conf"
    write_fragment(GeneratedFragment(path=path, text="x"), dry_run=True)

    assert not path.exists()
