"""
Tests for graphics classification and brightness method selection.
"""

import subprocess
from pathlib import Path

import pytest

from dotfiles_installer.lib.hwdetect import (
    HardwareProfile,
    classify_chipset,
    detect_graphics,
    list_backlight_devices,
    list_display_devices,
)

INTEL = "00:02.0 VGA compatible controller: Intel Corporation UHD Graphics 620 (rev 07)"
AMD = "06:00.0 VGA compatible controller: Advanced Micro Devices, Inc. [AMD/ATI] Renoir (rev c6)"
NVIDIA = "01:00.0 3D controller: NVIDIA Corporation GP107M [GeForce GTX 1050 Mobile] (rev a1)"


def _no_xbacklight(_name):
    return None


def _has_xbacklight(name):
    return "/usr/bin/xbacklight" if name == "xbacklight" else None


@pytest.fixture
def backlight(tmp_path: Path) -> Path:
    root = tmp_path / "backlight"
    root.mkdir()
    return root


@pytest.mark.parametrize(
    "text,expected",
    [
        (INTEL, "intel"),
        (AMD, "amd"),
        ("VGA: ATI Radeon HD 5450", "amd"),
        (NVIDIA, "nvidia"),
        ("VGA compatible controller: Red Hat, Inc. Virtio GPU", "unknown"),
        ("", "unknown"),
    ],
)
def test_classify_chipset(text: str, expected: str) -> None:
    assert classify_chipset(text) == expected


def test_intel_wins_over_nvidia_in_hybrid_systems() -> None:
    assert classify_chipset(INTEL + "\n" + NVIDIA) == "intel"
    assert classify_chipset("nvidia and intel") == "intel"


def test_corporation_does_not_read_as_ati() -> None:
    assert classify_chipset("NVIDIA Corporation") == "nvidia"


def test_keywords_must_be_whole_words() -> None:
    assert classify_chipset("IntelNvidia") == "unknown"
    assert classify_chipset("vendor: intel/nvidia") == "intel"


def test_degraded_profile_without_vendor_or_devices(backlight: Path) -> None:
    profile = detect_graphics(["Virtio GPU"], backlight_root=backlight, which=_no_xbacklight)

    assert profile == HardwareProfile(chipset="unknown", device=None, method="brightnessctl")


def test_missing_backlight_root_is_not_an_error(tmp_path: Path) -> None:
    profile = detect_graphics([], backlight_root=tmp_path / "absent", which=_no_xbacklight)

    assert profile.device is None
    assert profile.method == "brightnessctl"


def test_intel_prefers_intel_backlight(backlight: Path) -> None:
    for name in ("acpi_video0", "intel_backlight"):
        (backlight / name).mkdir()

    profile = detect_graphics([INTEL], backlight_root=backlight, which=_no_xbacklight)

    assert profile == HardwareProfile(chipset="intel", device="intel_backlight", method="brightnessctl")


def test_amd_falls_back_to_first_device(backlight: Path) -> None:
    for name in ("zz_panel", "edp_bl"):
        (backlight / name).mkdir()

    profile = detect_graphics([AMD], backlight_root=backlight, which=_no_xbacklight)

    assert profile.device == "edp_bl"


def test_nvidia_uses_acpi_video_when_present(backlight: Path) -> None:
    (backlight / "acpi_video0").mkdir()

    profile = detect_graphics([NVIDIA], backlight_root=backlight, which=_has_xbacklight)

    assert profile == HardwareProfile(chipset="nvidia", device="acpi_video0", method="brightnessctl")


def test_nvidia_uses_xbacklight_without_acpi_video(backlight: Path) -> None:
    (backlight / "nv_backlight").mkdir()

    profile = detect_graphics([NVIDIA], backlight_root=backlight, which=_has_xbacklight)

    assert profile == HardwareProfile(chipset="nvidia", device=None, method="xbacklight")


def test_nvidia_without_xbacklight_uses_first_device(backlight: Path) -> None:
    (backlight / "nv_backlight").mkdir()

    profile = detect_graphics([NVIDIA], backlight_root=backlight, which=_no_xbacklight)

    assert profile == HardwareProfile(chipset="nvidia", device="nv_backlight", method="brightnessctl")


def test_list_backlight_devices_sorted(backlight: Path) -> None:
    for name in ("b", "a"):
        (backlight / name).mkdir()

    assert list_backlight_devices(backlight) == ["a", "b"]


def test_list_display_devices_filters_lspci(monkeypatch: pytest.MonkeyPatch) -> None:
    out = "\n".join(
        [
            "00:00.0 Host bridge: Intel Corporation Device 9b61",
            INTEL,
            "00:1f.3 Audio device: Intel Corporation Comet Lake PCH cAVS",
            NVIDIA,
        ]
    )

    def fake_run(argv, **kwargs):
        return subprocess.CompletedProcess(argv, 0, stdout=out, stderr="")

    monkeypatch.setattr("dotfiles_installer.lib.command.subprocess.run", fake_run)

    assert list_display_devices() == [INTEL, NVIDIA]


def test_list_display_devices_without_lspci(no_commands: list) -> None:
    assert list_display_devices() == []
