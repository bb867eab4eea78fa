"""
Shared test fixtures: a throwaway home directory, a dotfiles tree and a
context that runs as the current user.
"""

import os
import subprocess
from pathlib import Path

import pytest

from dotfiles_installer.context import InstallContext
from dotfiles_installer.install_config import InstallConfig
from dotfiles_installer.lib.identity import UserIdentity, resolve_paths


@pytest.fixture
def home(tmp_path: Path) -> Path:
    h = tmp_path / "home"
    h.mkdir()
    return h


@pytest.fixture
def identity(home: Path) -> UserIdentity:
    current = UserIdentity.current()
    return UserIdentity(name=current.name, uid=os.getuid(), gid=os.getgid(), home=home)


@pytest.fixture
def dotfiles(tmp_path: Path) -> Path:
    """A dotfiles tree shaped like the real one, minus the optional pieces."""
    root = tmp_path / "dotfiles"
    (root / ".config" / "i3").mkdir(parents=True)
    (root / ".config" / "i3" / "config").write_text(
        "set $mod Mod4\nexec --no-startup-id ~/.fehbg\nbindsym $mod+Return exec kitty\n"
    )
    (root / ".config" / "kitty").mkdir(parents=True)
    (root / ".config" / "kitty" / "kitty.conf").write_text("font_size 11\n")
    (root / ".bashrc").write_text("export EDITOR=vim\n")
    (root / ".aliases").write_text("alias ll='ls -l'\n")
    (root / "bin").mkdir()
    (root / "bin" / "lock").write_text("#!/bin/sh\ni3lock\n")
    (root / "bin" / "shot").write_text("#!/bin/sh\nscrot\n")
    (root / "wallpapers").mkdir()
    (root / "wallpapers" / "b.PNG").write_bytes(b"png")
    return root


@pytest.fixture
def ctx(identity: UserIdentity, dotfiles: Path) -> InstallContext:
    return InstallContext(
        config=InstallConfig(),
        identity=identity,
        paths=resolve_paths(identity),
        dotfiles_dir=dotfiles,
        update_system=False,
    )


@pytest.fixture
def no_commands(monkeypatch: pytest.MonkeyPatch) -> list:
    """Make every external command fail with exit 1 and record what was asked for."""
    calls: list = []

    def fake_run(argv, **kwargs):
        calls.append(list(argv))
        return subprocess.CompletedProcess(argv, 1, stdout="", stderr="")

    monkeypatch.setattr("dotfiles_installer.lib.command.subprocess.run", fake_run)
    monkeypatch.delenv("DISPLAY", raising=False)
    return calls
