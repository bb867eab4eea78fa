from __future__ import annotations

import logging
import os
import pwd
import sys
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, Mapping, Optional, Sequence

from ..errors import ConfigurationError

logger = logging.getLogger(__name__)

WM_NAME = "i3"


@dataclass(frozen=True)
class UserIdentity:
    name: str
    uid: int
    gid: int
    home: Path

    @classmethod
    def from_pwd(cls, entry: pwd.struct_passwd) -> "UserIdentity":
        return cls(name=entry.pw_name, uid=entry.pw_uid, gid=entry.pw_gid, home=Path(entry.pw_dir))

    @classmethod
    def current(cls) -> "UserIdentity":
        return cls.from_pwd(pwd.getpwuid(os.getuid()))


@dataclass(frozen=True)
class ResolvedPaths:
    """Every home-relative location the installer touches."""

    home: Path

    @property
    def config_dir(self) -> Path:
        return self.home / ".config"

    @property
    def wm_config_dir(self) -> Path:
        return self.config_dir / WM_NAME

    @property
    def wm_config_file(self) -> Path:
        return self.wm_config_dir / "config"

    @property
    def fragment_file(self) -> Path:
        return self.wm_config_dir / "audio-brightness.conf"

    @property
    def local_bin(self) -> Path:
        return self.home / ".local" / "bin"

    @property
    def fonts_dir(self) -> Path:
        return self.home / ".local" / "share" / "fonts"

    @property
    def wallpaper_dir(self) -> Path:
        return self.home / "Pictures" / "wallpapers"

    @property
    def fehbg(self) -> Path:
        return self.home / ".fehbg"


def resolve_paths(identity: UserIdentity) -> ResolvedPaths:
    return ResolvedPaths(home=identity.home)


def is_elevated() -> bool:
    return os.geteuid() == 0


def ensure_elevated(argv: Sequence[str]) -> None:
    """Re-exec the installer through sudo, preserving arguments and environment.

    Does not return when a re-exec happens.
    """

    if is_elevated():
        return

    logger.warning("root privileges are required for system setup, re-running with sudo")
    os.execvp("sudo", ["sudo", "-E", sys.executable, "-m", "dotfiles_installer.main", *argv])


def resolve_invoking_user(environ: Optional[Mapping[str, str]] = None) -> UserIdentity:
    env = os.environ if environ is None else environ
    name = (env.get("SUDO_USER") or "").strip()
    if not name:
        raise ConfigurationError("SUDO_USER is not set; run the installer through sudo")

    try:
        entry = pwd.getpwnam(name)
    except KeyError as e:
        raise ConfigurationError(f"SUDO_USER refers to an unknown user: {name}") from e

    identity = UserIdentity.from_pwd(entry)
    logger.info("Target user: %s (home: %s)", identity.name, identity.home)
    return identity


@contextmanager
def run_as(identity: UserIdentity) -> Iterator[None]:
    """Switch effective uid/gid to `identity` for the duration of the block.

    Files created inside the block belong to the user. Outside root, or when the
    identity already matches, this is a no-op.
    """

    if os.geteuid() != 0 or identity.uid == 0:
        yield
        return

    saved_groups = os.getgroups()
    os.setgroups(os.getgrouplist(identity.name, identity.gid))
    os.setegid(identity.gid)
    os.seteuid(identity.uid)
    logger.debug("Dropped to uid=%s gid=%s", identity.uid, identity.gid)
    try:
        yield
    finally:
        os.seteuid(0)
        os.setegid(0)
        os.setgroups(saved_groups)
        logger.debug("Restored root privileges")
