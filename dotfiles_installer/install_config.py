from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from .errors import ConfigurationError
from .lib.manifests import load_yaml_file


@dataclass(frozen=True)
class InstallConfig:
    raw: Dict[str, Any] = field(default_factory=dict)

    @property
    def dotfiles_dir(self) -> Optional[str]:
        value = self.raw.get("dotfiles_dir")
        return str(value) if value else None

    @property
    def update_system(self) -> bool:
        return bool(self.raw.get("update_system", True))

    @property
    def extra_packages(self) -> List[str]:
        pkgs = self.raw.get("extra_packages") or []
        if not isinstance(pkgs, list):
            raise ConfigurationError("extra_packages must be a list")
        return [str(p).strip() for p in pkgs if str(p).strip()]

    @property
    def log_path(self) -> Optional[str]:
        value = self.raw.get("log_path")
        return str(value) if value else None


def load_install_config(path: Optional[str]) -> InstallConfig:
    if not path:
        return InstallConfig()

    p = Path(path)
    if not p.exists():
        raise ConfigurationError(f"Config file not found: {path}")

    if p.suffix.lower() not in {".yaml", ".yml"}:
        raise ConfigurationError("install config must be YAML")

    cfg = InstallConfig(raw=load_yaml_file(p))
    # malformed extra_packages is a load-time error
    cfg.extra_packages
    return cfg
