from __future__ import annotations

from pathlib import Path
from typing import Any, Dict

import yaml

from ..errors import ConfigurationError


def _manifest_dir() -> Path:
    # dotfiles_installer/lib/manifests.py -> dotfiles_installer/manifests
    return Path(__file__).resolve().parents[1] / "manifests"


def load_yaml_file(path: Path) -> Dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigurationError(f"Manifest must be a mapping/dict: {path}")
    return data


def load_manifest(name: str) -> Dict[str, Any]:
    """Load a YAML manifest shipped inside the package (manifests/<name>.yaml)."""
    return load_yaml_file(_manifest_dir() / f"{name}.yaml")


def load_packages_manifest() -> Dict[str, Any]:
    return load_manifest("packages")


def load_links_manifest() -> Dict[str, Any]:
    return load_manifest("links")
