from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from .install_config import InstallConfig
from .lib.fragment import GeneratedFragment
from .lib.hwdetect import HardwareProfile
from .lib.identity import ResolvedPaths, UserIdentity
from .lib.links import LinkResult
from .lib.pkg import AudioStack, PackageOutcome

logger = logging.getLogger(__name__)


@dataclass
class InstallContext:
    """Everything one run knows, threaded explicitly from step to step."""

    config: InstallConfig
    identity: UserIdentity
    paths: ResolvedPaths
    dotfiles_dir: Path
    dry_run: bool = False
    update_system: bool = True

    package_outcomes: Dict[str, PackageOutcome] = field(default_factory=dict)
    audio_stack: Optional[AudioStack] = None
    profile: Optional[HardwareProfile] = None
    fragment: Optional[GeneratedFragment] = None
    link_results: List[LinkResult] = field(default_factory=list)
    wallpaper: Optional[Path] = None
    warnings: List[str] = field(default_factory=list)

    def warn(self, msg: str, *args: Any) -> None:
        logger.warning(msg, *args)
        self.warnings.append(msg % args if args else msg)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "user": self.identity.name,
            "home": str(self.paths.home),
            "dotfiles_dir": str(self.dotfiles_dir),
            "dry_run": self.dry_run,
            "packages": {name: outcome.value for name, outcome in self.package_outcomes.items()},
            "audio_stack": self.audio_stack.value if self.audio_stack else None,
            "hardware": self.profile.to_dict() if self.profile else None,
            "fragment": str(self.fragment.path) if self.fragment else None,
            "links": [r.to_dict() for r in self.link_results],
            "wallpaper": str(self.wallpaper) if self.wallpaper else None,
            "warnings": list(self.warnings),
        }
