from .step_20_install_packages import InstallPackagesStep
from .step_30_detect_hardware import DetectHardwareStep
from .step_40_link_dotfiles import LinkDotfilesStep
from .step_50_apply_assets import ApplyAssetsStep
from .step_90_summary import SummaryStep

__all__ = [
    "InstallPackagesStep",
    "DetectHardwareStep",
    "LinkDotfilesStep",
    "ApplyAssetsStep",
    "SummaryStep",
]
