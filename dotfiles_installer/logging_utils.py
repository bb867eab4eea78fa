from __future__ import annotations

import logging
import os
from pathlib import Path

DEFAULT_LOG_PATH = "/var/log/dotfiles-installer.log"
FALLBACK_LOG_NAME = "dotfiles-installer.log"

_CONFIGURED_ATTR = "_dotfiles_installer_log_path"


def configure_logging(
    log_path: str = DEFAULT_LOG_PATH,
    level: int = logging.INFO,
    also_console: bool = True,
) -> str:
    """Attach a file handler (and a console handler) to the root logger.

    /var/log is only writable once elevated; when the requested file cannot be
    opened the log goes to ./dotfiles-installer.log instead.

    Returns the actual file path being used. Calling it again is a no-op.
    """

    root = logging.getLogger()
    root.setLevel(level)

    existing = getattr(root, _CONFIGURED_ATTR, None)
    if existing:
        return existing

    fmt = logging.Formatter(
        fmt="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S%z",
    )

    try:
        Path(os.path.dirname(log_path) or ".").mkdir(parents=True, exist_ok=True)
        file_handler: logging.Handler = logging.FileHandler(log_path)
        chosen_path = log_path
    except OSError:
        chosen_path = str(Path.cwd() / FALLBACK_LOG_NAME)
        file_handler = logging.FileHandler(chosen_path)
    file_handler.setFormatter(fmt)
    root.addHandler(file_handler)

    if also_console:
        console = logging.StreamHandler()
        console.setFormatter(fmt)
        root.addHandler(console)

    setattr(root, _CONFIGURED_ATTR, chosen_path)

    logging.getLogger(__name__).info("Logging initialized (requested=%s, actual=%s)", log_path, chosen_path)
    return chosen_path
