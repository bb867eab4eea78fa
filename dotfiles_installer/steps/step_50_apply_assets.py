from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from ..context import InstallContext
from ..lib.assets import copy_contents
from ..lib.command import run_cmd
from ..lib.identity import run_as
from ..lib.manifests import load_links_manifest
from ..lib.wallpaper import apply_wallpaper, display_running, find_wallpaper, install_wallpaper, write_fehbg

logger = logging.getLogger(__name__)


class ApplyAssetsStep:
    step_id = "50_apply_assets"

    def run(self, ctx: InstallContext) -> InstallContext:
        copies = load_links_manifest().get("copies") or {}
        wallpapers_src = ctx.dotfiles_dir / str((copies.get("wallpapers") or {}).get("source", "wallpapers"))
        fonts_src = ctx.dotfiles_dir / str((copies.get("fonts") or {}).get("source", "FiraCode"))

        with run_as(ctx.identity):
            if wallpapers_src.is_dir():
                logger.info("Copying wallpapers")
                copy_contents(wallpapers_src, ctx.paths.wallpaper_dir, dry_run=ctx.dry_run)

            if fonts_src.is_dir():
                logger.info("Installing fonts")
                copy_contents(fonts_src, ctx.paths.fonts_dir, dry_run=ctx.dry_run)

            ctx.wallpaper = self._setup_wallpaper(ctx)

        # Subprocesses below drop to the user through sudo, outside run_as.
        if fonts_src.is_dir():
            r = run_cmd(
                ["fc-cache", "-fv", str(ctx.paths.fonts_dir)],
                check=False,
                user=ctx.identity,
                dry_run=ctx.dry_run,
            )
            if r.returncode != 0:
                ctx.warn("Font cache refresh failed")

        if ctx.wallpaper is not None and display_running():
            if not apply_wallpaper(ctx.wallpaper, user=ctx.identity, dry_run=ctx.dry_run):
                ctx.warnings.append("wallpaper not applied")

        return ctx

    def _setup_wallpaper(self, ctx: InstallContext) -> Optional[Path]:
        source = find_wallpaper(ctx.dotfiles_dir)
        if source is None:
            ctx.warn("No wallpaper file found")
            return None

        logger.info("Found wallpaper: %s", source.name)
        try:
            target = install_wallpaper(source, ctx.paths.wallpaper_dir, dry_run=ctx.dry_run)
            write_fehbg(ctx.paths.fehbg, target, dry_run=ctx.dry_run)
        except OSError as e:
            ctx.warn("Could not set up wallpaper: %s", e)
            return None

        logger.info("Wallpaper set up at: %s", target)
        return target
