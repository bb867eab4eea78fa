from __future__ import annotations

import logging

from ..context import InstallContext
from ..lib.fragment import GeneratedFragment, render_fragment, write_fragment
from ..lib.hwdetect import detect_graphics, list_display_devices
from ..lib.identity import run_as

logger = logging.getLogger(__name__)


class DetectHardwareStep:
    step_id = "30_detect_hardware"

    def run(self, ctx: InstallContext) -> InstallContext:
        logger.info("Detecting graphics chipset")
        ctx.profile = detect_graphics(list_display_devices(dry_run=ctx.dry_run))
        if ctx.profile.chipset == "unknown":
            ctx.warnings.append("graphics chipset not recognized")
        if not ctx.profile.device and ctx.profile.method != "xbacklight":
            ctx.warnings.append("no backlight device found")

        ctx.fragment = GeneratedFragment(path=ctx.paths.fragment_file, text=render_fragment(ctx.profile))
        try:
            with run_as(ctx.identity):
                write_fragment(ctx.fragment, dry_run=ctx.dry_run)
        except OSError as e:
            ctx.warn("Could not write %s: %s", ctx.fragment.path, e)
        return ctx
