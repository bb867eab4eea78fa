from __future__ import annotations

import logging

from ..context import InstallContext
from ..lib.links import LinkStatus

logger = logging.getLogger(__name__)


class SummaryStep:
    step_id = "90_summary"

    def run(self, ctx: InstallContext) -> InstallContext:
        profile = ctx.profile
        logger.info("Installation complete")
        if profile is not None:
            logger.info("Graphics: %s", profile.chipset)
            logger.info("Brightness device: %s", profile.device or "auto")
        if ctx.fragment is not None:
            logger.info("Audio/Brightness config: %s", ctx.fragment.path)

        counts: dict = {}
        for r in ctx.link_results:
            counts[r.status.value] = counts.get(r.status.value, 0) + 1
        for status in LinkStatus:
            if status.value in counts:
                logger.info("Links %s: %d", status.value, counts[status.value])

        if ctx.warnings:
            logger.warning("%d warning(s) during the run:", len(ctx.warnings))
            for w in ctx.warnings:
                logger.warning("  - %s", w)

        logger.info("Next steps: restart i3 (Mod+Shift+R) or reboot, then 'source ~/.bashrc'")
        return ctx
