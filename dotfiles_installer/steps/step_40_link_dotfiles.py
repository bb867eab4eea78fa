from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

from ..context import InstallContext
from ..lib.fragment import FRAGMENT_NAME, write_fragment
from ..lib.identity import run_as
from ..lib.links import LinkStatus, build_link_specs, converge, log_link_result
from ..lib.manifests import load_links_manifest
from ..lib.textedit import ensure_directive

logger = logging.getLogger(__name__)

INCLUDE_MARKER = f"include {FRAGMENT_NAME}"
INCLUDE_ANCHOR = "exec --no-startup-id ~/.fehbg"
INCLUDE_BLOCK = ["# Include auto-generated audio and brightness control", INCLUDE_MARKER]

ALIASES_MARKER = "source ~/.aliases"
ALIASES_BLOCK = ["# Source aliases", ALIASES_MARKER]


class LinkDotfilesStep:
    step_id = "40_link_dotfiles"

    def run(self, ctx: InstallContext) -> InstallContext:
        entries = load_links_manifest().get("links") or []
        specs = build_link_specs(entries, dotfiles_dir=ctx.dotfiles_dir, home=ctx.paths.home)

        with run_as(ctx.identity):
            for spec in specs:
                result = converge(spec, dry_run=ctx.dry_run)
                log_link_result(result)
                if result.status is LinkStatus.FAILED:
                    ctx.warnings.append(f"could not link {spec.destination}: {result.error}")
                ctx.link_results.append(result)

            self._restore_fragment(ctx)
            bashrc = ctx.paths.home / ".bashrc"
            if self._linked(ctx, bashrc):
                self._ensure(ctx, bashrc, ALIASES_MARKER, ALIASES_BLOCK, None)
            self._ensure(ctx, ctx.paths.wm_config_file, INCLUDE_MARKER, INCLUDE_BLOCK, INCLUDE_ANCHOR)

        applied = sum(1 for r in ctx.link_results if r.applied)
        logger.info("Links done (%d specs, %d changed)", len(ctx.link_results), applied)
        return ctx

    def _linked(self, ctx: InstallContext, destination: Path) -> bool:
        # True when destination is managed by a dotfiles source on this run.
        return any(
            r.spec.destination == destination and r.status not in (LinkStatus.SKIPPED_NO_SOURCE, LinkStatus.FAILED)
            for r in ctx.link_results
        )

    def _restore_fragment(self, ctx: InstallContext) -> None:
        # Linking the wm directory moves an earlier real directory (and the
        # fragment written into it) aside; put the fragment back behind the link.
        fragment = ctx.fragment
        if fragment is None or ctx.dry_run:
            return
        try:
            if fragment.path.is_file() and fragment.path.read_text(encoding="utf-8") == fragment.text:
                return
            write_fragment(fragment)
        except (OSError, UnicodeDecodeError) as e:
            ctx.warn("Could not write %s: %s", fragment.path, e)

    def _ensure(
        self,
        ctx: InstallContext,
        path: Path,
        marker: str,
        block: List[str],
        anchor: Optional[str],
    ) -> None:
        if not path.is_file():
            return
        try:
            ensure_directive(path, marker=marker, directive=block, anchor=anchor, dry_run=ctx.dry_run)
        except (OSError, UnicodeDecodeError) as e:
            ctx.warn("Could not update %s: %s", path, e)
