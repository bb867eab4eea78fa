from __future__ import annotations

import logging

from ..context import InstallContext
from ..lib.manifests import load_packages_manifest
from ..lib.pkg import (
    AudioStack,
    PackageOutcome,
    audio_stack_packages,
    catalog_packages,
    detect_audio_stack,
    dnf_update,
    ensure_installed,
)

logger = logging.getLogger(__name__)


class InstallPackagesStep:
    step_id = "20_install_packages"

    def run(self, ctx: InstallContext) -> InstallContext:
        manifest = load_packages_manifest()

        if ctx.update_system:
            logger.info("Updating system packages")
            if not dnf_update(dry_run=ctx.dry_run):
                ctx.warn("System update failed, continuing with installed package set")

        for package in catalog_packages(manifest, ctx.config.extra_packages):
            self._install(ctx, package)

        # Evaluated once: exactly one of install PipeWire, install PulseAudio, or nothing.
        stack = detect_audio_stack(ctx.identity)
        ctx.audio_stack = stack
        if stack is AudioStack.NONE:
            logger.info("Audio system already available")
        else:
            logger.info("Installing %s audio stack", stack.value)
            for package in audio_stack_packages(manifest, stack):
                self._install(ctx, package)

        failed = [p for p, o in ctx.package_outcomes.items() if o is PackageOutcome.FAILED_SKIPPED]
        logger.info(
            "Packages done (%d total, %d failed)",
            len(ctx.package_outcomes),
            len(failed),
        )
        return ctx

    def _install(self, ctx: InstallContext, package: str) -> None:
        outcome = ensure_installed(package, dry_run=ctx.dry_run)
        ctx.package_outcomes[package] = outcome
        if outcome is PackageOutcome.FAILED_SKIPPED:
            ctx.warnings.append(f"package {package} not installed")
