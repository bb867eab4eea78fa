from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from .context import InstallContext
from .errors import ConfigurationError
from .install_config import InstallConfig, load_install_config
from .lib.identity import UserIdentity, ensure_elevated, resolve_invoking_user, resolve_paths
from .logging_utils import DEFAULT_LOG_PATH, configure_logging
from .pipeline import run_pipeline
from .report import save_report
from .steps import (
    ApplyAssetsStep,
    DetectHardwareStep,
    InstallPackagesStep,
    LinkDotfilesStep,
    SummaryStep,
)

logger = logging.getLogger(__name__)


def build_steps():
    return [
        InstallPackagesStep(),
        DetectHardwareStep(),
        LinkDotfilesStep(),
        ApplyAssetsStep(),
        SummaryStep(),
    ]


def build_context(
    *,
    config: InstallConfig,
    identity: UserIdentity,
    dotfiles_dir: Optional[str] = None,
    dry_run: bool = False,
    update_system: Optional[bool] = None,
) -> InstallContext:
    src = Path(dotfiles_dir or config.dotfiles_dir or Path.cwd()).expanduser().resolve()
    if not src.is_dir():
        raise ConfigurationError(f"dotfiles directory not found: {src}")

    return InstallContext(
        config=config,
        identity=identity,
        paths=resolve_paths(identity),
        dotfiles_dir=src,
        dry_run=dry_run,
        update_system=config.update_system if update_system is None else update_system,
    )


def run(
    ctx: InstallContext,
    *,
    report_path: Optional[str] = None,
    stop_after: Optional[str] = None,
) -> InstallContext:
    """Run every stage in order and optionally write the run report."""

    logger.info("Dotfiles installation for %s from %s", ctx.identity.name, ctx.dotfiles_dir)
    result = run_pipeline(ctx=ctx, steps=build_steps(), stop_after=stop_after)
    if report_path:
        report = result.ctx.to_dict()
        report["ran_steps"] = result.ran_steps
        save_report(report_path, report)
    return result.ctx


def main(argv: Optional[list[str]] = None) -> int:
    args_list = list(sys.argv[1:] if argv is None else argv)

    p = argparse.ArgumentParser(prog="dotfiles-installer", description="Provision an i3 workstation and link dotfiles")
    p.add_argument("--dotfiles-dir", default=None, help="Dotfiles source tree (default: current directory)")
    p.add_argument("--config", default=None, help="Optional YAML config file")
    p.add_argument("--log", default=None, help=f"Path to installer log (default: {DEFAULT_LOG_PATH})")
    p.add_argument("--report", default=None, help="Write a run report (json|yaml)")
    p.add_argument("--stop-after", default=None, help="Stop after step_id (e.g. 30_detect_hardware)")
    p.add_argument("--no-update", dest="update", action="store_false", default=None, help="Skip the dnf system update")
    p.add_argument("--dry-run", action="store_true", help="Log actions without changing anything")

    args = p.parse_args(args_list)

    ensure_elevated(args_list)

    try:
        config = load_install_config(args.config)
        configure_logging(log_path=args.log or config.log_path or DEFAULT_LOG_PATH)
        identity = resolve_invoking_user()
        ctx = build_context(
            config=config,
            identity=identity,
            dotfiles_dir=args.dotfiles_dir,
            dry_run=args.dry_run,
            update_system=args.update,
        )
    except ConfigurationError as e:
        logger.error("%s", e)
        return 1

    run(ctx, report_path=args.report, stop_after=args.stop_after)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
