"""Dotfiles installer for a Fedora i3 workstation (single pass, idempotent).

Core design goals:
- Strict stage order: packages, hardware, links, assets
- Re-running after a successful run changes nothing
- Conflicting files are backed up, never deleted
- Best-effort: a missing package or asset is a warning, not a failure
- Root for the system, the invoking user for everything under $HOME
"""

__all__ = []
