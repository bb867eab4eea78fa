from __future__ import annotations


class ConfigurationError(ValueError):
    """Fatal setup problem: nothing downstream can run without it fixed."""
