"""
mexd.version: semantic version string and a small metadata helper.

This module is intentionally tiny and dependency-free so it can be imported very early
during process startup (including in packaging or frozen environments).

Usage:
    from mexd.version import __version__, version_metadata
"""

from __future__ import annotations

import os
from functools import lru_cache
from typing import Dict

# Bump this when making a tagged release. Use semver (major.minor.patch).
__version__ = "0.1.0"


@lru_cache(maxsize=1)
def version_metadata() -> Dict[str, str]:
    """
    Structured version info for logs / diagnostics.

    Keys:
        version     -> semantic version (from __version__)
        describe    -> MEXD_GIT_DESCRIBE override, or "<version>+local"
    """
    override = os.getenv("MEXD_GIT_DESCRIBE")
    return {
        "version": __version__,
        "describe": override.strip() if override else f"{__version__}+local",
    }


__all__ = ["__version__", "version_metadata"]
