# seven5 - gb extension building browser clients and static pages
from __future__ import annotations

from .config import BuildConfig, load_config
from .orchestrator import PackageResult, build_all, build_package

__all__ = ["BuildConfig", "load_config", "PackageResult", "build_all", "build_package"]
