# config.py - project root, external tools and run policy
from __future__ import annotations
import os
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from .errors import ConfigError

PROJECT_ENV = "GB_PROJECT_DIR"
COMPILER_ENV = "SEVEN5_COMPILER"
PAGEGEN_ENV = "SEVEN5_PAGEGEN"
VERBOSE_ENV = "SEVEN5_VERBOSE"
TIMEOUT_ENV = "SEVEN5_TIMEOUT"

CONFIG_FILE = "seven5.yaml"

DEFAULT_COMPILER = "gopherjs"
DEFAULT_PAGEGEN = "pagegen"


@dataclass(frozen=True)
class BuildConfig:
    project: Path
    compiler: str = DEFAULT_COMPILER
    pagegen: str = DEFAULT_PAGEGEN
    verbose: bool = True
    # seconds per external invocation; None waits forever
    timeout: Optional[float] = None
    # False: stop the run at the first failed package
    keep_going: bool = False

    @property
    def vendor(self) -> Path:
        return self.project / "vendor"


def _to_bool(v: Any) -> bool:
    if isinstance(v, bool):
        return v
    return str(v).strip().lower() in {"1", "true", "yes", "y", "on"}


def _to_timeout(v: Any) -> Optional[float]:
    if v is None or str(v).strip() == "":
        return None
    try:
        t = float(v)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"invalid timeout {v!r}") from e
    return t if t > 0 else None


def _load_file(project: Path) -> Dict[str, Any]:
    path = project / CONFIG_FILE
    if not path.exists():
        return {}
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"unable to read {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"{path} must contain a mapping")
    return data


def load_config(environ: Optional[Mapping[str, str]] = None) -> BuildConfig:
    """Environment first, then <project>/seven5.yaml, then built-in defaults."""
    env = os.environ if environ is None else environ
    project = env.get(PROJECT_ENV, "").strip()
    if not project:
        raise ConfigError(f"gb extensions should be launched with {PROJECT_ENV} set")
    root = Path(project).resolve()

    data = _load_file(root)
    compiler = env.get(COMPILER_ENV) or data.get("compiler") or DEFAULT_COMPILER
    pagegen = env.get(PAGEGEN_ENV) or data.get("pagegen") or DEFAULT_PAGEGEN
    verbose = env.get(VERBOSE_ENV, data.get("verbose", True))
    timeout = env.get(TIMEOUT_ENV, data.get("timeout"))

    return BuildConfig(
        project=root,
        compiler=str(compiler),
        pagegen=str(pagegen),
        verbose=_to_bool(verbose),
        timeout=_to_timeout(timeout),
        keep_going=_to_bool(data.get("keep_going", False)),
    )


def check_executables(config: BuildConfig) -> None:
    for tool in (config.compiler, config.pagegen):
        if shutil.which(tool) is None:
            raise ConfigError(f"{tool} is not installed or not on PATH")
