# outputs.py - map a discovered file onto the mirrored location under another root
from __future__ import annotations
import os
from pathlib import Path

from .errors import InternalConsistencyError


def relative_to_root(path: Path, root: Path) -> str:
    """
    Strip root from path and return the remainder. The path must be inside
    root; anything else means a scanner returned a file it never visited.
    """
    p = os.path.normpath(str(path))
    r = os.path.normpath(str(root))
    if p == r:
        return ""
    prefix = r if r.endswith(os.sep) else r + os.sep
    if not p.startswith(prefix):
        raise InternalConsistencyError(f"unable to understand path {p} in directory {r}")
    return p[len(prefix):]


def resolve_output_path(path: Path, root: Path, output_root: Path) -> Path:
    suffix = relative_to_root(path, root)
    if not suffix:
        return Path(os.path.normpath(str(output_root)))
    return Path(os.path.normpath(os.path.join(str(output_root), suffix)))
