# pairing.py - match every page description (.json) with its markup (.html)
from __future__ import annotations
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Tuple

from .errors import PairingError
from .outputs import relative_to_root
from .paths import SUPPORT_DIR
from .scanner import walk_files

log = logging.getLogger(__name__)

DATA_SUFFIX = ".json"
MARKUP_SUFFIX = ".html"


@dataclass(frozen=True)
class TemplatePair:
    data_file: Path
    markup_file: Path

    def relative_to(self, root: Path) -> Tuple[str, str]:
        """(markup, data) relative to the template root."""
        return relative_to_root(self.markup_file, root), relative_to_root(self.data_file, root)


def find_template_pairs(root: Path) -> List[TemplatePair]:
    """
    Collect every (json, html) pair under root, skipping support/ directories.
    Raises PairingError on the first description without markup, before
    anything is handed to the page generator.
    """
    pairs: List[TemplatePair] = []
    for path in walk_files(root, prune=(SUPPORT_DIR,)):
        if not path.name.endswith(DATA_SUFFIX):
            continue
        base = path.name[: -len(DATA_SUFFIX)]
        markup = path.parent / (base + MARKUP_SUFFIX)
        if not markup.is_file():
            raise PairingError(path, markup)
        log.debug("pair %s -> %s", path, markup)
        pairs.append(TemplatePair(data_file=path, markup_file=markup))
    return pairs
