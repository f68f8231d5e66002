# scanner.py - find the client sources that declare a top-level main()
from __future__ import annotations
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator, List, Optional

import tree_sitter_go
from tree_sitter import Language, Parser

from .errors import ConfigError, ScanError, SourceParseError

log = logging.getLogger(__name__)

SOURCE_SUFFIX = ".go"

# everything go/parser accepts at package scope
TOP_LEVEL_DECLS = frozenset({
    "package_clause",
    "import_declaration",
    "function_declaration",
    "method_declaration",
    "const_declaration",
    "var_declaration",
    "type_declaration",
    "comment",
})


@dataclass(frozen=True)
class EntryPoint:
    path: Path
    is_entry: bool


class SourceClassifier(ABC):
    """Decides whether a source file is an independently compilable entry point."""

    suffix = SOURCE_SUFFIX

    def load(self) -> None:
        """Acquire whatever the classifier needs before the first file is seen."""

    @abstractmethod
    def is_entry_point(self, path: Path, source: bytes) -> bool:
        ...


def load_go_language() -> Language:
    try:
        return Language(tree_sitter_go.language())
    except Exception as e:
        raise ConfigError(f"unable to load the Go grammar: {e}") from e


class GoMainClassifier(SourceClassifier):
    """
    Entry point == the file declares `func main` at package scope.
    Methods named main and function literals don't count. The tree-sitter
    grammar is looser than the Go compiler, so the top level is checked
    by hand: a package clause first, declarations only after it.
    """

    def __init__(self, entry_name: str = "main"):
        self.entry_name = entry_name
        self._parser: Optional[Parser] = None

    def load(self) -> None:
        self._get_parser()

    def _get_parser(self) -> Parser:
        if self._parser is None:
            parser = Parser()
            parser.language = load_go_language()
            self._parser = parser
        return self._parser

    def is_entry_point(self, path: Path, source: bytes) -> bool:
        tree = self._get_parser().parse(source)
        root = tree.root_node
        if root.has_error:
            raise SourceParseError(path, _describe_error(root))
        _check_top_level(path, root)
        for decl in root.named_children:
            if decl.type != "function_declaration":
                continue
            name = decl.child_by_field_name("name")
            if name is not None and source[name.start_byte:name.end_byte].decode("utf-8", errors="replace") == self.entry_name:
                return True
        return False


def _check_top_level(path: Path, root) -> None:
    decls = [n for n in root.named_children if n.type != "comment"]
    if not decls or decls[0].type != "package_clause":
        raise SourceParseError(path, "expected 'package' clause")
    for i, node in enumerate(decls):
        if node.type not in TOP_LEVEL_DECLS or (node.type == "package_clause" and i > 0):
            line, col = node.start_point
            raise SourceParseError(
                path, f"non-declaration statement outside function body at line {line + 1}, column {col + 1}"
            )


def _describe_error(root) -> str:
    # depth-first, first ERROR or MISSING node wins
    stack = [root]
    while stack:
        node = stack.pop()
        if node.type == "ERROR" or node.is_missing:
            line, col = node.start_point
            return f"syntax error at line {line + 1}, column {col + 1}"
        stack.extend(reversed(node.children))
    return "syntax error"


def walk_files(root: Path, prune: Iterable[str] = ()) -> Iterator[Path]:
    """
    Yield regular files under root in lexical order. Symlinked directories
    are not followed; directories named in prune are not entered.
    """
    prune = frozenset(prune)
    try:
        entries = sorted(Path(root).iterdir(), key=lambda p: p.name)
    except OSError as e:
        raise ScanError(f"error walking {root}: {e}") from e
    for entry in entries:
        if entry.is_dir() and not entry.is_symlink():
            if entry.name not in prune:
                yield from walk_files(entry, prune)
        elif entry.is_file():
            yield entry


def find_sources(root: Path, suffix: str = SOURCE_SUFFIX) -> List[Path]:
    return [p for p in walk_files(root) if p.name.endswith(suffix)]


def classify(path: Path, classifier: SourceClassifier) -> EntryPoint:
    try:
        source = path.read_bytes()
    except OSError as e:
        raise ScanError(f"unable to read {path}: {e}") from e
    return EntryPoint(path=path, is_entry=classifier.is_entry_point(path, source))


def scan_entry_points(root: Path, classifier: Optional[SourceClassifier] = None) -> List[EntryPoint]:
    """
    Classify every source under root and return the entry points in walk order.
    Any unreadable or unparsable file aborts the whole scan.
    """
    classifier = classifier or GoMainClassifier()
    found: List[EntryPoint] = []
    for path in find_sources(root, classifier.suffix):
        ep = classify(path, classifier)
        log.debug("%s: entry=%s", path, ep.is_entry)
        if ep.is_entry:
            found.append(ep)
    return found
