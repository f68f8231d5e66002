# paths.py - canonical subtree locations for a package inside a gb project
from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path

from .errors import LayoutError

SUPPORT_DIR = "support"


def client_path(project: Path, package: str) -> Path:
    return Path(project) / "src" / package / "client"


def static_path(project: Path, package: str) -> Path:
    return Path(project) / "src" / package / "static" / "en" / "web"


def pages_path(project: Path, package: str) -> Path:
    return Path(project) / "src" / package / "pages"


def templates_path(project: Path, package: str) -> Path:
    return pages_path(project, package) / "template"


def support_path(project: Path, package: str) -> Path:
    return templates_path(project, package) / SUPPORT_DIR


@dataclass(frozen=True)
class PackageLayout:
    """
    Every directory the build touches for one package. Always built through
    for_package() so two derivations of the same location are identical.
    """
    project: Path
    package: str
    client: Path
    static: Path
    pages: Path
    templates: Path

    @classmethod
    def for_package(cls, project: Path, package: str) -> "PackageLayout":
        return cls(
            project=Path(project),
            package=package,
            client=client_path(project, package),
            static=static_path(project, package),
            pages=pages_path(project, package),
            templates=templates_path(project, package),
        )

    def validate(self) -> None:
        """Raise LayoutError for the first expected directory that is missing."""
        checks = [
            ("client package", self.client),
            ("static/en/web directory", self.static),
            ("pages directory", self.pages),
            ("pages/template directory", self.templates),
        ]
        for what, path in checks:
            if not path.is_dir():
                raise LayoutError(what, path)
