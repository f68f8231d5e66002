from __future__ import annotations
import subprocess
from pathlib import Path

import pytest

from seven5.config import BuildConfig
from seven5.paths import PackageLayout

MAIN_SRC = "package main\n\nfunc main() {}\n"
UTIL_SRC = "package util\n\nfunc Helper() int { return 1 }\n"


def write(path: Path, text: str = "") -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


@pytest.fixture
def project(tmp_path: Path) -> Path:
    root = tmp_path / "proj"
    root.mkdir()
    return root


@pytest.fixture
def make_package(project: Path):
    """Create the directories a package needs; returns its layout."""
    def _make(package: str = "site", skip: tuple = ()) -> PackageLayout:
        layout = PackageLayout.for_package(project, package)
        for name in ("client", "static", "pages", "templates"):
            if name not in skip:
                getattr(layout, name).mkdir(parents=True, exist_ok=True)
        return layout
    return _make


@pytest.fixture
def config(project: Path) -> BuildConfig:
    return BuildConfig(project=project)


class FakeRun:
    """Stands in for subprocess.run; records every command."""

    def __init__(self, returncode=0, stdout=b"", stderr=b"", fail_on=None):
        self.calls = []
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr
        self.fail_on = fail_on

    def __call__(self, cmd, **kwargs):
        self.calls.append((cmd, kwargs))
        rc = self.returncode
        if self.fail_on is not None and self.fail_on(cmd):
            rc = 1
        out = self.stdout(cmd) if callable(self.stdout) else self.stdout
        return subprocess.CompletedProcess(cmd, rc, stdout=out, stderr=self.stderr)


@pytest.fixture
def fake_run(monkeypatch):
    def _install(**kwargs) -> FakeRun:
        fake = FakeRun(**kwargs)
        monkeypatch.setattr(subprocess, "run", fake)
        return fake
    return _install
