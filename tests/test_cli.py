import os
import stat
import sys

import pytest

from seven5.cli import main, render_summary, render_usage
from seven5.orchestrator import PackageResult

from conftest import MAIN_SRC, UTIL_SRC, write

pytestmark = pytest.mark.skipif(sys.platform == "win32", reason="fake tools are shell scripts")

FAKE_GOPHERJS = """#!/bin/sh
# build -m -o TARGET SOURCE
echo "gopherjs $*"
printf 'compiled %s\\n' "$5" > "$4"
"""

FAKE_PAGEGEN = """#!/bin/sh
# --support S --dir D --start HTML --json JSON
printf '<html>%s|%s</html>' "$6" "$8"
"""

FAILING_GOPHERJS = """#!/bin/sh
echo "main.go:1: syntax error"
exit 1
"""


def _tool(bindir, name, body):
    p = write(bindir / name, body)
    p.chmod(p.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)


@pytest.fixture
def env(tmp_path, project, monkeypatch):
    bindir = tmp_path / "bin"
    _tool(bindir, "gopherjs", FAKE_GOPHERJS)
    _tool(bindir, "pagegen", FAKE_PAGEGEN)
    monkeypatch.setenv("GB_PROJECT_DIR", str(project))
    monkeypatch.setenv("PATH", f"{bindir}{os.pathsep}{os.environ.get('PATH', '')}")
    for var in ("SEVEN5_COMPILER", "SEVEN5_PAGEGEN", "SEVEN5_VERBOSE", "SEVEN5_TIMEOUT"):
        monkeypatch.delenv(var, raising=False)
    return bindir


def _site(make_package, name="site"):
    layout = make_package(name)
    write(layout.client / "a" / "main.go", MAIN_SRC)
    write(layout.client / "b" / "util.go", UTIL_SRC)
    write(layout.templates / "x" / "page.json", "{}")
    write(layout.templates / "x" / "page.html", "<p/>")
    write(layout.templates / "support" / "nav.json", "{}")
    return layout


def test_end_to_end(env, make_package, capsys):
    layout = _site(make_package)

    assert main(["site"]) == 0

    compiled = layout.static / "a" / "main.go"
    assert compiled.read_text() == f"compiled {layout.client / 'a' / 'main.go'}\n"
    assert not (layout.static / "b").exists()
    assert (layout.static / "x" / "page.html").read_text() == (
        f"<html>{os.path.join('x', 'page.html')}|{os.path.join('x', 'page.json')}</html>"
    )
    out = capsys.readouterr().out
    assert "gopherjs build -m -o" in out
    assert "site: ok (1 compiled, 1 pages)" in out


def test_no_packages_prints_usage(env, capsys):
    assert main([]) == 0
    assert "requires a package name" in capsys.readouterr().out


def test_missing_project_env(env, monkeypatch, capsys):
    monkeypatch.delenv("GB_PROJECT_DIR")
    assert main(["site"]) == 1
    assert "GB_PROJECT_DIR" in capsys.readouterr().err


def test_missing_executable(env, monkeypatch, capsys):
    monkeypatch.setenv("SEVEN5_PAGEGEN", "pagegen-that-does-not-exist")
    assert main([]) == 1
    assert "pagegen-that-does-not-exist" in capsys.readouterr().err


def test_compiler_failure_exit_code_and_echo(env, make_package, capsys):
    _tool(env, "gopherjs", FAILING_GOPHERJS)
    _site(make_package)
    assert main(["site"]) == 1
    captured = capsys.readouterr()
    assert "main.go:1: syntax error" in captured.out
    assert "FAILED during compile" in captured.out


def test_first_failure_stops_run(env, make_package, capsys):
    make_package("broken", skip=("static",))
    good = _site(make_package, "good")
    assert main(["broken", "good"]) == 1
    assert not (good.static / "a" / "main.go").exists()
    out = capsys.readouterr().out
    assert "not attempted: good" in out


def test_keep_going(env, make_package, capsys):
    make_package("broken", skip=("static",))
    good = _site(make_package, "good")
    assert main(["--keep-going", "broken", "good"]) == 1
    assert (good.static / "a" / "main.go").exists()
    out = capsys.readouterr().out
    assert "broken: FAILED during validate" in out
    assert "good: ok" in out


def test_quiet_success_prints_nothing(env, make_package, capsys):
    _site(make_package)
    assert main(["-q", "site"]) == 0
    captured = capsys.readouterr()
    assert "site: ok" not in captured.out
    assert captured.err == ""


def test_render_helpers():
    assert "gopherjs" in render_usage()
    text = render_summary([PackageResult(package="p", state="done")], ["q"])
    assert "p: ok (0 compiled, 0 pages)" in text
    assert "not attempted: q" in text


def test_grammar_failure_exits_before_building(env, make_package, monkeypatch, capsys):
    import seven5.scanner as scanner

    def broken(_):
        raise RuntimeError("Failed to fetch manifest")
    monkeypatch.setattr(scanner, "Language", broken)
    layout = _site(make_package)

    assert main(["site"]) == 1
    assert "Go grammar" in capsys.readouterr().err
    assert not (layout.static / "a" / "main.go").exists()
