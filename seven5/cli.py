# cli.py - `gb seven5 PACKAGE...` entry point
from __future__ import annotations
import argparse
import dataclasses
import logging
import sys
from typing import List, Optional

from jinja2 import DictLoader, Environment, StrictUndefined

from .config import PROJECT_ENV, check_executables, load_config
from .errors import ConfigError, InternalConsistencyError
from .orchestrator import PackageResult, build_all
from .scanner import GoMainClassifier

log = logging.getLogger("seven5")

INLINE_TEMPLATES = {
    "usage.txt.j2": """gb seven5 requires a package name to build client software from

usage: gb seven5 [-k] [-q] PACKAGE [PACKAGE ...]

For each PACKAGE under ${{ project_env }}/src:
  client/**/*.go        files declaring func main() are compiled with {{ compiler }}
  pages/template/**     each X.json + X.html pair is rendered with {{ pagegen }}
  static/en/web/        receives both, mirroring the source layout
""",
    "summary.txt.j2": """{% for r in results %}
{% if r.ok %}
{{ r.package }}: ok ({{ r.compiled|length }} compiled, {{ r.pages|length }} pages)
{% else %}
{{ r.package }}: FAILED during {{ r.failed_in }}: {{ r.error }}
{% endif %}
{% endfor %}
{% if skipped %}
not attempted: {{ skipped|join(", ") }}
{% endif %}
""",
}


def _env() -> Environment:
    return Environment(
        loader=DictLoader(INLINE_TEMPLATES),
        undefined=StrictUndefined,
        autoescape=False,
        trim_blocks=True,
        lstrip_blocks=True,
    )


def render_usage(compiler: str = "gopherjs", pagegen: str = "pagegen") -> str:
    return _env().get_template("usage.txt.j2").render(
        project_env=PROJECT_ENV, compiler=compiler, pagegen=pagegen
    )


def render_summary(results: List[PackageResult], skipped: List[str]) -> str:
    return _env().get_template("summary.txt.j2").render(results=results, skipped=skipped)


def setup_logging(verbose: bool) -> None:
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("[seven5] %(levelname)s %(message)s"))
    log.handlers[:] = [handler]
    log.setLevel(logging.INFO if verbose else logging.WARNING)
    log.propagate = False


def _parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="gb seven5",
        description="Compile client entry points and generate static pages for gb packages.",
    )
    ap.add_argument("packages", nargs="*", metavar="PACKAGE", help="Package path under $GB_PROJECT_DIR/src")
    ap.add_argument("-k", "--keep-going", action="store_true",
                    help="Continue with the next package after a failure (still exits 1)")
    ap.add_argument("-q", "--quiet", action="store_true", help="Only report warnings and errors")
    return ap


def main(argv: Optional[List[str]] = None) -> int:
    args = _parser().parse_args(argv)
    setup_logging(verbose=not args.quiet)

    try:
        config = load_config()
        config = dataclasses.replace(
            config,
            verbose=config.verbose and not args.quiet,
            keep_going=config.keep_going or args.keep_going,
        )
        setup_logging(config.verbose)
        check_executables(config)
        classifier = GoMainClassifier()
        classifier.load()
    except ConfigError as e:
        log.error("%s", e)
        return 1

    if not args.packages:
        print(render_usage(config.compiler, config.pagegen), end="")
        return 0

    try:
        results = build_all(args.packages, config, classifier)
    except InternalConsistencyError as e:
        log.critical("internal consistency violation (this is a bug in seven5): %s", e)
        return 1

    skipped = args.packages[len(results):]
    failed = [r for r in results if not r.ok]
    if config.verbose or failed:
        print(render_summary(results, skipped), end="")
    return 1 if failed or skipped else 0
