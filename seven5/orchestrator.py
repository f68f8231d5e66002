# orchestrator.py - validate, compile, paginate each package in argument order
from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, TextIO

from .config import BuildConfig
from .dispatch import CompileJob, PageJob, compile_entry_points, generate_pages
from .errors import Seven5Error
from .pairing import find_template_pairs
from .paths import PackageLayout
from .scanner import SourceClassifier, scan_entry_points

log = logging.getLogger(__name__)

VALIDATE = "validate"
COMPILE = "compile"
PAGINATE = "paginate"
DONE = "done"
FAILED = "failed"


@dataclass
class PackageResult:
    package: str
    state: str = VALIDATE
    # state the package was in when it failed
    failed_in: Optional[str] = None
    compiled: List[CompileJob] = field(default_factory=list)
    pages: List[PageJob] = field(default_factory=list)
    error: Optional[Seven5Error] = None

    @property
    def ok(self) -> bool:
        return self.state == DONE


def build_package(
    package: str,
    config: BuildConfig,
    classifier: Optional[SourceClassifier] = None,
    out: Optional[TextIO] = None,
    err: Optional[TextIO] = None,
) -> PackageResult:
    """
    Run one package through validate -> compile -> paginate. Build failures
    end in the failed state; InternalConsistencyError is not caught.
    """
    result = PackageResult(package=package)
    layout = PackageLayout.for_package(config.project, package)
    try:
        layout.validate()

        result.state = COMPILE
        entries = scan_entry_points(layout.client, classifier)
        log.info("%s: %d entry point(s) in %s", package, len(entries), layout.client)
        result.compiled = compile_entry_points(entries, layout, config, out=out)

        result.state = PAGINATE
        pairs = find_template_pairs(layout.templates)
        log.info("%s: %d page template(s) in %s", package, len(pairs), layout.templates)
        result.pages = generate_pages(pairs, layout, config, err=err)
    except Seven5Error as e:
        log.error("%s: %s", package, e)
        result.failed_in = result.state
        result.state = FAILED
        result.error = e
        return result

    result.state = DONE
    return result


def build_all(
    packages: Iterable[str],
    config: BuildConfig,
    classifier: Optional[SourceClassifier] = None,
    out: Optional[TextIO] = None,
    err: Optional[TextIO] = None,
) -> List[PackageResult]:
    """
    Build packages in order. Unless config.keep_going is set, the first
    failed package ends the run and later packages are not attempted.
    """
    results: List[PackageResult] = []
    for package in packages:
        result = build_package(package, config, classifier, out=out, err=err)
        results.append(result)
        if not result.ok and not config.keep_going:
            break
    return results
