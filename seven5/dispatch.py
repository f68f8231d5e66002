# dispatch.py - run the external compiler and page generator, one job at a time
from __future__ import annotations
import logging
import os
import subprocess
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Sequence, TextIO

from .config import BuildConfig
from .errors import ExternalProcessError, OutputWriteError
from .outputs import resolve_output_path
from .pairing import TemplatePair
from .paths import SUPPORT_DIR, PackageLayout
from .scanner import EntryPoint

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class CompileJob:
    source: Path
    target: Path


@dataclass(frozen=True)
class PageJob:
    pair: TemplatePair
    target: Path


def _decode(b: Optional[bytes]) -> str:
    return (b or b"").decode("utf-8", errors="replace")


def _run(cmd: Sequence[str], config: BuildConfig, **kwargs) -> subprocess.CompletedProcess:
    try:
        return subprocess.run(list(cmd), timeout=config.timeout, **kwargs)
    except FileNotFoundError as e:
        raise ExternalProcessError(cmd, None, reason=f"unable to start process: {e}") from e
    except subprocess.TimeoutExpired as e:
        raise ExternalProcessError(
            cmd, None, output=_decode(e.output), reason=f"timed out after {config.timeout}s"
        ) from e


def compile_env(config: BuildConfig) -> Dict[str, str]:
    """Inherited environment with GOPATH covering the project and its vendor tree."""
    env = dict(os.environ)
    env["GOPATH"] = f"{config.project}{os.pathsep}{config.vendor}"
    return env


def compile_command(config: BuildConfig, job: CompileJob) -> List[str]:
    return [config.compiler, "build", "-m", "-o", str(job.target), str(job.source)]


def compile_entry_points(
    entries: Sequence[EntryPoint],
    layout: PackageLayout,
    config: BuildConfig,
    out: Optional[TextIO] = None,
) -> List[CompileJob]:
    """
    Compile each entry point into static/en/web, mirroring its place under
    client/. The compiler's combined output is always echoed; the first
    non-zero exit stops the remaining entries.
    """
    out = out or sys.stdout
    env = compile_env(config)
    done: List[CompileJob] = []
    for ep in entries:
        job = CompileJob(source=ep.path, target=resolve_output_path(ep.path, layout.client, layout.static))
        cmd = compile_command(config, job)
        log.info("compiling %s -> %s", job.source, job.target)
        try:
            job.target.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise OutputWriteError(f"unable to create directory {job.target.parent}: {e}") from e

        try:
            proc = _run(cmd, config, env=env, stdout=subprocess.PIPE, stderr=subprocess.STDOUT)
        except ExternalProcessError as e:
            out.write(e.output)
            out.flush()
            raise
        output = _decode(proc.stdout)
        out.write(output)
        out.flush()
        if proc.returncode != 0:
            raise ExternalProcessError(cmd, proc.returncode, output)
        done.append(job)
    return done


def page_command(config: BuildConfig, templates: Path, pair: TemplatePair) -> List[str]:
    # pagegen joins --start and --json onto --dir, so both stay relative to the template root
    markup, data = pair.relative_to(templates)
    return [
        config.pagegen,
        "--support", SUPPORT_DIR,
        "--dir", str(templates),
        "--start", markup,
        "--json", data,
    ]


def generate_pages(
    pairs: Sequence[TemplatePair],
    layout: PackageLayout,
    config: BuildConfig,
    err: Optional[TextIO] = None,
) -> List[PageJob]:
    """Run pagegen for every pair and write its stdout to the mirrored html file."""
    err = err or sys.stderr
    done: List[PageJob] = []
    for pair in pairs:
        job = PageJob(pair=pair, target=resolve_output_path(pair.markup_file, layout.templates, layout.static))
        cmd = page_command(config, layout.templates, pair)
        log.info("generating %s from %s", job.target, pair.data_file)
        proc = _run(cmd, config, stdout=subprocess.PIPE, stderr=subprocess.PIPE)
        if proc.returncode != 0:
            stderr = _decode(proc.stderr)
            err.write(stderr + "\n")
            err.flush()
            raise ExternalProcessError(cmd, proc.returncode, stderr)

        try:
            job.target.parent.mkdir(parents=True, exist_ok=True)
            with open(job.target, "wb") as f:
                f.write(proc.stdout or b"")
        except OSError as e:
            raise OutputWriteError(f"unable to create output file {job.target}: {e}") from e
        done.append(job)
    return done
