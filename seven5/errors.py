# errors.py - failure kinds raised while building a package
from __future__ import annotations
from pathlib import Path
from typing import Optional, Sequence


class Seven5Error(Exception):
    """Base class for every build failure reported to the operator."""


class ConfigError(Seven5Error):
    pass


class LayoutError(Seven5Error):
    def __init__(self, what: str, expected: Path):
        self.what = what
        self.expected = Path(expected)
        super().__init__(f"Unable to find {what}, expected it to be {self.expected}")


class ScanError(Seven5Error):
    pass


class SourceParseError(Seven5Error):
    def __init__(self, path: Path, detail: str = ""):
        self.path = Path(path)
        msg = f"error parsing {self.path}"
        if detail:
            msg += f": {detail}"
        super().__init__(msg)


class PairingError(Seven5Error):
    def __init__(self, data_file: Path, expected: Path):
        self.data_file = Path(data_file)
        self.expected = Path(expected)
        super().__init__(
            f"unable to find corresponding html file for json file {self.data_file} "
            f"(expected {self.expected.name} in {self.expected.parent})"
        )


class ExternalProcessError(Seven5Error):
    def __init__(self, command: Sequence[str], returncode: Optional[int], output: str = "", reason: str = ""):
        self.command = list(command)
        self.returncode = returncode
        self.output = output
        detail = reason or f"exit status {returncode}"
        super().__init__(f"{self.command[0]} failed ({detail}): {' '.join(self.command)}")


class OutputWriteError(Seven5Error):
    pass


class InternalConsistencyError(RuntimeError):
    """A path broke an invariant the scanners guarantee; this is a bug, not bad input."""
