"""Combine build-script link declarations with binary-level link tables."""

import sys
from collections.abc import Callable, Iterable
from pathlib import Path

from .binary import extract
from .constants import EXECUTABLE_LIBS_HEADER, RUSTC_LIBS_HEADER, SELF_LIBRARY_NAME
from .messages import read_metadata
from .models import Metadata

Extractor = Callable[[Path], list[str]]


def binary_dependencies(path: Path, extractor: Extractor | None = None) -> list[str]:
    """Libraries an executable links against, sorted, without "self"."""
    libs = (extractor or extract)(path)
    return sorted({lib for lib in libs if lib != SELF_LIBRARY_NAME})


class MetadataAnalyzer:
    """
    Produces the analysis report for one build.

    Binary inspection runs for every executable before anything is
    returned, so a failure on any one of them fails the whole report.
    """

    def __init__(
        self,
        metadata: Metadata,
        inspect_binaries: bool = True,
        extractor: Extractor | None = None,
        verbose: bool = False,
    ):
        self.metadata = metadata
        self.inspect_binaries = inspect_binaries
        self.extractor = extractor
        self.verbose = verbose

    def executable_dependencies(self) -> list[tuple[Path, list[str]]]:
        """Binary-level dependencies per executable, in build order."""
        if not self.inspect_binaries:
            return []

        results = []
        for executable in self.metadata.executables:
            if self.verbose:
                print(f"[analyzer] Inspecting {executable}", file=sys.stderr)
            results.append((executable, binary_dependencies(executable, self.extractor)))
        return results

    def render(self) -> str:
        """Render the text report."""
        sections = self.executable_dependencies()

        lines = [RUSTC_LIBS_HEADER, self.metadata.linked_libs.render()]
        for executable, libs in sections:
            lines.append(EXECUTABLE_LIBS_HEADER.format(name=executable.name))
            lines.extend(f" - {lib}" for lib in libs)
        return "\n".join(lines) + "\n"

    def to_dict(self) -> dict:
        """Report as a JSON-serializable dict."""
        result = self.metadata.to_dict()
        if self.inspect_binaries:
            result["binaries"] = [
                {"executable": str(executable), "libraries": libs}
                for executable, libs in self.executable_dependencies()
            ]
        return result


def build_report(
    metadata: Metadata,
    inspect_binaries: bool = True,
    extractor: Extractor | None = None,
) -> str:
    """Render the text report for already collected metadata."""
    return MetadataAnalyzer(metadata, inspect_binaries=inspect_binaries, extractor=extractor).render()


def analyze(
    lines: Iterable[str],
    inspect_binaries: bool = True,
    extractor: Extractor | None = None,
) -> str:
    """Read cargo JSON output and render the report."""
    return build_report(read_metadata(lines), inspect_binaries=inspect_binaries, extractor=extractor)
