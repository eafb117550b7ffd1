"""Parsing of cargo's `--message-format json` output.

Cargo writes one JSON object per line, each with a `reason` field. Only
two reasons matter for link analysis:

    build-script-executed  carries the `cargo:rustc-link-lib` declarations
    compiler-artifact      carries the path of a produced executable, if any

Every other reason (compiler-message, build-finished, and whatever later
cargo versions add) is kept as an OtherMessage and ignored by interpret().
A line that is not a well-formed message is an error: the stream comes
straight from cargo, so a bad line means something upstream is broken.
"""

import json
import sys
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .constants import REASON_BUILD_SCRIPT_EXECUTED, REASON_COMPILER_ARTIFACT
from .linked_libs import LinkedLibs
from .models import Metadata, parse_link_descriptor


class MessageParseError(Exception):
    """Raised when a line of build output is not a valid cargo message."""

    def __init__(self, message: str, line_number: int | None = None):
        self.line_number = line_number
        if line_number is not None:
            message = f"line {line_number}: {message}"
        super().__init__(message)


@dataclass
class BuildScriptExecuted:
    """A build script finished running."""

    linked_libs: list[str] = field(default_factory=list)
    package_id: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "BuildScriptExecuted":
        if "linked_libs" not in data:
            raise MessageParseError("missing `linked_libs` field")
        linked_libs = data["linked_libs"]
        if not isinstance(linked_libs, list) or not all(isinstance(lib, str) for lib in linked_libs):
            raise MessageParseError("`linked_libs` must be a list of strings")
        return cls(linked_libs=list(linked_libs), package_id=data.get("package_id"))


@dataclass
class CompilerArtifact:
    """rustc produced an artifact; `executable` is set for binaries."""

    executable: Path | None = None
    package_id: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CompilerArtifact":
        executable = data.get("executable")
        if executable is not None and not isinstance(executable, str):
            raise MessageParseError("`executable` must be a string or null")
        return cls(
            executable=Path(executable) if executable is not None else None,
            package_id=data.get("package_id"),
        )


@dataclass
class OtherMessage:
    """Any message whose reason is not needed for link analysis."""

    reason: str


BuildEvent = BuildScriptExecuted | CompilerArtifact | OtherMessage


def parse_message(line: str) -> BuildEvent:
    """
    Decode one line of cargo JSON output.

    Raises:
        MessageParseError: if the line is not a JSON object with a string
            `reason`, or a known message has fields of the wrong type
    """
    try:
        data = json.loads(line)
    except json.JSONDecodeError as e:
        raise MessageParseError(f"invalid JSON: {e}") from e

    if not isinstance(data, dict):
        raise MessageParseError(f"expected a JSON object, got {type(data).__name__}")

    reason = data.get("reason")
    if not isinstance(reason, str):
        raise MessageParseError("missing `reason` field")

    if reason == REASON_BUILD_SCRIPT_EXECUTED:
        return BuildScriptExecuted.from_dict(data)
    if reason == REASON_COMPILER_ARTIFACT:
        return CompilerArtifact.from_dict(data)
    return OtherMessage(reason=reason)


def parse_stream(lines: Iterable[str]) -> Iterator[BuildEvent]:
    """Lazily parse build messages, skipping blank lines."""
    for line_number, line in enumerate(lines, 1):
        if not line.strip():
            continue
        try:
            yield parse_message(line)
        except MessageParseError as e:
            raise MessageParseError(str(e), line_number=line_number) from e


def interpret(events: Iterable[BuildEvent], verbose: bool = False) -> Metadata:
    """
    Collect linked libraries and executables from a stream of build events.

    The whole stream is consumed; executables are kept in the order cargo
    reported them.
    """
    libs = LinkedLibs()
    metadata = Metadata(linked_libs=libs)

    for event in events:
        if isinstance(event, BuildScriptExecuted):
            if not event.linked_libs:
                continue
            for token in event.linked_libs:
                descriptor = parse_link_descriptor(token)
                added = libs.add_descriptor(descriptor)
                if verbose and added:
                    print(f"[messages] {event.package_id or '?'}: links {token}", file=sys.stderr)
        elif isinstance(event, CompilerArtifact):
            if event.executable is not None:
                metadata.executables.append(event.executable)
                if verbose:
                    print(f"[messages] executable: {event.executable}", file=sys.stderr)

    return metadata


def read_metadata(lines: Iterable[str], verbose: bool = False) -> Metadata:
    """Parse and interpret cargo JSON output in one pass."""
    return interpret(parse_stream(lines), verbose=verbose)
