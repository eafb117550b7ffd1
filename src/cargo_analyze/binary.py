"""Extraction of linked libraries from compiled executables.

Only ELF and thin Mach-O images are supported, since those are what cargo
produces on Linux and macOS hosts. Other containers are recognized and
rejected with UnsupportedFormat so callers can tell "not a supported
binary" apart from "corrupt file".
"""

import io
import sys
from enum import Enum
from pathlib import Path

import lief

from .constants import SELF_LIBRARY_NAME

# Magic numbers, as they appear in the first bytes of the file
ELF_MAGIC = b"\x7fELF"
MACHO_MAGICS = {
    b"\xfe\xed\xfa\xce",  # MH_MAGIC
    b"\xce\xfa\xed\xfe",  # MH_CIGAM
    b"\xfe\xed\xfa\xcf",  # MH_MAGIC_64
    b"\xcf\xfa\xed\xfe",  # MH_CIGAM_64
}
FAT_MAGICS = {
    b"\xca\xfe\xba\xbe",  # FAT_MAGIC
    b"\xca\xfe\xba\xbf",  # FAT_MAGIC_64
}
PE_MAGIC = b"MZ"
ARCHIVE_MAGIC = b"!<arch>\n"
MIN_HEADER_SIZE = 4


class ContainerKind(str, Enum):
    """Object container formats the extractor distinguishes."""

    ELF = "ELF"
    MACHO = "mach"
    MACHO_FAT = "fat mach"
    PE = "PE"
    ARCHIVE = "archive"
    UNKNOWN = "unknown"


class ExtractError(Exception):
    """Base class for failures while inspecting a binary."""

    pass


class ReadFailed(ExtractError):
    """The file could not be read."""

    def __init__(self, path: Path, reason: str):
        self.path = path
        super().__init__(f"Failed to read file at {path}: {reason}")


class ParseFailed(ExtractError):
    """The file is not a structurally valid object file."""

    def __init__(self, path: Path, reason: str):
        self.path = path
        super().__init__(f"Failed to parse {path} as an object file: {reason}")


class UnsupportedFormat(ExtractError):
    """The file is a valid container of a kind that is not supported."""

    def __init__(self, format_name: str, path: Path | None = None):
        self.format_name = format_name
        self.path = path
        where = f" ({path})" if path is not None else ""
        super().__init__(f"Unsupported object format `{format_name}`{where}")


def detect_container(buffer: bytes) -> ContainerKind:
    """Identify the container format from the leading magic bytes."""
    if buffer.startswith(ARCHIVE_MAGIC):
        return ContainerKind.ARCHIVE

    magic = buffer[:4]
    if magic == ELF_MAGIC:
        return ContainerKind.ELF
    if magic in MACHO_MAGICS:
        return ContainerKind.MACHO
    if magic in FAT_MAGICS:
        return ContainerKind.MACHO_FAT
    if buffer.startswith(PE_MAGIC):
        return ContainerKind.PE
    return ContainerKind.UNKNOWN


def _elf_libraries(buffer: bytes, path: Path) -> list[str]:
    """DT_NEEDED entries in the order of the dynamic section."""
    elf = lief.ELF.parse(io.BytesIO(buffer))
    if elf is None:
        raise ParseFailed(path, "invalid ELF image")
    return [str(lib) for lib in elf.libraries]


def _macho_libraries(buffer: bytes, path: Path) -> list[str]:
    """Dylib load commands, preceded by the image's reference to itself.

    Library ordinal 0 in a Mach-O image means the image itself, so the list
    starts with "self" and the load commands follow in file order.
    """
    fat = lief.MachO.parse(io.BytesIO(buffer))
    if fat is None or fat.size == 0:
        raise ParseFailed(path, "invalid Mach-O image")
    macho = fat.at(0)
    return [SELF_LIBRARY_NAME] + [lib.name for lib in macho.libraries]


def extract_from_buffer(buffer: bytes, path: Path, verbose: bool = False) -> list[str]:
    """
    Extract linked libraries from an in-memory object file.

    Raises:
        ParseFailed: if the buffer is not a valid object file
        UnsupportedFormat: for fat Mach-O, PE, archives and unknown formats
    """
    if len(buffer) < MIN_HEADER_SIZE:
        raise ParseFailed(path, f"file is {len(buffer)} bytes, too small for an object header")

    kind = detect_container(buffer)
    if verbose:
        print(f"[binary] {path}: {kind.value}", file=sys.stderr)

    if kind is ContainerKind.ELF:
        return _elf_libraries(buffer, path)
    elif kind is ContainerKind.MACHO:
        return _macho_libraries(buffer, path)
    elif kind is ContainerKind.MACHO_FAT:
        raise UnsupportedFormat("fat mach", path)
    elif kind is ContainerKind.PE:
        raise UnsupportedFormat("PE", path)
    elif kind is ContainerKind.ARCHIVE:
        raise UnsupportedFormat("archive", path)
    elif kind is ContainerKind.UNKNOWN:
        raise UnsupportedFormat("unknown", path)
    raise AssertionError(f"unhandled container kind: {kind}")


def extract(path: Path | str, verbose: bool = False) -> list[str]:
    """
    Read a binary and return the libraries recorded in its link table.

    The list is in container order and may contain duplicates and, for
    Mach-O, the "self" entry; sorting and filtering are left to the caller.

    Raises:
        ReadFailed: if the file cannot be read
        ParseFailed: if the file is not a valid object file
        UnsupportedFormat: if the container kind is not ELF or thin Mach-O
    """
    path = Path(path)
    try:
        buffer = path.read_bytes()
    except OSError as e:
        raise ReadFailed(path, e.strerror or str(e)) from e

    return extract_from_buffer(buffer, path, verbose=verbose)
