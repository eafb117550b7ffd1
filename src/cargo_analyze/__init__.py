"""Native library link analysis for cargo builds."""

from .analyzer import MetadataAnalyzer, analyze, binary_dependencies, build_report
from .binary import ExtractError, ParseFailed, ReadFailed, UnsupportedFormat, extract
from .linked_libs import LinkedLibs
from .messages import interpret, parse_stream, read_metadata
from .models import LibraryKind, LinkDescriptor, Metadata, parse_link_descriptor

__all__ = [
    "ExtractError",
    "LibraryKind",
    "LinkDescriptor",
    "LinkedLibs",
    "Metadata",
    "MetadataAnalyzer",
    "ParseFailed",
    "ReadFailed",
    "UnsupportedFormat",
    "analyze",
    "binary_dependencies",
    "build_report",
    "extract",
    "interpret",
    "parse_link_descriptor",
    "parse_stream",
    "read_metadata",
]
