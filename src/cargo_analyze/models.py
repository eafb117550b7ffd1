"""Data models for cargo build analysis."""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .linked_libs import LinkedLibs


class LinkGrammarError(ValueError):
    """Raised when a link declaration carries an unknown kind prefix."""

    pass


class LibraryKind(str, Enum):
    """Kind of a native library passed to rustc via `-l [KIND=]NAME`."""

    STATIC = "static"
    DYNAMIC = "dylib"
    FRAMEWORK = "framework"

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, text: str) -> "LibraryKind":
        """Parse the canonical string form of a kind.

        Raises:
            ValueError: if text is not one of "static", "dylib", "framework"
        """
        return cls(text)

    @property
    def rank(self) -> int:
        """Position in declaration order, used to order rendered output."""
        return list(LibraryKind).index(self)


@dataclass(frozen=True)
class LinkDescriptor:
    """A single `[kind=]name` link declaration.

    kind is None when the declaration did not name a kind. rustc treats
    such libraries as static for statically linked executables and dynamic
    otherwise; that choice is not made here.
    """

    kind: LibraryKind | None
    name: str


def parse_link_descriptor(token: str) -> LinkDescriptor:
    """
    Parse a link string of the format '[kind=]name'.

    Follows rustc's `-l` option syntax. Only the first '=' separates the
    kind from the name, so a name that itself contains '=' keeps the rest.

    Examples:
        "dylib=z"  -> LinkDescriptor(LibraryKind.DYNAMIC, "z")
        "static=z" -> LinkDescriptor(LibraryKind.STATIC, "z")
        "z"        -> LinkDescriptor(None, "z")

    Raises:
        LinkGrammarError: if the prefix before '=' is not a known kind
    """
    prefix, sep, name = token.partition("=")
    if not sep:
        return LinkDescriptor(kind=None, name=token)

    try:
        kind = LibraryKind.parse(prefix)
    except ValueError:
        raise LinkGrammarError(f"Unknown library kind {prefix!r} in link declaration {token!r}") from None

    return LinkDescriptor(kind=kind, name=name)


@dataclass
class Metadata:
    """Everything collected from one pass over the build messages."""

    linked_libs: "LinkedLibs"
    executables: list[Path] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "linked_libs": self.linked_libs.to_dict(),
            "executables": [str(p) for p in self.executables],
        }
