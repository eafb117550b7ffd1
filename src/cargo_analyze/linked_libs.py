"""Deduplicated collection of libraries declared by build scripts."""

from collections.abc import Iterable
from typing import Any

from .models import LibraryKind, LinkDescriptor


def set_to_string(items: Iterable[str]) -> str:
    """Render items as '{ a, b, c }' in sorted order, or '' if there are none."""
    ordered = sorted(items)
    if not ordered:
        return ""
    return "{ " + ", ".join(ordered) + " }"


class LinkedLibs:
    """
    Libraries linked by rustc, grouped by kind.

    A (kind, name) pair is stored at most once. Libraries declared without
    a kind are kept in their own `unknown` bucket rather than being
    assigned a default.
    """

    def __init__(self):
        self.known: dict[LibraryKind, set[str]] = {}
        self.unknown: set[str] = set()

    def add(self, kind: LibraryKind | None, name: str) -> bool:
        """
        Add a library.

        Returns:
            True if the (kind, name) pair was not present before
        """
        if kind is None:
            bucket = self.unknown
        else:
            bucket = self.known.setdefault(kind, set())

        if name in bucket:
            return False
        bucket.add(name)
        return True

    def add_descriptor(self, descriptor: LinkDescriptor) -> bool:
        return self.add(descriptor.kind, descriptor.name)

    def all_empty(self) -> bool:
        """True if no library of any kind has been added."""
        return not any(self.known.values()) and not self.unknown

    def kinds(self) -> list[LibraryKind]:
        """Known kinds with at least one library, in declaration order."""
        return sorted((k for k, names in self.known.items() if names), key=lambda k: k.rank)

    def render(self) -> str:
        """
        Render one line per known kind followed by an `unknown` line.

        Example:
            static: { m }
            dylib: { ssl, z }
            unknown: { z }

        Returns an empty string if nothing was added.
        """
        if self.all_empty():
            return ""

        lines = [f"{kind.value}: {set_to_string(self.known[kind])}" for kind in self.kinds()]
        lines.append(f"unknown: {set_to_string(self.unknown)}")
        return "\n".join(lines) + "\n"

    def to_dict(self) -> dict[str, Any]:
        result: dict[str, Any] = {kind.value: sorted(self.known[kind]) for kind in self.kinds()}
        result["unknown"] = sorted(self.unknown)
        return result

    def __len__(self) -> int:
        return sum(len(names) for names in self.known.values()) + len(self.unknown)

    def __str__(self) -> str:
        return self.render()

    def __repr__(self) -> str:
        return f"LinkedLibs({self.to_dict()!r})"
