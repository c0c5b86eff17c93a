"""Materialized paths and the nodes and documents placed on them."""

from __future__ import annotations

import re
from dataclasses import dataclass, field

_SEGMENT_RE = re.compile(r"[0-9]{3}|[1-9][0-9]?")


class InvalidPathError(ValueError):
    """Raised when a materialized path or segment is invalid."""


@dataclass(frozen=True)
class MaterializedPath:
    """A node's position in the outline tree, as a sequence of segments."""

    segments: tuple[str, ...]

    def __str__(self) -> str:
        return "-".join(self.segments)

    @property
    def depth(self) -> int:
        """Number of segments in the path."""
        return len(self.segments)

    @property
    def last_segment(self) -> int:
        """Numeric value of the final segment."""
        return int(self.segments[-1])

    def parent(self) -> MaterializedPath | None:
        """The enclosing path, or None for a root-level path."""
        if len(self.segments) <= 1:
            return None
        return MaterializedPath(self.segments[:-1])

    def child(self, segment: int) -> MaterializedPath:
        """A new path with ``segment`` (1-999) appended."""
        if not 1 <= segment <= 999:
            raise InvalidPathError(
                f"invalid materialized path: segment {segment} out of range 1-999"
            )
        return MaterializedPath(self.segments + (f"{segment:03d}",))

    def is_ancestor_of(self, other: MaterializedPath) -> bool:
        """True if this path is a strict ancestor of ``other``."""
        return (
            len(self.segments) < len(other.segments)
            and other.segments[: len(self.segments)] == self.segments
        )


def parse_path(text: str) -> MaterializedPath:
    """Parse a dash-separated materialized path such as ``001-200``."""
    if not text:
        raise InvalidPathError("invalid materialized path: empty")
    segments = tuple(text.split("-"))
    for seg in segments:
        if _SEGMENT_RE.fullmatch(seg) is None or seg == "000":
            raise InvalidPathError(f"invalid materialized path: {text!r}")
    return MaterializedPath(segments)


@dataclass
class Document:
    """A file attached to a node."""

    doc_type: str
    filename: str
    content: str = ""


@dataclass
class Node:
    """A position in the project outline with its documents."""

    mp: MaterializedPath
    sid: str
    title: str = ""
    documents: list[Document] = field(default_factory=list)