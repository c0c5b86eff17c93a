"""Parsing and generation of outline document filenames."""

from __future__ import annotations

import re
from dataclasses import dataclass

_DOC_TYPE_RE = re.compile(r"[a-z]+")
_FILENAME_RE = re.compile(
    r"([0-9]{3}(?:-[0-9]{3})*)_([a-zA-Z0-9]{8,12})_([a-z]+)(?:_(.+))?\.md"
)
_FORBIDDEN_SLUG_CHARS = frozenset("/\\\x00")


class InvalidFilenameError(ValueError):
    """Raised when a filename does not follow the outline naming scheme."""


class InvalidDocTypeError(ValueError):
    """Raised when a document type contains characters other than a-z."""


@dataclass(frozen=True)
class ParsedFile:
    """The components of an outline document filename."""

    mp: str
    sid: str
    doc_type: str
    slug: str
    path_parts: tuple[str, ...]
    depth: int


def validate_doc_type(doc_type: str) -> None:
    """Raise InvalidDocTypeError unless doc_type is lowercase ASCII letters only."""
    if _DOC_TYPE_RE.fullmatch(doc_type) is None:
        raise InvalidDocTypeError(f"invalid doc type: {doc_type!r}")


def parse_filename(filename: str) -> ParsedFile:
    """Split a filename of the form ``<mp>_<sid>_<type>[_<slug>].md``."""
    match = _FILENAME_RE.fullmatch(filename)
    if match is None:
        raise InvalidFilenameError(f"invalid filename: {filename!r}")

    mp, sid, doc_type, slug = match.groups()
    path_parts = tuple(mp.split("-"))
    if "000" in path_parts:
        raise InvalidFilenameError(f"invalid filename: {filename!r}")

    slug = slug or ""
    if _FORBIDDEN_SLUG_CHARS.intersection(slug):
        raise InvalidFilenameError(f"invalid filename: {filename!r}")

    return ParsedFile(
        mp=mp,
        sid=sid,
        doc_type=doc_type,
        slug=slug,
        path_parts=path_parts,
        depth=len(path_parts),
    )


def generate_filename(mp: str, sid: str, doc_type: str, slug: str = "") -> str:
    """Build a filename from its components; the slug is omitted when empty."""
    parts = [mp, sid, doc_type]
    if slug:
        parts.append(slug)
    return "_".join(parts) + ".md"