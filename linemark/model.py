"""The outline tree built from parsed filenames, and check findings."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum, auto

from .filename import ParsedFile, generate_filename
from .paths import Document, Node, parse_path

DOC_TYPE_DRAFT = "draft"
DOC_TYPE_NOTES = "notes"


class FindingSeverity(str, Enum):
    """How severe a finding is."""

    ERROR = "error"
    WARNING = "warning"


class FindingType(str, Enum):
    """The kind of issue a finding reports."""

    INVALID_FILENAME = "invalid_filename"
    DUPLICATE_SID = "duplicate_sid"
    SLUG_DRIFT = "slug_drift"
    MISSING_DOC_TYPE = "missing_doc_type"
    MALFORMED_FRONTMATTER = "malformed_frontmatter"
    ORPHANED_RESERVATION = "orphaned_reservation"
    MISSING_RESERVATION = "missing_reservation"


@dataclass(frozen=True)
class Finding:
    """A validation issue discovered while checking the outline."""

    type: FindingType
    severity: FindingSeverity
    message: str
    path: str = ""


class DeleteMode(Enum):
    """How child nodes are handled when a node is deleted."""

    DEFAULT = auto()
    RECURSIVE = auto()
    PROMOTE = auto()


@dataclass
class Outline:
    """The project's document tree, ordered by materialized path."""

    nodes: list[Node] = field(default_factory=list)


def build_outline(files: Iterable[ParsedFile]) -> tuple[Outline, list[Finding]]:
    """Group parsed files by SID into nodes sorted by materialized path.

    Returns the outline and findings such as SIDs seen at several paths.
    Raises InvalidPathError if a node's path is invalid.
    """
    groups: dict[str, list[ParsedFile]] = {}
    findings: list[Finding] = []

    for parsed in files:
        group = groups.get(parsed.sid)
        if group is None:
            groups[parsed.sid] = [parsed]
            continue
        first_mp = group[0].mp
        if first_mp != parsed.mp:
            findings.append(
                Finding(
                    type=FindingType.DUPLICATE_SID,
                    severity=FindingSeverity.WARNING,
                    message=f"SID {parsed.sid} at MPs {first_mp} and {parsed.mp}",
                )
            )
        group.append(parsed)

    nodes: list[Node] = []
    for sid, group in groups.items():
        mp = parse_path(group[0].mp)
        documents = [
            Document(
                doc_type=f.doc_type,
                filename=generate_filename(f.mp, f.sid, f.doc_type, f.slug),
            )
            for f in group
        ]
        documents.sort(key=lambda doc: doc.doc_type)
        title = next(
            (f.slug for f in reversed(group) if f.doc_type == DOC_TYPE_DRAFT), ""
        )
        nodes.append(Node(mp=mp, sid=sid, title=title, documents=documents))

    nodes.sort(key=lambda node: str(node.mp))
    return Outline(nodes), findings