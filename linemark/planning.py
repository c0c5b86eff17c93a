"""Pure helpers that plan outline changes from parsed filenames."""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from .filename import InvalidFilenameError, ParsedFile, generate_filename, parse_filename
from .model import DOC_TYPE_DRAFT, DOC_TYPE_NOTES, Finding, FindingSeverity, FindingType
from .numbering import MAX_SIBLING, MaxSiblingsReachedError, compact_numbers
from .paths import Node
from .results import (
    AmbiguousSelectorError,
    FileRenamer,
    NodeNotFoundError,
    RenameError,
)
from .selector import Selector, SelectorKind


def build_child_mp(parent_mp: str, num: int) -> str:
    """The path of child ``num`` under ``parent_mp`` ("" for the root level)."""
    segment = f"{num:03d}"
    return f"{parent_mp}-{segment}" if parent_mp else segment


def is_descendant_mp(child_mp: str, ancestor_mp: str) -> bool:
    """Whether ``child_mp`` lies strictly below ``ancestor_mp``."""
    return child_mp.startswith(ancestor_mp + "-")


def is_direct_child(parsed: ParsedFile, parent_mp: str) -> bool:
    """Whether the file belongs to a direct child of ``parent_mp``."""
    if not parent_mp:
        return parsed.depth == 1
    parent_depth = parent_mp.count("-") + 1
    return is_descendant_mp(parsed.mp, parent_mp) and parsed.depth == parent_depth + 1


def collect_occupied_child_nums(
    parsed: Iterable[ParsedFile], parent_mp: str, exclude_mp: str
) -> list[int]:
    """Sibling numbers used under ``parent_mp``, ignoring files at ``exclude_mp``."""
    return [
        int(pf.path_parts[-1])
        for pf in parsed
        if is_direct_child(pf, parent_mp) and pf.mp != exclude_mp
    ]


def collect_child_numbers(filenames: Iterable[str], parent_mp: str) -> list[int]:
    """Sibling numbers used under ``parent_mp``; unparsable names are skipped."""
    numbers: list[int] = []
    for name in filenames:
        try:
            pf = parse_filename(name)
        except InvalidFilenameError:
            continue
        if is_direct_child(pf, parent_mp):
            numbers.append(int(pf.path_parts[-1]))
    return numbers


def last_segment_num(mp: str) -> int:
    """Numeric value of the last segment of ``mp``, or 0 if it is not a number."""
    try:
        return int(mp.split("-")[-1])
    except ValueError:
        return 0


def reconstruct_filename(parsed: ParsedFile) -> str:
    """The canonical filename of a parsed file."""
    return generate_filename(parsed.mp, parsed.sid, parsed.doc_type, parsed.slug)


def find_node_by_selector(parsed: Iterable[ParsedFile], selector: str) -> tuple[str, str]:
    """(mp, sid) of the first file whose path or SID equals ``selector``."""
    for pf in parsed:
        if selector in (pf.mp, pf.sid):
            return pf.mp, pf.sid
    raise NodeNotFoundError()


def resolve_target(parsed: Iterable[ParsedFile], selector: Selector) -> tuple[str, str]:
    """(mp, sid) of the first file matching a parsed selector."""
    by_sid = selector.kind is SelectorKind.SID
    for pf in parsed:
        if (pf.sid if by_sid else pf.mp) == selector.value:
            return pf.mp, pf.sid
    raise NodeNotFoundError()


def find_node_by_mp(nodes: Iterable[Node], mp: str) -> Node:
    """The first node at path ``mp``."""
    for node in nodes:
        if str(node.mp) == mp:
            return node
    raise NodeNotFoundError()


def find_node_by_sid(nodes: Iterable[Node], sid: str) -> Node:
    """The single node with ``sid``; raises if none or several match."""
    matches = [node for node in nodes if node.sid == sid]
    if not matches:
        raise NodeNotFoundError()
    if len(matches) > 1:
        raise AmbiguousSelectorError()
    return matches[0]


def parse_files_with_findings(
    filenames: Iterable[str],
) -> tuple[list[ParsedFile], list[Finding]]:
    """Parse filenames, reporting each invalid one as a finding."""
    parsed: list[ParsedFile] = []
    findings: list[Finding] = []
    for name in filenames:
        try:
            parsed.append(parse_filename(name))
        except InvalidFilenameError:
            findings.append(
                Finding(
                    type=FindingType.INVALID_FILENAME,
                    severity=FindingSeverity.WARNING,
                    message=f"invalid filename: {name}",
                    path=name,
                )
            )
    return parsed, findings


def unique_sids(parsed: Iterable[ParsedFile]) -> list[str]:
    """Distinct SIDs in order of first appearance."""
    return list(dict.fromkeys(pf.sid for pf in parsed))


def node_has_doc_type(node: Node, doc_type: str) -> bool:
    """Whether the node has a document of ``doc_type``."""
    return any(doc.doc_type == doc_type for doc in node.documents)


def missing_doc_type_findings(nodes: Iterable[Node]) -> list[Finding]:
    """Findings for nodes lacking a draft or notes document."""
    findings: list[Finding] = []
    for node in nodes:
        for doc_type in (DOC_TYPE_DRAFT, DOC_TYPE_NOTES):
            if not node_has_doc_type(node, doc_type):
                findings.append(
                    Finding(
                        type=FindingType.MISSING_DOC_TYPE,
                        severity=FindingSeverity.ERROR,
                        message=f"node {node.sid} missing {doc_type}",
                    )
                )
    return findings


def compact_renames(
    parsed: Iterable[ParsedFile], old_parent_mp: str, new_parent_mp: str
) -> dict[str, str]:
    """Renames that renumber the subtree under ``old_parent_mp`` at even spacing.

    ``old_parent_mp`` locates children on disk; ``new_parent_mp`` is where
    they end up, which differs once an ancestor has itself been renumbered.
    A level with too many children to compact is left as it is.
    """
    files = list(parsed)
    child_mps = sorted({pf.mp for pf in files if is_direct_child(pf, old_parent_mp)})
    if not child_mps:
        return {}
    try:
        numbers = compact_numbers(len(child_mps))
    except MaxSiblingsReachedError:
        return {}

    renames: dict[str, str] = {}
    for old_child_mp, number in zip(child_mps, numbers):
        new_child_mp = build_child_mp(new_parent_mp, number)
        for pf in files:
            if pf.mp != old_child_mp:
                continue
            old_name = reconstruct_filename(pf)
            new_name = generate_filename(new_child_mp, pf.sid, pf.doc_type, pf.slug)
            if old_name != new_name:
                renames[old_name] = new_name
        renames.update(compact_renames(files, old_child_mp, new_child_mp))
    return renames


def count_available_gaps(occupied: Iterable[int]) -> int:
    """Free sibling positions in 1-999 given the occupied numbers."""
    return MAX_SIBLING - len(set(occupied))


def apply_renames(renamer: FileRenamer, renames: Mapping[str, str]) -> None:
    """Perform renames, undoing completed ones if any fails.

    Raises RenameError naming the failed rename and any rollback failures.
    """
    completed: list[tuple[str, str]] = []
    for old_name, new_name in renames.items():
        try:
            renamer.rename_file(old_name, new_name)
        except OSError as exc:
            rollback_errors = _rollback(renamer, completed)
            raise RenameError(old_name, new_name, exc, rollback_errors) from exc
        completed.append((old_name, new_name))


def _rollback(renamer: FileRenamer, completed: list[tuple[str, str]]) -> list[str]:
    errors: list[str] = []
    for old_name, new_name in reversed(completed):
        try:
            renamer.rename_file(new_name, old_name)
        except OSError as exc:
            errors.append(f"rollback {new_name} -> {old_name}: {exc}")
    return errors