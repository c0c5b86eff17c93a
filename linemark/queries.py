"""Read-only outline operations: loading, resolving, listing and checking."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any

from . import frontmatter as _frontmatter
from .filename import InvalidFilenameError, ParsedFile, parse_filename
from .model import (
    DOC_TYPE_DRAFT,
    Finding,
    FindingSeverity,
    FindingType,
    Outline,
    build_outline,
)
from .paths import Node
from .planning import (
    find_node_by_mp,
    find_node_by_selector,
    find_node_by_sid,
    missing_doc_type_findings,
    parse_files_with_findings,
    reconstruct_filename,
    unique_sids,
)
from .results import (
    CheckResult,
    ContentReader,
    DirectoryReader,
    FileDeleter,
    FileRenamer,
    FileWriter,
    FrontmatterHandler,
    ListResult,
    LoadResult,
    Locker,
    ReservationStoreLike,
    SIDReserver,
)
from .selector import Selector, SelectorKind, parse_selector
from .slug import slugify

OutlineBuilder = Callable[[Iterable[ParsedFile]], "tuple[Outline, list[Finding]]"]
Slugifier = Callable[[str], str]


@dataclass(frozen=True)
class _SlugDrift:
    """A draft whose filename slug disagrees with its frontmatter title."""

    filename: str
    expected_slug: str
    parsed: ParsedFile


class OutlineQueries:
    """Operations that read the outline without changing it or taking the lock.

    The collaborators for writing, deleting, renaming, locking and SID
    reservation are kept for the mutating operations built on this class.
    """

    def __init__(
        self,
        reader: DirectoryReader | None,
        writer: FileWriter | None,
        locker: Locker | None,
        reserver: SIDReserver | None,
        *,
        builder: OutlineBuilder = build_outline,
        deleter: FileDeleter | None = None,
        renamer: FileRenamer | None = None,
        content_reader: ContentReader | None = None,
        slugifier: Slugifier = slugify,
        frontmatter: FrontmatterHandler | Any = _frontmatter,
        reservation_store: ReservationStoreLike | None = None,
    ) -> None:
        self.reader = reader
        self.writer = writer
        self.locker = locker
        self.reserver = reserver
        self.builder = builder
        self.deleter = deleter
        self.renamer = renamer
        self.content_reader = content_reader
        self.slugifier = slugifier
        self.frontmatter = frontmatter
        self.reservation_store = reservation_store

    @contextmanager
    def _locked(self) -> Iterator[None]:
        """Hold the advisory lock for the duration of the block."""
        self.locker.try_lock()
        try:
            yield
        finally:
            self.locker.unlock()

    def _read_and_parse_with_findings(self) -> tuple[list[ParsedFile], list[Finding]]:
        if self.reader is None:
            return [], []
        return parse_files_with_findings(self.reader.list_files())

    def _read_and_parse(self) -> list[ParsedFile]:
        parsed, _ = self._read_and_parse_with_findings()
        return parsed

    def load(self) -> LoadResult:
        """Read the project directory and build the outline."""
        parsed, findings = self._read_and_parse_with_findings()
        outline, build_findings = self.builder(parsed)
        return LoadResult(outline=outline, findings=findings + list(build_findings))

    def resolve_selector(self, selector: Selector | str) -> Node:
        """The node that ``selector`` names; raises NodeNotFoundError if none."""
        if isinstance(selector, str):
            selector = parse_selector(selector)
        nodes = self.load().outline.nodes
        if selector.kind is SelectorKind.MP:
            return find_node_by_mp(nodes, selector.value)
        return find_node_by_sid(nodes, selector.value)

    def list_types(self, selector: str) -> ListResult:
        """The sorted document types of the node named by path or SID."""
        if self.reader is None:
            return ListResult()
        parsed = self._read_and_parse()
        node_mp, node_sid = find_node_by_selector(parsed, selector)
        types = sorted(pf.doc_type for pf in parsed if pf.mp == node_mp)
        return CheckResult and ListResult(types=types, node_mp=node_mp, node_sid=node_sid)

    def check(self) -> CheckResult:
        """Validate the outline and report every finding."""
        parsed, findings = self._read_and_parse_with_findings()
        outline, build_findings = self.builder(parsed)
        findings.extend(build_findings)
        findings.extend(missing_doc_type_findings(outline.nodes))
        findings.extend(self._slug_drift_findings(outline.nodes))
        findings.extend(self._malformed_frontmatter_findings(parsed))
        findings.extend(self._missing_reservation_findings(parsed))
        return CheckResult(findings=findings)

    def _detect_slug_drifts(self, nodes: Iterable[Node]) -> list[_SlugDrift]:
        if self.content_reader is None:
            return []
        drifts: list[_SlugDrift] = []
        for node in nodes:
            for doc in node.documents:
                if doc.doc_type != DOC_TYPE_DRAFT:
                    continue
                try:
                    content = self.content_reader.read_file(doc.filename)
                except OSError:
                    continue
                try:
                    title = self.frontmatter.get_title(content)
                except ValueError:
                    continue
                if not title:
                    continue
                expected = self.slugifier(title)
                try:
                    pf = parse_filename(doc.filename)
                except InvalidFilenameError:
                    continue
                if pf.slug != expected:
                    drifts.append(_SlugDrift(doc.filename, expected, pf))
        return drifts

    def _slug_drift_findings(self, nodes: Iterable[Node]) -> list[Finding]:
        return [
            Finding(
                type=FindingType.SLUG_DRIFT,
                severity=FindingSeverity.WARNING,
                message=f"slug drift: {d.filename} (expected {d.expected_slug})",
                path=d.filename,
            )
            for d in self._detect_slug_drifts(nodes)
        ]

    def _malformed_frontmatter_findings(
        self, parsed: Iterable[ParsedFile]
    ) -> list[Finding]:
        if self.content_reader is None:
            return []
        findings: list[Finding] = []
        for pf in parsed:
            if pf.doc_type != DOC_TYPE_DRAFT:
                continue
            filename = reconstruct_filename(pf)
            try:
                content = self.content_reader.read_file(filename)
            except OSError:
                continue
            try:
                self.frontmatter.get_title(content)
            except ValueError:
                findings.append(
                    Finding(
                        type=FindingType.MALFORMED_FRONTMATTER,
                        severity=FindingSeverity.ERROR,
                        message=f"malformed frontmatter: {filename}",
                        path=filename,
                    )
                )
        return findings

    def _missing_reservation_findings(
        self, parsed: Iterable[ParsedFile]
    ) -> list[Finding]:
        if self.reservation_store is None:
            return []
        return [
            Finding(
                type=FindingType.MISSING_RESERVATION,
                severity=FindingSeverity.WARNING,
                message=f"missing reservation marker for SID {sid}",
                path=sid,
            )
            for sid in unique_sids(parsed)
            if not self.reservation_store.has_reservation(sid)
        ]