"""Outline operations that change document files under the advisory lock."""

from __future__ import annotations

from .filename import generate_filename, validate_doc_type
from .model import DOC_TYPE_DRAFT, DOC_TYPE_NOTES, FindingType
from .planning import (
    apply_renames,
    compact_renames,
    find_node_by_selector,
    node_has_doc_type,
    reconstruct_filename,
)
from .queries import OutlineQueries
from .results import (
    CompactResult,
    ModifyResult,
    RenameResult,
    RepairAction,
    RepairResult,
    TypeAlreadyExistsError,
)


class OutlineMaintenance(OutlineQueries):
    """Adds and removes document types, repairs, compacts and retitles nodes.

    Every operation here holds the advisory lock while it runs.
    """

    def add_type(self, doc_type: str, selector: str) -> ModifyResult:
        """Create an empty document of ``doc_type`` on the selected node."""
        validate_doc_type(doc_type)
        with self._locked():
            if self.reader is None:
                return ModifyResult()
            parsed = self._read_and_parse()
            node_mp, node_sid = find_node_by_selector(parsed, selector)
            if any(pf.mp == node_mp and pf.doc_type == doc_type for pf in parsed):
                raise TypeAlreadyExistsError()
            filename = generate_filename(node_mp, node_sid, doc_type, "")
            self.writer.write_file(filename, "")
            return ModifyResult(filename=filename, node_mp=node_mp, node_sid=node_sid)

    def remove_type(self, doc_type: str, selector: str) -> ModifyResult:
        """Delete the slug-less document of ``doc_type`` from the selected node."""
        validate_doc_type(doc_type)
        with self._locked():
            if self.reader is None:
                return ModifyResult()
            parsed = self._read_and_parse()
            node_mp, node_sid = find_node_by_selector(parsed, selector)
            filename = generate_filename(node_mp, node_sid, doc_type, "")
            self.deleter.delete_file(filename)
            return ModifyResult(filename=filename, node_mp=node_mp, node_sid=node_sid)

    def repair(self) -> RepairResult:
        """Add missing notes, missing reservation markers, and fix slug drift."""
        with self._locked():
            if self.reader is None:
                return RepairResult()
            parsed = self._read_and_parse()
            outline, build_findings = self.builder(parsed)
            result = RepairResult(unrepaired=list(build_findings))

            for node in outline.nodes:
                if node_has_doc_type(node, DOC_TYPE_NOTES):
                    continue
                filename = generate_filename(str(node.mp), node.sid, DOC_TYPE_NOTES, "")
                self.writer.write_file(filename, "")
                result.repairs.append(
                    RepairAction(type=FindingType.MISSING_DOC_TYPE, new=filename)
                )

            for finding in self._missing_reservation_findings(parsed):
                self.reservation_store.create_reservation(finding.path)
                result.repairs.append(
                    RepairAction(type=FindingType.MISSING_RESERVATION, new=finding.path)
                )

            for drift in self._detect_slug_drifts(outline.nodes):
                pf = drift.parsed
                new_name = generate_filename(
                    pf.mp, pf.sid, pf.doc_type, drift.expected_slug
                )
                self.renamer.rename_file(drift.filename, new_name)
                result.repairs.append(
                    RepairAction(
                        type=FindingType.SLUG_DRIFT, old=drift.filename, new=new_name
                    )
                )
            return result

    def compact(self, selector: str, apply: bool) -> CompactResult:
        """Renumber the subtree under ``selector`` ("" for the root) at even spacing."""
        with self._locked():
            parsed = self._read_and_parse()
            renames = compact_renames(parsed, selector, selector)
            if apply:
                apply_renames(self.renamer, renames)
            return CompactResult(renames=renames)

    def rename(self, selector: str, new_title: str, apply: bool) -> RenameResult:
        """Retitle a node: rename its draft files and update the frontmatter title."""
        with self._locked():
            parsed = self._read_and_parse()
            node_mp, node_sid = find_node_by_selector(parsed, selector)
            new_slug = self.slugifier(new_title)

            renames: dict[str, str] = {}
            draft_content = ""
            old_title = ""
            for pf in parsed:
                if pf.mp != node_mp or pf.doc_type != DOC_TYPE_DRAFT:
                    continue
                old_name = reconstruct_filename(pf)
                new_name = generate_filename(pf.mp, pf.sid, pf.doc_type, new_slug)
                if old_name != new_name:
                    renames[old_name] = new_name
                if draft_content:
                    continue
                try:
                    content = self.content_reader.read_file(old_name)
                except OSError:
                    continue
                draft_content = content
                try:
                    old_title = self.frontmatter.get_title(content)
                except ValueError:
                    old_title = ""

            result = RenameResult(
                mp=node_mp,
                sid=node_sid,
                old_title=old_title,
                new_title=new_title,
                renames=renames,
            )
            if not apply:
                return result

            apply_renames(self.renamer, renames)

            if draft_content:
                try:
                    updated = self.frontmatter.set_title(draft_content, new_title)
                except ValueError:
                    return result
                new_filename = generate_filename(
                    node_mp, node_sid, DOC_TYPE_DRAFT, new_slug
                )
                self.writer.write_file(new_filename, updated)
            return result