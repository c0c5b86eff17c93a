"""The full outline service: adding, deleting and moving nodes."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence

from .filename import ParsedFile, generate_filename
from .maintenance import OutlineMaintenance
from .model import DOC_TYPE_DRAFT, DOC_TYPE_NOTES, DeleteMode
from .numbering import next_sibling_number, sibling_number_after, sibling_number_before
from .planning import (
    apply_renames,
    build_child_mp,
    collect_child_numbers,
    collect_occupied_child_nums,
    count_available_gaps,
    is_descendant_mp,
    last_segment_num,
    reconstruct_filename,
    resolve_target,
)
from .results import (
    AddResult,
    CycleDetectedError,
    DeleteResult,
    EmptyTitleError,
    InsufficientGapsError,
    MoveResult,
    NodeHasChildrenError,
    OutlineError,
)
from .selector import Selector, parse_selector


def _as_selector(selector: Selector | str) -> Selector:
    return parse_selector(selector) if isinstance(selector, str) else selector


def _sibling_number(occupied: Sequence[int], before: str, after: str) -> int:
    if before:
        return sibling_number_before(occupied, last_segment_num(before))
    if after:
        return sibling_number_after(occupied, last_segment_num(after))
    return next_sibling_number(occupied)


class OutlineService(OutlineMaintenance):
    """Every outline operation; mutating ones hold the advisory lock."""

    def add(
        self,
        title: str,
        parent_mp: str = "",
        *,
        before: str = "",
        after: str = "",
        apply: bool = True,
    ) -> AddResult:
        """Create a node with a draft and notes under ``parent_mp`` ("" for root).

        ``before`` or ``after`` name a sibling path to position against. With
        ``apply`` false the position is planned but no document is written.
        """
        if not title.strip():
            raise EmptyTitleError()
        with self._locked():
            files = self.reader.list_files()
            sid = self.reserver.reserve()
            if self.reservation_store is not None:
                self.reservation_store.create_reservation(sid)

            occupied = collect_child_numbers(files, parent_mp)
            number = _sibling_number(occupied, before, after)
            mp = build_child_mp(parent_mp, number)

            filename = generate_filename(mp, sid, DOC_TYPE_DRAFT, self.slugifier(title))
            if apply:
                self.writer.write_file(filename, self._initial_draft(title))
                notes = generate_filename(mp, sid, DOC_TYPE_NOTES, "")
                self.writer.write_file(notes, "")
            return AddResult(sid=sid, mp=mp, filename=filename)

    def _initial_draft(self, title: str) -> str:
        encoded = self.frontmatter.encode_yaml_value(title)
        return self.frontmatter.serialize(f"title: {encoded}\n", "")

    def delete(
        self, selector: Selector | str, mode: DeleteMode, apply: bool
    ) -> DeleteResult:
        """Delete a node: only a leaf, its whole subtree, or promoting its children."""
        selector = _as_selector(selector)
        with self._locked():
            parsed = self._read_and_parse()
            target_mp, target_sid = resolve_target(parsed, selector)

            target_files: list[str] = []
            descendants: list[ParsedFile] = []
            for pf in parsed:
                if pf.mp == target_mp:
                    target_files.append(reconstruct_filename(pf))
                elif is_descendant_mp(pf.mp, target_mp):
                    descendants.append(pf)

            if mode is DeleteMode.DEFAULT:
                if descendants:
                    raise NodeHasChildrenError()
                return self._delete_files(target_files, {}, [target_sid], apply)

            if mode is DeleteMode.RECURSIVE:
                all_files = target_files + [reconstruct_filename(pf) for pf in descendants]
                sids = list(dict.fromkeys([target_sid, *(pf.sid for pf in descendants)]))
                return self._delete_files(all_files, {}, sids, apply)

            return self._promote_children(
                parsed, target_mp, target_sid, target_files, descendants, apply
            )

    def _promote_children(
        self,
        parsed: Sequence[ParsedFile],
        target_mp: str,
        target_sid: str,
        target_files: list[str],
        descendants: Sequence[ParsedFile],
        apply: bool,
    ) -> DeleteResult:
        parent_mp = target_mp.rpartition("-")[0]
        target_depth = target_mp.count("-") + 1
        child_mps = list(
            dict.fromkeys(pf.mp for pf in descendants if pf.depth == target_depth + 1)
        )

        siblings = collect_occupied_child_nums(parsed, parent_mp, target_mp)
        need = len(child_mps)
        available = count_available_gaps(siblings)
        if available < need:
            raise InsufficientGapsError(need, available)

        occupied = list(siblings)
        renames: dict[str, str] = {}
        for child_mp in child_mps:
            number = next_sibling_number(occupied)
            occupied.append(number)
            new_mp = build_child_mp(parent_mp, number)
            for pf in descendants:
                if pf.mp == child_mp:
                    renames[reconstruct_filename(pf)] = generate_filename(
                        new_mp, pf.sid, pf.doc_type, pf.slug
                    )

        return self._delete_files(target_files, renames, [target_sid], apply)

    def _delete_files(
        self,
        to_delete: list[str],
        to_rename: Mapping[str, str],
        sids: Iterable[str],
        apply: bool,
    ) -> DeleteResult:
        result = DeleteResult(
            files_deleted=list(to_delete),
            files_renamed=dict(to_rename),
            sids_preserved=list(sids),
        )
        if not apply:
            return result

        if self.renamer is not None:
            apply_renames(self.renamer, to_rename)

        deleted: list[str] = []
        for filename in to_delete:
            try:
                self.deleter.delete_file(filename)
            except OSError as exc:
                raise OutlineError(
                    f"delete {filename}: {exc} (already deleted: {', '.join(deleted)})"
                ) from exc
            deleted.append(filename)
        return result

    def move(
        self,
        source: Selector | str,
        target: Selector | str,
        before: str,
        after: str,
        apply: bool,
    ) -> MoveResult:
        """Move a node and its subtree beneath ``target``.

        ``before`` or ``after`` name a sibling path under the target to
        position against; otherwise the node is appended.
        """
        source = _as_selector(source)
        target = _as_selector(target)
        with self._locked():
            parsed = self._read_and_parse()
            source_mp, _ = resolve_target(parsed, source)
            target_mp, _ = resolve_target(parsed, target)

            if target_mp == source_mp or is_descendant_mp(target_mp, source_mp):
                raise CycleDetectedError(source_mp, target_mp)

            occupied = collect_occupied_child_nums(parsed, target_mp, source_mp)
            number = _sibling_number(occupied, before, after)
            new_source_mp = build_child_mp(target_mp, number)

            renames: dict[str, str] = {}
            for pf in parsed:
                if pf.mp == source_mp or is_descendant_mp(pf.mp, source_mp):
                    new_mp = new_source_mp + pf.mp[len(source_mp):]
                    renames[reconstruct_filename(pf)] = generate_filename(
                        new_mp, pf.sid, pf.doc_type, pf.slug
                    )

            if apply:
                apply_renames(self.renamer, renames)
            return MoveResult(renames=renames)