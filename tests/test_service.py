import io

import pytest

from linemark import frontmatter
from linemark.filename import parse_filename
from linemark.lock import AlreadyLockedError
from linemark.model import DeleteMode
from linemark.planning import is_descendant_mp
from linemark.results import (
    CycleDetectedError,
    EmptyTitleError,
    NodeHasChildrenError,
    NodeNotFoundError,
)
from linemark.service import OutlineService
from linemark.storage import ProjectFiles, RandomSIDReserver, ReservationStore

SID_A = "AAAAAAAAAAAA"
SID_B = "BBBBBBBBBBBB"
SID_C = "CCCCCCCCCCCC"


class RecordingLocker:
    def __init__(self, error=None):
        self.error = error
        self.lock_calls = 0
        self.unlock_calls = 0

    def try_lock(self):
        self.lock_calls += 1
        if self.error is not None:
            raise self.error

    def unlock(self):
        self.unlock_calls += 1


def make_node(files, mp, sid, slug):
    files.write_file(
        f"{mp}_{sid}_draft_{slug}.md", frontmatter.serialize(f"title: {slug}\n", "")
    )
    files.write_file(f"{mp}_{sid}_notes.md", "")


def make_service(tmp_path, locker=None):
    (tmp_path / ".linemark").mkdir(exist_ok=True)
    files = ProjectFiles(tmp_path)
    store = ReservationStore(tmp_path)
    reserver = RandomSIDReserver(io.BytesIO(bytes(range(12)) * 4))
    locker = locker or RecordingLocker()
    service = OutlineService(
        files,
        files,
        locker,
        reserver,
        deleter=files,
        renamer=files,
        content_reader=files,
        reservation_store=store,
    )
    return service, files, store, locker


def mps_of(files):
    return {parse_filename(name).mp for name in files.list_files()}


def test_add_rejects_blank_title_before_locking(tmp_path):
    service, files, _, locker = make_service(tmp_path)
    with pytest.raises(EmptyTitleError):
        service.add("   ")
    assert locker.lock_calls == 0
    assert files.list_files() == []


def test_add_to_empty_project_writes_draft_and_notes(tmp_path):
    service, files, store, locker = make_service(tmp_path)
    result = service.add("My Novel")
    assert result.sid == "ABCDEFGHIJKL"
    assert result.mp == "100"
    assert result.filename == f"100_{result.sid}_draft_my-novel.md"
    assert set(files.list_files()) == {result.filename, f"100_{result.sid}_notes.md"}
    assert frontmatter.get_title(files.read_file(result.filename)) == "My Novel"
    assert store.has_reservation(result.sid)
    assert (locker.lock_calls, locker.unlock_calls) == (1, 1)


def test_add_appends_after_existing_sibling(tmp_path):
    service, files, _, _ = make_service(tmp_path)
    make_node(files, "100", SID_A, "first")
    result = service.add("Second")
    assert result.mp == "200"


def test_add_before_sibling_takes_lower_number(tmp_path):
    service, files, _, _ = make_service(tmp_path)
    make_node(files, "100", SID_A, "first")
    make_node(files, "200", SID_B, "second")
    result = service.add("Zeroth", before="100")
    assert int(result.mp) < 100
    assert result.mp in mps_of(files)


def test_add_after_sibling_lies_between(tmp_path):
    service, files, _, _ = make_service(tmp_path)
    make_node(files, "100", SID_A, "first")
    make_node(files, "200", SID_B, "second")
    result = service.add("Middle", after="100")
    assert 100 < int(result.mp) < 200


def test_add_under_parent_is_nested(tmp_path):
    service, files, _, _ = make_service(tmp_path)
    make_node(files, "100", SID_A, "parent")
    result = service.add("Child", "100")
    assert is_descendant_mp(result.mp, "100")
    assert parse_filename(result.filename).depth == 2


def test_add_without_apply_writes_no_documents(tmp_path):
    service, files, store, _ = make_service(tmp_path)
    result = service.add("Planned", apply=False)
    assert files.list_files() == []
    assert store.has_reservation(result.sid)


def test_add_fails_when_lock_is_held(tmp_path):
    locker = RecordingLocker(AlreadyLockedError())
    service, files, _, _ = make_service(tmp_path, locker)
    with pytest.raises(AlreadyLockedError):
        service.add("Anything")
    assert files.list_files() == []
    assert locker.unlock_calls == 0


def test_delete_leaf_removes_its_files(tmp_path):
    service, files, _, _ = make_service(tmp_path)
    make_node(files, "100", SID_A, "first")
    make_node(files, "200", SID_B, "second")
    result = service.delete("100", DeleteMode.DEFAULT, True)
    assert result.sids_preserved == [SID_A]
    assert len(result.files_deleted) == 2
    assert mps_of(files) == {"200"}


def test_delete_default_refuses_node_with_children(tmp_path):
    service, files, _, locker = make_service(tmp_path)
    make_node(files, "100", SID_A, "parent")
    make_node(files, "100-100", SID_B, "child")
    with pytest.raises(NodeHasChildrenError):
        service.delete("100", DeleteMode.DEFAULT, True)
    assert mps_of(files) == {"100", "100-100"}
    assert locker.unlock_calls == 1


def test_delete_recursive_removes_subtree(tmp_path):
    service, files, _, _ = make_service(tmp_path)
    make_node(files, "100", SID_A, "parent")
    make_node(files, "100-100", SID_B, "child")
    make_node(files, "200", SID_C, "other")
    result = service.delete(f"sid:{SID_A}", DeleteMode.RECURSIVE, True)
    assert set(result.sids_preserved) == {SID_A, SID_B}
    assert len(result.files_deleted) == 4
    assert mps_of(files) == {"200"}


def test_delete_promote_moves_children_up(tmp_path):
    service, files, _, _ = make_service(tmp_path)
    make_node(files, "100", SID_A, "parent")
    make_node(files, "100-100", SID_B, "child")
    make_node(files, "200", SID_C, "other")
    result = service.delete("100", DeleteMode.PROMOTE, True)
    assert result.sids_preserved == [SID_A]
    assert len(result.files_renamed) == 2
    remaining = [parse_filename(name) for name in files.list_files()]
    assert all(pf.sid != SID_A for pf in remaining)
    promoted = {pf.mp for pf in remaining if pf.sid == SID_B}
    assert len(promoted) == 1
    (new_mp,) = promoted
    assert "-" not in new_mp
    assert new_mp not in {"100", "200"}


def test_delete_without_apply_changes_nothing(tmp_path):
    service, files, _, _ = make_service(tmp_path)
    make_node(files, "100", SID_A, "first")
    before = files.list_files()
    result = service.delete("100", DeleteMode.DEFAULT, False)
    assert sorted(result.files_deleted) == before
    assert files.list_files() == before


def test_delete_unknown_node_raises(tmp_path):
    service, files, _, locker = make_service(tmp_path)
    make_node(files, "100", SID_A, "first")
    with pytest.raises(NodeNotFoundError):
        service.delete("300", DeleteMode.DEFAULT, True)
    assert locker.unlock_calls == 1


@pytest.mark.parametrize("target", ["100", "100-100"])
def test_move_into_own_subtree_is_a_cycle(tmp_path, target):
    service, files, _, _ = make_service(tmp_path)
    make_node(files, "100", SID_A, "parent")
    make_node(files, "100-100", SID_B, "child")
    with pytest.raises(CycleDetectedError):
        service.move("100", target, "", "", True)


def test_move_relocates_subtree_under_target(tmp_path):
    service, files, _, _ = make_service(tmp_path)
    make_node(files, "100", SID_A, "parent")
    make_node(files, "100-100", SID_B, "child")
    make_node(files, "200", SID_C, "other")
    result = service.move("100", "200", "", "", True)
    assert len(result.renames) == 4
    for old, new in result.renames.items():
        old_pf, new_pf = parse_filename(old), parse_filename(new)
        assert is_descendant_mp(new_pf.mp, "200")
        assert new_pf.depth == old_pf.depth + 1
        assert (new_pf.sid, new_pf.doc_type, new_pf.slug) == (
            old_pf.sid,
            old_pf.doc_type,
            old_pf.slug,
        )
    assert set(files.list_files()) == set(
        list(result.renames.values()) + [f"200_{SID_C}_draft_other.md", f"200_{SID_C}_notes.md"]
    )


def test_move_before_existing_child(tmp_path):
    service, files, _, _ = make_service(tmp_path)
    make_node(files, "100", SID_A, "mover")
    make_node(files, "200", SID_B, "target")
    make_node(files, "200-100", SID_C, "existing")
    result = service.move(f"sid:{SID_A}", "200", "200-100", "", False)
    new_mps = {parse_filename(name).mp for name in result.renames.values()}
    assert len(new_mps) == 1
    (new_mp,) = new_mps
    assert is_descendant_mp(new_mp, "200")
    assert int(new_mp.split("-")[-1]) < 100


def test_move_without_apply_leaves_files(tmp_path):
    service, files, _, _ = make_service(tmp_path)
    make_node(files, "100", SID_A, "mover")
    make_node(files, "200", SID_B, "target")
    before = files.list_files()
    result = service.move("100", "200", "", "", False)
    assert sorted(result.renames) == [
        f"100_{SID_A}_draft_mover.md",
        f"100_{SID_A}_notes.md",
    ]
    assert files.list_files() == before