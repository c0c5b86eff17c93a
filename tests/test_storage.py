import io

import pytest

from linemark.storage import (
    ProjectFiles,
    ProjectNotFoundError,
    RandomSIDReserver,
    ReservationStore,
    find_project_root,
)


def test_has_reservation_false_without_marker(tmp_path):
    store = ReservationStore(tmp_path)
    assert store.has_reservation("SID001AABB") is False


def test_has_reservation_true_with_marker(tmp_path):
    ids = tmp_path / ".linemark" / "ids"
    ids.mkdir(parents=True)
    (ids / "SID001AABB").write_bytes(b"")
    store = ReservationStore(tmp_path)
    assert store.has_reservation("SID001AABB") is True


@pytest.mark.parametrize("sid", ["SID001AABB", "NEWSID12345"])
def test_create_reservation_creates_marker(tmp_path, sid):
    (tmp_path / ".linemark").mkdir()
    store = ReservationStore(str(tmp_path))
    store.create_reservation(sid)
    assert (tmp_path / ".linemark" / "ids" / sid).is_file()
    assert store.has_reservation(sid) is True


def test_write_and_read_round_trip(tmp_path):
    files = ProjectFiles(tmp_path)
    files.write_file("001_AAAAAAAA_draft.md", "---\ntitle: Café\n---\n")
    assert files.read_file("001_AAAAAAAA_draft.md") == "---\ntitle: Café\n---\n"


def test_write_file_creates_directories(tmp_path):
    files = ProjectFiles(tmp_path)
    files.write_file("sub/dir/note.md", "hello")
    assert (tmp_path / "sub" / "dir" / "note.md").read_text() == "hello"


def test_list_files_skips_directories_and_sorts(tmp_path):
    (tmp_path / ".linemark").mkdir()
    (tmp_path / "b.md").write_text("")
    (tmp_path / "a.md").write_text("")
    assert ProjectFiles(tmp_path).list_files() == ["a.md", "b.md"]


def test_list_files_missing_root_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        ProjectFiles(tmp_path / "missing").list_files()


def test_delete_file(tmp_path):
    (tmp_path / "x.md").write_text("x")
    files = ProjectFiles(tmp_path)
    files.delete_file("x.md")
    assert files.list_files() == []


def test_delete_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        ProjectFiles(tmp_path).delete_file("nope.md")


def test_rename_file(tmp_path):
    (tmp_path / "old.md").write_text("content")
    files = ProjectFiles(tmp_path)
    files.rename_file("old.md", "new.md")
    assert files.list_files() == ["new.md"]
    assert files.read_file("new.md") == "content"


def test_reserver_uses_reader():
    reserver = RandomSIDReserver(io.BytesIO(bytes(range(12))))
    assert reserver.reserve() == "ABCDEFGHIJKL"


def test_reserver_default_source_produces_twelve_chars():
    value = RandomSIDReserver().reserve()
    assert len(value) == 12
    assert value.isalnum()


def test_find_project_root_walks_up(tmp_path):
    (tmp_path / ".linemark").mkdir()
    nested = tmp_path / "a" / "b"
    nested.mkdir(parents=True)
    assert find_project_root(nested) == tmp_path


def test_find_project_root_ignores_plain_file(tmp_path):
    (tmp_path / ".linemark").mkdir()
    sub = tmp_path / "sub"
    sub.mkdir()
    (sub / ".linemark").write_text("not a directory")
    assert find_project_root(sub) == tmp_path


def test_find_project_root_not_found(tmp_path):
    with pytest.raises(ProjectNotFoundError):
        find_project_root(tmp_path)