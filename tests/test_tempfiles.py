"""
Tests for the temporary output file manager
"""

from encodingman.tempfiles import TempFileManager


def test_allocate_follows_naming_scheme(tmp_path):
    mgr = TempFileManager(tmp_path / "out")
    path = mgr.allocate(tmp_path / "data.csv")
    assert path == tmp_path / "out" / "data_utf8.csv"
    assert path.exists()


def test_allocate_never_reuses_a_name(tmp_path):
    mgr = TempFileManager(tmp_path / "out")
    first = mgr.allocate(tmp_path / "a" / "data.csv")
    second = mgr.allocate(tmp_path / "b" / "data.csv")
    third = mgr.allocate(tmp_path / "c" / "data.csv")
    assert [first.name, second.name, third.name] == ["data_utf8.csv", "data_utf8_1.csv", "data_utf8_2.csv"]
    assert mgr.owned == [first, second, third]


def test_allocate_skips_files_from_earlier_runs(tmp_path):
    root = tmp_path / "out"
    root.mkdir()
    (root / "data_sjis.txt").write_bytes(b"old")
    path = TempFileManager(root).allocate(tmp_path / "data.txt", tag="sjis")
    assert path.name == "data_sjis_1.txt"
    assert (root / "data_sjis.txt").read_bytes() == b"old"


def test_cleanup_one(tmp_path):
    mgr = TempFileManager(tmp_path / "out")
    path = mgr.allocate(tmp_path / "x.txt")
    assert mgr.cleanup(path)
    assert not path.exists()
    assert mgr.owned == []
    assert not mgr.cleanup(path)


def test_cleanup_all_only_touches_owned_files(tmp_path):
    root = tmp_path / "out"
    root.mkdir()
    foreign = root / "keep.txt"
    foreign.write_bytes(b"x")
    mgr = TempFileManager(root)
    a = mgr.allocate(tmp_path / "a.txt")
    b = mgr.allocate(tmp_path / "b.txt")

    assert mgr.cleanup_all() == 2
    assert not a.exists() and not b.exists()
    assert foreign.exists()
    assert mgr.cleanup_all() == 0


def test_purge_removes_leftovers(tmp_path):
    root = tmp_path / "out"
    root.mkdir()
    (root / "old_utf8.csv").write_bytes(b"x")
    mgr = TempFileManager(root)
    mgr.allocate(tmp_path / "new.csv")

    assert mgr.purge() == 2
    assert list(root.iterdir()) == []
    assert mgr.owned == []


def test_purge_without_root(tmp_path):
    assert TempFileManager(tmp_path / "absent").purge() == 0
