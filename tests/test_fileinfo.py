import os

from pollwatch.fileinfo import (
    FileInfo,
    inode_supported,
    path_exists,
    path_is_link,
)


def test_regular_file_stats(tmp_path):
    path = tmp_path / "a.txt"
    data = b"hello world"
    path.write_bytes(data)
    info = FileInfo(str(path))
    assert info.size == len(data)
    assert info.is_regular_file()
    assert not info.is_directory()
    assert info.exists()
    assert info.inode == os.stat(path).st_ino
    assert info.modification_time == int(os.stat(path).st_mtime)


def test_directory_with_trailing_separator(tmp_path):
    dirpath = str(tmp_path) + os.sep
    info = FileInfo(dirpath)
    assert info.is_directory()
    assert info.exists()
    assert info.filepath == dirpath


def test_missing_path_has_empty_stats(tmp_path):
    missing = str(tmp_path / "nope")
    info = FileInfo(missing)
    assert not info.exists()
    assert not info.is_directory()
    assert not info.is_regular_file()
    assert info.inode == 0
    assert info.size == 0
    assert path_exists(missing) is False


def test_default_instance_does_not_exist():
    info = FileInfo()
    assert info.filepath == ""
    assert info.exists() is False
    assert info.permissions == 0


def test_equality_ignores_path(tmp_path):
    path = tmp_path / "a.txt"
    path.write_text("x")
    other = tmp_path / "b.txt"
    os.link(path, other)
    first = FileInfo(str(path))
    second = FileInfo(str(other))
    assert first == second
    assert first.filepath != second.filepath


def test_inequality_after_change_and_refresh(tmp_path):
    path = tmp_path / "a.txt"
    path.write_text("x")
    before = FileInfo(str(path))
    path.write_text("much longer content")
    after = FileInfo(str(path))
    assert before != after
    before.refresh()
    assert before == after
    assert before.size == len("much longer content")


def test_same_inode(tmp_path):
    path = tmp_path / "a.txt"
    path.write_text("x")
    os.link(path, tmp_path / "hard.txt")
    (tmp_path / "other.txt").write_text("x")
    info = FileInfo(str(path))
    assert info.same_inode(FileInfo(str(tmp_path / "hard.txt")))
    assert not info.same_inode(FileInfo(str(tmp_path / "other.txt")))


def test_symlink_information(tmp_path):
    target = tmp_path / "target"
    target.mkdir()
    link = tmp_path / "link"
    os.symlink(target, link)
    link_info = FileInfo(str(link), link_info=True)
    assert link_info.is_link()
    assert link_info.links_to() == os.path.realpath(target)
    followed = FileInfo(str(link))
    assert not followed.is_link()
    assert followed.is_directory()
    assert path_is_link(str(link)) is True
    assert path_is_link(str(target)) is False


def test_links_to_of_plain_file_is_empty(tmp_path):
    path = tmp_path / "a.txt"
    path.write_text("x")
    assert FileInfo(str(path), link_info=True).links_to() == ""


def test_readable_file(tmp_path):
    path = tmp_path / "a.txt"
    path.write_text("x")
    assert FileInfo(str(path)).is_readable() is True


def test_inode_supported_matches_platform():
    assert inode_supported() == (os.name != "nt")