"""
Unit tests for FileScannerImpl and root validation.
Verifies recursive discovery, skipping of non-regular entries, overlapping roots and early stop.
"""
import os
import sys

import pytest

from dupfinder.core.scanner import FileScannerImpl, InvalidRootError, validate_roots, walk_files


class TestFileScannerImpl:
    """Test the directory walk."""

    def test_finds_all_regular_files_recursively(self, test_files, temp_dir):
        found = set(FileScannerImpl([str(temp_dir)]).scan())
        assert found == {str(p) for p in test_files.values()}

    def test_paths_are_absolute(self, test_files, temp_dir, monkeypatch):
        monkeypatch.chdir(temp_dir.parent)
        found = list(FileScannerImpl([temp_dir.name]).scan())
        assert found
        assert all(os.path.isabs(p) for p in found)

    def test_directories_are_not_emitted(self, test_files, temp_dir):
        found = set(FileScannerImpl([str(temp_dir)]).scan())
        assert str(temp_dir / "subdir") not in found

    def test_empty_directory(self, temp_dir):
        assert list(FileScannerImpl([str(temp_dir)]).scan()) == []

    @pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks not supported")
    def test_skips_symlinks(self, temp_dir):
        real_file = temp_dir / "real.txt"
        real_file.write_bytes(b"content")
        target_dir = temp_dir / "dir"
        target_dir.mkdir()
        (target_dir / "inner.txt").write_bytes(b"inner")
        try:
            os.symlink(real_file, temp_dir / "link.txt")
            os.symlink(target_dir, temp_dir / "dirlink")
        except (OSError, NotImplementedError):
            pytest.skip("cannot create symlinks here")

        found = set(FileScannerImpl([str(temp_dir)]).scan())

        assert found == {str(real_file), str(target_dir / "inner.txt")}

    @pytest.mark.skipif(not hasattr(os, "mkfifo"), reason="FIFOs not supported")
    def test_skips_fifos(self, temp_dir):
        """Opening a FIFO would block the worker; it must never be emitted."""
        os.mkfifo(temp_dir / "pipe")
        (temp_dir / "file.txt").write_bytes(b"x")

        found = list(FileScannerImpl([str(temp_dir)]).scan())

        assert found == [str(temp_dir / "file.txt")]

    def test_multiple_roots(self, make_tree):
        root1 = make_tree("one", {"a.txt": b"a"})
        root2 = make_tree("two", {"b.txt": b"b", "sub/c.txt": b"c"})

        found = set(FileScannerImpl([str(root1), str(root2)]).scan())

        assert found == {str(root1 / "a.txt"), str(root2 / "b.txt"), str(root2 / "sub" / "c.txt")}

    def test_overlapping_roots_emit_each_file_once(self, make_tree):
        """A file must never be reported as a duplicate of itself."""
        root = make_tree("outer", {"a.txt": b"a", "inner/b.txt": b"b"})

        for roots in ([root, root / "inner"], [root / "inner", root], [root, root]):
            found = list(FileScannerImpl([str(r) for r in roots]).scan())
            assert sorted(found) == sorted([str(root / "a.txt"), str(root / "inner" / "b.txt")])

    @pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks not supported")
    def test_symlinked_root_alias_walked_once(self, make_tree, tmp_path):
        root = make_tree("real", {"only.txt": b"unique content", "sub/deep.txt": b"deep"})
        alias = tmp_path / "alias"
        sub_alias = tmp_path / "sub_alias"
        try:
            os.symlink(root, alias)
            os.symlink(root / "sub", sub_alias)
        except (OSError, NotImplementedError):
            pytest.skip("cannot create symlinks here")

        for roots in ([root, alias], [alias, root], [root, sub_alias], [sub_alias, alias]):
            found = list(FileScannerImpl([str(r) for r in roots]).scan())
            assert len(found) == 2
            assert sorted(os.path.basename(p) for p in found) == ["deep.txt", "only.txt"]

    def test_stopped_flag_ends_walk(self, test_files, temp_dir):
        assert list(FileScannerImpl([str(temp_dir)]).scan(stopped_flag=lambda: True)) == []

    def test_stopped_flag_checked_per_directory(self, make_tree):
        root = make_tree("tree", {"a.txt": b"a", "sub/b.txt": b"b"})
        checks = []

        def stop_after_first_directory():
            checks.append(1)
            return len(checks) > 1

        found = list(FileScannerImpl([str(root)]).scan(stopped_flag=stop_after_first_directory))

        assert found == [str(root / "a.txt")]

    def test_unlistable_directory_is_skipped(self, temp_dir):
        assert FileScannerImpl._list_directory(str(temp_dir / "missing")) == []

    @pytest.mark.skipif(sys.platform == "win32" or os.geteuid() == 0,
                        reason="permission bits not enforced")
    def test_permission_denied_directory_is_skipped(self, make_tree):
        root = make_tree("perm", {"visible.txt": b"v", "locked/hidden.txt": b"h"})
        locked = root / "locked"
        locked.chmod(0)
        try:
            found = list(FileScannerImpl([str(root)]).scan())
        finally:
            locked.chmod(0o755)

        assert found == [str(root / "visible.txt")]


class TestWalkFiles:
    def test_matches_scanner(self, test_files, temp_dir):
        assert set(walk_files([str(temp_dir)])) == {str(p) for p in test_files.values()}

    def test_is_lazy_and_stoppable(self, test_files, temp_dir):
        walker = walk_files([str(temp_dir)], stopped_flag=lambda: True)
        assert list(walker) == []


class TestValidateRoots:
    def test_accepts_directories(self, tmp_path):
        validate_roots([str(tmp_path)])

    def test_missing_root(self, tmp_path):
        with pytest.raises(InvalidRootError, match="does not exist"):
            validate_roots([str(tmp_path), str(tmp_path / "nope")])

    def test_file_root(self, tmp_path):
        f = tmp_path / "file.txt"
        f.write_bytes(b"x")
        with pytest.raises(InvalidRootError, match="Not a directory"):
            validate_roots([str(f)])

    def test_is_runtime_error(self):
        assert issubclass(InvalidRootError, RuntimeError)
