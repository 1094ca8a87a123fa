"""Unit tests for project file operations."""

from pathlib import Path

from vibectl.core.fileops import delete_path, prune_empty_parents, write_text_file


class TestWriteTextFile:
    """Tests for write_text_file function."""

    def test_creates_parents_and_returns_bytes(self, tmp_path: Path) -> None:
        """Parent directories are created and the encoded bytes returned."""
        target = tmp_path / "a" / "b" / "c.md"

        data = write_text_file(target, "héllo\n")

        assert data == "héllo\n".encode()
        assert target.read_bytes() == data

    def test_no_newline_translation(self, tmp_path: Path) -> None:
        """Line endings are written exactly as given."""
        target = tmp_path / "crlf.txt"

        write_text_file(target, "a\r\nb\n")

        assert target.read_bytes() == b"a\r\nb\n"


class TestDeletePath:
    """Tests for delete_path function."""

    def test_deletes_file(self, tmp_path: Path) -> None:
        """Files are unlinked."""
        target = tmp_path / "f.txt"
        target.write_text("x")

        assert delete_path(target) is True
        assert not target.exists()

    def test_deletes_directory_tree(self, tmp_path: Path) -> None:
        """Directories are removed recursively."""
        target = tmp_path / "dir"
        (target / "nested").mkdir(parents=True)
        (target / "nested" / "f.txt").write_text("x")

        assert delete_path(target) is True
        assert not target.exists()

    def test_deletes_symlink_not_target(self, tmp_path: Path) -> None:
        """Symlinks to directories are unlinked, not followed."""
        real = tmp_path / "real"
        real.mkdir()
        (real / "keep.txt").write_text("x")
        link = tmp_path / "link"
        link.symlink_to(real)

        assert delete_path(link) is True
        assert not link.exists()
        assert (real / "keep.txt").exists()

    def test_missing_path(self, tmp_path: Path) -> None:
        """Missing paths report False."""
        assert delete_path(tmp_path / "missing") is False


class TestPruneEmptyParents:
    """Tests for prune_empty_parents function."""

    def test_removes_empty_chain(self, tmp_path: Path) -> None:
        """Empty directories up to the stop directory are removed."""
        target = tmp_path / "a" / "b" / "c" / "f.txt"
        target.parent.mkdir(parents=True)

        prune_empty_parents(target, tmp_path)

        assert not (tmp_path / "a").exists()
        assert tmp_path.exists()

    def test_stops_at_non_empty_directory(self, tmp_path: Path) -> None:
        """A directory with other content is kept."""
        target = tmp_path / "a" / "b" / "f.txt"
        target.parent.mkdir(parents=True)
        (tmp_path / "a" / "other.txt").write_text("x")

        prune_empty_parents(target, tmp_path)

        assert not (tmp_path / "a" / "b").exists()
        assert (tmp_path / "a" / "other.txt").exists()

    def test_never_leaves_stop_directory(self, tmp_path: Path) -> None:
        """Directories outside stop_at are untouched."""
        root = tmp_path / "root"
        root.mkdir()

        prune_empty_parents(root / "f.txt", root)

        assert root.exists()
