"""Unit tests for DirectoryWalker.

Tests depth-first enumeration, non-directory roots, unreadable
directories, paths that vanish mid-walk, and one-shot iteration.
"""

from pathlib import Path

from fakes import InMemoryFilesystem
from nestfix.filesystem.walker import DirectoryWalker


class TestDirectoryWalker:
    """Tests for DirectoryWalker against the in-memory filesystem."""

    def test_yields_root_and_every_subdirectory_once(self, memory_fs: InMemoryFilesystem) -> None:
        """Every directory in the subtree is yielded exactly once."""
        memory_fs.add_file("/r/a/x/file.txt")
        memory_fs.add_dir("/r/b")
        memory_fs.add_dir("/r/a/y")

        visited = list(DirectoryWalker(Path("/r"), backend=memory_fs))

        assert len(visited) == len(set(visited))
        assert set(visited) == {
            Path("/r"),
            Path("/r/a"),
            Path("/r/a/x"),
            Path("/r/a/y"),
            Path("/r/b"),
        }

    def test_files_are_not_yielded(self, memory_fs: InMemoryFilesystem) -> None:
        """Only directories are produced."""
        memory_fs.add_file("/r/one.txt")
        memory_fs.add_file("/r/sub/two.txt")

        visited = list(DirectoryWalker(Path("/r"), backend=memory_fs))

        assert visited == [Path("/r"), Path("/r/sub")]

    def test_depth_first_order(self, memory_fs: InMemoryFilesystem) -> None:
        """A subtree is finished before its sibling is started."""
        memory_fs.add_dir("/r/a/x")
        memory_fs.add_dir("/r/b/y")

        visited = list(DirectoryWalker(Path("/r"), backend=memory_fs))

        # Children are pushed in name order, so the last one is popped first
        assert visited == [
            Path("/r"),
            Path("/r/b"),
            Path("/r/b/y"),
            Path("/r/a"),
            Path("/r/a/x"),
        ]

    def test_root_is_a_file(self, memory_fs: InMemoryFilesystem) -> None:
        """A root that is a file yields nothing."""
        memory_fs.add_file("/r/file.txt")

        assert list(DirectoryWalker(Path("/r/file.txt"), backend=memory_fs)) == []

    def test_root_does_not_exist(self, memory_fs: InMemoryFilesystem) -> None:
        """A missing root yields nothing and does not raise."""
        assert list(DirectoryWalker(Path("/missing"), backend=memory_fs)) == []

    def test_unreadable_directory_contributes_no_children(
        self, memory_fs: InMemoryFilesystem
    ) -> None:
        """An unreadable directory is yielded but not descended into."""
        memory_fs.add_dir("/r/locked/inner")
        memory_fs.add_dir("/r/open/inner")
        memory_fs.unreadable.add(Path("/r/locked"))

        visited = list(DirectoryWalker(Path("/r"), backend=memory_fs))

        assert Path("/r/locked") in visited
        assert Path("/r/locked/inner") not in visited
        assert Path("/r/open/inner") in visited

    def test_directory_removed_mid_walk(self, memory_fs: InMemoryFilesystem) -> None:
        """A queued directory that disappears is yielded and the walk continues."""
        memory_fs.add_dir("/r/a/deep")
        memory_fs.add_dir("/r/b")

        visited: list[Path] = []
        for directory in DirectoryWalker(Path("/r"), backend=memory_fs):
            visited.append(directory)
            if directory == Path("/r/b"):
                memory_fs.dirs.discard(Path("/r/a/deep"))
                memory_fs.dirs.discard(Path("/r/a"))

        assert visited == [Path("/r"), Path("/r/b"), Path("/r/a")]

    def test_children_read_after_consumer_resumes(self, memory_fs: InMemoryFilesystem) -> None:
        """Changes made to a yielded directory decide what is visited below it."""
        memory_fs.add_dir("/r")

        visited: list[Path] = []
        for directory in DirectoryWalker(Path("/r"), backend=memory_fs):
            visited.append(directory)
            if directory == Path("/r"):
                memory_fs.add_dir("/r/late")

        assert visited == [Path("/r"), Path("/r/late")]

    def test_walker_is_one_shot(self, memory_fs: InMemoryFilesystem) -> None:
        """A second iteration of an exhausted walker yields nothing."""
        memory_fs.add_dir("/r/a")
        walker = DirectoryWalker(Path("/r"), backend=memory_fs)

        assert len(list(walker)) == 2
        assert list(walker) == []

    def test_walk_is_read_only(self, memory_fs: InMemoryFilesystem) -> None:
        """Walking never mutates the filesystem."""
        memory_fs.add_file("/r/a/a/file.txt")
        before = memory_fs.snapshot()

        list(DirectoryWalker(Path("/r"), backend=memory_fs))

        assert memory_fs.snapshot() == before
        assert memory_fs.renames == []


class TestDirectoryWalkerOnDisk:
    """Tests for DirectoryWalker with the default local filesystem."""

    def test_walks_real_tree(self, tmp_path: Path) -> None:
        """The default backend enumerates a real directory tree."""
        (tmp_path / "a" / "b").mkdir(parents=True)
        (tmp_path / "c").mkdir()
        (tmp_path / "a" / "file.txt").write_text("content")

        visited = set(DirectoryWalker(tmp_path))

        assert visited == {tmp_path, tmp_path / "a", tmp_path / "a" / "b", tmp_path / "c"}

    def test_root_is_a_real_file(self, tmp_path: Path) -> None:
        """A file root on disk yields nothing."""
        target = tmp_path / "file.txt"
        target.write_text("content")

        assert list(DirectoryWalker(target)) == []
