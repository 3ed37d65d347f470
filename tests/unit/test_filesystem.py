"""Unit tests for the filesystem adapters."""

import pytest

from service_builder.domain.entities import DirectoryEntry
from service_builder.domain.exceptions import DirectoryNotFoundError
from service_builder.infrastructure.filesystem import LocalFileSystem, MemoryFileSystem
from service_builder.services.root_finder import RootFinder


class TestLocalFileSystem:
    """Test cases for LocalFileSystem class."""

    def test_list_entries(self, tmp_path):
        """Test listing a directory of the working tree."""
        (tmp_path / "svc" / "handler").mkdir(parents=True)
        (tmp_path / "svc" / "go.mod").write_text("module svc")

        fs = LocalFileSystem(tmp_path)

        assert fs.list_entries("svc") == [
            DirectoryEntry(name="go.mod", is_directory=False),
            DirectoryEntry(name="handler", is_directory=True),
        ]
        assert fs.list_entries("svc/") == fs.list_entries("svc")
        assert DirectoryEntry(name="svc", is_directory=True) in fs.list_entries(".")

    def test_missing_directory(self, tmp_path):
        """Test that a missing directory raises DirectoryNotFoundError."""
        with pytest.raises(DirectoryNotFoundError):
            LocalFileSystem(tmp_path).list_entries("nope")

    def test_file_is_not_a_directory(self, tmp_path):
        """Test that listing a file raises DirectoryNotFoundError."""
        (tmp_path / "file.txt").write_text("x")
        with pytest.raises(DirectoryNotFoundError):
            LocalFileSystem(tmp_path).list_entries("file.txt")

    def test_root_finder_on_disk(self, tmp_path):
        """Test the root finder against a real tree."""
        (tmp_path / "a" / "b" / "pkg").mkdir(parents=True)
        (tmp_path / "a" / "b" / "go.mod").write_text("module b")
        finder = RootFinder(LocalFileSystem(tmp_path))

        assert finder.find_owning_directory("a/b/pkg/x.go") == "a/b"
        assert finder.find_all_roots() == ["a/b"]

    def test_symlinked_directory_is_not_a_directory(self, tmp_path):
        """Test that symlinks to directories are listed as plain entries."""
        (tmp_path / "svc").mkdir()
        (tmp_path / "alias").symlink_to(tmp_path / "svc", target_is_directory=True)

        assert LocalFileSystem(tmp_path).list_entries(".") == [
            DirectoryEntry(name="alias", is_directory=False),
            DirectoryEntry(name="svc", is_directory=True),
        ]

    def test_all_roots_with_symlinks_and_git_dir(self, tmp_path):
        """Test the bulk walk over a tree with an alias, a cycle and a .git dir."""
        (tmp_path / "svc").mkdir()
        (tmp_path / "svc" / "go.mod").write_text("module svc")
        (tmp_path / "alias").symlink_to(tmp_path / "svc", target_is_directory=True)
        (tmp_path / "svc" / "loop").symlink_to(tmp_path, target_is_directory=True)
        (tmp_path / ".git" / "modules" / "vendored").mkdir(parents=True)
        (tmp_path / ".git" / "modules" / "vendored" / "go.mod").write_text("module v")

        assert RootFinder(LocalFileSystem(tmp_path)).find_all_roots() == ["svc"]


class TestMemoryFileSystem:
    """Test cases for MemoryFileSystem class."""

    def test_directories_are_implied(self):
        """Test that parent directories exist for every file."""
        fs = MemoryFileSystem(["a/b/c.txt"])

        assert fs.list_entries(".") == [DirectoryEntry("a", True)]
        assert fs.list_entries("a") == [DirectoryEntry("b", True)]
        assert fs.list_entries("a/b") == [DirectoryEntry("c.txt", False)]

    def test_empty_directory(self):
        """Test registering an empty directory."""
        fs = MemoryFileSystem(["a/empty/"])
        assert fs.list_entries("a/empty") == []

    def test_remove(self):
        """Test forgetting a file."""
        fs = MemoryFileSystem(["a/go.mod", "a/main.go"])
        fs.remove("a/go.mod")
        assert fs.list_entries("a") == [DirectoryEntry("main.go", False)]

    def test_missing_directory(self):
        """Test that unknown directories raise DirectoryNotFoundError."""
        with pytest.raises(DirectoryNotFoundError):
            MemoryFileSystem(["a/x"]).list_entries("b")
