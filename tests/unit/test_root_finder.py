"""Unit tests for RootFinder class."""

import pytest

from service_builder.domain.exceptions import DirectoryNotFoundError, RootNotFoundError
from service_builder.infrastructure.filesystem import MemoryFileSystem
from service_builder.services.root_finder import RootFinder


class TestFindOwningDirectory:
    """Test cases for RootFinder.find_owning_directory."""

    def setup_method(self):
        """Set up test fixtures."""
        self.fs = MemoryFileSystem(
            [
                "serviceA/go.mod",
                "serviceA/main.go",
                "serviceA/handler/handler.go",
                "serviceA/proto/serviceA/serviceA.pb.go",
                "foo/nestedServiceA/go.mod",
                "foo/nestedServiceA/main.go",
                "foo/README.md",
                "go.mod",
            ]
        )
        self.finder = RootFinder(self.fs, marker="go.mod")

    def test_marker_file_is_its_own_root(self):
        """Test that the marker's directory is returned without listing it."""
        assert self.finder.find_owning_directory("gone/go.mod") == "gone"

    def test_file_next_to_marker(self):
        """Test a file in the service root."""
        assert self.finder.find_owning_directory("serviceA/main.go") == "serviceA"

    def test_deeply_nested_file(self):
        """Test walking several levels up."""
        path = "serviceA/proto/serviceA/serviceA.pb.go"
        assert self.finder.find_owning_directory(path) == "serviceA"

    def test_nested_service(self):
        """Test a service that lives below a plain directory."""
        assert (
            self.finder.find_owning_directory("foo/nestedServiceA/main.go")
            == "foo/nestedServiceA"
        )

    def test_missing_intermediate_directories(self):
        """Test that deleted directories count as marker absent."""
        path = "serviceA/deleted/deeper/file.go"
        assert self.finder.find_owning_directory(path) == "serviceA"

    def test_no_owner_below_root(self):
        """Test that a marker in the repository root is never a service."""
        with pytest.raises(RootNotFoundError):
            self.finder.find_owning_directory("foo/README.md")

    def test_top_level_file(self):
        """Test files directly in the repository root."""
        with pytest.raises(RootNotFoundError):
            self.finder.find_owning_directory("README.md")
        with pytest.raises(RootNotFoundError):
            self.finder.find_owning_directory("go.mod")

    def test_wholly_deleted_service(self):
        """Test a file of a service that no longer exists."""
        with pytest.raises(RootNotFoundError):
            self.finder.find_owning_directory("serviceZ/handler/handler.go")

    def test_trailing_slash_is_stripped(self):
        """Test that returned paths are normalised."""
        assert self.finder.find_owning_directory("serviceA//main.go") == "serviceA"

    def test_custom_marker(self):
        """Test a different marker convention."""
        finder = RootFinder(MemoryFileSystem(["api/main.go", "api/h/h.go"]), marker="main.go")
        assert finder.find_owning_directory("api/h/h.go") == "api"


class TestFindAllRoots:
    """Test cases for RootFinder.find_all_roots."""

    def test_flat_services(self):
        """Test services at the top level."""
        fs = MemoryFileSystem(
            ["serviceA/go.mod", "serviceA/handler/handler.go", "serviceB/go.mod"]
        )
        assert RootFinder(fs).find_all_roots() == ["serviceA", "serviceB"]

    def test_nested_services(self):
        """Test nested and sibling services, and files without a marker."""
        fs = MemoryFileSystem(
            [
                "nested/serviceA/go.mod",
                "nested/serviceA/handler/handler.go",
                "serviceB/go.mod",
                "nested/nested/serviceC/go.mod",
                "nested/serviceC/some/other/dir/foo.go",
                "nested/main.go",
                "go.mod",
            ]
        )
        assert sorted(RootFinder(fs).find_all_roots()) == [
            "nested/nested/serviceC",
            "nested/serviceA",
            "serviceB",
        ]

    def test_dotted_directories_are_skipped(self):
        """Test that markers under dot-prefixed directories are not reported."""
        fs = MemoryFileSystem([".github/tools/go.mod", "svc/.cache/go.mod", "svc/go.mod"])
        assert RootFinder(fs).find_all_roots() == ["svc"]

    def test_empty_tree(self):
        """Test that an empty tree has no roots."""
        assert RootFinder(MemoryFileSystem()).find_all_roots() == []

    def test_missing_start_directory(self):
        """Test that the bulk walk does not hide a missing start directory."""
        with pytest.raises(DirectoryNotFoundError):
            RootFinder(MemoryFileSystem()).find_all_roots("missing")
