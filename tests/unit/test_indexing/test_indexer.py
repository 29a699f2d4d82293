"""Tests for ModuleIndexer."""

import logging
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from cbomkit.core.exceptions.errors import ClientDisconnectedError, InvalidExcludePatternError
from cbomkit.layers.indexing import (
    CppBuildKind,
    JavaModuleStrategy,
    ModuleIndexer,
    PythonBuildKind,
    PythonModuleStrategy,
    get_strategy,
)
from cbomkit.models.progress import ProgressMessageType


def file_names(module) -> list[str]:
    return [f.relative_path for f in module.files]


class TestModulePartitioning:
    """Tests for marker-based module detection."""

    def test_sibling_modules(self, make_tree) -> None:
        """Test that every marker directory becomes its own module."""
        root = make_tree({
            "a/setup.py": "from setuptools import setup\n",
            "a/x.py": "import hashlib\n",
            "a/sub/y.py": "pass\n",
            "b/pyproject.toml": "[project]\n",
            "b/z.py": "pass\n",
            "c/w.py": "pass\n",
        })

        indexer = ModuleIndexer(root, PythonModuleStrategy())
        modules = indexer.index()

        assert [m.identifier for m in modules] == ["a", "b"]
        assert file_names(modules[0]) == ["setup.py", "sub/y.py", "x.py"]
        assert file_names(modules[1]) == ["z.py"]
        assert modules[0].root_path == root / "a"

    def test_module_files_are_disjoint(self, make_tree) -> None:
        """Test that no file is indexed by two modules."""
        root = make_tree({
            "pom.xml": "<project/>",
            "Main.java": "class Main {}",
            "core/pom.xml": "<project/>",
            "core/Core.java": "class Core {}",
            "core/api/pom.xml": "<project/>",
            "core/api/Api.java": "class Api {}",
            "web/src/main/java/Web.java": "class Web {}",
        })

        modules = ModuleIndexer(root, JavaModuleStrategy()).index()

        paths = [f.absolute_path for m in modules for f in m.files]
        assert len(paths) == len(set(paths)) == 4

    def test_nested_module_precedes_parent(self, make_tree) -> None:
        """Test that a nested module is emitted before its enclosing module."""
        root = make_tree({
            "outer/setup.py": "",
            "outer/a.py": "",
            "outer/inner/pyproject.toml": "",
            "outer/inner/b.py": "",
        })

        indexer = ModuleIndexer(root, PythonModuleStrategy())
        modules = indexer.index()

        assert [m.identifier for m in modules] == ["outer/inner", "outer"]
        assert file_names(modules[0]) == ["b.py"]
        assert file_names(modules[1]) == ["a.py", "setup.py"]

    def test_main_build_kind_is_first_module(self, make_tree) -> None:
        """Test that only the first module's build kind is recorded."""
        root = make_tree({
            "a/CMakeLists.txt": "",
            "a/a.c": "",
            "b/Makefile": "",
            "b/b.c": "",
        })

        indexer = ModuleIndexer(root, get_strategy("cpp"))
        modules = indexer.index()

        assert len(modules) == 2
        assert indexer.main_build_kind == CppBuildKind.CMAKE

    def test_module_without_matching_files_is_omitted(self, make_tree) -> None:
        """Test that an empty module is silently dropped."""
        root = make_tree({
            "docs/pyproject.toml": "",
            "docs/index.md": "# Docs",
            "app/setup.py": "",
        })

        modules = ModuleIndexer(root, PythonModuleStrategy()).index()

        assert [m.identifier for m in modules] == ["app"]

    def test_git_directory_is_skipped(self, make_tree) -> None:
        """Test that .git content is never indexed."""
        root = make_tree({
            "setup.py": "",
            ".git/hooks/hook.py": "",
        })

        modules = ModuleIndexer(root, PythonModuleStrategy()).index()

        assert [m.identifier for m in modules] == [""]
        assert file_names(modules[0]) == ["setup.py"]

    def test_package_folder(self, make_tree) -> None:
        """Test indexing only a sub-folder of the base directory."""
        root = make_tree({
            "one/setup.py": "",
            "two/setup.py": "",
        })

        modules = ModuleIndexer(root, PythonModuleStrategy()).index("two")

        assert [m.identifier for m in modules] == [""]
        assert modules[0].root_path == root / "two"


class TestFallbackModule:
    """Tests for the fallback rule when no marker is found."""

    def test_flat_tree_becomes_root_module(self, make_tree) -> None:
        """Test that a marker-less flat tree is one module."""
        root = make_tree({"main.py": "", "util.py": "", "README.md": ""})

        indexer = ModuleIndexer(root, PythonModuleStrategy())
        modules = indexer.index()

        assert len(modules) == 1
        assert modules[0].identifier == ""
        assert file_names(modules[0]) == ["main.py", "util.py"]
        assert indexer.main_build_kind is None

    def test_only_first_sibling_gets_fallback(self, make_tree) -> None:
        """Test that the fallback checks the modules of the whole run."""
        root = make_tree({"x/a.py": "", "y/b.py": ""})

        modules = ModuleIndexer(root, PythonModuleStrategy()).index()

        assert [m.identifier for m in modules] == ["x"]

    def test_fallback_skips_empty_subtree(self, make_tree) -> None:
        """Test that a sibling without matching files does not block the fallback."""
        root = make_tree({"a/readme.txt": "", "b/c.py": ""})

        modules = ModuleIndexer(root, PythonModuleStrategy()).index()

        assert [m.identifier for m in modules] == ["b"]

    def test_empty_tree(self, temp_dir: Path) -> None:
        """Test indexing an empty directory."""
        assert ModuleIndexer(temp_dir, PythonModuleStrategy()).index() == []


class TestExcludePatterns:
    """Tests for exclusion rules."""

    def test_default_patterns(self, make_tree) -> None:
        """Test that strategy defaults apply when no patterns are given."""
        root = make_tree({
            "setup.py": "",
            "pkg/core.py": "",
            "tests/test_core.py": "",
        })

        indexer = ModuleIndexer(root, PythonModuleStrategy())
        modules = indexer.index()

        assert indexer.exclude_patterns == ["src/test/", "tests/"]
        assert file_names(modules[0]) == ["pkg/core.py", "setup.py"]

    def test_empty_list_disables_exclusion(self, make_tree) -> None:
        """Test that an empty list keeps every file."""
        root = make_tree({"setup.py": "", "tests/test_core.py": ""})

        modules = ModuleIndexer(root, PythonModuleStrategy(), exclude_patterns=[]).index()

        assert file_names(modules[0]) == ["setup.py", "tests/test_core.py"]

    def test_excluded_directory_is_pruned(self, make_tree) -> None:
        """Test that an excluded module directory is skipped entirely."""
        root = make_tree({
            "app/setup.py": "",
            "vendor/lib/setup.py": "",
            "vendor/lib/lib.py": "",
        })

        modules = ModuleIndexer(root, PythonModuleStrategy(), exclude_patterns=["^vendor"]).index()

        assert [m.identifier for m in modules] == ["app"]

    def test_exclude_everything(self, make_tree) -> None:
        """Test that a pattern matching the root yields no modules."""
        root = make_tree({"setup.py": "", "a.py": ""})

        modules = ModuleIndexer(root, PythonModuleStrategy(), exclude_patterns=[".*"]).index()

        assert modules == []

    def test_invalid_pattern_fails_fast(self, temp_dir: Path) -> None:
        """Test that an invalid pattern is rejected before indexing."""
        with pytest.raises(InvalidExcludePatternError, match="Invalid exclude pattern"):
            ModuleIndexer(temp_dir, PythonModuleStrategy(), exclude_patterns=["("])

    def test_set_none_restores_defaults(self, temp_dir: Path) -> None:
        """Test resetting patterns to the strategy defaults."""
        indexer = ModuleIndexer(temp_dir, JavaModuleStrategy(), exclude_patterns=["foo"])
        indexer.set_exclude_patterns(None)
        assert indexer.exclude_patterns == ["src/test/"]


class TestFileDecoding:
    """Tests for reading file contents."""

    def test_utf8(self, make_tree) -> None:
        """Test that UTF-8 files are decoded as UTF-8."""
        root = make_tree({"a.py": "name = 'café'\n"})

        file_ref = ModuleIndexer(root, PythonModuleStrategy()).index()[0].files[0]

        assert file_ref.encoding == "utf-8"
        assert "café" in file_ref.contents

    def test_latin1_fallback(self, make_tree) -> None:
        """Test that non-UTF-8 bytes fall back to ISO-8859-1."""
        root = make_tree({"a.py": b"name = 'caf\xe9'\nprint(name)\n"})

        file_ref = ModuleIndexer(root, PythonModuleStrategy()).index()[0].files[0]

        assert file_ref.encoding == "iso-8859-1"
        assert file_ref.contents == "name = 'café'\nprint(name)\n"
        assert file_ref.lines == 3
        assert file_ref.language == "python"

    def test_undecodable_file_is_skipped(self, make_tree, monkeypatch, caplog) -> None:
        """Test that a file no encoding can decode is dropped with a warning."""
        monkeypatch.setattr("cbomkit.layers.indexing.indexer.ENCODINGS", ("utf-8",))
        root = make_tree({
            "setup.py": "",
            "legacy.py": b"name = 'caf\xe9'\n",
            "valid.py": "name = 'cafe'\n",
        })

        with caplog.at_level(logging.WARNING, logger="cbomkit.layers.indexing.indexer"):
            modules = ModuleIndexer(root, PythonModuleStrategy()).index()

        assert len(modules) == 1
        assert file_names(modules[0]) == ["setup.py", "valid.py"]
        assert any(
            "Invalid encoding" in r.message and "legacy.py" in r.message for r in caplog.records
        )


class TestProgress:
    """Tests for progress labels."""

    def test_labels(self, make_tree, recording_dispatcher) -> None:
        """Test that indexing start and found modules are reported."""
        root = make_tree({"setup.py": "", "a.py": ""})

        ModuleIndexer(root, PythonModuleStrategy(), progress_dispatcher=recording_dispatcher).index()

        labels = [m.message for m in recording_dispatcher.of_type(ProgressMessageType.LABEL)]
        assert labels == [
            "Indexing projects ...",
            "Found project module '' [2 .py files]",
        ]

    def test_disconnect_aborts_indexing(self, make_tree) -> None:
        """Test that a disconnected client stops the walk."""
        root = make_tree({"setup.py": ""})
        dispatcher = MagicMock()
        dispatcher.label.side_effect = ClientDisconnectedError("gone")

        with pytest.raises(ClientDisconnectedError):
            ModuleIndexer(root, PythonModuleStrategy(), progress_dispatcher=dispatcher).index()


class TestIndexingRun:
    """Tests for the run accumulator."""

    def test_runs_are_independent(self, make_tree) -> None:
        """Test that a second index call starts from scratch."""
        root = make_tree({"setup.py": "", "a.py": ""})
        indexer = ModuleIndexer(root, PythonModuleStrategy())

        first = indexer.index_run()
        second = indexer.index_run()

        assert len(first.modules) == len(second.modules) == 1
        assert second.main_build_kind == PythonBuildKind.SETUP
        assert second.root == root
