"""Tests for module detection strategies."""

from pathlib import Path

import pytest

from cbomkit.core.exceptions.errors import ConfigurationError
from cbomkit.layers.indexing import (
    SUPPORTED_LANGUAGES,
    CppModuleStrategy,
    JavaBuildKind,
    JavaModuleStrategy,
    PythonBuildKind,
    PythonModuleStrategy,
    get_strategy,
)


class TestBuildMarkers:
    """Tests for build marker detection."""

    @pytest.mark.parametrize(
        ("marker", "expected"),
        [
            ("pyproject.toml", PythonBuildKind.TOML),
            ("setup.cfg", PythonBuildKind.SETUP),
            ("setup.py", PythonBuildKind.SETUP),
        ],
    )
    def test_python_markers(self, temp_dir: Path, marker: str, expected: PythonBuildKind) -> None:
        """Test Python marker files."""
        (temp_dir / marker).write_text("")
        strategy = PythonModuleStrategy()

        assert strategy.is_module(temp_dir)
        assert strategy.classify_build_kind(temp_dir) == expected

    def test_first_marker_wins(self, temp_dir: Path) -> None:
        """Test that marker order decides between several markers."""
        (temp_dir / "setup.py").write_text("")
        (temp_dir / "pyproject.toml").write_text("")

        assert PythonModuleStrategy().classify_build_kind(temp_dir) == PythonBuildKind.TOML

    def test_gradle_kotlin(self, temp_dir: Path) -> None:
        """Test Gradle Kotlin DSL build files."""
        (temp_dir / "build.gradle.kts").write_text("")

        assert JavaModuleStrategy().classify_build_kind(temp_dir) == JavaBuildKind.GRADLE

    def test_marker_directory_is_not_a_marker(self, temp_dir: Path) -> None:
        """Test that a directory named like a marker does not count."""
        (temp_dir / "pom.xml").mkdir()

        assert not JavaModuleStrategy().is_module(temp_dir)

    def test_file_is_not_a_module(self, temp_dir: Path) -> None:
        """Test classifying a regular file."""
        path = temp_dir / "Makefile"
        path.write_text("")

        assert CppModuleStrategy().classify_build_kind(path) is None


class TestExtensions:
    """Tests for file extension matching."""

    def test_cpp_extensions(self) -> None:
        """Test C and C++ sources and headers."""
        strategy = CppModuleStrategy()

        assert strategy.matches_extension("main.cpp")
        assert strategy.matches_extension("util.h")
        assert not strategy.matches_extension("CMakeLists.txt")

    def test_python_extension(self) -> None:
        """Test Python sources."""
        strategy = PythonModuleStrategy()

        assert strategy.matches_extension("setup.py")
        assert not strategy.matches_extension("module.pyc")


class TestGetStrategy:
    """Tests for strategy lookup."""

    def test_supported_languages(self) -> None:
        """Test that every supported language has a strategy."""
        for language in SUPPORTED_LANGUAGES:
            assert get_strategy(language).language == language

    def test_case_insensitive(self) -> None:
        """Test lookup ignores case."""
        assert isinstance(get_strategy("Java"), JavaModuleStrategy)

    def test_unknown_language(self) -> None:
        """Test that an unknown language is a configuration error."""
        with pytest.raises(ConfigurationError, match="Unsupported language"):
            get_strategy("cobol")
