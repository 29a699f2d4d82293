"""Per-language module detection strategies.

A strategy tells the indexer which files belong to a language, which
directories are modules (they hold a build marker file) and which build
system a module uses.
"""

from enum import Enum
from pathlib import Path

from cbomkit.core.exceptions.errors import ConfigurationError


class PythonBuildKind(str, Enum):
    """Python build systems."""

    TOML = "toml"
    SETUP = "setup"


class JavaBuildKind(str, Enum):
    """Java build systems."""

    MAVEN = "maven"
    GRADLE = "gradle"


class CppBuildKind(str, Enum):
    """C/C++ build systems."""

    CMAKE = "cmake"
    MAKE = "make"


BuildKind = PythonBuildKind | JavaBuildKind | CppBuildKind


class ModuleStrategy:
    """Base strategy.

    ``build_markers`` is ordered: the first marker present in a directory
    decides its build kind.
    """

    language: str = ""
    file_extensions: tuple[str, ...] = ()
    default_exclude_patterns: tuple[str, ...] = ()
    build_markers: tuple[tuple[str, BuildKind], ...] = ()

    def is_module(self, directory: Path) -> bool:
        """Check whether a directory contains any build marker file.

        Args:
            directory: Directory to check.

        Returns:
            True if the directory is the root of a module.
        """
        return self.classify_build_kind(directory) is not None

    def classify_build_kind(self, directory: Path) -> BuildKind | None:
        """Determine the build kind of a module directory.

        Args:
            directory: Directory to classify.

        Returns:
            Build kind, or None if the path is not a module directory.
        """
        if not directory.is_dir():
            return None
        for marker, kind in self.build_markers:
            if (directory / marker).is_file():
                return kind
        return None

    def matches_extension(self, file_name: str) -> bool:
        """Check whether a file name ends with one of the language extensions."""
        return any(file_name.endswith(ext) for ext in self.file_extensions)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(language={self.language!r})"


class PythonModuleStrategy(ModuleStrategy):
    """Python projects: pyproject.toml, setup.cfg or setup.py."""

    language = "python"
    file_extensions = (".py",)
    default_exclude_patterns = ("src/test/", "tests/")
    build_markers = (
        ("pyproject.toml", PythonBuildKind.TOML),
        ("setup.cfg", PythonBuildKind.SETUP),
        ("setup.py", PythonBuildKind.SETUP),
    )


class JavaModuleStrategy(ModuleStrategy):
    """Java projects: Maven or Gradle."""

    language = "java"
    file_extensions = (".java",)
    default_exclude_patterns = ("src/test/",)
    build_markers = (
        ("pom.xml", JavaBuildKind.MAVEN),
        ("build.gradle", JavaBuildKind.GRADLE),
        ("build.gradle.kts", JavaBuildKind.GRADLE),
    )


class CppModuleStrategy(ModuleStrategy):
    """C and C++ projects: CMake or Make."""

    language = "cpp"
    file_extensions = (".c", ".cc", ".cpp", ".cxx", ".h", ".hh", ".hpp", ".hxx")
    default_exclude_patterns = ("test/",)
    build_markers = (
        ("CMakeLists.txt", CppBuildKind.CMAKE),
        ("Makefile", CppBuildKind.MAKE),
    )


_STRATEGIES: dict[str, type[ModuleStrategy]] = {
    "python": PythonModuleStrategy,
    "java": JavaModuleStrategy,
    "cpp": CppModuleStrategy,
}

SUPPORTED_LANGUAGES = tuple(_STRATEGIES)


def get_strategy(language: str) -> ModuleStrategy:
    """Create the strategy for a language.

    Raises:
        ConfigurationError: If the language is not supported.
    """
    try:
        return _STRATEGIES[language.lower()]()
    except KeyError:
        raise ConfigurationError(
            f"Unsupported language: {language}",
            config_key="language",
            details={"supported": list(SUPPORTED_LANGUAGES)},
        ) from None
