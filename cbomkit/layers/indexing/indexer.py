"""Partitioning of a source tree into project modules."""

import re
from dataclasses import dataclass, field
from pathlib import Path

from cbomkit.core.exceptions.errors import InvalidExcludePatternError, UnreadableFileError
from cbomkit.core.logger.logger import get_logger
from cbomkit.layers.indexing.strategy import BuildKind, ModuleStrategy
from cbomkit.models.progress import ProgressDispatcher
from cbomkit.models.project import FileRef, ProjectModule

logger = get_logger(__name__)

# Tried in order; the first one that decodes the whole file wins
ENCODINGS = ("utf-8", "iso-8859-1")

GIT_DIRECTORY = ".git"


@dataclass
class IndexingRun:
    """State accumulated over one ``ModuleIndexer.index`` call.

    Attributes:
        root: Absolute scan root of the run.
        modules: Modules found so far, in discovery order.
        main_build_kind: Build kind of the first module found.
    """

    root: Path
    modules: list[ProjectModule] = field(default_factory=list)
    main_build_kind: BuildKind | None = None


class ModuleIndexer:
    """Walks a directory tree and partitions matching files into modules.

    A directory holding a build marker becomes a module; nested marker
    directories become modules of their own. When the walk finds no module
    at all, the first non-module directory fully explored (depth-first)
    becomes a single fallback module. The fallback looks at the modules of
    the whole run, not of a subtree, so other marker-less siblings stay
    unindexed once any module exists.
    """

    def __init__(
        self,
        base_directory: Path,
        strategy: ModuleStrategy,
        progress_dispatcher: ProgressDispatcher | None = None,
        exclude_patterns: list[str] | None = None,
    ) -> None:
        """Initialize the indexer.

        Args:
            base_directory: Directory to index.
            strategy: Language strategy deciding modules and file types.
            progress_dispatcher: Optional sink for progress labels.
            exclude_patterns: Regular expressions excluding paths. None uses
                the strategy defaults.

        Raises:
            InvalidExcludePatternError: If a pattern does not compile.
        """
        self.base_directory = Path(base_directory)
        self.strategy = strategy
        self.progress_dispatcher = progress_dispatcher
        self._exclude_patterns: list[re.Pattern[str]] = []
        self._last_run: IndexingRun | None = None
        self.set_exclude_patterns(exclude_patterns)

    def set_exclude_patterns(self, patterns: list[str] | None) -> None:
        """Install exclude patterns.

        Patterns are searched for (not fully matched) in the path of each
        directory and file relative to the scan root.

        Args:
            patterns: Regular expressions. None restores the strategy
                defaults; an empty list disables exclusion.

        Raises:
            InvalidExcludePatternError: If a pattern does not compile.
        """
        if patterns is None:
            patterns = list(self.strategy.default_exclude_patterns)

        compiled: list[re.Pattern[str]] = []
        for pattern in patterns:
            try:
                compiled.append(re.compile(pattern))
            except re.error as e:
                raise InvalidExcludePatternError(
                    f"Invalid exclude pattern: {pattern!r}",
                    pattern=pattern,
                    details={"error": str(e)},
                ) from e
        self._exclude_patterns = compiled

    @property
    def exclude_patterns(self) -> list[str]:
        """Currently installed exclude patterns."""
        return [p.pattern for p in self._exclude_patterns]

    @property
    def main_build_kind(self) -> BuildKind | None:
        """Build kind of the first module of the last run."""
        return self._last_run.main_build_kind if self._last_run else None

    def index(self, package_folder: Path | str | None = None) -> list[ProjectModule]:
        """Index the base directory.

        Args:
            package_folder: Optional sub-path of the base directory to index
                instead of the whole tree.

        Returns:
            Modules in depth-first discovery order.

        Raises:
            ClientDisconnectedError: If the progress sink disconnects.
        """
        return self.index_run(package_folder).modules

    def index_run(self, package_folder: Path | str | None = None) -> IndexingRun:
        """Index the base directory and return the complete run state."""
        root = self.base_directory
        if package_folder is not None:
            root = root / package_folder

        run = IndexingRun(root=root.resolve())
        self._notify("Indexing projects ...")
        self._detect_modules(run.root, run)
        self._last_run = run

        logger.debug(
            f"Indexed {len(run.modules)} {self.strategy.language} module(s) "
            f"under {run.root}"
        )
        return run

    def _detect_modules(self, directory: Path, run: IndexingRun) -> None:
        if not directory.is_dir() or self._is_excluded(directory, run):
            return

        if self.strategy.is_module(directory):
            # A module absorbs its whole subtree except nested modules
            if run.main_build_kind is None:
                run.main_build_kind = self.strategy.classify_build_kind(directory)
            self._add_module(directory, run)
            return

        for entry in self._list_directory(directory):
            if self._is_walkable_directory(entry):
                self._detect_modules(entry, run)

        if not run.modules:
            self._add_module(directory, run)

    def _add_module(self, directory: Path, run: IndexingRun) -> None:
        if self._is_excluded(directory, run):
            return

        identifier = self._relative_path(directory, run.root)
        files: list[FileRef] = []
        self._collect_files(directory, directory, run, files)

        if not files:
            logger.debug(f"Skipping module '{identifier}' without matching files")
            return

        extensions = ", ".join(self.strategy.file_extensions)
        self._notify(f"Found project module '{identifier}' [{len(files)} {extensions} files]")
        run.modules.append(
            ProjectModule(identifier=identifier, root_path=directory, files=tuple(files))
        )

    def _collect_files(
        self,
        directory: Path,
        module_root: Path,
        run: IndexingRun,
        files: list[FileRef],
    ) -> None:
        for entry in self._list_directory(directory):
            if entry.is_dir():
                if not self._is_walkable_directory(entry):
                    continue
                if self.strategy.is_module(entry):
                    self._add_module(entry, run)
                elif not self._is_excluded(entry, run):
                    self._collect_files(entry, module_root, run, files)
                continue

            if (
                entry.is_file()
                and self.strategy.matches_extension(entry.name)
                and not self._is_excluded(entry, run)
            ):
                try:
                    files.append(self._read_file(entry, module_root))
                except UnreadableFileError as e:
                    logger.warning(str(e))

    def _read_file(self, file_path: Path, module_root: Path) -> FileRef:
        """Decode a file into a FileRef.

        Raises:
            UnreadableFileError: If the file cannot be read or decoded.
        """
        try:
            raw = file_path.read_bytes()
        except OSError as e:
            raise UnreadableFileError(
                f"Error reading file: {file_path}",
                file_path=str(file_path),
                details={"error": str(e)},
            ) from e

        for encoding in ENCODINGS:
            try:
                contents = raw.decode(encoding)
            except UnicodeDecodeError as e:
                logger.debug(f"Error reading file {file_path} as {encoding}: {e}")
                continue
            return FileRef(
                absolute_path=file_path,
                relative_path=file_path.relative_to(module_root).as_posix(),
                language=self.strategy.language,
                contents=contents,
                encoding=encoding,
            )

        raise UnreadableFileError(
            f"Invalid encoding of file {file_path}",
            file_path=str(file_path),
            details={"encodings": list(ENCODINGS)},
        )

    def _is_excluded(self, path: Path, run: IndexingRun) -> bool:
        relative = self._relative_path(path, run.root)
        return any(p.search(relative) for p in self._exclude_patterns)

    @staticmethod
    def _relative_path(path: Path, root: Path) -> str:
        if path == root:
            return ""
        return path.relative_to(root).as_posix()

    @staticmethod
    def _is_walkable_directory(entry: Path) -> bool:
        return entry.is_dir() and not entry.is_symlink() and entry.name != GIT_DIRECTORY

    @staticmethod
    def _list_directory(directory: Path) -> list[Path]:
        try:
            return sorted(directory.iterdir(), key=lambda p: p.name)
        except OSError as e:
            logger.warning(f"Error accessing directory: {directory} - {e}")
            return []

    def _notify(self, text: str) -> None:
        logger.info(text)
        if self.progress_dispatcher is not None:
            self.progress_dispatcher.label(text)
