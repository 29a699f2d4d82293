"""Per-language scanner services.

A scanner service runs one detector over the modules produced by the
indexer and collects everything it reports into a single CBOM.
"""

import os
import threading
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor, as_completed
from datetime import datetime, timezone
from pathlib import Path

from cbomkit.core.exceptions.errors import CBOMKitError, MissingBuildArtifactsError, ModuleScanError
from cbomkit.core.logger.logger import get_logger
from cbomkit.layers.scanning.aggregator import FindingAggregator
from cbomkit.layers.scanning.detector import Detector, DetectorOptions
from cbomkit.layers.scanning.models import ScanResult
from cbomkit.models.progress import ProgressDispatcher
from cbomkit.models.project import ProjectModule

logger = get_logger(__name__)

GLOB_CHARACTERS = "*?[{"


class ScannerService:
    """Drives a detector over modules and aggregates its findings."""

    language = "generic"

    def __init__(
        self,
        project_directory: Path,
        detector: Detector,
        progress_dispatcher: ProgressDispatcher | None = None,
        workers: int = 1,
    ) -> None:
        """Initialize the scanner.

        Args:
            project_directory: Scan root.
            detector: Detector invoked once per module.
            progress_dispatcher: Optional sink for labels and detections.
            workers: Number of modules scanned concurrently.
        """
        self.project_directory = Path(project_directory)
        self.detector = detector
        self.progress_dispatcher = progress_dispatcher
        self.workers = max(1, workers)
        self.aggregator = self._new_aggregator()
        self._scan_lock = threading.Lock()

    def _new_aggregator(self) -> FindingAggregator:
        return FindingAggregator(
            self.project_directory,
            progress_dispatcher=self.progress_dispatcher,
            engine=self.detector,
        )

    def detector_options(self) -> DetectorOptions:
        """Options handed to the detector for every module."""
        return DetectorOptions(language=self.language, working_directory=self.project_directory)

    def scan(self, modules: Sequence[ProjectModule]) -> ScanResult:
        """Scan modules and return the finalized CBOM.

        Each call starts from an empty CBOM; concurrent calls are serialized.

        Args:
            modules: Modules produced by the indexer.

        Returns:
            Scan result with counters and the CBOM.

        Raises:
            MissingBuildArtifactsError: If the language requires build output
                and none was configured.
            ModuleScanError: If the detector fails on a module.
            ClientDisconnectedError: If the progress sink disconnects.
        """
        with self._scan_lock:
            self._check_build_artifacts(modules)
            self.aggregator = self._new_aggregator()
            return self._scan(modules)

    def _scan(self, modules: Sequence[ProjectModule]) -> ScanResult:
        start_time = datetime.now(timezone.utc)
        total = len(modules)
        logger.info(f"Start scanning {total} {self.language} projects")

        options = self.detector_options()
        scanned_files = 0
        scanned_lines = 0

        if self.workers == 1 or total <= 1:
            for index, module in enumerate(modules, start=1):
                self._label(module, index, total)
                self._scan_module(module, options)
                scanned_files += len(module.files)
                scanned_lines += module.line_count
        else:
            with ThreadPoolExecutor(max_workers=self.workers) as executor:
                future_to_module = {}
                for index, module in enumerate(modules, start=1):
                    self._label(module, index, total)
                    future = executor.submit(self._scan_module, module, options)
                    future_to_module[future] = module

                try:
                    for future in as_completed(future_to_module):
                        module = future_to_module[future]
                        future.result()
                        scanned_files += len(module.files)
                        scanned_lines += module.line_count
                except Exception:
                    for future in future_to_module:
                        future.cancel()
                    raise

        cbom = self.aggregator.finalize()
        end_time = datetime.now(timezone.utc)
        logger.info(f"Scanned {total} {self.language} projects")

        return ScanResult(
            start_time=start_time,
            end_time=end_time,
            scanned_lines=scanned_lines,
            scanned_files=scanned_files,
            cbom=cbom,
        )

    def _scan_module(self, module: ProjectModule, options: DetectorOptions) -> None:
        try:
            for nodes in self.detector.detect(module, options):
                self.aggregator.accept(nodes)
        except CBOMKitError:
            raise
        except Exception as e:
            raise ModuleScanError(
                f"Detector failed on module '{module.identifier}'",
                module=module.identifier,
                details={"error": str(e)},
            ) from e

    def _label(self, module: ProjectModule, index: int, total: int) -> None:
        text = f"Scanning {self.language} project {module.identifier or '.'} ({index}/{total})"
        logger.info(text)
        if self.progress_dispatcher is not None:
            self.progress_dispatcher.label(text)

    def _check_build_artifacts(self, modules: Sequence[ProjectModule]) -> None:
        """Verify that everything the detector needs is available."""


class PythonScannerService(ScannerService):
    """Scanner for Python projects."""

    language = "python"


class CppScannerService(ScannerService):
    """Scanner for C and C++ projects."""

    language = "cpp"


class JavaScannerService(ScannerService):
    """Scanner for Java projects.

    Java detection resolves types against compiled classes and dependency
    jars. By default a scan refuses to start without them.
    """

    language = "java"

    def __init__(
        self,
        project_directory: Path,
        detector: Detector,
        progress_dispatcher: ProgressDispatcher | None = None,
        workers: int = 1,
        require_build: bool = True,
    ) -> None:
        super().__init__(project_directory, detector, progress_dispatcher, workers)
        self.require_build = require_build
        self.dependency_jars: list[str] = []
        self.class_dirs: list[str] = []

    def add_java_dependency_jar(self, jar: str) -> None:
        """Register a dependency jar path or glob.

        The literal part before the first glob character is made absolute
        and normalized; the glob part is kept as given.
        """
        position = next((i for i, char in enumerate(jar) if char in GLOB_CHARACTERS), len(jar))
        literal, pattern = jar[:position], jar[position:]

        if pattern:
            head, sep, rest = literal.rpartition(os.sep)
            literal, pattern = (head + sep, rest + pattern) if sep else ("", literal + pattern)

        base = os.path.normpath(os.path.abspath(literal or os.curdir))
        if pattern:
            self.dependency_jars.append(os.path.join(base, pattern))
        else:
            self.dependency_jars.append(base)

    def add_java_class_dir(self, class_dir: str) -> None:
        """Register a directory of compiled classes."""
        self.class_dirs.append(os.path.normpath(os.path.abspath(class_dir)))

    def detector_options(self) -> DetectorOptions:
        return DetectorOptions(
            language=self.language,
            working_directory=self.project_directory,
            libraries=list(self.dependency_jars),
            binaries=list(self.class_dirs),
        )

    def _check_build_artifacts(self, modules: Sequence[ProjectModule]) -> None:
        if not modules or self.dependency_jars or self.class_dirs:
            return

        if self.require_build:
            raise MissingBuildArtifactsError(
                "Java scan requires compiled classes or dependency jars",
                language=self.language,
            )
        logger.warning(
            "No Java class directories or dependency jars configured; "
            "scanning without type resolution"
        )


SCANNER_SERVICES: dict[str, type[ScannerService]] = {
    "python": PythonScannerService,
    "java": JavaScannerService,
    "cpp": CppScannerService,
}
