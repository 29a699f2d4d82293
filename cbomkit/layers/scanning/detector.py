"""Detector contract.

Detectors are the language-specific analysis engines that parse a module's
files and report the crypto assets they find. CBOMkit does not ship any;
they are plugged in through this interface.
"""

import importlib
from abc import ABC, abstractmethod
from collections.abc import Iterable, Sequence
from pathlib import Path
from typing import Protocol, runtime_checkable

from pydantic import BaseModel, Field

from cbomkit.core.exceptions.errors import DetectorLoadError
from cbomkit.models.finding import CryptoFindingNode
from cbomkit.models.project import ProjectModule


@runtime_checkable
class EngineState(Protocol):
    """Process-wide analysis state of a detection engine."""

    def reset(self) -> None:
        """Release accumulated state so the next scan starts clean."""
        ...


class NoOpEngineState:
    """Engine state for detectors that keep nothing between scans."""

    def reset(self) -> None:
        pass


class DetectorOptions(BaseModel):
    """Context handed to a detector for each module."""

    language: str
    working_directory: Path
    libraries: list[str] = Field(
        default_factory=list,
        description="Dependency jars or libraries used for semantic resolution",
    )
    binaries: list[str] = Field(
        default_factory=list,
        description="Directories holding build output (e.g. compiled classes)",
    )


class Detector(ABC):
    """Base class for crypto detectors."""

    @abstractmethod
    def detect(
        self, module: ProjectModule, options: DetectorOptions
    ) -> Iterable[Sequence[CryptoFindingNode]]:
        """Analyze a module.

        Args:
            module: Module whose files are analyzed.
            options: Scan context.

        Returns:
            Batches of finding nodes, produced as parsing progresses.
        """

    def reset(self) -> None:
        """Release any process-wide analysis state."""


def load_detector(reference: str) -> Detector:
    """Instantiate a detector from a ``module:attribute`` reference.

    The attribute may be a Detector subclass, a factory returning a
    Detector, or a Detector instance.

    Raises:
        DetectorLoadError: If the reference cannot be resolved
            or the detector cannot be created.
    """
    module_name, sep, attribute = reference.partition(":")
    if not sep or not module_name or not attribute:
        raise DetectorLoadError(
            f"Detector reference must look like 'package.module:Name', got {reference!r}"
        )

    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise DetectorLoadError(
            f"Cannot import detector module {module_name!r}",
            details={"error": str(e)},
        ) from e

    target = getattr(module, attribute, None)
    if target is None:
        raise DetectorLoadError(f"Module {module_name!r} has no attribute {attribute!r}")

    detector = target
    if callable(target) and not isinstance(target, Detector):
        try:
            detector = target()
        except Exception as e:
            raise DetectorLoadError(
                f"Failed to create detector from {reference!r}",
                details={"error": str(e)},
            ) from e

    if not isinstance(detector, Detector):
        raise DetectorLoadError(
            f"{reference!r} did not produce a Detector",
            details={"type": type(detector).__name__},
        )
    return detector
