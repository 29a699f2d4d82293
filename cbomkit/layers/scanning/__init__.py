"""Scanning layer: detectors, finding aggregation and CBOM assembly."""

from cbomkit.layers.scanning.aggregator import FindingAggregator, FindingKey, sanitize_occurrences
from cbomkit.layers.scanning.cbom import CBOMDocument
from cbomkit.layers.scanning.components import ComponentBatch, ComponentFactory
from cbomkit.layers.scanning.detector import (
    Detector,
    DetectorOptions,
    EngineState,
    NoOpEngineState,
    load_detector,
)
from cbomkit.layers.scanning.models import ScanResult
from cbomkit.layers.scanning.provenance import GitProvenance, read_git_provenance
from cbomkit.layers.scanning.service import (
    SCANNER_SERVICES,
    CppScannerService,
    JavaScannerService,
    PythonScannerService,
    ScannerService,
)

__all__ = [
    "CBOMDocument",
    "ComponentBatch",
    "ComponentFactory",
    "CppScannerService",
    "Detector",
    "DetectorOptions",
    "EngineState",
    "FindingAggregator",
    "FindingKey",
    "GitProvenance",
    "JavaScannerService",
    "NoOpEngineState",
    "PythonScannerService",
    "SCANNER_SERVICES",
    "ScanResult",
    "ScannerService",
    "load_detector",
    "read_git_provenance",
    "sanitize_occurrences",
]
