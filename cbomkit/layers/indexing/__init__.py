"""Indexing layer - partitions a source tree into project modules."""

from cbomkit.layers.indexing.indexer import ENCODINGS, IndexingRun, ModuleIndexer
from cbomkit.layers.indexing.strategy import (
    SUPPORTED_LANGUAGES,
    BuildKind,
    CppBuildKind,
    CppModuleStrategy,
    JavaBuildKind,
    JavaModuleStrategy,
    ModuleStrategy,
    PythonBuildKind,
    PythonModuleStrategy,
    get_strategy,
)

__all__ = [
    "ENCODINGS",
    "IndexingRun",
    "ModuleIndexer",
    # Strategies
    "ModuleStrategy",
    "PythonModuleStrategy",
    "JavaModuleStrategy",
    "CppModuleStrategy",
    "SUPPORTED_LANGUAGES",
    "get_strategy",
    # Build kinds
    "BuildKind",
    "PythonBuildKind",
    "JavaBuildKind",
    "CppBuildKind",
]
