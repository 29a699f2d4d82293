"""Data models for CBOMkit."""

from cbomkit.models.cyclonedx import (
    Bom,
    Component,
    CryptoProperties,
    Dependency,
    Evidence,
    Metadata,
    Occurrence,
    OrganizationalEntity,
    Property,
    Service,
    Tools,
)
from cbomkit.models.finding import AssetKind, CryptoFindingNode, FindingLocation
from cbomkit.models.progress import ProgressDispatcher, ProgressMessage, ProgressMessageType
from cbomkit.models.project import FileRef, ProjectModule

__all__ = [
    # CycloneDX
    "Bom",
    "Component",
    "CryptoProperties",
    "Dependency",
    "Evidence",
    "Metadata",
    "Occurrence",
    "OrganizationalEntity",
    "Property",
    "Service",
    "Tools",
    # Detector output
    "AssetKind",
    "CryptoFindingNode",
    "FindingLocation",
    # Progress
    "ProgressDispatcher",
    "ProgressMessage",
    "ProgressMessageType",
    # Indexing
    "FileRef",
    "ProjectModule",
]
