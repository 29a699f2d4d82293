"""Detector output models."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class AssetKind(str, Enum):
    """Kind of cryptographic asset, as named by CycloneDX ``assetType``."""

    ALGORITHM = "algorithm"
    CERTIFICATE = "certificate"
    PROTOCOL = "protocol"
    RELATED_CRYPTO_MATERIAL = "related-crypto-material"


class FindingLocation(BaseModel):
    """Where a detector observed an asset. Locations are absolute paths."""

    location: str = Field(..., description="Absolute path of the source file")
    line: int = Field(..., ge=0, description="Line number")
    offset: int = Field(default=0, ge=0, description="Column offset")


class CryptoFindingNode(BaseModel):
    """A crypto asset reported by a detector.

    ``children`` are assets the node is composed of (a mode or padding of a
    cipher, the key of a signature); each becomes its own component linked
    to the parent by a dependency edge.
    """

    asset_name: str = Field(..., description="Asset name, e.g. AES128-CBC-PKCS7")
    asset_kind: AssetKind = Field(default=AssetKind.ALGORITHM)
    occurrences: list[FindingLocation] = Field(default_factory=list)
    properties: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional cryptoProperties entries, e.g. algorithmProperties",
    )
    children: list["CryptoFindingNode"] = Field(default_factory=list)
