"""CycloneDX 1.6 data models used by the CBOM.

Only the parts of the schema CBOMkit reads or writes are modelled
explicitly. Every model keeps unknown fields, so a document parsed from
JSON serializes back without losing data.
"""

import uuid
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

CRYPTOGRAPHIC_ASSET = "cryptographic-asset"


class CycloneDXModel(BaseModel):
    """Base model: camelCase aliases on the wire, extra fields preserved."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")


class Occurrence(CycloneDXModel):
    """A single place in the source where an asset was observed."""

    location: str = Field(..., description="File path of the occurrence")
    line: int | None = Field(default=None, description="Line number")
    offset: int | None = Field(default=None, description="Column offset")
    additional_context: str | None = Field(default=None, alias="additionalContext")


class Evidence(CycloneDXModel):
    """Component evidence."""

    occurrences: list[Occurrence] = Field(default_factory=list)


class CryptoProperties(CycloneDXModel):
    """Cryptographic properties of a component.

    Algorithm, protocol or key specific blocks are kept as extra fields.
    """

    asset_type: str = Field(..., alias="assetType")
    oid: str | None = None


class Component(CycloneDXModel):
    """A BOM component; for a CBOM typically a cryptographic asset."""

    type: str = Field(default=CRYPTOGRAPHIC_ASSET)
    name: str
    bom_ref: str | None = Field(default=None, alias="bom-ref")
    crypto_properties: CryptoProperties | None = Field(default=None, alias="cryptoProperties")
    evidence: Evidence | None = None

    @property
    def occurrences(self) -> list[Occurrence]:
        """Occurrences of this component, empty if it carries no evidence."""
        if self.evidence is None:
            return []
        return self.evidence.occurrences


class Dependency(CycloneDXModel):
    """A dependency edge from one component reference to others."""

    ref: str
    depends_on: list[str] = Field(default_factory=list, alias="dependsOn")


class Property(CycloneDXModel):
    """Name/value property."""

    name: str
    value: str | None = None


class OrganizationalEntity(CycloneDXModel):
    """Organization providing a tool or service."""

    name: str | None = None
    url: list[str] | None = None


class Service(CycloneDXModel):
    """Service entry, used to describe the generating tool."""

    name: str
    provider: OrganizationalEntity | None = None
    version: str | None = None


class Tools(CycloneDXModel):
    """Tools that produced the BOM."""

    components: list[Component] | None = None
    services: list[Service] | None = None


class Metadata(CycloneDXModel):
    """BOM metadata block."""

    timestamp: datetime | None = None
    tools: Tools | None = None
    properties: list[Property] | None = None

    def add_property(self, name: str, value: str) -> None:
        """Append a property, creating the list on first use."""
        if self.properties is None:
            self.properties = []
        self.properties.append(Property(name=name, value=value))


class Bom(CycloneDXModel):
    """Top-level CycloneDX document."""

    bom_format: str = Field(default="CycloneDX", alias="bomFormat")
    spec_version: str = Field(default="1.6", alias="specVersion")
    serial_number: str | None = Field(default=None, alias="serialNumber")
    version: int = 1
    metadata: Metadata | None = None
    components: list[Component] = Field(default_factory=list)
    dependencies: list[Dependency] = Field(default_factory=list)

    @classmethod
    def create(cls, **data: Any) -> "Bom":
        """Start a new BOM with a fresh serial number."""
        return cls(serial_number=f"urn:uuid:{uuid.uuid4()}", **data)

    def dump(self) -> dict[str, Any]:
        """Dump to a JSON-compatible dictionary using wire names."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
