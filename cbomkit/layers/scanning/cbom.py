"""CBOM document wrapper around the CycloneDX model."""

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from pydantic import ValidationError
from pydantic_core import PydanticSerializationError

from cbomkit.core.exceptions.errors import CBOMSerializationError
from cbomkit.core.logger.logger import get_logger
from cbomkit.models.cyclonedx import Bom, Metadata, OrganizationalEntity, Service, Tools

logger = get_logger(__name__)

TOOL_NAME = "CBOMkit"
TOOL_ORGANIZATION = "PQCA"


class CBOMDocument:
    """An accumulated Cryptography Bill of Materials."""

    def __init__(self, bom: Bom | None = None) -> None:
        """Initialize the document.

        Args:
            bom: CycloneDX BOM to wrap. A new empty BOM if not provided.
        """
        self.bom = bom if bom is not None else Bom.create()

    def merge(self, other: "CBOMDocument | None") -> None:
        """Append another document's components and dependency edges.

        This is a plain union: nothing is deduplicated and edges that refer
        to the same component are not reconciled.

        Args:
            other: Document to merge into this one.
        """
        if other is None:
            return
        self.bom.components.extend(other.bom.components)
        self.bom.dependencies.extend(other.bom.dependencies)

    def add_metadata(
        self,
        git_url: str | None = None,
        revision: str | None = None,
        commit: str | None = None,
        subfolder: str | None = None,
    ) -> None:
        """Stamp capture time, tool identity and provenance properties.

        Replaces any existing metadata block. A provenance property is only
        added for arguments that are not None.
        """
        metadata = Metadata(
            timestamp=datetime.now(timezone.utc),
            tools=Tools(
                services=[
                    Service(
                        name=TOOL_NAME,
                        provider=OrganizationalEntity(name=TOOL_ORGANIZATION),
                    )
                ]
            ),
        )

        provenance = {
            "gitUrl": git_url,
            "revision": revision,
            "commit": commit,
            "subfolder": subfolder,
        }
        for name, value in provenance.items():
            if value is not None:
                metadata.add_property(name, value)

        self.bom.metadata = metadata

    def finding_count(self) -> int:
        """Number of occurrences over all components."""
        return sum(len(component.occurrences) for component in self.bom.components)

    def to_json(self) -> dict[str, Any]:
        """Serialize to a CycloneDX JSON structure.

        Raises:
            CBOMSerializationError: If the document cannot be serialized.
        """
        try:
            return self.bom.dump()
        except PydanticSerializationError as e:
            raise CBOMSerializationError(
                "Failed to build CBOM JSON",
                operation="build",
                details={"error": str(e)},
            ) from e

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "CBOMDocument":
        """Parse a CycloneDX JSON structure.

        Raises:
            CBOMSerializationError: If the structure does not conform.
        """
        try:
            return cls(Bom.model_validate(data))
        except ValidationError as e:
            raise CBOMSerializationError(
                "Invalid CBOM structure",
                operation="parse",
                details={"errors": e.error_count(), "error": str(e)},
            ) from e

    def write(self, path: Path | str) -> None:
        """Write the document as formatted JSON.

        Raises:
            CBOMSerializationError: If the document cannot be built or written.
        """
        document = self.to_json()
        try:
            Path(path).write_text(json.dumps(document, indent=2) + "\n", encoding="utf-8")
        except OSError as e:
            raise CBOMSerializationError(
                f"Failed to write CBOM to {path}",
                operation="write",
                details={"error": str(e)},
            ) from e
        logger.info(f"Wrote CBOM with {self.finding_count()} findings to {path}")

    @classmethod
    def read(cls, path: Path | str) -> "CBOMDocument":
        """Read a document from a JSON file.

        Raises:
            CBOMSerializationError: If the file cannot be read or parsed.
        """
        try:
            data = json.loads(Path(path).read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise CBOMSerializationError(
                f"Failed to read CBOM from {path}",
                operation="read",
                details={"error": str(e)},
            ) from e
        if not isinstance(data, dict):
            raise CBOMSerializationError(
                f"CBOM root must be a JSON object: {path}",
                operation="parse",
            )
        return cls.from_json(data)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CBOMDocument):
            return NotImplemented
        return self.bom == other.bom

    def __repr__(self) -> str:
        return (
            f"CBOMDocument(components={len(self.bom.components)}, "
            f"dependencies={len(self.bom.dependencies)})"
        )
