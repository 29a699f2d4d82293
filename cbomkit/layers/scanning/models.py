"""Scan result model."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from cbomkit.layers.scanning.cbom import CBOMDocument


class ScanResult(BaseModel):
    """Outcome of scanning a list of modules."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    start_time: datetime
    end_time: datetime
    scanned_lines: int = Field(default=0, ge=0, description="Lines in all scanned files")
    scanned_files: int = Field(default=0, ge=0, description="Number of scanned files")
    cbom: CBOMDocument | None = Field(default=None, description="Finalized CBOM")

    @property
    def duration(self) -> float:
        """Scan duration in seconds."""
        return (self.end_time - self.start_time).total_seconds()
