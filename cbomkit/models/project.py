"""Indexing data models."""

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field


class FileRef(BaseModel):
    """A decoded source file belonging to a project module."""

    model_config = ConfigDict(frozen=True)

    absolute_path: Path = Field(description="Absolute path of the file")
    relative_path: str = Field(description="Path relative to the module root")
    language: str = Field(description="Language identifier, e.g. python")
    contents: str = Field(repr=False, description="Decoded file contents")
    encoding: str = Field(description="Encoding the contents were decoded with")

    @property
    def filename(self) -> str:
        """Base name of the file."""
        return self.absolute_path.name

    @property
    def lines(self) -> int:
        """Number of lines; an empty file has one line."""
        return self.contents.count("\n") + 1


class ProjectModule(BaseModel):
    """An independently buildable part of the scanned tree."""

    model_config = ConfigDict(frozen=True)

    identifier: str = Field(description="Module root relative to the scan root")
    root_path: Path = Field(description="Absolute module root")
    files: tuple[FileRef, ...] = Field(default_factory=tuple)

    @property
    def line_count(self) -> int:
        """Total number of lines over all files."""
        return sum(f.lines for f in self.files)
