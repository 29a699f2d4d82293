"""Pytest configuration and shared fixtures."""

import shutil
import tempfile
from collections.abc import Callable, Iterable, Sequence
from pathlib import Path
from typing import Generator

import pytest
from git import Repo

from cbomkit.layers.scanning.detector import Detector, DetectorOptions
from cbomkit.models.finding import CryptoFindingNode, FindingLocation
from cbomkit.models.progress import ProgressDispatcher, ProgressMessage
from cbomkit.models.project import ProjectModule


class RecordingDispatcher(ProgressDispatcher):
    """Progress sink that keeps every message it receives."""

    def __init__(self) -> None:
        self.messages: list[ProgressMessage] = []

    def send(self, message: ProgressMessage) -> None:
        self.messages.append(message)

    def of_type(self, message_type) -> list[ProgressMessage]:
        return [m for m in self.messages if m.type == message_type]


class FileNameDetector(Detector):
    """Detector reporting one AES finding on the first line of every file."""

    def __init__(self, asset_name: str = "AES") -> None:
        self.asset_name = asset_name
        self.reset_calls = 0
        self.scanned: list[str] = []

    def detect(
        self, module: ProjectModule, options: DetectorOptions
    ) -> Iterable[Sequence[CryptoFindingNode]]:
        self.scanned.append(module.identifier)
        for file_ref in module.files:
            yield [
                CryptoFindingNode(
                    asset_name=self.asset_name,
                    occurrences=[FindingLocation(location=str(file_ref.absolute_path), line=1)],
                )
            ]

    def reset(self) -> None:
        self.reset_calls += 1


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory that is cleaned up after the test.

    Yields:
        Path to the temporary directory.
    """
    temp_path = Path(tempfile.mkdtemp()).resolve()
    yield temp_path
    shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def make_tree(temp_dir: Path) -> Callable[[dict[str, str | bytes]], Path]:
    """Return a helper that writes files below the temporary directory.

    Keys are POSIX relative paths, values are text or raw bytes. Keys
    ending with ``/`` create empty directories.
    """

    def _make(files: dict[str, str | bytes]) -> Path:
        for relative, content in files.items():
            target = temp_dir / relative
            if relative.endswith("/"):
                target.mkdir(parents=True, exist_ok=True)
                continue
            target.parent.mkdir(parents=True, exist_ok=True)
            if isinstance(content, bytes):
                target.write_bytes(content)
            else:
                target.write_text(content, encoding="utf-8")
        return temp_dir

    return _make


@pytest.fixture
def recording_dispatcher() -> RecordingDispatcher:
    """Progress sink that records messages."""
    return RecordingDispatcher()


@pytest.fixture
def file_name_detector() -> FileNameDetector:
    """Detector with one finding per file."""
    return FileNameDetector()


@pytest.fixture
def sample_git_repo(temp_dir: Path) -> Generator[Path, None, None]:
    """Create a Git repository with one commit and an origin remote.

    Yields:
        Path to the repository.
    """
    repo_path = temp_dir / "sample_repo"
    repo_path.mkdir()

    repo = Repo.init(repo_path)
    with repo.config_writer() as config:
        config.set_value("user", "name", "Test User")
        config.set_value("user", "email", "test@example.com")

    (repo_path / "pkg").mkdir()
    (repo_path / "pkg" / "setup.py").write_text("from setuptools import setup\nsetup()\n")
    (repo_path / "pkg" / "crypto.py").write_text("from hashlib import sha256\n")
    repo.index.add(["pkg/setup.py", "pkg/crypto.py"])
    repo.index.commit("Initial commit")
    repo.create_remote("origin", "https://example.com/org/sample.git")

    yield repo_path
