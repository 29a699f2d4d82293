"""Git provenance of a scanned checkout."""

import os
from pathlib import Path

from git import Repo
from git.exc import GitCommandError, InvalidGitRepositoryError, NoSuchPathError
from pydantic import BaseModel, Field

from cbomkit.core.exceptions.errors import GitError
from cbomkit.core.logger.logger import get_logger
from cbomkit.layers.scanning.cbom import CBOMDocument

logger = get_logger(__name__)


class GitProvenance(BaseModel):
    """Where the scanned sources came from."""

    git_url: str | None = Field(default=None, description="URL of the origin remote")
    revision: str | None = Field(default=None, description="Branch name or short commit sha")
    commit: str | None = Field(default=None, description="Full commit sha")
    subfolder: str | None = Field(default=None, description="Scanned folder inside the repository")

    def stamp(self, document: CBOMDocument) -> None:
        """Add this provenance as metadata of a document."""
        document.add_metadata(
            git_url=self.git_url,
            revision=self.revision,
            commit=self.commit,
            subfolder=self.subfolder,
        )


def open_repo(path: Path) -> Repo:
    """Open the repository containing a path.

    Raises:
        GitError: If the path is not inside a Git repository.
    """
    try:
        return Repo(path, search_parent_directories=True)
    except (InvalidGitRepositoryError, NoSuchPathError) as e:
        raise GitError(
            f"Not a valid Git repository: {path}",
            repo_path=str(path),
            details={"error": str(e)},
        ) from e


def get_current_ref(repo: Repo) -> str:
    """Current branch name, or the short commit sha when detached."""
    if repo.head.is_detached:
        return repo.head.commit.hexsha[:8]
    return repo.active_branch.name


def read_git_provenance(path: Path, package_folder: Path | str | None = None) -> GitProvenance:
    """Read provenance for a scan of ``path``.

    Args:
        path: Scanned directory, anywhere inside a working tree.
        package_folder: Sub-folder of ``path`` that was actually scanned.

    Returns:
        Provenance; fields that cannot be determined are None.

    Raises:
        GitError: If ``path`` is not in a repository or has no commits.
    """
    repo = open_repo(Path(path))

    try:
        commit = repo.head.commit.hexsha
        revision = get_current_ref(repo)
    except ValueError as e:
        raise GitError(
            "Repository has no commits",
            repo_path=str(path),
            details={"error": str(e)},
        ) from e

    git_url = None
    try:
        git_url = repo.remote("origin").url
    except (ValueError, GitCommandError):
        logger.debug(f"Repository at {repo.working_tree_dir} has no origin remote")

    scanned = Path(path).resolve()
    if package_folder is not None:
        scanned = scanned / package_folder
    subfolder = os.path.relpath(scanned, Path(repo.working_tree_dir).resolve())
    subfolder = None if subfolder == os.curdir else Path(subfolder).as_posix()

    return GitProvenance(git_url=git_url, revision=revision, commit=commit, subfolder=subfolder)
