"""Lookup of repositories registered with Helm.

Helm keeps its repository list in repositories.yaml; a repository added with
`helm repo add <name> bos://bucket/path` can then be referred to by name.
"""

import logging
import os
import sys
from abc import ABC, abstractmethod
from pathlib import Path

import yaml

from helm_bos.core.errors import RepoNotFoundError, StageError
from helm_bos.core.yaml_io import load_yaml

logger = logging.getLogger(__name__)


def helm_config_home() -> Path:
    """Get Helm's configuration directory, following Helm's own lookup rules."""
    if configured := os.environ.get("HELM_CONFIG_HOME"):
        return Path(configured)
    if xdg := os.environ.get("XDG_CONFIG_HOME"):
        return Path(xdg) / "helm"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Preferences" / "helm"
    if sys.platform == "win32":
        return Path(os.environ.get("APPDATA", Path.home())) / "helm"
    return Path.home() / ".config" / "helm"


def repository_config_path() -> Path:
    """Get the path of Helm's repositories.yaml (HELM_REPOSITORY_CONFIG wins)."""
    if configured := os.environ.get("HELM_REPOSITORY_CONFIG"):
        return Path(configured)
    return helm_config_home() / "repositories.yaml"


class RepoRegistry(ABC):
    """Abstract interface for the local repository registry (read-only)."""

    @abstractmethod
    def lookup(self, name: str) -> str:
        """Resolve a registered repository name to its base URL.

        Args:
            name: Repository name as registered with Helm

        Returns:
            Base URL of the repository, e.g. bos://bucket/charts

        Raises:
            RepoNotFoundError: If no repository has that name
        """
        ...


class HelmRepoRegistry(RepoRegistry):
    """Production implementation reading Helm's repositories.yaml."""

    def __init__(self, path: Path | None = None) -> None:
        """Create the registry.

        Args:
            path: repositories.yaml location (defaults to repository_config_path())
        """
        self._path = path

    def path(self) -> Path:
        return self._path if self._path is not None else repository_config_path()

    def lookup(self, name: str) -> str:
        repo_file = self.path()
        logger.debug("helm repo file: %s", repo_file)
        try:
            data = load_yaml(repo_file.read_text(encoding="utf-8"))
        except (OSError, yaml.YAMLError) as e:
            raise StageError("load repo file", e) from e

        repositories = data.get("repositories") if isinstance(data, dict) else None
        for entry in repositories or []:
            if isinstance(entry, dict) and entry.get("name") == name and entry.get("url"):
                return str(entry["url"])
        raise RepoNotFoundError(name)


class InMemoryRepoRegistry(RepoRegistry):
    """Test implementation holding the name -> URL mapping in memory."""

    def __init__(self, repositories: dict[str, str] | None = None) -> None:
        """Initialize in-memory registry.

        Args:
            repositories: Mapping of repository name -> base URL
        """
        self._repositories = repositories or {}

    def lookup(self, name: str) -> str:
        if name not in self._repositories:
            raise RepoNotFoundError(name)
        return self._repositories[name]
