"""Repository handle: where a chart repository's index and archives live."""

from dataclasses import dataclass

from helm_bos.core.registry import RepoRegistry
from helm_bos.core.urls import INDEX_FILE, resolve_reference


@dataclass
class Repo:
    """Handle on one chart repository stored in BOS.

    Owned by a single synchronization session. change_token is updated by
    the engine on every index load and store; concurrent sessions must each
    construct their own Repo.

    Attributes:
        base_url: Root under which the index and archives live (bos://bucket/path)
        index_url: base_url joined with index.yaml
        name: Registered repository name, None when built from an explicit path
        change_token: ETag of the index as last observed, None when unknown
    """

    base_url: str
    index_url: str
    name: str | None = None
    change_token: str | None = None

    @staticmethod
    def from_path(path: str) -> "Repo":
        """Create a handle from an explicit base path (no registry lookup)."""
        return Repo(base_url=path, index_url=resolve_reference(path, INDEX_FILE))

    @staticmethod
    def from_registry(name: str, registry: RepoRegistry) -> "Repo":
        """Create a handle for a repository registered with Helm.

        Raises:
            RepoNotFoundError: If name is not registered
        """
        base_url = registry.lookup(name)
        return Repo(base_url=base_url, index_url=resolve_reference(base_url, INDEX_FILE), name=name)

    @staticmethod
    def resolve(name_or_url: str, registry: RepoRegistry) -> "Repo":
        """Create a handle from either a bos:// URL or a registered name."""
        if "://" in name_or_url:
            return Repo.from_path(name_or_url)
        return Repo.from_registry(name_or_url, registry)

    def archive_url(self, filename: str) -> str:
        """Storage path of an archive stored alongside the index."""
        return resolve_reference(self.base_url, filename)
