"""Index synchronization: load, mutate and store a repository index safely.

The index is a single object with no server-side transactions. Several
processes may read it, mutate their copy and write it back at the same time.
Lost updates are prevented with optimistic concurrency:

1. The change token (ETag) of the index is captured on load.
2. Before writing, the current token is re-checked (best effort), then the
   write is sent conditioned on the captured token (If-Match).
3. A mismatch raises IndexOutOfDateError; with retry enabled the index is
   reloaded and the mutation re-applied, with exponential backoff, up to
   max_attempts times.

Without store-side conditional writes only step 2's re-check applies, which
narrows the race window between re-check and write but cannot close it.

Archive uploads and deletions happen only after the index store succeeded. A
failure there leaves the index referring to missing archives (push) or
leaves orphaned archives (remove) and is reported as ArchiveSyncError.
"""

import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import TypeVar

from helm_bos.core.blob_store.abc import BlobStore
from helm_bos.core.blob_store.types import BlobNotFoundError, BlobObject, PreconditionFailedError
from helm_bos.core.chart.abc import ChartLoader
from helm_bos.core.errors import (
    ArchiveSyncError,
    ChartAlreadyIndexedError,
    ChartNotFoundError,
    HelmBosError,
    IndexOutOfDateError,
    StageError,
)
from helm_bos.core.index import ChartVersion, IndexFile
from helm_bos.core.repo import Repo
from helm_bos.core.time.abc import Time
from helm_bos.core.urls import archive_filename, resolve_download_url

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_MAX_ATTEMPTS = 10
DEFAULT_BASE_DELAY = 0.5
DEFAULT_BACKOFF_FACTOR = 2.0
DEFAULT_MAX_DELAY = 5.0


@contextmanager
def _stage(stage: str) -> Iterator[None]:
    """Wrap collaborator failures with the stage that produced them."""
    try:
        yield
    except HelmBosError:
        raise
    except Exception as e:
        raise StageError(stage, e) from e


class IndexSync:
    """Synchronization engine for one or more chart repositories.

    Stateless apart from its collaborators; per-operation state lives in the
    Repo handle (change token) and a freshly loaded IndexFile.
    """

    def __init__(
        self,
        *,
        blob_store: BlobStore,
        chart_loader: ChartLoader,
        time: Time,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        base_delay: float = DEFAULT_BASE_DELAY,
        backoff_factor: float = DEFAULT_BACKOFF_FACTOR,
        max_delay: float = DEFAULT_MAX_DELAY,
    ) -> None:
        """Create the engine.

        Args:
            blob_store: Object store holding the index and archives
            chart_loader: Reads chart metadata and digests from local archives
            time: Clock used for timestamps and retry backoff
            max_attempts: Maximum store attempts per operation when retrying
            base_delay: Delay in seconds before the first retry
            backoff_factor: Multiplier applied to the delay on every retry
            max_delay: Upper bound of a single retry delay
        """
        if max_attempts < 1:
            msg = f"max_attempts must be at least 1, got {max_attempts}"
            raise ValueError(msg)
        self._blob_store = blob_store
        self._chart_loader = chart_loader
        self._time = time
        self._max_attempts = max_attempts
        self._base_delay = base_delay
        self._backoff_factor = backoff_factor
        self._max_delay = max_delay

    def _timestamp(self) -> str:
        return self._time.now().strftime("%Y-%m-%dT%H:%M:%S.%fZ")

    def create_repository(self, repo: Repo) -> bool:
        """Initialize a repository by writing an empty index. Idempotent.

        An existing non-empty index is never overwritten.

        Returns:
            True if an index was written, False if the repository already existed
        """
        logger.debug("create a repository with index file at %s", repo.index_url)
        existing: BlobObject | None
        with _stage("load index"):
            try:
                existing = self._blob_store.get(repo.index_url)
            except BlobNotFoundError:
                existing = None

        if existing is not None and len(existing.data) > 0:
            logger.debug("file %s already exists", repo.index_url)
            repo.change_token = existing.change_token
            return False

        index = IndexFile(generated=self._timestamp())
        with _stage("create index"):
            try:
                token = self._blob_store.put(
                    repo.index_url,
                    index.to_yaml(),
                    if_match=existing.change_token if existing is not None else None,
                    if_none_match=existing is None,
                )
            except PreconditionFailedError:
                logger.debug("index %s was created concurrently", repo.index_url)
                return False
        repo.change_token = token
        return True

    def load_index(self, repo: Repo) -> IndexFile:
        """Load and sort the repository index, recording its change token on repo."""
        logger.debug('load index file "%s"', repo.index_url)
        with _stage("load index"):
            blob = self._blob_store.get(repo.index_url)
        repo.change_token = blob.change_token
        logger.debug("index file generation: %s", blob.change_token)
        return IndexFile.from_yaml(blob.data)

    def store_index(self, repo: Repo, index: IndexFile) -> None:
        """Write the index back if the remote copy is still the one loaded.

        Raises:
            IndexOutOfDateError: If the index changed since it was loaded
        """
        index.sort_entries()
        index.generated = self._timestamp()
        data = index.to_yaml()
        logger.debug("push index file (expected generation: %s)", repo.change_token)

        with _stage("store index"):
            if repo.change_token is not None:
                current = self._blob_store.head(repo.index_url)
                if current != repo.change_token:
                    logger.debug(
                        "index generation changed: expected %s, found %s",
                        repo.change_token,
                        current,
                    )
                    raise IndexOutOfDateError(repo.index_url)
            try:
                token = self._blob_store.put(repo.index_url, data, if_match=repo.change_token)
            except PreconditionFailedError as e:
                raise IndexOutOfDateError(repo.index_url) from e
        repo.change_token = token

    def _update_with_retry(
        self,
        repo: Repo,
        index: IndexFile,
        retry: bool,
        update: Callable[[IndexFile], T],
    ) -> T:
        """Apply update to index, reloading and re-applying it on conflict.

        update mutates the index and stores it; it is called once per attempt
        with a freshly loaded index.
        """
        attempts = self._max_attempts if retry else 1
        attempt = 1
        while True:
            try:
                return update(index)
            except IndexOutOfDateError as e:
                if attempt == attempts:
                    if attempts == 1:
                        raise
                    raise IndexOutOfDateError(repo.index_url, attempts) from e
                logger.debug("%s", e)

            attempt += 1
            delay = min(self._base_delay * self._backoff_factor ** (attempt - 2), self._max_delay)
            logger.debug("retrying after %.1fs (attempt %d/%d)", delay, attempt, attempts)
            self._time.sleep(delay)
            index = self.load_index(repo)

    def push_chart(
        self,
        repo: Repo,
        chart_path: Path,
        *,
        force: bool = False,
        retry: bool = False,
        public: bool = False,
        public_url: str = "",
    ) -> ChartVersion:
        """Add a chart archive to the repository.

        The index is updated first; the archive is uploaded only once the index
        store succeeded.

        Args:
            repo: Repository handle
            chart_path: Local packaged chart (.tgz)
            force: Replace an already indexed version
            retry: Reload and re-apply on concurrent index modification
            public: Publish a public (CDN) download URL in the index
            public_url: Explicit public base URL (used when public is set)

        Returns:
            The index entry written

        Raises:
            ChartAlreadyIndexedError: If the version is indexed and force is not set
            IndexOutOfDateError: If the index changed concurrently (and retries ran out)
            ArchiveSyncError: If the index was updated but the upload failed
            StageError: If loading the index or chart, or storing the index failed
        """
        index = self.load_index(repo)

        logger.debug(
            'load chart "%s" (force=%s, retry=%s, public=%s)', chart_path, force, retry, public
        )
        with _stage("load chart"):
            metadata = self._chart_loader.load(chart_path)
            digest = self._chart_loader.digest(chart_path)
        logger.debug("chart loaded: %s-%s", metadata.name, metadata.version)

        download_url = resolve_download_url(repo.base_url, public, public_url)
        filename = chart_path.name

        def add_chart(index: IndexFile) -> ChartVersion:
            if index.has(metadata.name, metadata.version) and not force:
                raise ChartAlreadyIndexedError(metadata.name, metadata.version)
            logger.debug(
                "indexing chart '%s-%s' as '%s' (base url: %s)",
                metadata.name,
                metadata.version,
                filename,
                download_url,
            )
            entry = index.add_or_replace(
                metadata, filename, download_url, digest, created=self._timestamp()
            )
            self.store_index(repo, index)
            return entry

        entry = self._update_with_retry(repo, index, retry, add_chart)

        archive_url = repo.archive_url(filename)
        logger.debug("upload file %s to bos path %s", filename, archive_url)
        try:
            self._blob_store.put_file(archive_url, chart_path)
        except Exception as e:
            raise ArchiveSyncError("upload", [archive_url], e) from e
        return entry

    def remove_chart(
        self,
        repo: Repo,
        name: str,
        version: str = "",
        *,
        retry: bool = False,
    ) -> list[str]:
        """Remove a chart version, or every version when version is empty.

        Archives are deleted one at a time after the index store succeeded;
        the first failing delete stops the loop. When an explicit version is no
        longer indexed but its archive is still stored under the conventional
        name, only the archive is deleted.

        Returns:
            Storage paths of the deleted archives

        Raises:
            ChartNotFoundError: If the chart (or the given version) is not indexed
            IndexOutOfDateError: If the index changed concurrently (and retries ran out)
            ArchiveSyncError: If the index was updated but a delete failed
        """
        logger.debug("removing chart %s-%s", name, version)
        index = self.load_index(repo)

        def remove(index: IndexFile) -> list[str]:
            urls = index.remove_version(name, version)
            self.store_index(repo, index)
            return urls

        try:
            urls = self._update_with_retry(repo, index, retry, remove)
        except ChartNotFoundError:
            if not version:
                raise
            # an earlier remove may have updated the index but failed the delete
            leftover = repo.archive_url(f"{name}-{version}.tgz")
            with _stage("check archive"):
                found = self._blob_store.exists(leftover)
            if not found:
                raise
            logger.debug("%s-%s is not indexed; deleting leftover archive", name, version)
            paths = [leftover]
        else:
            paths = [
                repo.archive_url(filename) for url in urls if (filename := archive_filename(url))
            ]

        for position, path in enumerate(paths):
            logger.debug("delete bos file %s", path)
            try:
                self._blob_store.delete(path)
            except Exception as e:
                raise ArchiveSyncError("delete", paths[position:], e) from e
        return paths
