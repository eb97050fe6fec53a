"""Error taxonomy for chart repository operations.

Every error raised by the core derives from HelmBosError so the CLI can map
them to a single exit path. Subclasses are distinguishable by kind so a caller
can decide whether to re-invoke with --force or --retry:

- ChartAlreadyIndexedError: terminal, re-invoke with force
- IndexOutOfDateError: recoverable by reloading the index (retry)
- ChartNotFoundError / ChartVersionNotFoundError: terminal
- RepoNotFoundError: terminal
- StageError: a collaborator failed; carries the stage that produced it
- ArchiveSyncError: the index was updated but the archive operation failed
"""


class HelmBosError(Exception):
    """Base class for all helm-bos errors."""

    pass


class ChartAlreadyIndexedError(HelmBosError):
    """Raised when pushing a chart version that is already indexed without force."""

    def __init__(self, name: str, version: str) -> None:
        self.name = name
        self.version = version
        super().__init__(
            f"chart {name}-{version} already indexed. Use --force to still upload the chart"
        )


class IndexOutOfDateError(HelmBosError):
    """Raised when the remote index changed between load and store.

    Recoverable: reload the index and apply the mutation again.
    """

    def __init__(self, index_url: str, attempts: int = 1) -> None:
        self.index_url = index_url
        self.attempts = attempts
        message = f"index is out-of-date: {index_url} was modified concurrently"
        if attempts > 1:
            message += f" (gave up after {attempts} attempts)"
        super().__init__(message)


class ChartNotFoundError(HelmBosError):
    """Raised when removing a chart name that is not indexed."""

    def __init__(self, name: str, message: str | None = None) -> None:
        self.name = name
        super().__init__(message or f'chart "{name}" not found')


class ChartVersionNotFoundError(ChartNotFoundError):
    """Raised when removing a version that is not indexed under an existing name."""

    def __init__(self, name: str, version: str) -> None:
        self.version = version
        super().__init__(name, f'chart "{name}" has no version "{version}"')


class RepoNotFoundError(HelmBosError):
    """Raised when a repository name is not registered with Helm."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f'repository "{name}" does not exist')


class IndexParseError(HelmBosError):
    """Raised when an index document cannot be parsed."""

    pass


class ChartLoadError(HelmBosError):
    """Raised when a chart archive cannot be read."""

    pass


class StageError(HelmBosError):
    """Collaborator failure wrapped with the operation stage that produced it.

    The original exception is available as __cause__ and as `cause`.
    """

    def __init__(self, stage: str, cause: Exception) -> None:
        self.stage = stage
        self.cause = cause
        super().__init__(f"{stage}: {cause}")


class ArchiveSyncError(HelmBosError):
    """Raised when the index was stored but the archive operation failed.

    The index and the object store are possibly inconsistent. A forced push
    uploads again; removing a version that is no longer indexed deletes its
    leftover archive.

    Attributes:
        operation: "upload" or "delete"
        paths: Archive paths that were not processed
        cause: The underlying blob store error
    """

    def __init__(self, operation: str, paths: list[str], cause: Exception) -> None:
        self.operation = operation
        self.paths = paths
        self.cause = cause
        super().__init__(
            f"index updated, archive {operation} failed for {', '.join(paths)}: {cause}"
        )
