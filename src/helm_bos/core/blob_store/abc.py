"""Abstract interface for object store operations."""

from abc import ABC, abstractmethod
from pathlib import Path

from helm_bos.core.blob_store.types import BlobObject


class BlobStore(ABC):
    """Abstract interface for reading and writing objects by bos:// path.

    All implementations (real, fake and dry-run) must implement this interface.
    """

    @property
    @abstractmethod
    def supports_conditional_writes(self) -> bool:
        """Whether put() enforces if_match/if_none_match atomically.

        When False, callers can only re-check the change token before writing,
        which narrows but does not close the lost-update window.
        """
        ...

    @abstractmethod
    def get(self, path: str) -> BlobObject:
        """Read an object.

        Args:
            path: bos://bucket/key path

        Returns:
            BlobObject with the content and its change token

        Raises:
            BlobNotFoundError: If the object does not exist
        """
        ...

    @abstractmethod
    def head(self, path: str) -> str | None:
        """Get the current change token of an object without reading it.

        Args:
            path: bos://bucket/key path

        Returns:
            Current change token, or None if the object does not exist
        """
        ...

    @abstractmethod
    def exists(self, path: str) -> bool:
        """Check whether an object exists.

        Unlike head(), the answer does not depend on the store exposing change
        tokens.
        """
        ...

    @abstractmethod
    def put(
        self,
        path: str,
        data: bytes,
        *,
        if_match: str | None = None,
        if_none_match: bool = False,
    ) -> str | None:
        """Write an object, optionally conditioned on its current state.

        Args:
            path: bos://bucket/key path
            data: Content to write
            if_match: Only write if the object's change token equals this value
            if_none_match: Only write if the object does not exist yet

        Returns:
            Change token of the written object, None if the store exposes none

        Raises:
            PreconditionFailedError: If a condition does not hold
        """
        ...

    @abstractmethod
    def put_file(self, path: str, local_path: Path) -> None:
        """Upload a local file.

        Args:
            path: bos://bucket/key destination
            local_path: File to upload
        """
        ...

    @abstractmethod
    def delete(self, path: str) -> None:
        """Delete an object.

        Args:
            path: bos://bucket/key path
        """
        ...
