"""Dry-run blob store wrapper.

Read-only operations are delegated to the wrapped implementation; writes print
what would happen instead of executing.
"""

from pathlib import Path

from helm_bos.cli.output import user_output
from helm_bos.core.blob_store.abc import BlobStore
from helm_bos.core.blob_store.types import BlobObject


class DryRunBlobStore(BlobStore):
    """Wrapper that prevents writes to the object store.

    Usage:
        real_store = BosBlobStore(...)
        dry_run_store = DryRunBlobStore(real_store)

        # Prints a message instead of uploading
        dry_run_store.put_file("bos://bucket/charts/foo-1.0.0.tgz", path)
    """

    def __init__(self, wrapped: BlobStore) -> None:
        """Create a dry-run wrapper around a BlobStore implementation.

        Args:
            wrapped: The BlobStore implementation to wrap
        """
        self._wrapped = wrapped

    @property
    def supports_conditional_writes(self) -> bool:
        return self._wrapped.supports_conditional_writes

    def get(self, path: str) -> BlobObject:
        """Read an object (read-only, delegates to wrapped)."""
        return self._wrapped.get(path)

    def head(self, path: str) -> str | None:
        """Get change token (read-only, delegates to wrapped)."""
        return self._wrapped.head(path)

    def exists(self, path: str) -> bool:
        """Check existence (read-only, delegates to wrapped)."""
        return self._wrapped.exists(path)

    def put(
        self,
        path: str,
        data: bytes,
        *,
        if_match: str | None = None,
        if_none_match: bool = False,
    ) -> str | None:
        """Print the write and return the token the object already has."""
        user_output(f"[DRY RUN] Would write {len(data)} bytes to {path}")
        return if_match

    def put_file(self, path: str, local_path: Path) -> None:
        user_output(f"[DRY RUN] Would upload {local_path} to {path}")

    def delete(self, path: str) -> None:
        user_output(f"[DRY RUN] Would delete {path}")
