"""In-memory fake blob store for testing."""

import threading
from collections.abc import Callable
from pathlib import Path

from helm_bos.core.blob_store.abc import BlobStore
from helm_bos.core.blob_store.types import (
    BlobNotFoundError,
    BlobObject,
    PreconditionFailedError,
    split_path,
)


class FakeBlobStore(BlobStore):
    """In-memory fake implementation for testing.

    All state is provided via constructor using keyword arguments. Each write
    bumps a per-object generation counter which serves as the change token.
    Operations are serialized with a lock so concurrent writers see atomic
    compare-and-swap semantics.
    """

    def __init__(
        self,
        *,
        objects: dict[str, bytes] | None = None,
        supports_conditional_writes: bool = True,
        expose_tokens: bool = True,
        before_put: Callable[[str], None] | None = None,
        failing_paths: set[str] | None = None,
    ) -> None:
        """Create FakeBlobStore with pre-configured state.

        Args:
            objects: Mapping of bos:// path -> content
            supports_conditional_writes: Whether put() enforces preconditions
            expose_tokens: Whether get()/head()/put() return change tokens
            before_put: Called with the path before every put() is applied,
                outside the lock (simulates a concurrent writer)
            failing_paths: Paths for which put_file() and delete() raise RuntimeError
        """
        self._objects: dict[str, bytes] = {}
        self._generations: dict[str, int] = {}
        for path, data in (objects or {}).items():
            split_path(path)
            self._objects[path] = data
            self._generations[path] = 1
        self._supports_conditional_writes = supports_conditional_writes
        self._expose_tokens = expose_tokens
        self._before_put = before_put
        self._failing_paths = failing_paths or set()
        self._lock = threading.Lock()
        self._put_calls: list[str] = []
        self._uploaded_files: list[tuple[str, Path]] = []
        self._deleted_paths: list[str] = []
        self._rejected_puts: list[str] = []

    @property
    def objects(self) -> dict[str, bytes]:
        """Read-only copy of stored objects for test assertions."""
        with self._lock:
            return dict(self._objects)

    @property
    def put_calls(self) -> list[str]:
        """Paths passed to successful put() calls, in order."""
        return self._put_calls

    @property
    def uploaded_files(self) -> list[tuple[str, Path]]:
        """(path, local_path) tuples passed to put_file()."""
        return self._uploaded_files

    @property
    def deleted_paths(self) -> list[str]:
        """Paths passed to successful delete() calls."""
        return self._deleted_paths

    @property
    def rejected_puts(self) -> list[str]:
        """Paths of put() calls rejected by a failed precondition."""
        return self._rejected_puts

    @property
    def supports_conditional_writes(self) -> bool:
        return self._supports_conditional_writes

    def _token(self, path: str) -> str | None:
        if not self._expose_tokens or path not in self._generations:
            return None
        return f'"{self._generations[path]}"'

    def get(self, path: str) -> BlobObject:
        split_path(path)
        with self._lock:
            if path not in self._objects:
                raise BlobNotFoundError(path)
            return BlobObject(data=self._objects[path], change_token=self._token(path))

    def head(self, path: str) -> str | None:
        split_path(path)
        with self._lock:
            return self._token(path)

    def exists(self, path: str) -> bool:
        split_path(path)
        with self._lock:
            return path in self._objects

    def put(
        self,
        path: str,
        data: bytes,
        *,
        if_match: str | None = None,
        if_none_match: bool = False,
    ) -> str | None:
        split_path(path)
        if self._before_put is not None:
            self._before_put(path)
        with self._lock:
            if self._supports_conditional_writes:
                exists = path in self._objects
                if if_none_match and exists:
                    self._rejected_puts.append(path)
                    raise PreconditionFailedError(path)
                if if_match is not None and (not exists or self._token(path) != if_match):
                    self._rejected_puts.append(path)
                    raise PreconditionFailedError(path)
            self._objects[path] = data
            self._generations[path] = self._generations.get(path, 0) + 1
            self._put_calls.append(path)
            return self._token(path)

    def put_file(self, path: str, local_path: Path) -> None:
        split_path(path)
        if path in self._failing_paths:
            msg = f"upload failed: {path}"
            raise RuntimeError(msg)
        data = local_path.read_bytes()
        with self._lock:
            self._objects[path] = data
            self._generations[path] = self._generations.get(path, 0) + 1
            self._uploaded_files.append((path, local_path))

    def delete(self, path: str) -> None:
        split_path(path)
        if path in self._failing_paths:
            msg = f"delete failed: {path}"
            raise RuntimeError(msg)
        with self._lock:
            self._objects.pop(path, None)
            self._generations.pop(path, None)
            self._deleted_paths.append(path)
