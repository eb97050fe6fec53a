"""Object store subpackage.

Abstractions over BOS object operations with a fake for tests and a dry-run
wrapper.
"""

from helm_bos.core.blob_store.abc import BlobStore
from helm_bos.core.blob_store.dry_run import DryRunBlobStore
from helm_bos.core.blob_store.fake import FakeBlobStore
from helm_bos.core.blob_store.real import BosBlobStore
from helm_bos.core.blob_store.types import (
    BlobNotFoundError,
    BlobObject,
    BosPath,
    InvalidBosPathError,
    PreconditionFailedError,
    split_path,
)

__all__ = [
    "BlobNotFoundError",
    "BlobObject",
    "BlobStore",
    "BosBlobStore",
    "BosPath",
    "DryRunBlobStore",
    "FakeBlobStore",
    "InvalidBosPathError",
    "PreconditionFailedError",
    "split_path",
]
