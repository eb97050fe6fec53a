"""Data types and path handling for the blob store integration."""

from dataclasses import dataclass
from urllib.parse import urlparse

BOS_SCHEMES = ("bos", "bs")


@dataclass(frozen=True)
class BlobObject:
    """Content of a stored object together with its change token.

    Fields:
        data: Raw object bytes
        change_token: Opaque marker of the object's state at read time (ETag),
            None when the store does not expose one
    """

    data: bytes
    change_token: str | None


@dataclass(frozen=True)
class BosPath:
    """A bos://bucket/key path split into its parts."""

    bucket: str
    key: str


class BlobNotFoundError(Exception):
    """Raised when reading an object that does not exist."""

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"object not found: {path}")


class PreconditionFailedError(Exception):
    """Raised when a conditional write does not match the object's current state."""

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"precondition failed writing {path}")


class InvalidBosPathError(ValueError):
    """Raised when a path is not a bos://bucket/path URL."""

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f'incorrect url "{path}", should be "bos://bucket/path"')


def split_path(path: str) -> BosPath:
    """Split a bos://bucket/key URL into bucket and key.

    Args:
        path: URL with scheme bos or bs

    Returns:
        BosPath with the bucket (URL host) and key (URL path without leading slash)

    Raises:
        InvalidBosPathError: If the scheme is not bos/bs or the bucket is missing
    """
    parsed = urlparse(path)
    if parsed.scheme not in BOS_SCHEMES or not parsed.netloc:
        raise InvalidBosPathError(path)
    return BosPath(bucket=parsed.netloc, key=parsed.path.lstrip("/"))
