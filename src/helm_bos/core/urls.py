"""URL resolution for repository paths and chart download locations.

All functions are pure: the same inputs always produce the same URL.
"""

import posixpath
from urllib.parse import urlparse, urlunparse

INDEX_FILE = "index.yaml"
CDN_HOST_SUFFIX = "cdn.bcebos.com"


def resolve_reference(base: str, name: str) -> str:
    """Join base's path with name, preserving scheme and host.

    Args:
        base: Base URL, e.g. bos://bucket/charts
        name: Relative path to append, e.g. index.yaml

    Returns:
        Joined URL, e.g. bos://bucket/charts/index.yaml

    Example:
        >>> resolve_reference("bos://bucket/charts", "index.yaml")
        'bos://bucket/charts/index.yaml'
        >>> resolve_reference("bos://bucket", "foo-1.0.0.tgz")
        'bos://bucket/foo-1.0.0.tgz'
    """
    parsed = urlparse(base)
    joined = posixpath.normpath(posixpath.join("/", parsed.path, name))
    return urlunparse(parsed._replace(path=joined))


def resolve_download_url(base: str, public: bool, public_url: str) -> str:
    """Compute the base URL charts are downloaded from, as written into the index.

    Args:
        base: Repository base URL, e.g. bos://bucket/charts
        public: Whether to publish a public (CDN) URL instead of the bos:// path
        public_url: Explicit public base URL; used verbatim when public is set

    Returns:
        public_url when public and public_url is non-empty; the BOS CDN URL for
        base's bucket and path when public; base unchanged otherwise
    """
    if public and public_url:
        return public_url
    if public:
        parsed = urlparse(base)
        return f"https://{parsed.netloc}.{CDN_HOST_SUFFIX}/{parsed.path.lstrip('/')}"
    return base


def url_join(base: str, filename: str) -> str:
    """Join a download base URL and a chart file name.

    An empty base yields the bare file name (a relative URL).
    """
    if not base:
        return filename
    return base.rstrip("/") + "/" + filename


def archive_filename(url: str) -> str:
    """Get the archive file name a download URL points at ("" when it has none)."""
    return posixpath.basename(urlparse(url).path)
