"""Helm repository index document model.

The index (index.yaml) lists every chart name of a repository together with
its versions. Invariants maintained here:

- Within entries[name], no two ChartVersion share a version.
- A name key exists only while it has at least one version.
- After sort_entries(), names are ordered alphabetically and versions by
  descending semantic version; unparseable versions come last.

Serialization is YAML with sorted keys and string timestamps, so a document
loaded and stored again without changes is byte-identical apart from the
generated timestamp.
"""

import re
from dataclasses import dataclass, field
from typing import Any

import semver
import yaml

from helm_bos.core.chart.types import ChartMetadata
from helm_bos.core.errors import ChartNotFoundError, ChartVersionNotFoundError, IndexParseError
from helm_bos.core.urls import url_join
from helm_bos.core.yaml_io import dump_yaml, load_yaml

API_VERSION = "v1"
DEFAULT_CHART_API_VERSION = "v1"

_IDENTITY_KEYS = ("name", "version", "urls", "digest", "created")

_NUMERIC_CORE_RE = re.compile(r"^(\d+(?:\.\d+){0,2})(.*)$", re.DOTALL)


def semver_key(version: str) -> semver.Version | None:
    """Parse a chart version for semantic version ordering.

    Accepts the same relaxed forms Helm does: an optional "v" prefix, missing
    minor/patch components (counted as zero) and leading zeros. Build
    metadata does not take part in ordering.

    Returns:
        Comparable semver.Version, or None when version is not a semantic version
    """
    text = version[1:] if version.startswith("v") else version
    match = _NUMERIC_CORE_RE.match(text)
    if match is None:
        return None
    core = ".".join(str(int(part)) for part in match.group(1).split("."))
    try:
        return semver.Version.parse(core + match.group(2), optional_minor_and_patch=True)
    except ValueError:
        return None


def sort_versions(versions: list["ChartVersion"]) -> list["ChartVersion"]:
    """Order versions newest first; unparseable versions last, by string."""
    parsed = [(semver_key(v.version), v) for v in versions]
    valid = [(key, v) for key, v in parsed if key is not None]
    invalid = [v for key, v in parsed if key is None]
    valid.sort(key=lambda item: (item[0], item[1].version), reverse=True)
    invalid.sort(key=lambda v: v.version)
    return [v for _, v in valid] + invalid


@dataclass(frozen=True)
class ChartVersion:
    """One (name, version) record of the index.

    Fields:
        name: Chart name
        version: Chart version
        urls: Download URLs (this tool always writes exactly one)
        digest: Hex SHA-256 of the chart archive
        created: ISO-8601 timestamp of when the entry was created
        metadata: Remaining Chart.yaml fields, copied verbatim
    """

    name: str
    version: str
    urls: list[str]
    digest: str
    created: str
    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        data = dict(self.metadata)
        data.update(name=self.name, version=self.version, urls=list(self.urls))
        # absent in the source document stays absent; Helm rejects an empty created
        if self.digest:
            data["digest"] = self.digest
        if self.created:
            data["created"] = self.created
        return data

    @staticmethod
    def from_dict(data: dict[str, Any]) -> "ChartVersion":
        if not isinstance(data, dict):
            raise IndexParseError(f"chart version entry is not a mapping: {data!r}")
        name = data.get("name")
        version = data.get("version")
        if not name or version is None:
            raise IndexParseError(f"chart version entry without name or version: {data!r}")
        urls = data.get("urls") or []
        if not isinstance(urls, list):
            raise IndexParseError(f"urls of {name}-{version} is not a list")
        return ChartVersion(
            name=str(name),
            version=str(version),
            urls=[str(u) for u in urls],
            digest=str(data.get("digest") or ""),
            created=str(data.get("created") or ""),
            metadata={k: v for k, v in data.items() if k not in _IDENTITY_KEYS},
        )


@dataclass
class IndexFile:
    """In-memory representation of a repository index.

    Mutable: the synchronization engine loads one, mutates it, and stores it.
    Never share one instance across concurrent mutations.
    """

    entries: dict[str, list[ChartVersion]] = field(default_factory=dict)
    generated: str = ""
    api_version: str = API_VERSION
    extra: dict[str, Any] = field(default_factory=dict)

    def has(self, name: str, version: str) -> bool:
        """Check whether name+version is indexed."""
        return self.get(name, version) is not None

    def get(self, name: str, version: str) -> ChartVersion | None:
        """Look up an exact name+version; None when absent."""
        for entry in self.entries.get(name, []):
            if entry.version == version:
                return entry
        return None

    def add_or_replace(
        self,
        metadata: ChartMetadata,
        filename: str,
        base_url: str,
        digest: str,
        created: str,
    ) -> ChartVersion:
        """Index a chart version, replacing an existing entry with the same version.

        Args:
            metadata: Chart metadata from the archive
            filename: Archive file name, appended to base_url
            base_url: Download base URL (see urls.resolve_download_url)
            digest: Hex SHA-256 of the archive
            created: ISO-8601 creation timestamp

        Returns:
            The new entry
        """
        fields = dict(metadata.fields)
        fields.setdefault("apiVersion", DEFAULT_CHART_API_VERSION)
        entry = ChartVersion(
            name=metadata.name,
            version=metadata.version,
            urls=[url_join(base_url, filename)],
            digest=digest,
            created=created,
            metadata=fields,
        )
        versions = [v for v in self.entries.get(metadata.name, []) if v.version != entry.version]
        versions.append(entry)
        self.entries[metadata.name] = versions
        return entry

    def remove_version(self, name: str, version: str) -> list[str]:
        """Remove one version of a chart, or all versions when version is empty.

        The name key is deleted once no versions remain.

        Returns:
            URLs of the removed entries

        Raises:
            ChartNotFoundError: If name is not indexed
            ChartVersionNotFoundError: If version is given but not indexed
        """
        versions = self.entries.get(name)
        if not versions:
            raise ChartNotFoundError(name)

        removed = [v for v in versions if not version or v.version == version]
        if not removed:
            raise ChartVersionNotFoundError(name, version)

        kept = [v for v in versions if version and v.version != version]
        if kept:
            self.entries[name] = kept
        else:
            del self.entries[name]
        return [url for entry in removed for url in entry.urls]

    def sort_entries(self) -> None:
        """Re-establish canonical ordering of names and versions."""
        self.entries = {name: sort_versions(self.entries[name]) for name in sorted(self.entries)}

    def to_yaml(self) -> bytes:
        data: dict[str, Any] = dict(self.extra)
        data["apiVersion"] = self.api_version
        data["entries"] = {
            name: [v.to_dict() for v in versions] for name, versions in self.entries.items()
        }
        data["generated"] = self.generated
        return dump_yaml(data).encode("utf-8")

    @staticmethod
    def from_yaml(content: bytes) -> "IndexFile":
        """Parse an index document and sort it.

        Raises:
            IndexParseError: If the document is not a valid index
        """
        try:
            data = load_yaml(content)
        except yaml.YAMLError as e:
            raise IndexParseError(f"invalid index document: {e}") from e
        if data is None:
            return IndexFile()
        if not isinstance(data, dict):
            raise IndexParseError("index document is not a mapping")

        raw_entries = data.pop("entries", None) or {}
        if not isinstance(raw_entries, dict):
            raise IndexParseError("index entries is not a mapping")
        entries: dict[str, list[ChartVersion]] = {}
        for name, raw_versions in raw_entries.items():
            versions = [ChartVersion.from_dict(v) for v in raw_versions or []]
            if versions:
                entries[str(name)] = versions

        index = IndexFile(
            entries=entries,
            generated=str(data.pop("generated", "") or ""),
            api_version=str(data.pop("apiVersion", API_VERSION) or API_VERSION),
            extra=data,
        )
        index.sort_entries()
        return index
