"""Tests for the index document model."""

import pytest

from helm_bos.core.chart.types import ChartMetadata
from helm_bos.core.errors import ChartNotFoundError, ChartVersionNotFoundError, IndexParseError
from helm_bos.core.index import ChartVersion, IndexFile, semver_key, sort_versions

BASE = "bos://bucket/charts"
CREATED = "2024-01-15T10:00:00.000000Z"


def _add(index: IndexFile, name: str, version: str, digest: str = "d", **fields: object) -> None:
    index.add_or_replace(
        ChartMetadata(name=name, version=version, fields=dict(fields)),
        f"{name}-{version}.tgz",
        BASE,
        digest,
        created=CREATED,
    )


def _versions(index: IndexFile, name: str) -> list[str]:
    return [v.version for v in index.entries[name]]


def test_has_and_get_exact_match() -> None:
    index = IndexFile()
    _add(index, "foo", "1.0.0", digest="abc")

    assert index.has("foo", "1.0.0")
    assert not index.has("foo", "1.0.1")
    assert not index.has("bar", "1.0.0")
    entry = index.get("foo", "1.0.0")
    assert entry is not None
    assert entry.digest == "abc"
    assert index.get("foo", "2.0.0") is None


def test_add_builds_entry_from_metadata() -> None:
    index = IndexFile()
    index.add_or_replace(
        ChartMetadata(
            name="foo", version="1.0.0", fields={"appVersion": "2.3", "apiVersion": "v2"}
        ),
        "foo-1.0.0.tgz",
        "https://bucket.cdn.bcebos.com/charts",
        "abc",
        created=CREATED,
    )

    entry = index.get("foo", "1.0.0")
    assert entry == ChartVersion(
        name="foo",
        version="1.0.0",
        urls=["https://bucket.cdn.bcebos.com/charts/foo-1.0.0.tgz"],
        digest="abc",
        created=CREATED,
        metadata={"appVersion": "2.3", "apiVersion": "v2"},
    )


def test_add_defaults_chart_api_version() -> None:
    index = IndexFile()
    _add(index, "foo", "1.0.0")

    entry = index.get("foo", "1.0.0")
    assert entry is not None
    assert entry.metadata["apiVersion"] == "v1"


def test_add_with_empty_base_url_uses_relative_url() -> None:
    index = IndexFile()
    index.add_or_replace(
        ChartMetadata(name="foo", version="1.0.0"), "foo-1.0.0.tgz", "", "d", created=CREATED
    )

    entry = index.get("foo", "1.0.0")
    assert entry is not None
    assert entry.urls == ["foo-1.0.0.tgz"]


def test_add_or_replace_replaces_same_version() -> None:
    index = IndexFile()
    _add(index, "foo", "1.0.0", digest="old")
    _add(index, "foo", "1.1.0")
    _add(index, "foo", "1.0.0", digest="new")

    assert sorted(_versions(index, "foo")) == ["1.0.0", "1.1.0"]
    entry = index.get("foo", "1.0.0")
    assert entry is not None
    assert entry.digest == "new"


def test_remove_single_version_returns_its_urls() -> None:
    index = IndexFile()
    _add(index, "foo", "1.0.0")
    _add(index, "foo", "1.1.0")

    removed = index.remove_version("foo", "1.0.0")

    assert removed == [f"{BASE}/foo-1.0.0.tgz"]
    assert _versions(index, "foo") == ["1.1.0"]


def test_remove_last_version_deletes_name() -> None:
    index = IndexFile()
    _add(index, "foo", "1.0.0")

    index.remove_version("foo", "1.0.0")

    assert "foo" not in index.entries


def test_remove_all_versions_with_empty_version() -> None:
    index = IndexFile()
    _add(index, "foo", "1.0.0")
    _add(index, "foo", "1.1.0")
    _add(index, "bar", "0.1.0")

    removed = index.remove_version("foo", "")

    assert sorted(removed) == [f"{BASE}/foo-1.0.0.tgz", f"{BASE}/foo-1.1.0.tgz"]
    assert "foo" not in index.entries
    assert index.has("bar", "0.1.0")


def test_remove_unknown_name_raises_not_found() -> None:
    index = IndexFile()

    with pytest.raises(ChartNotFoundError, match='chart "foo" not found'):
        index.remove_version("foo", "")


def test_remove_unknown_version_raises_and_keeps_entries() -> None:
    index = IndexFile()
    _add(index, "foo", "1.0.0")

    with pytest.raises(ChartVersionNotFoundError):
        index.remove_version("foo", "9.9.9")

    assert index.has("foo", "1.0.0")


def test_sort_entries_orders_names_and_descending_versions() -> None:
    index = IndexFile()
    for version in ["1.2.0", "not-semver", "1.10.0", "1.10.0-rc.1", "0.9.0", "v2.0"]:
        _add(index, "foo", version)
    _add(index, "bar", "1.0.0")

    index.sort_entries()

    assert list(index.entries) == ["bar", "foo"]
    assert _versions(index, "foo") == [
        "v2.0",
        "1.10.0",
        "1.10.0-rc.1",
        "1.2.0",
        "0.9.0",
        "not-semver",
    ]


def test_semver_key_prerelease_precedence() -> None:
    ordered = [
        "1.0.0-alpha",
        "1.0.0-alpha.1",
        "1.0.0-alpha.beta",
        "1.0.0-beta.2",
        "1.0.0-beta.11",
        "1.0.0",
    ]
    keys = [semver_key(v) for v in ordered]

    assert keys == sorted(keys)


def test_semver_key_rejects_invalid_versions() -> None:
    assert semver_key("latest") is None
    assert semver_key("1.0.0.0") is None
    assert semver_key("1.0.0+build.5") == semver_key("1.0.0")


def test_semver_key_accepts_leading_zeros_and_prefix() -> None:
    assert semver_key("01.2.3") == semver_key("1.2.3")
    assert semver_key("v1.02") == semver_key("1.2.0")

    entries = [
        ChartVersion(name="foo", version=v, urls=[], digest="", created="")
        for v in ["01.2.3", "latest", "1.10.0"]
    ]

    assert [v.version for v in sort_versions(entries)] == ["1.10.0", "01.2.3", "latest"]


def test_sort_versions_puts_unparseable_last() -> None:
    entries = [
        ChartVersion(name="foo", version=v, urls=[], digest="", created="")
        for v in ["b", "1.0.0", "a", "2.0.0"]
    ]

    assert [v.version for v in sort_versions(entries)] == ["2.0.0", "1.0.0", "a", "b"]


def test_yaml_round_trip_is_stable() -> None:
    index = IndexFile(generated=CREATED)
    _add(index, "zeta", "0.1.0", description="Last chart", keywords=["a", "b"])
    _add(index, "alpha", "1.0.0", appVersion="1.16")
    _add(index, "alpha", "1.1.0")
    index.sort_entries()
    first = index.to_yaml()

    reloaded = IndexFile.from_yaml(first)

    assert reloaded.to_yaml() == first
    assert reloaded.entries == index.entries


def test_from_yaml_keeps_timestamps_as_strings() -> None:
    content = b"""apiVersion: v1
entries:
  foo:
  - apiVersion: v2
    created: 2020-01-02T03:04:05.123456789Z
    digest: abc
    name: foo
    urls:
    - bos://bucket/charts/foo-1.0.0.tgz
    version: 1.0.0
generated: 2020-01-02T03:04:05Z
serverInfo: {}
"""

    index = IndexFile.from_yaml(content)

    entry = index.get("foo", "1.0.0")
    assert entry is not None
    assert entry.created == "2020-01-02T03:04:05.123456789Z"
    assert index.generated == "2020-01-02T03:04:05Z"
    assert index.extra == {"serverInfo": {}}


def test_from_yaml_numeric_version_becomes_string() -> None:
    content = b"""apiVersion: v1
entries:
  foo:
  - name: foo
    version: 1.0
    urls: []
generated: ""
"""

    index = IndexFile.from_yaml(content)

    assert index.has("foo", "1.0")


def test_to_yaml_omits_digest_and_created_missing_from_source() -> None:
    content = b"apiVersion: v1\nentries:\n  foo:\n  - name: foo\n    version: 1.0.0\n    urls: []\n"

    output = IndexFile.from_yaml(content).to_yaml()

    assert b"digest" not in output
    assert b"created" not in output
    assert IndexFile.from_yaml(output).has("foo", "1.0.0")


def test_from_yaml_empty_document_is_empty_index() -> None:
    index = IndexFile.from_yaml(b"")

    assert index.entries == {}
    assert index.api_version == "v1"


def test_from_yaml_drops_names_without_versions() -> None:
    index = IndexFile.from_yaml(b"apiVersion: v1\nentries:\n  foo: []\ngenerated: ''\n")

    assert index.entries == {}


@pytest.mark.parametrize(
    "content",
    [
        b"- just\n- a list\n",
        b"entries: [1, 2]\n",
        b"entries:\n  foo:\n  - version: 1.0.0\n",
        b"entries: {foo: [{name: foo, version: 1.0.0, urls: nope}]}\n",
        b"entries: {unclosed\n",
    ],
)
def test_from_yaml_rejects_malformed_documents(content: bytes) -> None:
    with pytest.raises(IndexParseError):
        IndexFile.from_yaml(content)
