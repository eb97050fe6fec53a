"""Tests for FakeBlobStore compare-and-swap semantics and path handling."""

from pathlib import Path

import pytest

from helm_bos.core.blob_store.fake import FakeBlobStore
from helm_bos.core.blob_store.types import (
    BlobNotFoundError,
    BosPath,
    InvalidBosPathError,
    PreconditionFailedError,
    split_path,
)

PATH = "bos://bucket/charts/index.yaml"


@pytest.mark.parametrize(
    ("path", "expected"),
    [
        ("bos://bucket/charts/index.yaml", BosPath(bucket="bucket", key="charts/index.yaml")),
        ("bs://bucket/index.yaml", BosPath(bucket="bucket", key="index.yaml")),
        ("bos://bucket", BosPath(bucket="bucket", key="")),
    ],
)
def test_split_path(path: str, expected: BosPath) -> None:
    assert split_path(path) == expected


@pytest.mark.parametrize("path", ["s3://bucket/key", "bos:///key", "bucket/key", ""])
def test_split_path_rejects_other_urls(path: str) -> None:
    with pytest.raises(InvalidBosPathError, match="should be"):
        split_path(path)


def test_get_missing_object() -> None:
    with pytest.raises(BlobNotFoundError):
        FakeBlobStore().get(PATH)
    assert FakeBlobStore().head(PATH) is None


def test_put_changes_token() -> None:
    store = FakeBlobStore(objects={PATH: b"v1"})
    before = store.get(PATH).change_token

    after = store.put(PATH, b"v2", if_match=before)

    assert before == '"1"'
    assert after == '"2"'
    assert store.head(PATH) == after


def test_put_with_stale_token_is_rejected() -> None:
    store = FakeBlobStore(objects={PATH: b"v1"})
    store.put(PATH, b"v2")

    with pytest.raises(PreconditionFailedError):
        store.put(PATH, b"v3", if_match='"1"')

    assert store.objects[PATH] == b"v2"
    assert store.rejected_puts == [PATH]


def test_put_if_none_match_on_existing_object_is_rejected() -> None:
    store = FakeBlobStore(objects={PATH: b"v1"})

    with pytest.raises(PreconditionFailedError):
        store.put(PATH, b"v2", if_none_match=True)


def test_put_if_match_on_missing_object_is_rejected() -> None:
    with pytest.raises(PreconditionFailedError):
        FakeBlobStore().put(PATH, b"v1", if_match='"1"')


def test_preconditions_ignored_without_conditional_writes() -> None:
    store = FakeBlobStore(objects={PATH: b"v1"}, supports_conditional_writes=False)

    store.put(PATH, b"v2", if_match='"99"')

    assert store.objects[PATH] == b"v2"


def test_tokens_hidden_when_not_exposed() -> None:
    store = FakeBlobStore(objects={PATH: b"v1"}, expose_tokens=False)

    assert store.get(PATH).change_token is None
    assert store.head(PATH) is None
    assert store.put(PATH, b"v2") is None


def test_exists_ignores_token_exposure() -> None:
    store = FakeBlobStore(objects={PATH: b"v1"}, expose_tokens=False)

    assert store.exists(PATH)
    assert not store.exists("bos://bucket/charts/missing.tgz")


def test_put_file_and_delete(tmp_path: Path) -> None:
    local = tmp_path / "foo-1.0.0.tgz"
    local.write_bytes(b"chart")
    store = FakeBlobStore()

    store.put_file("bos://bucket/charts/foo-1.0.0.tgz", local)
    assert store.get("bos://bucket/charts/foo-1.0.0.tgz").data == b"chart"

    store.delete("bos://bucket/charts/foo-1.0.0.tgz")
    assert "bos://bucket/charts/foo-1.0.0.tgz" not in store.objects
    assert store.deleted_paths == ["bos://bucket/charts/foo-1.0.0.tgz"]


def test_failing_paths(tmp_path: Path) -> None:
    local = tmp_path / "foo-1.0.0.tgz"
    local.write_bytes(b"chart")
    store = FakeBlobStore(failing_paths={"bos://bucket/foo-1.0.0.tgz"})

    with pytest.raises(RuntimeError, match="upload failed"):
        store.put_file("bos://bucket/foo-1.0.0.tgz", local)
    with pytest.raises(RuntimeError, match="delete failed"):
        store.delete("bos://bucket/foo-1.0.0.tgz")
