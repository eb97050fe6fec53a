"""Tests for DryRunBlobStore."""

from pathlib import Path

import pytest

from helm_bos.core.blob_store.dry_run import DryRunBlobStore
from helm_bos.core.blob_store.fake import FakeBlobStore

PATH = "bos://bucket/charts/index.yaml"


def test_reads_are_delegated() -> None:
    store = DryRunBlobStore(FakeBlobStore(objects={PATH: b"content"}))

    assert store.get(PATH).data == b"content"
    assert store.head(PATH) == '"1"'
    assert store.exists(PATH)
    assert store.supports_conditional_writes is True


def test_writes_are_printed_not_executed(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    wrapped = FakeBlobStore(objects={PATH: b"content"})
    store = DryRunBlobStore(wrapped)
    local = tmp_path / "foo-1.0.0.tgz"
    local.write_bytes(b"chart")

    token = store.put(PATH, b"new content", if_match='"1"')
    store.put_file("bos://bucket/charts/foo-1.0.0.tgz", local)
    store.delete(PATH)

    assert token == '"1"'
    assert wrapped.objects == {PATH: b"content"}
    assert wrapped.put_calls == []
    err = capsys.readouterr().err
    assert f"[DRY RUN] Would write 11 bytes to {PATH}" in err
    assert f"[DRY RUN] Would upload {local} to bos://bucket/charts/foo-1.0.0.tgz" in err
    assert f"[DRY RUN] Would delete {PATH}" in err
