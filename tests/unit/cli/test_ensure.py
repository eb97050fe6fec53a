"""Tests for CLI error reporting."""

import pytest

from helm_bos.cli.ensure import Ensure, exit_on_error
from helm_bos.core.errors import (
    ArchiveSyncError,
    ChartAlreadyIndexedError,
    IndexOutOfDateError,
)

INDEX_URL = "bos://bucket/charts/index.yaml"


def test_invariant_passes_silently() -> None:
    Ensure.invariant(True, "never shown")


def test_invariant_exits_with_message(capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as exc_info:
        Ensure.invariant(False, "something is wrong")

    assert exc_info.value.code == 1
    assert "Error: something is wrong" in capsys.readouterr().err


@pytest.mark.parametrize("value", ["bos://bucket/charts", "bs://bucket"])
def test_bos_url_accepts(value: str) -> None:
    assert Ensure.bos_url(value, "bad") == value


@pytest.mark.parametrize("value", ["bos://", "s3://bucket", "bucket/charts"])
def test_bos_url_rejects(value: str) -> None:
    with pytest.raises(SystemExit):
        Ensure.bos_url(value, "bad")


def test_out_of_date_hints_retry(capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit):
        with exit_on_error():
            raise IndexOutOfDateError(INDEX_URL)

    assert "Use --retry" in capsys.readouterr().err


def test_out_of_date_after_retry_has_no_hint(capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit):
        with exit_on_error(retry=True):
            raise IndexOutOfDateError(INDEX_URL, attempts=10)

    err = capsys.readouterr().err
    assert "gave up after 10 attempts" in err
    assert "Use --retry" not in err


def test_archive_sync_error_lists_paths(capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit):
        with exit_on_error():
            raise ArchiveSyncError(
                "delete",
                ["bos://bucket/charts/a-1.tgz", "bos://bucket/charts/b-1.tgz"],
                RuntimeError("boom"),
            )

    err = capsys.readouterr().err
    assert "archive delete failed" in err
    assert (
        "re-run the remove with --version for each archive to delete: "
        "bos://bucket/charts/a-1.tgz, bos://bucket/charts/b-1.tgz"
    ) in err


def test_other_errors_print_message(capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit):
        with exit_on_error():
            raise ChartAlreadyIndexedError("foo", "1.0.0")

    assert "Error: chart foo-1.0.0 already indexed" in capsys.readouterr().err


def test_unrelated_errors_propagate() -> None:
    with pytest.raises(KeyError):
        with exit_on_error():
            raise KeyError("x")
