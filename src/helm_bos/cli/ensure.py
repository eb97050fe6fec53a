"""CLI error handling utilities with styled output.

Ensure asserts invariants in CLI commands with consistent, user-friendly error
messages; exit_on_error converts core errors into the same styled output.
All errors use a red "Error:" prefix and exit code 1.
"""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import NoReturn

import click

from helm_bos.cli.output import user_output
from helm_bos.core.errors import ArchiveSyncError, HelmBosError, IndexOutOfDateError

logger = logging.getLogger(__name__)


def _fail(error_message: str) -> NoReturn:
    user_output(click.style("Error: ", fg="red") + error_message)
    raise SystemExit(1)


class Ensure:
    """Helper class for asserting invariants with consistent error handling."""

    @staticmethod
    def invariant(condition: bool, error_message: str) -> None:
        """Ensure condition is true, otherwise output styled error and exit.

        Raises:
            SystemExit: If condition is false (with exit code 1)
        """
        if not condition:
            _fail(error_message)

    @staticmethod
    def bos_url(value: str, error_message: str) -> str:
        """Ensure value is a bos://bucket/path URL, otherwise output styled error and exit."""
        if not value.startswith(("bos://", "bs://")) or len(value.split("://", 1)[1]) == 0:
            _fail(error_message)
        return value


@contextmanager
def exit_on_error(*, retry: bool = False) -> Iterator[None]:
    """Report core errors as styled CLI errors and exit with code 1.

    Args:
        retry: Whether the command ran with --retry (suppresses the --retry hint)
    """
    try:
        yield
    except IndexOutOfDateError as e:
        logger.debug("Exception details:", exc_info=True)
        hint = "" if retry else "\nUse --retry to reload the index and try again."
        _fail(f"{e}{hint}")
    except ArchiveSyncError as e:
        logger.debug("Exception details:", exc_info=True)
        if e.operation == "upload":
            action = "re-run the push with --force to upload"
        else:
            action = "re-run the remove with --version for each archive to delete"
        _fail(
            f"{e}\nThe index is up to date but storage may be inconsistent; "
            f"{action}: {', '.join(e.paths)}"
        )
    except HelmBosError as e:
        logger.debug("Exception details:", exc_info=True)
        _fail(str(e))
