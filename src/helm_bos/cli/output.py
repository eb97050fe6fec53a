"""Output utilities for CLI commands with clear intent.

user_output writes messages for humans to stderr; machine_output_bytes writes data
meant for other programs (e.g. Helm reading a pulled chart) to stdout.
"""

import click


def user_output(message: str = "", nl: bool = True, color: bool | None = None) -> None:
    """Write a user-facing message to stderr."""
    click.echo(message, nl=nl, err=True, color=color)


def machine_output_bytes(data: bytes) -> None:
    """Write raw bytes to stdout."""
    stream = click.get_binary_stream("stdout")
    stream.write(data)
    stream.flush()
