"""Pull command - print an object to stdout.

Used by Helm as the downloader for bos:// URLs.
"""

import click

from helm_bos.cli.ensure import Ensure, exit_on_error
from helm_bos.cli.output import machine_output_bytes
from helm_bos.core.context import HelmBosContext
from helm_bos.core.errors import StageError


@click.command("pull")
@click.argument("url")
@click.pass_obj
def pull_cmd(ctx: HelmBosContext, url: str) -> None:
    """Print the object at URL (bos://bucket/path) on stdout."""
    Ensure.bos_url(url, f'incorrect url "{url}", should be "bos://bucket/path"')
    with exit_on_error():
        try:
            blob = ctx.blob_store.get(url)
        except Exception as e:
            raise StageError("pull", e) from e
    machine_output_bytes(blob.data)
