"""Init command - create a chart repository on BOS."""

import click

from helm_bos.cli.ensure import Ensure, exit_on_error
from helm_bos.cli.output import user_output
from helm_bos.core.context import HelmBosContext
from helm_bos.core.repo import Repo


@click.command("init")
@click.argument("path")
@click.pass_obj
def init_cmd(ctx: HelmBosContext, path: str) -> None:
    """Create a repository at PATH (bos://bucket/path) by uploading an empty index.

    Running it again on an existing repository does nothing.
    """
    Ensure.bos_url(path, f'incorrect url "{path}", should be "bos://bucket/path"')
    repo = Repo.from_path(path)

    with exit_on_error():
        created = ctx.index_sync().create_repository(repo)

    if created:
        user_output(click.style("Repository initialized: ", fg="green") + path)
    else:
        user_output(f"Repository already initialized: {path}")
