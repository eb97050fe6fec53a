"""Remove command - delete a chart from a repository."""

import click

from helm_bos.cli.ensure import exit_on_error
from helm_bos.cli.output import user_output
from helm_bos.core.context import HelmBosContext
from helm_bos.core.repo import Repo


@click.command("rm")
@click.argument("name")
@click.argument("repository")
@click.option(
    "-v",
    "--version",
    default="",
    help="Version to remove (default: all versions).",
)
@click.option(
    "--retry",
    is_flag=True,
    help="Reload the index and retry if the repository was updated concurrently.",
)
@click.pass_obj
def rm_cmd(ctx: HelmBosContext, name: str, repository: str, version: str, retry: bool) -> None:
    """Remove chart NAME from REPOSITORY.

    Without --version every version of the chart is removed. The index is
    updated first, then the chart archives are deleted.
    """
    with exit_on_error(retry=retry):
        repo = Repo.resolve(repository, ctx.registry)
        deleted = ctx.index_sync().remove_chart(repo, name, version, retry=retry)

    for path in deleted:
        user_output(f"Deleted {path}")
    label = f"{name}-{version}" if version else name
    user_output(click.style("Removed ", fg="green") + f"{label} from {repo.base_url}")
