"""Push command - index a chart and upload it to a repository."""

import logging
from pathlib import Path

import click

from helm_bos.cli.ensure import Ensure, exit_on_error
from helm_bos.cli.output import user_output
from helm_bos.core.context import HelmBosContext
from helm_bos.core.repo import Repo

logger = logging.getLogger(__name__)


@click.command("push")
@click.argument("chart", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("repository")
@click.option("--force", is_flag=True, help="Upload the chart even if its version is indexed.")
@click.option(
    "--retry",
    is_flag=True,
    help="Reload the index and retry if the repository was updated concurrently.",
)
@click.option("--public", is_flag=True, help="Index the chart with its public (CDN) URL.")
@click.option(
    "--public-url",
    "--publicURL",
    "public_url",
    default="",
    help="Public base URL written into the index (requires --public).",
)
@click.pass_obj
def push_cmd(
    ctx: HelmBosContext,
    chart: Path,
    repository: str,
    force: bool,
    retry: bool,
    public: bool,
    public_url: str,
) -> None:
    """Push CHART (a packaged .tgz) to REPOSITORY.

    REPOSITORY is either the name of a repository added with `helm repo add`
    or a bos://bucket/path URL.
    """
    Ensure.invariant(not public_url or public, "--public-url requires --public")
    logger.debug(
        "Command invoked: push(chart=%s, repository=%s, force=%s, retry=%s, public=%s)",
        chart,
        repository,
        force,
        retry,
        public,
    )

    with exit_on_error(retry=retry):
        repo = Repo.resolve(repository, ctx.registry)
        entry = ctx.index_sync().push_chart(
            repo,
            chart,
            force=force,
            retry=retry,
            public=public,
            public_url=public_url,
        )

    user_output(
        click.style("Pushed ", fg="green") + f"{entry.name}-{entry.version} to {repo.base_url}"
    )
