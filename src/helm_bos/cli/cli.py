import click

from helm_bos.cli.commands.init import init_cmd
from helm_bos.cli.commands.pull import pull_cmd
from helm_bos.cli.commands.push import push_cmd
from helm_bos.cli.commands.rm import rm_cmd
from helm_bos.cli.logging_setup import configure_logging
from helm_bos.core.context import HelmBosContext, create_context

CONTEXT_SETTINGS = dict(help_option_names=["-h", "--help"])  # terse help flags


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(package_name="helm-bos")
@click.option("--ak", "access_key", default=None, help="Access key to use for BOS.")
@click.option("--sk", "secret_key", default=None, help="Secret key to use for BOS.")
@click.option("--endpoint", default=None, help="BOS S3-compatible endpoint URL.")
@click.option("--debug", is_flag=True, help="Activate debug output.")
@click.option("--dry-run", is_flag=True, help="Print object store writes instead of executing.")
@click.pass_context
def cli(
    ctx: click.Context,
    access_key: str | None,
    secret_key: str | None,
    endpoint: str | None,
    debug: bool,
    dry_run: bool,
) -> None:
    """Manage Helm repositories on Baidu Object Storage."""
    # Only create context if not already provided (e.g., by tests)
    if ctx.obj is None:
        ctx.obj = create_context(
            dry_run=dry_run,
            access_key=access_key,
            secret_key=secret_key,
            endpoint=endpoint,
            debug=debug,
        )
    context: HelmBosContext = ctx.obj
    configure_logging(debug or context.global_config.debug)


cli.add_command(init_cmd)
cli.add_command(push_cmd)
cli.add_command(rm_cmd)
cli.add_command(rm_cmd, name="remove")
cli.add_command(pull_cmd)


def main() -> None:
    """CLI entry point used by the `helm-bos` console script."""
    cli()
