"""
wpstack CLI - setup commands for the WordPress Bedrock Docker stack.

Commands:
    wpstack setup             - Create directories and boilerplate, set permissions
    wpstack salts             - Generate missing security salts in .env
    wpstack make-executable   - chmod +x scripts/*.sh
    wpstack check-versions    - Print versions and service connectivity
    wpstack install           - Wait for the database and install WordPress
    wpstack version           - Show version
"""

import os
import sys
from pathlib import Path
from typing import Optional

import click

from wpstack.config import ENV_FILE, StackConfig
from wpstack.core.resource import Platform
from wpstack.installer import BootstrapInstaller, DEFAULT_PLUGINS
from wpstack.logging import setup_logging, get_stack_logger
from wpstack.permissions import make_executable as make_scripts_executable, set_permissions
from wpstack.retry import RetryPolicy
from wpstack.salts import SaltGenerator
from wpstack.scaffold import Scaffolder, print_next_steps
from wpstack.transport import ComposeTransport, LocalTransport
from wpstack.versions import VersionChecker
from wpstack.wpcli import WPCLI

logger = get_stack_logger(__name__)


@click.group(invoke_without_command=True)
@click.option('--root', type=click.Path(file_okay=False, path_type=Path), default='.',
              show_default=True, help='Project root (holds .env and composer.json)')
@click.option('--log-level', default='INFO', show_default=True,
              type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR'], case_sensitive=False))
@click.pass_context
def cli(ctx, root: Path, log_level: str):
    """wpstack - setup helpers for a WordPress Bedrock Docker stack."""
    setup_logging(level=log_level, force=True)
    ctx.ensure_object(dict)
    ctx.obj['root'] = root
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


@cli.command()
@click.option('--quiet', '-q', is_flag=True, help='Skip the next-steps banner')
@click.option('--dry-run', is_flag=True, help='Show what would be created and change nothing')
@click.pass_context
def setup(ctx, quiet: bool, dry_run: bool):
    """
    Create the project skeleton and set permissions.

    Safe to run repeatedly; existing files are never overwritten.

    Example:
        wpstack setup
        wpstack --root /srv/site setup
        wpstack setup --dry-run
    """
    root = ctx.obj['root']
    if dry_run:
        Scaffolder(root).plan()
        return

    logger.step("Setting up Docker environment with MariaDB...")

    result = Scaffolder(root).run()
    if not result.changed_resources and result.success:
        logger.notice("Project skeleton already in place")

    report = set_permissions(root)
    if report.skipped:
        logger.notice(report.skipped_reason)
    elif report.failed:
        logger.warning(f"Could not set permissions for: {', '.join(report.failed)}")

    if not quiet:
        print_next_steps(root)


@cli.command()
@click.option('--env-file', default=ENV_FILE, show_default=True, help='Env file relative to root')
@click.pass_context
def salts(ctx, env_file: str):
    """
    Generate WordPress security salts into .env.

    Only keys whose value is empty are filled.
    """
    SaltGenerator(ctx.obj['root'] / env_file).run()


@cli.command('make-executable')
@click.option('--pattern', default='*.sh', show_default=True, help='Glob inside scripts/')
@click.pass_context
def make_executable(ctx, pattern: str):
    """Make the scripts directory's shell scripts executable."""
    make_scripts_executable(ctx.obj['root'], pattern=pattern)


@cli.command('check-versions')
@click.pass_context
def check_versions(ctx):
    """Show component versions and test database/cache connectivity."""
    VersionChecker(ctx.obj['root'], environ=os.environ).run().render()


@cli.command()
@click.option('--wp-bin', default='wp', show_default=True, help='WP-CLI executable')
@click.option('--container', help='Run WP-CLI inside this docker compose service')
@click.option('--compose-file', type=click.Path(dir_okay=False), help='docker compose file')
@click.option('--allow-root', is_flag=True, help='Pass --allow-root to WP-CLI')
@click.option('--attempts', default=30, show_default=True, type=click.IntRange(min=1),
              help='Database readiness checks before giving up')
@click.option('--interval', default=2.0, show_default=True, type=click.FloatRange(min=0),
              help='Seconds between readiness checks')
@click.option('--plugin', 'plugins', multiple=True,
              help=f"Plugin slug to install (default: {', '.join(DEFAULT_PLUGINS)})")
@click.pass_context
def install(ctx, wp_bin: str, container: Optional[str], compose_file: Optional[str],
            allow_root: bool, attempts: int, interval: float, plugins: tuple):
    """
    Wait for the database, then install WordPress and its plugins.

    Exits 0 when WordPress is installed (now or previously), 1 when the
    database never became reachable or the install failed.

    Example:
        wpstack install
        wpstack install --container web --allow-root
    """
    root = ctx.obj['root']
    config = StackConfig.load(root, environ=os.environ)

    if container:
        transport = ComposeTransport(container, compose_file=compose_file)
    else:
        transport = LocalTransport()

    wp = WPCLI(transport, binary=wp_bin, extra_args=['--allow-root'] if allow_root else None)
    installer = BootstrapInstaller(
        config,
        wp,
        policy=RetryPolicy(attempts=attempts, interval=interval),
        plugins=list(plugins) if plugins else None,
    )
    sys.exit(installer.run())


@cli.command()
def version():
    """Show wpstack version."""
    from wpstack import __version__
    click.echo(f"wpstack version {__version__}")


@cli.command()
def platform_info():
    """Show detected platform information."""
    plat = Platform.detect()
    click.echo("Platform Information:")
    click.echo(f"  System:  {plat.system}")
    click.echo(f"  Release: {plat.release}")
    click.echo(f"  Arch:    {plat.arch}")


def main():
    """Entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
