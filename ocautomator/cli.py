import logging
import signal
import threading
import traceback
from contextlib import contextmanager
from typing import Optional

import typer

from ocautomator.config import Config
from ocautomator.dispatcher import ClusterDispatcher, list_clusters, validate_platform
from ocautomator.logging import setup_logging
from ocautomator.registry import StoreNotFoundError

app = typer.Typer(help="OC Cluster Automator - create and destroy OpenShift clusters.")

logger = logging.getLogger("ocautomator")

# Set by SIGINT; checked between the create and destroy steps
shutdown_requested = threading.Event()


def _handle_interrupt(signum, frame):
    shutdown_requested.set()
    logger.info("received interrupt signal, will exit gracefully at the end of the current step")


@contextmanager
def abort_on_error(debug_mode: bool = False):
    """Turn any failure from the lower layers into a logged message and exit code 1."""
    try:
        yield
    except typer.Exit:
        raise
    except Exception as e:
        if debug_mode:
            logger.error(f"❌ Unhandled exception: {e}\n{traceback.format_exc()}")
        else:
            logger.error(f"❌ {e}")
        raise typer.Exit(code=1)


def _install_signal_handler(ctx: typer.Context) -> None:
    shutdown_requested.clear()
    previous = signal.signal(signal.SIGINT, _handle_interrupt)
    ctx.call_on_close(lambda: signal.signal(signal.SIGINT, previous))


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    create: bool = typer.Option(False, "--create", help="Create a new cluster"),
    destroy: Optional[str] = typer.Option(None, "--destroy", help="Name of the cluster to destroy"),
    dry_run: bool = typer.Option(False, "--dryrun", help="Log the installer invocation without running it"),
    platform: Optional[str] = typer.Option(None, "--platform", help="Platform to create the cluster on (aws/azure)"),
    debug: bool = typer.Option(False, "--debug", "-d", help="Enable debug logging"),
):
    """Create and/or destroy a cluster on the given platform."""
    ctx.obj = {"platform": platform, "debug": debug}

    if ctx.invoked_subcommand is not None:
        return

    # Usage errors come before configuration, filesystem or subprocess
    try:
        platform = validate_platform(platform)
    except ValueError as e:
        raise typer.BadParameter(str(e), param_hint="'--platform'")
    if destroy is not None and not destroy.strip():
        raise typer.BadParameter("Cluster name to destroy must not be empty", param_hint="'--destroy'")

    env_config = Config()
    setup_logging(debug, level=env_config.log_level, fmt=env_config.log_format)
    _install_signal_handler(ctx)

    with abort_on_error(debug):
        config = Config.from_env()
        logger.debug(f"loaded configuration: {config!r}")

        dispatcher = ClusterDispatcher.prepare(
            config, platform, dry_run=dry_run, shutdown=shutdown_requested
        )
        if not create and not destroy:
            logger.info("Nothing to do: pass --create and/or --destroy <name>")
            return
        dispatcher.run(create=create, destroy=destroy)


@app.command("list")
def list_cmd(ctx: typer.Context):
    """List the clusters recorded in the store."""
    obj = ctx.obj or {}
    platform = obj.get("platform")
    debug = obj.get("debug", False)

    if platform:
        try:
            validate_platform(platform)
        except ValueError as e:
            raise typer.BadParameter(str(e), param_hint="'--platform'")

    env_config = Config()
    setup_logging(debug, level=env_config.log_level, fmt=env_config.log_format)

    with abort_on_error(debug):
        config = Config.from_env()
        try:
            clusters = list_clusters(config, platform)
        except StoreNotFoundError:
            typer.echo("No clusters recorded yet.")
            return

        if not any(clusters.values()):
            typer.echo("No clusters recorded yet.")
            return
        for name, records in clusters.items():
            for record in records:
                typer.echo(f"{name}: {record.name} ({record.directory})")


if __name__ == "__main__":
    app()
