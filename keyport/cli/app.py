"""Main CLI application for Keyport."""

import logging
import sys
from importlib.metadata import PackageNotFoundError, version as package_version
from typing import Annotated

import typer

from keyport.cli.decorators.error_handling import print_stack_trace_if_verbose
from keyport.config.user_config import UserConfig, create_user_config
from keyport.core.logging import setup_logging


__all__ = ["app", "main", "__version__", "AppContext"]

try:
    __version__ = package_version("keyport")
except PackageNotFoundError:
    __version__ = "0.0.0"

logger = logging.getLogger(__name__)


class AppContext:
    """Application context for storing shared state."""

    def __init__(
        self,
        verbose: int = 0,
        log_file: str | None = None,
        config_file: str | None = None,
        debug: bool = False,
    ):
        self.verbose = verbose
        self.debug = debug
        self.log_file = log_file
        self.config_file = config_file
        self.user_config: UserConfig = create_user_config(cli_config_path=config_file)


app = typer.Typer(
    name="keyport",
    help=f"""Keyport ZMK keymap transcoder v{__version__}

Converts keyboard layers between device binding data and ZMK keymap source:

  Device layers (.json) → export → .keymap
  .keymap → import → layers (.json)

Common workflows:
  • Export layers:  keyport export layers.json --device "Corne" --output config/
  • Import keymap:  keyport import corne.keymap --output layers.json
  • Inspect keymap: keyport inspect corne.keymap""",
    no_args_is_help=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    verbose: Annotated[
        int,
        typer.Option(
            "-v",
            "--verbose",
            count=True,
            help="Increase verbosity (-v=INFO, -vv=DEBUG)",
        ),
    ] = 0,
    debug: Annotated[
        bool,
        typer.Option("--debug", help="Enable debug logging (equivalent to -vv)"),
    ] = False,
    log_file: Annotated[
        str | None, typer.Option("--log-file", help="Log to file")
    ] = None,
    config_file: Annotated[
        str | None,
        typer.Option("-c", "--config", help="Path to configuration file"),
    ] = None,
    show_version: Annotated[
        bool, typer.Option("--version", help="Show version and exit")
    ] = False,
) -> None:
    """Keyport ZMK keymap transcoder."""
    if show_version:
        print(f"Keyport v{__version__}")
        raise typer.Exit()

    if ctx.invoked_subcommand is None:
        print(ctx.get_help())
        raise typer.Exit()

    app_context = AppContext(
        verbose=verbose, log_file=log_file, config_file=config_file, debug=debug
    )
    ctx.obj = app_context

    log_level = logging.WARNING
    if debug:
        log_level = logging.DEBUG
    elif verbose == 1:
        log_level = logging.INFO
    elif verbose >= 2:
        log_level = logging.DEBUG
    elif log_file is None:
        log_level = app_context.user_config.get_log_level_int()

    setup_logging(level=log_level, log_file=log_file)


def main() -> int:
    """Main CLI entry point.

    Commands are registered when the ``keyport.cli`` package is imported.
    """
    try:
        app()
    except SystemExit as e:
        return e.code if isinstance(e.code, int) else 0
    except Exception as e:
        logger.error("Unexpected error: %s", e)
        print_stack_trace_if_verbose()
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
