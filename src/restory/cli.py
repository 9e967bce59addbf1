# -----------------------------------------------------------------------------
# /*
#  * Copyright (C) 2025 CodeStory
#  *
#  * This program is free software; you can redistribute it and/or modify
#  * it under the terms of the GNU General Public License as published by
#  * the Free Software Foundation; Version 2.
#  *
#  * This program is distributed in the hope that it will be useful,
#  * but WITHOUT ANY WARRANTY; without even the implied warranty of
#  * MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE. See the
#  * GNU General Public License for more details.
#  *
#  * You should have received a copy of the GNU General Public License
#  * along with this program; if not, you can contact us at support@codestory.build
#  */
# -----------------------------------------------------------------------------

import sys
from pathlib import Path

import typer
from colorama import init
from dotenv import load_dotenv
from loguru import logger

from restory.commands import add, move, offset, remove, split
from restory.constants import (
    APP_NAME,
    ENV_APP_PREFIX,
    GLOBAL_CONFIG_FILE,
    LOCAL_CONFIG_FILE,
)
from restory.context import GlobalConfig, GlobalContext
from restory.core.config.config_loader import ConfigLoader
from restory.core.exceptions import handle_restory_exception
from restory.core.logging.logging import setup_logger
from restory.core.validation import validate_git_repository
from restory.runtimeutil import (
    ensure_utf8_output,
    get_log_dir_callback,
    setup_signal_handlers,
    version_callback,
)

# Initialize colorama (colored output in terminal)
init(autoreset=True)

app = typer.Typer(
    help=f"{APP_NAME}: rewrite git history at sub-commit granularity",
    pretty_exceptions_show_locals=False,
    pretty_exceptions_enable=False,
    add_completion=False,
)

app.command(name="split")(split.main)
app.command(name="add")(add.main)
app.command(name="remove")(remove.main)
app.command(name="move")(move.main)
app.command(name="offset")(offset.main)

# commands that never touch a repository
no_context_commands = {"offset"}


def load_global_config(custom_config_path: str | None, **input_args):
    # input args are the runtime overrides for configs
    config_args = {}

    for key, item in input_args.items():
        if item is not None:
            config_args[key] = item

    return ConfigLoader.get_full_config(
        GlobalConfig,
        config_args,
        LOCAL_CONFIG_FILE,
        ENV_APP_PREFIX,
        GLOBAL_CONFIG_FILE,
        Path(custom_config_path) if custom_config_path is not None else None,
    )


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
    log_path: bool = typer.Option(
        False,
        "--log-dir",
        "-LD",
        callback=get_log_dir_callback,
        is_eager=True,
        help=f"Show log path (where logs for {APP_NAME} live) and exit",
    ),
    repo_path: str = typer.Option(
        ".",
        "--repo",
        help="Path to the git repository to operate on.",
    ),
    custom_config: str | None = typer.Option(
        None,
        "--custom-config",
        help="Path to a custom config file",
    ),
    verbose: bool | None = typer.Option(
        None,
        "--verbose",
        "-v",
        help="Enable verbose logging.",
    ),
    silent: bool | None = typer.Option(
        None,
        "--silent",
        "-s",
        help="Only print errors and command results.",
    ),
    remote: str | None = typer.Option(
        None,
        "--remote",
        help="Remote used for pushing and for remote-only branches.",
    ),
    keep_patch_files: bool | None = typer.Option(
        None,
        "--keep-patch-files",
        help="Keep the temporary patch files written while splitting.",
    ),
) -> None:
    """
    Global setup callback. Initialize global context/config used by commands
    """
    with handle_restory_exception(exit_on_fail=True):
        if ctx.invoked_subcommand is None:
            typer.echo(ctx.get_help())
            raise typer.Exit()

        # skip --help in subcommands
        if any(arg in ctx.help_option_names for arg in sys.argv):
            return

        # initial setup of logger, updated once the config is known
        setup_logger(
            ctx.invoked_subcommand, debug=verbose or False, silent=silent or False
        )

        if ctx.invoked_subcommand in no_context_commands:
            return

        config, used_config_sources, used_default = load_global_config(
            custom_config,
            verbose=verbose,
            silent=silent,
            remote=remote,
            keep_patch_files=keep_patch_files,
        )

        setup_logger(ctx.invoked_subcommand, debug=config.verbose, silent=config.silent)

        logger.debug(f"Used {used_config_sources} to build global context.")
        if used_default:
            logger.debug("Some settings fell back to default values.")

        global_context = GlobalContext.from_global_config(config, Path(repo_path))
        # fail before any command runs if this is not a repository
        validate_git_repository(global_context.git_commands)

        ctx.obj = global_context


def run_app():
    """Run the application with global exception handling."""
    # force stdout to be utf8
    ensure_utf8_output()
    # Ctrl+C / SIGTERM exit with 130
    setup_signal_handlers()
    # load any .env files (config values possibly set through env)
    load_dotenv()
    # launch cli
    app(prog_name=APP_NAME)


if __name__ == "__main__":
    run_app()
