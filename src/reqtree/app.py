"""Typer application and CLI entry point for reqtree.

This module wires the top-level Typer application together: the root
callback that installs the output manager and logging, the import and tree
commands, and the ``config`` sub-group.

The :func:`main` function is the console-script entry point declared in
``pyproject.toml``. Errors derived from
:class:`~reqtree.exceptions.ReqtreeError` exit with their own exit code;
anything else is written to a crash log under the data directory.
"""

from __future__ import annotations

import signal
import sys
import traceback
from datetime import datetime
from typing import Any, Optional

import typer

from reqtree import __version__
from reqtree.commands.config import config_app
from reqtree.commands.importing import curl_command, detect_command, import_command
from reqtree.commands.tree import (
    add_collection_command,
    add_folder_command,
    add_request_command,
    delete_command,
    duplicate_command,
    move_command,
    rename_command,
    show_command,
)
from reqtree.exit_codes import EXIT_GENERIC_FAILURE


app = typer.Typer(
    name="reqtree",
    help="Import API collections and manage them as a request tree.",
    no_args_is_help=True,
    add_completion=False,
    rich_markup_mode="rich",
)

app.command("import")(import_command)
app.command("curl")(curl_command)
app.command("detect")(detect_command)
app.command("show")(show_command)
app.command("add-collection")(add_collection_command)
app.command("add-folder")(add_folder_command)
app.command("add-request")(add_request_command)
app.command("rename")(rename_command)
app.command("delete")(delete_command)
app.command("move")(move_command)
app.command("duplicate")(duplicate_command)
app.add_typer(config_app, name="config", help="Configuration management.")


def _version_callback(value: bool) -> None:
    """Print version and exit when --version is passed."""
    if value:
        typer.echo(f"reqtree {__version__}")
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
    storage: Optional[str] = typer.Option(
        None, "--storage", "-s", help="Collection snapshot file to use."
    ),
    json_output: bool = typer.Option(False, "--json", help="JSON output format."),
    plain_output: bool = typer.Option(False, "--plain", help="Plain text output."),
    no_color: bool = typer.Option(False, "--no-color", help="Disable color output."),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Suppress non-essential output."
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug output."),
) -> None:
    """Root callback executed before every sub-command.

    Loads the configuration, installs the global
    :class:`~reqtree.output.OutputManager` and stores shared options in
    ``ctx.obj`` for the sub-commands.

    With neither ``--json`` nor ``--plain``, the format comes from
    ``output.format`` in the config file.
    """
    from reqtree.config import load_config
    from reqtree.output import OutputFormat, OutputManager, set_output

    config = load_config()

    fmt = OutputFormat.AUTO
    if json_output:
        fmt = OutputFormat.JSON
    elif plain_output:
        fmt = OutputFormat.PLAIN
    elif config.output.format in {f.value for f in OutputFormat}:
        fmt = OutputFormat(config.output.format)

    output = OutputManager(format=fmt, no_color=no_color, quiet=quiet, verbose=verbose)
    output.configure_logging()
    set_output(output)

    ctx.ensure_object(dict)
    ctx.obj["config"] = config
    ctx.obj["storage"] = storage
    ctx.obj["verbose"] = verbose


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)

    signal.signal(signal.SIGINT, _handler)


def _write_crash_log(exc: Exception) -> str:
    """Write a crash traceback to disk and return the log file path."""
    from reqtree.config import get_data_dir

    logs_dir = get_data_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    log_path = logs_dir / f"crash-{timestamp}.log"
    log_path.write_text(
        "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    )
    return str(log_path)


def main() -> None:
    """CLI entry point invoked by the ``reqtree`` console script.

    Typer re-raises exceptions from commands, so a
    :class:`~reqtree.exceptions.ReqtreeError` reaches this handler and
    exits with the error's ``exit_code``. All other exceptions produce a
    crash log and a generic failure exit.

    Raises:
        SystemExit: Always raised.
    """
    _setup_signal_handlers()
    try:
        app()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(130)
    except Exception as exc:
        from reqtree.exceptions import ReqtreeError
        from reqtree.output import error

        if isinstance(exc, ReqtreeError):
            error(str(exc))
            sys.exit(exc.exit_code)
        log_path = _write_crash_log(exc)
        error(f"Unexpected error. Debug log: {log_path}")
        sys.exit(EXIT_GENERIC_FAILURE)
