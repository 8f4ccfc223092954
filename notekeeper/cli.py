"""CLI entrypoint for notekeeper."""

import logging
import sys
from pathlib import Path

import click

from . import __version__
from .config import ConfigError, Settings, load_settings, resolve_root

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(settings: Settings) -> None:
    """Send package logs to the log file; the terminal belongs to the UI."""
    logger = logging.getLogger("notekeeper")
    logger.setLevel(settings.log_level_value)
    log_path = str(settings.log_path.resolve())
    for handler in list(logger.handlers):
        if isinstance(handler, logging.FileHandler):
            if handler.baseFilename == log_path:
                return
            logger.removeHandler(handler)
            handler.close()
    handler = logging.FileHandler(log_path, encoding="utf-8")
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)


@click.group(invoke_without_command=True)
@click.version_option(__version__, prog_name="notekeeper")
@click.option(
    "--root",
    "-r",
    type=click.Path(file_okay=False, dir_okay=True, path_type=Path),
    default=None,
    help="Configuration root holding notes/ and tasks.json (defaults to $NOTEKEEPER_HOME or ~/.config/notekeeper)",
)
@click.pass_context
def cli(ctx: click.Context, root: Path | None) -> None:
    """notekeeper - notes and tasks in the terminal.

    Run without a command to open the interactive UI.
    """
    ctx.ensure_object(dict)
    try:
        root = resolve_root(root)
        root.mkdir(parents=True, exist_ok=True)
        settings = load_settings(root)
    except ConfigError as e:
        raise click.ClickException(str(e))
    except OSError as e:
        raise click.ClickException(f"Cannot create configuration root: {e}")

    configure_logging(settings)
    ctx.obj["settings"] = settings

    if ctx.invoked_subcommand is None:
        ctx.invoke(run)


@cli.command()
@click.pass_context
def run(ctx: click.Context) -> None:
    """Open the interactive note and task UI."""
    from .app import App

    settings: Settings = ctx.obj["settings"]
    try:
        app = App.open(settings)
    except OSError as e:
        raise click.ClickException(f"Cannot prepare storage under {settings.root}: {e}")
    app.run()


@cli.command()
@click.option("--tag", "-t", type=str, default=None, help="Only notes carrying this tag")
@click.pass_context
def notes(ctx: click.Context, tag: str | None) -> None:
    """List stored notes."""
    from .commands.listing import run_notes
    from .storage import NoteStore

    store = NoteStore.from_settings(ctx.obj["settings"])
    store.ensure_layout()
    sys.exit(run_notes(store, tag=tag))


@cli.command()
@click.option("--all", "include_completed", is_flag=True, help="Include completed tasks")
@click.pass_context
def tasks(ctx: click.Context, include_completed: bool) -> None:
    """List stored tasks (open ones by default)."""
    from .commands.listing import run_tasks
    from .storage import NoteStore

    store = NoteStore.from_settings(ctx.obj["settings"])
    store.ensure_layout()
    sys.exit(run_tasks(store, include_completed=include_completed))


def main() -> None:
    cli(obj={})


if __name__ == "__main__":
    main()
