"""CLI entrypoint for vaultquery."""

import locale
import logging
import sys
from pathlib import Path

import click
from rich.logging import RichHandler

from . import __version__

logger = logging.getLogger(__name__)


def _auto_detect_vault(start: Path) -> Path | None:
    """Find a vault root (a folder holding `.obsidian/`) by walking up from `start`."""
    cur = start.resolve()
    for p in (cur, *cur.parents):
        if (p / ".obsidian").is_dir():
            return p
    return None


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(show_path=False)],
        force=True,
    )


@click.group()
@click.version_option(__version__, prog_name="vaultquery")
@click.option(
    "--vault",
    "-v",
    type=click.Path(exists=False, file_okay=False, dir_okay=True, path_type=Path),
    default=None,
    help="Path to the vault root (defaults to the nearest folder containing .obsidian, else cwd)",
)
@click.option("--verbose", is_flag=True, help="Log debug output (including skipped rewrites)")
@click.pass_context
def cli(ctx: click.Context, vault: Path | None, verbose: bool) -> None:
    """vaultquery - sort notes by metadata and check off tasks in place."""
    ctx.ensure_object(dict)
    _configure_logging(verbose)

    if vault is None:
        vault = _auto_detect_vault(Path.cwd()) or Path.cwd()

    if not vault.exists() or not vault.is_dir():
        raise click.BadParameter(f"Directory '{vault}' does not exist.", param_hint="--vault / -v")

    ctx.obj["vault"] = vault.resolve()


@cli.command()
@click.argument("field")
@click.option("--group-by", "group_field", type=str, default=None, metavar="FIELD", help="Group notes by this field")
@click.option("--desc", "descending", is_flag=True, help="Sort in descending order")
@click.option("--json", "output_json", is_flag=True, help="Output results as JSON")
@click.pass_context
def sort(ctx: click.Context, field: str, group_field: str | None, descending: bool, output_json: bool) -> None:
    """Sort notes by a frontmatter FIELD (or file.name, file.mtime, ...).

    Examples:

        vaultquery sort due

        vaultquery sort priority --group-by status --desc
    """
    from .commands.sort_cmd import run_sort

    exit_code = run_sort(
        ctx.obj["vault"],
        field,
        group_field=group_field,
        descending=descending,
        output_json=output_json,
    )
    sys.exit(exit_code)


@cli.command()
@click.argument("file")
@click.pass_context
def tasks(ctx: click.Context, file: str) -> None:
    """List the checkbox tasks of FILE (a vault-relative path)."""
    from .commands.tasks_cmd import run_tasks

    sys.exit(run_tasks(ctx.obj["vault"], file))


@cli.command()
@click.argument("file")
@click.argument("line", type=int)
@click.option("--status", type=str, default=None, help="Checkbox character to set (default: toggle X / blank)")
@click.option("--text", type=str, default=None, help="Replacement task text")
@click.pass_context
def check(ctx: click.Context, file: str, line: int, status: str | None, text: str | None) -> None:
    """Check or uncheck the task on LINE (1-based) of FILE, editing the note in place."""
    from .commands.tasks_cmd import run_check

    if status is not None and len(status) > 1:
        raise click.BadParameter("Status must be a single character.", param_hint="--status")

    sys.exit(run_check(ctx.obj["vault"], file, line, status=status, text=text))


def main() -> None:
    try:
        locale.setlocale(locale.LC_COLLATE, "")
    except locale.Error as e:
        # Unusable LANG/LC_* settings leave the C collation in place.
        logger.debug("Keeping C collation: %s", e)
    cli()


if __name__ == "__main__":
    main()
