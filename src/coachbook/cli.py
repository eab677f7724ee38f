"""CLI entry point for coachbook."""

import logging
from pathlib import Path

import click

from .commands import book, clients, init, packages, serve, slots, trainers


@click.group()
@click.version_option(version="0.1.0", prog_name="coachbook")
@click.option(
    "--data-dir",
    type=click.Path(file_okay=False, path_type=Path),
    envvar="COACHBOOK_DATA_DIR",
    help="Directory holding the database (env: COACHBOOK_DATA_DIR)",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def main(ctx: click.Context, data_dir: Path | None, verbose: bool):
    """coachbook: trainer availability and lesson booking.

    Declare one-off or weekly availability for trainers and book client
    lessons against prepaid lesson packages.

    Example usage:

        coachbook init
        coachbook trainers add t1 "Alex Smith"
        coachbook slots recur t1 --days mon,wed --from-hour 9 --to-hour 12
        coachbook book t1 2025-03-10 9
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    ctx.ensure_object(dict)
    ctx.obj["data_dir"] = data_dir


# Register commands
main.add_command(init)
main.add_command(trainers)
main.add_command(clients)
main.add_command(packages)
main.add_command(slots)
main.add_command(book)
main.add_command(serve)


def run():
    """Run the CLI."""
    main()


if __name__ == "__main__":
    run()
