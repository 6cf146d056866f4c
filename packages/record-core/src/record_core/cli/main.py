"""Record CLI - personal ticket archive."""

import typer

from record_core.cli.archive import search, stats, year_in_review
from record_core.cli.runtime import configure_logging
from record_core.cli.tickets import tickets_app
from record_core.config import Settings

app = typer.Typer(
    name="record",
    help="Personal archive of performances you attended",
    no_args_is_help=True,
)

# Add command groups
app.add_typer(tickets_app, name="tickets")
app.command("search")(search)
app.command("stats")(stats)
app.command("year-in-review")(year_in_review)


@app.callback()
def setup() -> None:
    """Configure logging from RECORD_LOG_LEVEL."""
    configure_logging(Settings().log_level)


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
