import logging
from typing import Annotated

import typer

from cargo_affected.cli.members import members
from cargo_affected.cli.run import resolve_base_command, run

app = typer.Typer(
    name="cargo-affected",
    help="cargo-affected — find the workspace members impacted by a change.",
    no_args_is_help=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)


@app.callback()
def _configure(
    log_level: Annotated[str, typer.Option(envvar="CARGO_AFFECTED_LOG_LEVEL", help="Logging level.")] = "WARNING",
) -> None:
    logging.basicConfig(
        level=getattr(logging, log_level.upper(), logging.WARNING),
        format="%(levelname)s %(name)s: %(message)s",
    )


app.command("run")(run)
app.command("members")(members)
app.command("resolve-base")(resolve_base_command)


def main() -> None:
    app()
