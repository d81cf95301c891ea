from __future__ import annotations

import typer

from .base import configure_logging
from .commands.classify import app as classify_app
from .commands.listen import app as listen_app

configure_logging()
app = typer.Typer(
    help="Streaming spectrogram classification CLI",
    context_settings={"help_option_names": ["-h", "--help"]},
)

app.add_typer(classify_app, name="classify")
app.add_typer(listen_app, name="listen")


def main() -> None:
    """Main entry point for package CLI.

    Invokes the Typer application, which handles command parsing and
    execution.

    Side Effects:
        - Processes CLI arguments and executes commands.
        - May exit with non-zero code on errors.
    """
    app()


if __name__ == "__main__":
    main()
