"""
Compatibility entrypoint.

Prefer running:
  - `qrc-ass convert song.qrc`
or:
  - `python -m qrc_ass convert song.qrc`
"""

from qrc_ass.cli import main as cli_main


def cli() -> None:
    cli_main()


if __name__ == "__main__":
    cli()
