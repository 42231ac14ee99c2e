"""Run the command line with ``python -m pdfgrid``."""

from .cli import main as cli_main


def main() -> None:
    """Entry point for ``python -m pdfgrid``."""
    raise SystemExit(cli_main())


if __name__ == "__main__":
    main()
