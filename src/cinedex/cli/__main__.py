"""Main entry point for cinedex CLI when run as a module."""

from cinedex.cli.main import main

if __name__ == "__main__":  # pragma: no cover
    main()
