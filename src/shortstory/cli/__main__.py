"""Main entry point for the shortstory CLI when run as a module."""

from shortstory.cli.main import main

if __name__ == "__main__":  # pragma: no cover
    main()
