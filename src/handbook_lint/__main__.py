"""Module entry point for running with ``python -m handbook_lint``."""

from handbook_lint.cli import main

if __name__ == "__main__":
    raise SystemExit(main())
