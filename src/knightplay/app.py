"""Application entry point."""

from __future__ import annotations

import sys


def main() -> None:
    """Launch a console match against the search engine."""
    from knightplay.bootstrap import run_console

    sys.exit(run_console())


if __name__ == "__main__":
    main()
