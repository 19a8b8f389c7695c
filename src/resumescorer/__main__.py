"""Main entry point for the resumescorer package.

This module allows the package to be run as a script using `python -m resumescorer`.
"""

import sys


def main() -> None:
    """Run the command line interface."""
    from resumescorer.cli import main as cli_main

    sys.exit(cli_main())


if __name__ == "__main__":
    main()
