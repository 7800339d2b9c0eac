"""Entry point for the minhypr CLI."""

import sys


def main() -> int:
    """Main entry point."""
    from minhypr.cli.commands import cli_main
    return cli_main()


if __name__ == "__main__":
    sys.exit(main())
