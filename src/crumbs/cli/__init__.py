"""Crumbs CLI — key derivation.

Entry point registered as ``crumbs`` in ``pyproject.toml``::

    [project.scripts]
    crumbs = "crumbs.cli:main"
"""

import argparse
import sys


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the ``crumbs`` command."""
    parser = argparse.ArgumentParser(
        prog="crumbs",
        description="Crumbs — signed and encrypted cookies with key rotation.",
    )
    subparsers = parser.add_subparsers(dest="command")

    # -- crumbs derive-key ------------------------------------------------
    derive_parser = subparsers.add_parser(
        "derive-key", help="Derive a base64 cookie key from a passphrase",
    )
    derive_parser.add_argument(
        "--secret", required=True, help="Passphrase for encryption and decryption",
    )
    derive_parser.add_argument(
        "--salt",
        default=None,
        help="Salt mixed into the passphrase (default: random, not reproducible)",
    )
    derive_parser.add_argument(
        "--iterations",
        type=int,
        default=None,
        help="Number of PBKDF2 iterations (default: 600000)",
    )

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.command == "derive-key":
        from crumbs.cli._derive import run_derive_key

        run_derive_key(args)
