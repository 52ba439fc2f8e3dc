"""``crumbs derive-key`` — print a base64 key derived from a passphrase."""

import argparse
import sys

from crumbs.security.keys import DEFAULT_ITERATIONS, derive_key, encode_key


def run_derive_key(args: argparse.Namespace) -> None:
    """Derive a key and print it to stdout.

    Exits with code 1 if the arguments are rejected by ``derive_key``.
    """
    iterations = args.iterations if args.iterations is not None else DEFAULT_ITERATIONS
    try:
        key = derive_key(args.secret, salt=args.salt, iterations=iterations)
    except ValueError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    print(encode_key(key))
