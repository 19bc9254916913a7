#!/usr/bin/env python3
"""PQLang CLI - Command-line interface for the PQLang language.

Usage:
    pqlang <file.pq>                 # Run a program with timing report
    pqlang <file.pq> --quiet         # Run, only show program output
    pqlang <file.pq> --tokens        # Show the token stream
    pqlang <file.pq> --ast           # Show the parsed program
    pqlang "print(1+2)" --text       # Run source given on the command line
"""

import argparse
import logging
import pathlib
import sys
import time

import pqlang


SEPARATOR = "-------------------------------"


def show_tokens(source):
    """Print each token with its position."""
    for token in pqlang.tokenize(source):
        print(f"{token.line}:{token.column} {token.type}: {token.value!r}")


def run(interp, source, loader, quiet):
    """Parse and run a program, reporting result and timing.

    Returns:
        (int) Exit status
    """
    try:
        start = time.perf_counter()
        block = interp.parse(source, loader)
        elapsed = _ms(start)
        if not quiet:
            print(f"Successfully parsed in {elapsed}ms")
            print(SEPARATOR)
            print()

        start = time.perf_counter()
        result = interp.evaluate(block)
        elapsed = _ms(start)
    except pqlang.LangError as err:
        if not quiet:
            print(SEPARATOR)
        print(pqlang.describe(err))
        return 1
    except RecursionError:
        if not quiet:
            print(SEPARATOR)
        print("Error! Stack exhausted")
        return 1

    if not quiet:
        print()
        print(SEPARATOR)
        print(f"Returned: {result.format()}")
        print(f"Time: {elapsed}ms")
    return 0


def _ms(start):
    return int((time.perf_counter() - start) * 1000)


def main(argv=None):
    parser = argparse.ArgumentParser(
        prog="pqlang",
        description="PQLang language command-line interface")
    parser.add_argument("source",
        help="PQLang source file to run")
    parser.add_argument("--text", action="store_true",
        help="Treat source as program text instead of a file path")
    parser.add_argument("--tokens", action="store_true",
        help="Show the token stream and exit")
    parser.add_argument("--ast", action="store_true",
        help="Show the parsed program and exit")
    parser.add_argument("--quiet", "-q", action="store_true",
        help="Only show program output and errors")
    parser.add_argument("--path", action="append", default=[], metavar="DIR",
        help="Extra library search directory (repeatable)")
    parser.add_argument("--recursion-limit", type=int, default=10000, metavar="N",
        help="Python recursion limit for deep programs (default 10000)")
    parser.add_argument("--verbose", "-v", action="store_true",
        help="Enable debug logging")

    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")
    if args.recursion_limit > 0:
        sys.setrecursionlimit(args.recursion_limit)

    filepath = None
    if args.text:
        source = args.source
    else:
        filepath = pathlib.Path(args.source)
        if not filepath.is_absolute():
            filepath = pathlib.Path.cwd() / filepath
        try:
            source = filepath.read_text(encoding="utf-8")
        except OSError as err:
            print(f"Cannot read {args.source}: {err.strerror}", file=sys.stderr)
            return 1

    interp = pqlang.Interp(search_paths=args.path)
    loader = None
    if filepath is not None:
        loader = pqlang.FileLoader([str(filepath.parent)] + interp.search_paths)

    if args.tokens or args.ast:
        try:
            if args.tokens:
                show_tokens(source)
            else:
                print(interp.parse(source, loader).unparse())
        except pqlang.LangError as err:
            print(pqlang.describe(err))
            return 1
        return 0

    return run(interp, source, loader, args.quiet)


if __name__ == "__main__":
    sys.exit(main())
