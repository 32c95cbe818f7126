"""
CLI entry point for hmap (clang header map reader/writer).

Usage:
    python3 -m tools.hmap print build/Foo.hmap
    python3 -m tools.hmap print a.hmap b.hmap --strict
    python3 -m tools.hmap convert build/Foo.hmap Foo.json
    python3 -m tools.hmap convert Foo.yaml build/Foo.hmap
"""

import argparse
import sys

from .commands import convert_file, print_file
from .errors import HeaderMapError


def cmd_print(args) -> int:
    for path in args.files:
        if len(args.files) > 1:
            print(f"{path}:")

        text = print_file(path, strict=args.strict)
        print(text if text else "Empty header map")

        if len(args.files) > 1:
            print()
    return 0


def cmd_convert(args) -> int:
    convert_file(args.source, args.dest, strict=args.strict)
    print(f"  wrote {args.dest}")
    return 0


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        prog="hmap",
        description="Read and write clang header maps",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    p_print = sub.add_parser("print", help="Print the entries of header maps")
    p_print.add_argument("files", nargs="+", help="Path(s) to header map file")
    p_print.set_defaults(func=cmd_print)

    p_convert = sub.add_parser(
        "convert", help="Convert between .hmap, .json and .yaml")
    p_convert.add_argument("source", help="Path to the file to be converted")
    p_convert.add_argument("dest", help="Path to the converted file")
    p_convert.set_defaults(func=cmd_convert)

    for p in (p_print, p_convert):
        p.add_argument("--strict", action="store_true",
                       help="Fail on corrupt buckets instead of skipping them")

    args = parser.parse_args(argv)
    try:
        return args.func(args)
    except HeaderMapError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
