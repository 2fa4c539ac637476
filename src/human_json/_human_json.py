import argparse
import json
import logging
import sys

import human_json
from human_json import BlockMode, ConfigurationError, EolStyle, Formatter, _get_version
from human_json.keys import DEFAULT_PRIORITY_KEYS

logger = logging.getLogger(human_json.__name__)

MODES = [m.value for m in BlockMode]


def command_line_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Format JSON into human readable, diffable form",
    )
    parser.add_argument("-V", "--version", action="store_true")

    parser.add_argument(
        "--output",
        "-o",
        action="append",
        help="The output file name(s). The number of output file names must match "
        "the number of input files.",
    )
    parser.add_argument(
        "--keys",
        metavar="KEYS",
        help="Comma-separated list of keys to sort first "
        f"(default={','.join(DEFAULT_PRIORITY_KEYS)})",
    )
    parser.add_argument(
        "--indent",
        "-i",
        metavar="N",
        type=int,
        default=2,
        help="Indent N spaces (default=2)",
    )
    parser.add_argument(
        "--max-length",
        "-l",
        metavar="N",
        type=int,
        default=120,
        help="Maximum line length before wrapping (default=120)",
    )
    parser.add_argument(
        "--no-sort",
        default=False,
        action="store_true",
        help="Keep dict keys in their original order",
    )
    parser.add_argument(
        "--spacing",
        choices=MODES,
        default="object",
        help="Add spaces inside the brackets of single-line containers (default=object)",
    )
    parser.add_argument(
        "--fill",
        choices=MODES,
        default="array",
        help="Pack several simple values per line (default=array)",
    )
    parser.add_argument(
        "--ensure-ascii",
        default=False,
        action="store_true",
        help="Escape all non-ASCII characters",
    )
    parser.add_argument(
        "--east-asian-chars",
        default=False,
        action="store_true",
        help="Treat strings as unicode East Asian characters",
    )
    parser.add_argument(
        "--crlf",
        default=False,
        action="store_true",
        help="Use Windows-style CRLF line endings",
    )
    parser.add_argument(
        "--debug",
        default=False,
        action="store_true",
        help="Enable debug logging",
    )

    parser.add_argument(
        "json",
        nargs="*",
        type=argparse.FileType("r", encoding="utf-8"),
        help='JSON file(s) to parse (or stdin with "-")',
    )
    return parser


def main() -> None:
    parser = command_line_parser()

    def die(message: str) -> None:
        print(f"{parser.prog}: {message}", file=sys.stderr)
        sys.exit(1)

    args = parser.parse_args()
    if args.version:
        print(_get_version())
        return
    if len(args.json) == 0:
        parser.print_help()
        return

    hdlr = logging.StreamHandler()
    hdlr.setFormatter(logging.Formatter("%(levelname)s:%(name)s:%(message)s"))
    logger.addHandler(hdlr)
    if args.debug:
        logger.setLevel("DEBUG")
    else:
        logger.setLevel("ERROR")

    options = {}
    if args.keys is not None:
        options["priority_keys"] = [k.strip() for k in args.keys.split(",") if k.strip()]

    try:
        formatter = Formatter(
            indent_spaces=args.indent,
            max_line_length=args.max_length,
            sort_keys=not args.no_sort,
            spacing_mode=args.spacing,
            fill_mode=args.fill,
            ensure_ascii=args.ensure_ascii,
            east_asian_string_widths=args.east_asian_chars,
            json_eol_style=EolStyle.CRLF if args.crlf else EolStyle.LF,
            **options,
        )
    except ConfigurationError as e:
        die(str(e))

    in_files = args.json
    out_files = args.output
    if out_files is not None and len(in_files) != len(out_files):
        die("the numbers of input and output file names do not match")

    for index, fh in enumerate(in_files):
        try:
            obj = json.load(fh)
        except json.JSONDecodeError as e:
            die(f"{fh.name}: invalid JSON: {e}")
        except (UnicodeDecodeError, OSError) as e:
            die(f"{fh.name}: unable to read input: {e}")

        if out_files is None:
            sys.stdout.write(formatter.serialize(obj))
        else:
            try:
                formatter.dump(obj, output_file=out_files[index])
            except OSError as e:
                die(f"{out_files[index]}: unable to write output: {e.strerror}")


if __name__ == "__main__":  # pragma: no cover
    # execute only if run as a script
    main()
