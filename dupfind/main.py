"""CLI entry point: dispatches dupfind subcommands."""
import argparse
import logging
import sys

from dupfind import __version__
from dupfind.errors import DupfindError


def _positive_int(value: str) -> int:
    n = int(value)
    if n < 1:
        raise argparse.ArgumentTypeError("must be at least 1")
    return n


def _configure_logging(debug: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(asctime)s %(levelname)-5s [%(name)s] %(message)s",
        datefmt="%H:%M:%S",
    )


def build_parser() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--db", default=None, help="Path to the catalog (.duckdb)")
    common.add_argument("--output", default=None, help="Where to write the CSV report")
    common.add_argument("--debug", action="store_true", help="Log every file decision")
    common.add_argument("--quiet", action="store_true",
                        help="Suppress progress and summary output")

    parser = argparse.ArgumentParser(
        prog="dupfind",
        description="Incremental duplicate file finder",
    )
    parser.add_argument("--version", action="version", version=f"dupfind {__version__}")
    sub = parser.add_subparsers(dest="command", metavar="COMMAND")

    # dupfind find-dups
    p_find = sub.add_parser("find-dups", parents=[common],
                            help="Scan a directory, then export duplicates")
    p_find.add_argument("path", nargs="?", default=None,
                        help="Directory to scan (default: search_path from config)")
    p_find.add_argument("-j", "--concurrency", type=_positive_int, default=None,
                        help="Maximum files hashed concurrently (default: 10)")

    # dupfind delete-files-not-found
    sub.add_parser("delete-files-not-found", parents=[common],
                   help="Remove catalog entries whose files are gone, then export")

    # dupfind export-result
    sub.add_parser("export-result", parents=[common],
                   help="Export duplicates from the catalog without scanning")

    return parser


def main(argv=None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    _configure_logging(getattr(args, "debug", False))

    try:
        if args.command == "find-dups":
            from dupfind.commands.find_dups import cmd_find_dups
            cmd_find_dups(args)
        elif args.command == "delete-files-not-found":
            from dupfind.commands.delete_not_found import cmd_delete_files_not_found
            cmd_delete_files_not_found(args)
        elif args.command == "export-result":
            from dupfind.commands.export_result import cmd_export_result
            cmd_export_result(args)
        else:
            parser.print_help()
            sys.exit(1)
    except DupfindError as e:
        print(f"dupfind: {e}", file=sys.stderr)
        sys.exit(1)
    except KeyboardInterrupt:
        sys.stderr.write("\n")
        sys.exit(130)


if __name__ == "__main__":
    main()
