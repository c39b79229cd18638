"""pyreclaim - command-line entry point."""

import argparse
import logging
import sys

from pyreclaim.console import show_processes, show_trim, terminate_all
from pyreclaim.inspector import ProcessInspector, default_inspector
from pyreclaim.menu import InteractiveMenu
from pyreclaim.reclaim import list_high_memory_processes, trim_working_set

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"


class UsageError(Exception):
    """Raised for unrecognized, missing or malformed arguments."""


class _Parser(argparse.ArgumentParser):
    def error(self, message: str) -> None:
        raise UsageError(message)


def usage(prog: str) -> str:
    """Return the usage text printed on bad invocations."""
    return (
        "Usage:\n"
        f"  {prog} trim\n"
        f"  {prog} list <thresholdMB> [--kill]\n"
        f"  {prog} alt\n"
    )


def _threshold_mb(value: str) -> int:
    try:
        threshold = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not a whole number of MB: {value!r}") from None
    if threshold < 0:
        raise argparse.ArgumentTypeError(f"threshold must be >= 0, got {threshold}")
    return threshold


def build_parser(prog: str = "pyreclaim") -> argparse.ArgumentParser:
    """Build the argument parser for the one-shot commands."""
    parser = _Parser(
        prog=prog,
        description="Trim this process's working set, list memory-heavy processes, "
        "and optionally terminate them.",
        usage=usage(prog),
        add_help=False,
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="log diagnostics to stderr",
    )

    commands = parser.add_subparsers(dest="command", metavar="command")
    commands.add_parser("trim", help="trim the current process working set", add_help=False)

    list_cmd = commands.add_parser(
        "list",
        help="list processes using >= thresholdMB",
        add_help=False,
    )
    list_cmd.add_argument("threshold", type=_threshold_mb, metavar="thresholdMB")
    list_cmd.add_argument(
        "--kill",
        action="store_true",
        help="attempt to terminate every listed process (use with care)",
    )

    commands.add_parser("alt", help="trim demonstration, then exit", add_help=False)
    return parser


def configure_logging(verbose: bool) -> None:
    """Send log records to stderr; DEBUG when verbose, WARNING otherwise."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format=LOG_FORMAT,
        stream=sys.stderr,
    )


def run_trim(inspector: ProcessInspector) -> int:
    """Trim the current process and print the report."""
    show_trim(trim_working_set(inspector))
    return 0


def run_list(inspector: ProcessInspector, threshold: int, kill: bool) -> int:
    """Print every matching process, then terminate them all when asked."""
    records = list_high_memory_processes(threshold, inspector)
    show_processes(records, threshold)
    if kill:
        terminate_all(records, inspector)
    return 0


def run_alt(inspector: ProcessInspector) -> int:
    """Demonstration entry: trim once, then point at the other commands."""
    print("Alternate main: trimming current process working set...")
    show_trim(trim_working_set(inspector))
    print("Done. Use the program with arguments to list/kill processes.")
    return 0


def main(
    argv: list[str] | None = None,
    inspector: ProcessInspector | None = None,
) -> int:
    """
    Dispatch one invocation.

    With no arguments the interactive menu runs; otherwise a single command
    is serviced. Returns the process exit code.
    """
    if argv is None:
        argv = sys.argv[1:]

    parser = build_parser()
    try:
        args = parser.parse_args(argv)
    except UsageError as exc:
        logger.debug("Bad arguments %r: %s", argv, exc)
        print(usage(parser.prog), end="")
        return 1

    configure_logging(args.verbose)
    inspector = inspector or default_inspector()

    if args.command is None:
        return InteractiveMenu(inspector).run()
    if args.command == "trim":
        return run_trim(inspector)
    if args.command == "list":
        return run_list(inspector, args.threshold, args.kill)
    return run_alt(inspector)


if __name__ == "__main__":
    sys.exit(main())
