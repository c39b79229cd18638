"""Human-readable console output shared by the CLI and the menu."""

import sys
from typing import TextIO

from pyreclaim.inspector import ProcessInspector
from pyreclaim.models import ProcessRecord, TrimReport, TrimStatus
from pyreclaim.reclaim import try_terminate


def format_record(record: ProcessRecord) -> str:
    """Format a process as 'PID=<id> name=<name> rssMB=<MB>'."""
    return f"PID={record.pid} name={record.name} rssMB={record.rss_mb}"


def show_trim(report: TrimReport, out: TextIO | None = None) -> None:
    """Print the before/after lines of a trim, with the attempt's message."""
    out = out or sys.stdout
    print(f"Before trim: {report.before_kb} KB", file=out)

    attempt = report.attempt
    if attempt.message:
        stream = sys.stderr if attempt.status is TrimStatus.FAILED else out
        print(attempt.message, file=stream)

    print(f"After  trim: {report.after_kb} KB", file=out)


def show_processes(
    records: list[ProcessRecord],
    threshold_mb: int,
    out: TextIO | None = None,
    indent: str = "",
) -> None:
    """Print one line per record, or an explicit message when there are none."""
    out = out or sys.stdout
    if not records:
        print(f"{indent}No processes found using >= {threshold_mb} MB", file=out)
        return
    for record in records:
        print(f"{indent}{format_record(record)}", file=out)


def terminate_all(
    records: list[ProcessRecord],
    inspector: ProcessInspector,
    out: TextIO | None = None,
) -> int:
    """
    Try to terminate every record, in order, reporting each outcome.

    Returns:
        Number of processes for which termination was accepted.
    """
    out = out or sys.stdout
    accepted = 0
    for record in records:
        print(f"  Attempting to terminate PID {record.pid} ... ", end="", file=out)
        if try_terminate(record.pid, inspector):
            accepted += 1
            print("OK", file=out)
        else:
            print("FAILED", file=out)
        out.flush()
    return accepted
