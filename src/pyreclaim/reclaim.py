"""Trim, enumerate and terminate operations for pyreclaim."""

import logging
from collections.abc import Iterator

from pyreclaim.inspector import ProcessInspector
from pyreclaim.models import ProcessRecord, TrimReport

logger = logging.getLogger(__name__)

BYTES_PER_MB = 1024 * 1024


def trim_working_set(inspector: ProcessInspector) -> TrimReport:
    """
    Ask the OS to release reclaimable pages of the current process.

    A failed or unavailable trim is reported in the returned TrimReport,
    never raised.
    """
    before = inspector.current_rss()
    attempt = inspector.trim()
    after = inspector.current_rss()

    logger.debug("Trim %s: %d -> %d bytes", attempt.status.value, before, after)
    return TrimReport(before=before, after=after, attempt=attempt)


def iter_high_memory_processes(
    threshold_mb: int,
    inspector: ProcessInspector,
) -> Iterator[ProcessRecord]:
    """
    Yield processes whose resident size is at least threshold_mb megabytes.

    The process table is captured once, when iteration starts. Processes
    that exit or deny access before they are probed are skipped, and the
    yielded records may already be stale by the time a caller acts on them.

    Args:
        threshold_mb: Minimum resident size in megabytes.
        inspector: Platform inspector to read the process table from.

    Raises:
        ValueError: If threshold_mb is negative.
    """
    if threshold_mb < 0:
        raise ValueError(f"threshold_mb must be >= 0, got {threshold_mb}")
    return _scan(threshold_mb * BYTES_PER_MB, inspector)


def _scan(threshold: int, inspector: ProcessInspector) -> Iterator[ProcessRecord]:
    pids = inspector.snapshot()
    logger.debug("Snapshot holds %d processes", len(pids))

    for pid in pids:
        record = inspector.probe(pid)
        if record is None:
            continue
        if record.rss >= threshold:
            yield record


def list_high_memory_processes(
    threshold_mb: int,
    inspector: ProcessInspector,
) -> list[ProcessRecord]:
    """Collect iter_high_memory_processes into a list."""
    return list(iter_high_memory_processes(threshold_mb, inspector))


def try_terminate(pid: int, inspector: ProcessInspector) -> bool:
    """Request termination of pid. Returns False instead of raising."""
    ok = inspector.terminate(pid)
    if ok:
        logger.info("Termination requested for pid %d", pid)
    else:
        logger.info("Termination of pid %d failed", pid)
    return ok
