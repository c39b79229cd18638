"""Shared fixtures for pyreclaim tests."""

import pytest

from pyreclaim.inspector import ProcessInspector
from pyreclaim.models import ProcessRecord, TrimAttempt, TrimStatus

MB = 1024 * 1024


class FakeInspector(ProcessInspector):
    """
    Inspector over a synthetic process table.

    A pid mapped to None is listed in the snapshot but fails to probe,
    like a process that exits or denies access mid-scan.
    """

    def __init__(
        self,
        table: dict[int, ProcessRecord | None] | None = None,
        rss: tuple[int, int] = (8 * MB, 6 * MB),
        attempt: TrimAttempt | None = None,
        refuse: set[int] | None = None,
    ) -> None:
        self.table = dict(table or {})
        self._rss = list(rss)
        self.attempt = attempt or TrimAttempt(TrimStatus.TRIMMED, "trimmed")
        self.refuse = refuse or set()
        self.terminated: list[int] = []
        self.snapshots = 0
        self.trims = 0

    def snapshot(self) -> list[int]:
        self.snapshots += 1
        return list(self.table)

    def probe(self, pid: int) -> ProcessRecord | None:
        return self.table.get(pid)

    def current_rss(self) -> int:
        return self._rss.pop(0) if len(self._rss) > 1 else self._rss[0]

    def trim(self) -> TrimAttempt:
        self.trims += 1
        return self.attempt

    def terminate(self, pid: int) -> bool:
        if pid in self.refuse or pid not in self.table:
            return False
        self.terminated.append(pid)
        del self.table[pid]
        return True


@pytest.fixture
def records():
    """The two-process table used across scenarios."""
    return [
        ProcessRecord(pid=100, name="a", rss=50 * MB),
        ProcessRecord(pid=101, name="b", rss=200 * MB),
    ]


@pytest.fixture
def inspector(records):
    """FakeInspector over the two-process table."""
    return FakeInspector({record.pid: record for record in records})


@pytest.fixture
def make_inspector():
    """Factory for FakeInspector with custom tables and trim behaviour."""
    return FakeInspector
