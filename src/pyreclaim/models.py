"""Data models for pyreclaim."""

from dataclasses import dataclass
from enum import Enum


@dataclass(slots=True, frozen=True)
class ProcessRecord:
    """Immutable record of one process seen during an enumeration pass."""

    pid: int
    name: str  # Best-effort, may be empty
    rss: int  # Bytes

    @property
    def rss_mb(self) -> int:
        """Resident size in whole megabytes."""
        return self.rss // 1024 // 1024


class TrimStatus(Enum):
    """Outcome of a working-set trim request."""

    TRIMMED = "trimmed"
    UNAVAILABLE = "unavailable"
    FAILED = "failed"


@dataclass(slots=True, frozen=True)
class TrimAttempt:
    """Result of calling the platform trim primitive."""

    status: TrimStatus
    message: str = ""
    code: int | None = None


@dataclass(slots=True, frozen=True)
class TrimReport:
    """Resident size of the current process around one trim attempt."""

    before: int  # Bytes
    after: int  # Bytes
    attempt: TrimAttempt

    @property
    def before_kb(self) -> int:
        return self.before // 1024

    @property
    def after_kb(self) -> int:
        return self.after // 1024
