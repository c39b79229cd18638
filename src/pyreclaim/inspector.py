"""Platform process inspection for pyreclaim."""

import ctypes
import ctypes.util
import logging
import os
import signal
import sys
from abc import ABC, abstractmethod
from pathlib import Path

import psutil

from pyreclaim.models import ProcessRecord, TrimAttempt, TrimStatus

logger = logging.getLogger(__name__)

# (SIZE_T)-1 for both limits asks Windows to trim the working set
_SIZE_T_MAX = ctypes.c_size_t(-1).value

MALLOC_TRIM_REQUEST = "Requesting malloc_trim (glibc) if available..."


class ProcessInspector(ABC):
    """
    Capability interface over the host's process table.

    Implementations hide every platform call; callers only see pids,
    ProcessRecord values, TrimAttempt values and booleans.
    """

    @abstractmethod
    def snapshot(self) -> list[int]:
        """Return the pids present in the process table right now."""

    @abstractmethod
    def probe(self, pid: int) -> ProcessRecord | None:
        """
        Read name and resident size of one process.

        Returns None when the process is gone or cannot be inspected.
        """

    @abstractmethod
    def current_rss(self) -> int:
        """Resident size of the calling process, in bytes."""

    @abstractmethod
    def trim(self) -> TrimAttempt:
        """Ask the OS to reclaim unused resident pages of the calling process."""

    @abstractmethod
    def terminate(self, pid: int) -> bool:
        """Request termination of a process. Never raises for OS failures."""


class PsutilInspector(ProcessInspector):
    """
    Inspector backed by psutil process handles.

    Used as-is on platforms without a trim facility (macOS, BSD), where
    termination is a SIGTERM the target may only observe.
    """

    def snapshot(self) -> list[int]:
        return psutil.pids()

    def probe(self, pid: int) -> ProcessRecord | None:
        try:
            proc = psutil.Process(pid)
            with proc.oneshot():
                rss = proc.memory_info().rss
                try:
                    name = proc.name() or ""
                except psutil.AccessDenied:
                    name = ""
        except (psutil.NoSuchProcess, psutil.AccessDenied, psutil.ZombieProcess) as exc:
            logger.debug("Skipping pid %d: %s", pid, exc)
            return None

        return ProcessRecord(pid=pid, name=name, rss=rss)

    def current_rss(self) -> int:
        return psutil.Process().memory_info().rss

    def trim(self) -> TrimAttempt:
        return TrimAttempt(
            TrimStatus.UNAVAILABLE,
            "No portable trim available on this POSIX platform.",
        )

    def terminate(self, pid: int) -> bool:
        # 0 and negative pids address process groups, never a single process
        if pid <= 0:
            return False
        try:
            self._stop(psutil.Process(pid))
        except psutil.Error as exc:
            logger.debug("Could not terminate pid %d: %s", pid, exc)
            return False
        return True

    def _stop(self, proc: psutil.Process) -> None:
        proc.terminate()


class WindowsInspector(PsutilInspector):
    """Inspector for Windows: trims through kernel32 and kills forcefully."""

    def __init__(self) -> None:
        """Bind the kernel32 entry points used for trimming."""
        from ctypes import wintypes

        self._kernel32 = ctypes.WinDLL("kernel32", use_last_error=True)
        self._kernel32.GetCurrentProcess.restype = wintypes.HANDLE
        self._kernel32.SetProcessWorkingSetSize.argtypes = (
            wintypes.HANDLE,
            ctypes.c_size_t,
            ctypes.c_size_t,
        )
        self._kernel32.SetProcessWorkingSetSize.restype = wintypes.BOOL

    def trim(self) -> TrimAttempt:
        handle = self._kernel32.GetCurrentProcess()
        if not self._kernel32.SetProcessWorkingSetSize(handle, _SIZE_T_MAX, _SIZE_T_MAX):
            code = ctypes.get_last_error()
            return TrimAttempt(
                TrimStatus.FAILED,
                f"SetProcessWorkingSetSize failed, error={code}",
                code,
            )
        return TrimAttempt(TrimStatus.TRIMMED, "Working set trimmed.")

    def _stop(self, proc: psutil.Process) -> None:
        # TerminateProcess
        proc.kill()


class ProcfsInspector(ProcessInspector):
    """
    Inspector reading the Linux /proc filesystem table directly.

    Resident size comes from the second field of /proc/<pid>/statm (pages),
    the name from /proc/<pid>/comm.
    """

    def __init__(
        self,
        proc_root: str | os.PathLike[str] = "/proc",
        page_size: int | None = None,
    ) -> None:
        """
        Initialize the ProcfsInspector.

        Args:
            proc_root: Mount point of the proc filesystem. Default /proc.
            page_size: Page size in bytes. Defaults to the system page size.
        """
        self._root = Path(proc_root)
        self._page_size = page_size or os.sysconf("SC_PAGE_SIZE")

    @property
    def proc_root(self) -> Path:
        return self._root

    @property
    def page_size(self) -> int:
        return self._page_size

    def snapshot(self) -> list[int]:
        try:
            entries = os.listdir(self._root)
        except OSError as exc:
            logger.warning("Cannot list %s: %s", self._root, exc)
            return []
        return [int(entry) for entry in entries if entry.isdigit() and int(entry) > 0]

    def probe(self, pid: int) -> ProcessRecord | None:
        entry = self._root / str(pid)
        try:
            rss = self._read_rss(entry)
        except (OSError, ValueError, IndexError) as exc:
            logger.debug("Skipping pid %d: %s", pid, exc)
            return None

        try:
            name = (entry / "comm").read_text(errors="replace").rstrip("\n")
        except OSError:
            name = ""

        return ProcessRecord(pid=pid, name=name, rss=rss)

    def current_rss(self) -> int:
        return self._read_rss(self._root / "self")

    def _read_rss(self, entry: Path) -> int:
        fields = (entry / "statm").read_text().split()
        return int(fields[1]) * self._page_size

    def trim(self) -> TrimAttempt:
        try:
            libc = ctypes.CDLL(ctypes.util.find_library("c") or "libc.so.6")
            malloc_trim = libc.malloc_trim
        except (OSError, AttributeError):
            # musl and other non-glibc C libraries
            return TrimAttempt(
                TrimStatus.UNAVAILABLE,
                f"{MALLOC_TRIM_REQUEST}\nmalloc_trim not available on this platform.",
            )

        malloc_trim.argtypes = (ctypes.c_size_t,)
        malloc_trim.restype = ctypes.c_int
        result = malloc_trim(0)
        logger.debug("malloc_trim(0) -> %d", result)
        return TrimAttempt(
            TrimStatus.TRIMMED,
            f"{MALLOC_TRIM_REQUEST}\nmalloc_trim returned {result}",
            result,
        )

    def terminate(self, pid: int) -> bool:
        # 0 and negative pids address process groups, never a single process
        if pid <= 0:
            return False
        try:
            os.kill(pid, signal.SIGTERM)
        except OSError as exc:
            logger.debug("Could not terminate pid %d: %s", pid, exc)
            return False
        return True


def default_inspector() -> ProcessInspector:
    """Pick the inspector for the running platform."""
    if sys.platform == "win32":
        return WindowsInspector()
    if sys.platform.startswith("linux"):
        return ProcfsInspector()
    return PsutilInspector()
