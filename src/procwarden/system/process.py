import time
import psutil
import logging
from collections import defaultdict
from dataclasses import dataclass
from typing import DefaultDict, Dict, Iterable, List, Optional, Tuple
from procwarden.exceptions import ProcessAbsent

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProcessEntry:
    """One row of the process table."""
    pid: int
    ppid: int


@dataclass(frozen=True)
class ProcessUsage:
    """CPU usage of a single process and the pids of its direct children."""
    pid: int
    cpu_percent: float
    children: Tuple[int, ...]


class ProcessTable:
    """
    A point-in-time view of the live processes, indexed by pid and by parent.
    Built once per sample so a whole tree walk only enumerates the OS table once.
    """

    def __init__(self, entries: Iterable[ProcessEntry]) -> None:
        self.entries: Dict[int, ProcessEntry] = {}
        self._children: DefaultDict[int, List[int]] = defaultdict(list)
        for entry in entries:
            self.entries[entry.pid] = entry
        for entry in self.entries.values():
            # Some platforms report pid 0 as its own parent.
            if entry.ppid != entry.pid:
                self._children[entry.ppid].append(entry.pid)

    def __contains__(self, pid: int) -> bool:
        return pid in self.entries

    def __len__(self) -> int:
        return len(self.entries)

    def children(self, pid: int) -> Tuple[int, ...]:
        """Returns the direct children of a pid, in ascending pid order."""
        return tuple(sorted(self._children.get(pid, ())))


#* --- Process Handles ---
def get_process_from_pid(pid: int) -> psutil.Process:
    """A wrapper for psutil.Process for easy testing/mocking if needed."""
    return psutil.Process(pid)


class ProcessMetrics:
    """
    Reads per-process CPU usage from psutil.

    CPU usage is reported the way the OS accounts it, so a process using more
    than one core reads above 100%. psutil handles are kept between polls so each
    reading covers the time since the previous one.
    """

    def __init__(self) -> None:
        self._handles: Dict[int, psutil.Process] = {}

    def process_table(self) -> ProcessTable:
        """
        Enumerates the live processes once.
        Processes that exit during the enumeration are skipped by psutil.

        :return: A ProcessTable of every visible process.
        """
        entries = []
        for proc in psutil.process_iter(["pid", "ppid"]):
            ppid = proc.info.get("ppid")
            if ppid is None:
                continue
            entries.append(ProcessEntry(pid=proc.info["pid"], ppid=ppid))
        table = ProcessTable(entries)
        self._prune(table)
        return table

    def usage(self, pid: int, table: Optional[ProcessTable] = None) -> ProcessUsage:
        """
        Returns the CPU usage of a single process and its direct children.

        :param pid: The process to measure.
        :param table: A process table from this sample; enumerated fresh when omitted.
        :return: A ProcessUsage for the process.
        :raises ProcessAbsent: If the pid is not a live process.
        """
        if table is None:
            table = self.process_table()
        if pid not in table:
            raise ProcessAbsent(pid)
        return ProcessUsage(pid=pid, cpu_percent=self.cpu_percent(pid), children=table.children(pid))

    def cpu_percent(self, pid: int) -> float:
        """
        Returns the CPU percentage of a process since it was last read.
        The first reading of a process is its lifetime average instead, matching
        what 'ps' reports in its %cpu column.

        :raises ProcessAbsent: If the process has exited.
        """
        proc = self._handles.get(pid)
        if proc is not None and not proc.is_running():
            # The pid now belongs to a different process.
            log.debug(f"PID {pid} was reused, discarding cached process handle.")
            del self._handles[pid]
            proc = None

        try:
            if proc is not None:
                return proc.cpu_percent(interval=None)

            proc = get_process_from_pid(pid)
            with proc.oneshot():
                cpu_times = proc.cpu_times()
                created = proc.create_time()
            # Prime the handle so the next reading covers only the poll interval.
            proc.cpu_percent(interval=None)
            self._handles[pid] = proc
            return _lifetime_percent(cpu_times.user + cpu_times.system, time.time() - created)
        except psutil.NoSuchProcess:
            self._handles.pop(pid, None)
            raise ProcessAbsent(pid) from None
        except psutil.AccessDenied:
            log.debug(f"Access denied reading CPU usage of PID {pid}, counting it as 0%.")
            return 0.0

    def forget(self, pids: Iterable[int]) -> None:
        """Drops cached handles for the given pids."""
        for pid in pids:
            self._handles.pop(pid, None)

    def _prune(self, table: ProcessTable) -> None:
        """Drops cached handles of processes that are no longer in the table."""
        self.forget([pid for pid in self._handles if pid not in table])


def _lifetime_percent(cpu_seconds: float, age_seconds: float) -> float:
    if age_seconds <= 0:
        return 0.0
    return cpu_seconds / age_seconds * 100.0
