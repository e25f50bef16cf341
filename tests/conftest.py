"""Pytest configuration and shared fakes for procwarden tests."""

from typing import Dict, Iterable, Optional, Tuple

import pytest
from procwarden.exceptions import ProcessAbsent
from procwarden.system.process import ProcessEntry, ProcessTable, ProcessUsage
from procwarden.system.tree import TreeSample


class FakeMetrics:
    """ProcessMetrics stand-in backed by plain dictionaries."""

    def __init__(
        self,
        cpu: Optional[Dict[int, float]] = None,
        parents: Optional[Dict[int, int]] = None,
        vanished: Iterable[int] = (),
        children: Optional[Dict[int, Tuple[int, ...]]] = None,
    ):
        self.cpu = dict(cpu or {})
        self.parents = dict(parents or {})
        # Listed in the process table but gone by the time they are measured.
        self.vanished = set(vanished)
        # Forced child lists, for simulating inconsistent OS reports.
        self.children = dict(children or {})
        self.measured = []
        self.tables_built = 0

    def process_table(self) -> ProcessTable:
        self.tables_built += 1
        return ProcessTable(ProcessEntry(pid=pid, ppid=ppid) for pid, ppid in self.parents.items())

    def usage(self, pid: int, table: Optional[ProcessTable] = None) -> ProcessUsage:
        table = table if table is not None else self.process_table()
        self.measured.append(pid)
        if pid in self.vanished or pid not in table:
            raise ProcessAbsent(pid)
        children = self.children.get(pid, table.children(pid))
        return ProcessUsage(pid=pid, cpu_percent=self.cpu.get(pid, 0.0), children=children)


class StubSampler:
    """Tree sampler that replays queued totals. None stands for an exited root."""

    def __init__(self, totals: Iterable[Optional[float]] = ()):
        self.totals = list(totals)
        self.sampled_pids = []

    def queue(self, *totals: Optional[float]) -> None:
        self.totals.extend(totals)

    def sample(self, pid: int) -> TreeSample:
        self.sampled_pids.append(pid)
        total = self.totals.pop(0)
        if total is None:
            return TreeSample(root_pid=pid, total_cpu=0.0, root_present=False, pids=())
        return TreeSample(root_pid=pid, total_cpu=total, root_present=True, pids=(pid,))

    def aggregate_usage(self, pid: int) -> float:
        return self.sample(pid).total_cpu


@pytest.fixture
def fake_metrics():
    """Factory for FakeMetrics instances."""
    return FakeMetrics


@pytest.fixture
def stub_sampler():
    """An empty StubSampler; queue totals with stub_sampler.queue(...)."""
    return StubSampler()


@pytest.fixture
def pid_file(tmp_path):
    """Writes a PID file and returns its path."""
    def _write(content: str = "4242\n", name: str = "service.pid"):
        path = tmp_path / name
        path.write_text(content)
        return path
    return _write
