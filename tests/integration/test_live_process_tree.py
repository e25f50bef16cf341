"""Integration tests against the real process table."""

import os
import subprocess
import sys

import pytest
from procwarden.conditions import CpuUsage
from procwarden.supervisor import Watch
from procwarden.system import ProcessMetrics, ProcessTreeSampler


@pytest.fixture
def child_process():
    proc = subprocess.Popen([sys.executable, "-c", "import time; time.sleep(30)"])
    yield proc
    proc.kill()
    proc.wait()


class TestLiveProcessTree:
    """Sampling the test runner itself and a child it spawned."""

    def test_own_tree_includes_spawned_child(self, child_process):
        sample = ProcessTreeSampler().sample(os.getpid())

        assert sample.root_present is True
        assert sample.pids[0] == os.getpid()
        assert child_process.pid in sample.pids
        assert sample.total_cpu >= 0.0

    def test_usage_lists_direct_children(self, child_process):
        usage = ProcessMetrics().usage(os.getpid())

        assert child_process.pid in usage.children

    def test_exited_process_samples_as_absent(self, child_process):
        pid = child_process.pid
        child_process.kill()
        child_process.wait()

        sample = ProcessTreeSampler().sample(pid)

        assert sample.root_present is False
        assert sample.total_cpu == 0.0

    def test_condition_polls_live_process(self, tmp_path):
        pid_path = tmp_path / "self.pid"
        pid_path.write_text(f"{os.getpid()}\n")
        condition = CpuUsage.build(Watch("self", pid_file=pid_path), above=100000, times=(1, 2))

        condition.test()
        triggered, message = condition.test()

        assert triggered is False
        assert message.startswith("cpu within bounds [")
        assert len(condition.timeline) == 2
