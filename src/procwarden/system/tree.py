import logging
from collections import deque
from dataclasses import dataclass
from typing import Deque, List, Optional, Set, Tuple
from procwarden.exceptions import ProcessAbsent
from procwarden.system.process import ProcessMetrics

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class TreeSample:
    """Aggregate CPU usage of a process and all of its descendants."""
    root_pid: int
    total_cpu: float
    root_present: bool
    pids: Tuple[int, ...]


class ProcessTreeSampler:
    """
    Sums the CPU usage of a process tree.

    A supervised service commonly forks workers, so a CPU limit has to bound
    the whole tree rather than the root alone.
    """

    def __init__(self, metrics: Optional[ProcessMetrics] = None) -> None:
        self.metrics = metrics or ProcessMetrics()

    def aggregate_usage(self, root_pid: int) -> float:
        """Returns the summed CPU percentage of root_pid and its descendants."""
        return self.sample(root_pid).total_cpu

    def sample(self, root_pid: int) -> TreeSample:
        """
        Walks the descendants of root_pid breadth-first and sums their usage.

        The root exiting before it is measured is not an error: it contributes 0
        and root_present is False. Descendants that exit mid-walk are skipped.
        A visited set keeps the walk finite even if the OS reports a cycle.

        :param root_pid: The process at the top of the tree.
        :return: A TreeSample with the total and the pids that contributed to it.
        """
        table = self.metrics.process_table()
        visited: Set[int] = {root_pid}
        counted: List[int] = []
        queue: Deque[int] = deque()

        try:
            root = self.metrics.usage(root_pid, table)
            total = root.cpu_percent
            root_present = True
            counted.append(root_pid)
            queue.extend(root.children)
        except ProcessAbsent:
            log.debug(f"Root process {root_pid} has exited, counting it as 0%.")
            total = 0.0
            root_present = False
            queue.extend(table.children(root_pid))

        while queue:
            pid = queue.popleft()
            if pid in visited:
                continue
            visited.add(pid)
            try:
                usage = self.metrics.usage(pid, table)
            except ProcessAbsent:
                log.debug(f"Descendant {pid} of {root_pid} exited during the walk, skipping.")
                continue
            total += usage.cpu_percent
            counted.append(pid)
            queue.extend(child for child in usage.children if child not in visited)

        return TreeSample(root_pid=root_pid, total_cpu=total, root_present=root_present, pids=tuple(counted))
