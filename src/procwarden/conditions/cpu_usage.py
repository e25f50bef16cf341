import logging
from pathlib import Path
from typing import Any, List, Optional, Tuple, Union
from procwarden.config import effective_settings as config
from procwarden.conditions.base import PollCondition
from procwarden.conditions.policy import ThresholdPolicy, is_number, normalize_times
from procwarden.conditions.timeline import Timeline
from procwarden.exceptions import ConfigurationError, InvalidPidFile
from procwarden.system.pidfile import read_pid_file
from procwarden.system.tree import ProcessTreeSampler

log = logging.getLogger(__name__)


class CpuUsage(PollCondition):
    """
    Triggers when the CPU use of a process, summed over the process and all of
    its descendants, is above a limit. On multi-core hosts the sum can exceed 100.

    Attributes:
        above: Required. The percentage above which a sample counts against the process.
        times: An integer k (trigger when all of the last k samples are above), or an
            (occurrences, window) pair (trigger when `occurrences` of the last `window`
            samples are above). Defaults to (1, 1).
        pid_file: Optional. PID file of the process to measure. Without it the
            condition measures the owning watch's process.

    Examples::

        # More than 25% in 3 of the last 5 polls, measured on the watch's process.
        condition = CpuUsage.build(watch, above=25, times=(3, 5))

        # A process the watch does not own directly.
        condition = CpuUsage.build(watch, above=25, pid_file="/var/run/mongrel.3000.pid")
    """

    ATTRIBUTES = ("above", "times", "pid_file", "interval")

    def __init__(self, sampler: Optional[ProcessTreeSampler] = None) -> None:
        super().__init__()
        self.above: Optional[float] = None
        self.times: Any = (config.DEFAULT_OCCURRENCES, config.DEFAULT_WINDOW)
        self.pid_file: Optional[Union[str, Path]] = None
        self.sampler = sampler or ProcessTreeSampler()
        self.policy: Optional[ThresholdPolicy] = None
        self.timeline: Optional[Timeline] = None

    @classmethod
    def build(
        cls,
        watch,
        above: float,
        times: Any = 1,
        pid_file: Optional[Union[str, Path]] = None,
        sampler: Optional[ProcessTreeSampler] = None,
    ) -> "CpuUsage":
        """
        Assembles a condition, validates it and prepares it in one step.

        :raises ConfigurationError: If the resulting condition is not usable.
        """
        condition = cls(sampler)
        condition.watch = watch
        condition.above = above
        condition.times = times
        condition.pid_file = pid_file
        condition.validate()
        condition.prepare()
        return condition

    def problems(self) -> List[str]:
        problems = super().problems()
        if self.pid_file is None and not self._watch_has_pid_source():
            problems.append("Attribute 'pid_file' must be specified")
        if self.above is None:
            problems.append("Attribute 'above' must be specified")
        elif not is_number(self.above):
            problems.append(f"Attribute 'above' must be a number of percent, got {self.above!r}")
        try:
            occurrences, window = normalize_times(self.times)
            if occurrences < 1 or window < occurrences:
                problems.append(f"Attribute 'times' needs 1 <= occurrences <= window, got {self.times!r}")
        except ConfigurationError as e:
            problems.append(str(e))
        return problems

    def _watch_has_pid_source(self) -> bool:
        if self.watch is None:
            return False
        return self.watch.pid_file() is not None or self.watch.pid() is not None

    def prepare(self) -> None:
        """
        Normalizes 'times' into a policy and sizes the timeline to its window.
        Calling it again keeps the newest samples that still fit.
        """
        self.policy = ThresholdPolicy.from_times(self.above, self.times)
        if self.timeline is not None and self.timeline.capacity == self.policy.window:
            return

        timeline = Timeline(self.policy.window)
        for sample in self.timeline or ():
            timeline.push(sample)
        self.timeline = timeline

    def reset(self) -> None:
        """Clears the sample history. The policy is left untouched."""
        if self.timeline is not None:
            self.timeline.clear()

    def pid(self) -> Optional[int]:
        """
        Resolves the process to measure: the condition's own PID file first,
        then the owning watch's process.

        :raises InvalidPidFile: If the condition's PID file cannot be used.
        """
        if self.pid_file is not None:
            return read_pid_file(self.pid_file)
        return self.watch.pid() if self.watch is not None else None

    def test(self) -> Tuple[bool, str]:
        """
        Takes one sample of the process tree and evaluates the window.

        An exited process is recorded as 0%. A PID file that cannot be read
        yields no sample for this poll. Neither raises.

        :return: A (triggered, message) tuple; the message is also kept in `info`.
        """
        if self.timeline is None:
            self.prepare()

        try:
            pid = self.pid()
        except InvalidPidFile as e:
            log.warning(f"{e}. Skipping this sample.", extra={"watch": self.watch_name})
            return self._not_sampled(str(e))

        if pid is None:
            log.debug("No process id available. Skipping this sample.", extra={"watch": self.watch_name})
            return self._not_sampled("no process id available")

        sample = self.sampler.sample(pid)
        if not sample.root_present:
            log.info(f"Process {pid} is not running, recording 0%.", extra={"watch": self.watch_name})
        self.timeline.push(sample.total_cpu)

        history = self.history()
        if self.policy.triggered(self.timeline):
            self.info = f"cpu out of bounds {history}"
            return True, self.info
        self.info = f"cpu within bounds {history}"
        return False, self.info

    def _not_sampled(self, reason: str) -> Tuple[bool, str]:
        self.info = f"cpu not sampled ({reason}) {self.history()}"
        return False, self.info

    def history(self) -> str:
        """Renders the timeline oldest first, marking over-threshold samples with '*'."""
        samples = self.timeline or ()
        return "[" + ", ".join(self._format_sample(sample) for sample in samples) + "]"

    def _format_sample(self, sample: float) -> str:
        # The marker compares the raw sample, not the rendered one.
        marker = "*" if self.policy.is_over(sample) else ""
        return f"{marker}{format_percent(sample)}%"


def format_percent(value: float) -> str:
    """Formats a percentage with at most two decimals: 42.0 -> '42', 25.043 -> '25.04'."""
    text = f"{value:.2f}".rstrip("0").rstrip(".")
    return "0" if text in ("", "-0") else text
