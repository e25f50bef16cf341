"""
The conditions package.
Conditions are evaluated by the supervisor on every poll and report whether
the watched process should be acted upon.
"""
from .base import PollCondition
from .timeline import Timeline
from .policy import ThresholdPolicy, normalize_times
from .cpu_usage import CpuUsage
from .registry import CONDITIONS, generate

__all__ = [
    "PollCondition", "Timeline", "ThresholdPolicy", "normalize_times",
    "CpuUsage", "CONDITIONS", "generate",
]
