"""
The system package.
Reads CPU usage and parent/child relationships from the OS process table.
"""
from .process import ProcessEntry, ProcessMetrics, ProcessTable, ProcessUsage
from .tree import ProcessTreeSampler, TreeSample

__all__ = [
    "ProcessEntry", "ProcessMetrics", "ProcessTable", "ProcessUsage",
    "ProcessTreeSampler", "TreeSample",
]
