"""
procwarden: CPU-usage conditions for process supervision.

The package samples the CPU use of a watched process together with all of its
descendants and decides, over a sliding window of polls, whether the usage has
crossed a threshold often enough to trigger the supervisor.
"""

__version__ = "0.3.0"
