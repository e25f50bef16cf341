"""
The Supervisor package.
Drives the conditions of each watch on a polling interval.

This package contains the Watch collaborator that conditions measure, the
WatchSupervisor poll loop and the loader for the YAML watch file. A triggered
condition is reported to the watch's trigger handler; starting, stopping and
restarting processes is left to that handler.
"""
from .watch import Watch, log_trigger
from .supervisor import WatchSupervisor
from .watch_file import load_watch_file

__all__ = ['Watch', 'log_trigger', 'WatchSupervisor', 'load_watch_file']
