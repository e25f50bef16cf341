"""
Entry point for the supervisor process.

Its sole responsibility is to load the watch file, register every watch and
run the supervision loop under a recognizable process title.
"""
import sys
import logging
import setproctitle
from pathlib import Path
from typing import Optional, Union
from procwarden.config import effective_settings as config
from procwarden.exceptions import ConfigurationError
from procwarden.log.setup import setup_logging
from procwarden.supervisor import WatchSupervisor, load_watch_file

log = logging.getLogger(__name__)


def build_supervisor(watch_file: Union[str, Path]) -> WatchSupervisor:
    """
    Loads the watch file and registers every watch on a new supervisor.

    :raises ConfigurationError: If the file or any condition in it is invalid.
    """
    supervisor = WatchSupervisor()
    for watch in load_watch_file(watch_file):
        supervisor.register(watch)
    return supervisor


def run_supervisor(watch_file: Optional[Union[str, Path]] = None, verbose: bool = False) -> bool:
    """
    Runs the supervisor in the foreground until it is interrupted.

    :return: False if the configuration was rejected, True after a normal stop.
    """
    setproctitle.setproctitle(config.SUPERVISOR_PROCESS_TITLE)
    console_level = logging.DEBUG if verbose else getattr(logging, config.LOG_LEVEL, logging.INFO)
    setup_logging(console_level, config.LOG_FILE_PATH or None)

    watch_file = watch_file or config.WATCH_FILE_PATH
    try:
        supervisor = build_supervisor(watch_file)
    except ConfigurationError as e:
        log.error(f"Configuration rejected: {e}")
        for problem in e.problems:
            log.error(f"  - {problem}")
        return False

    supervisor.supervision_loop()
    return True


if __name__ == "__main__":
    sys.exit(0 if run_supervisor(sys.argv[1] if len(sys.argv) > 1 else None) else 1)
