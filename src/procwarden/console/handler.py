import time
import logging
from typing import List
from procwarden.config import effective_settings as config
from procwarden.conditions.cpu_usage import format_percent
from procwarden.exceptions import ConfigurationError
from procwarden.log.setup import setup_logging
from procwarden.supervisor_entry import build_supervisor, run_supervisor
from procwarden.system.tree import ProcessTreeSampler

log = logging.getLogger(__name__)


def handle_sample_command(args: List[str]) -> None:
    """
    Prints the CPU usage of a process tree.
    Usage: sample <PID> [COUNT]
    """
    if not args:
        print("Usage: sample <PID> [COUNT]")
        return
    try:
        pid = int(args[0])
        count = int(args[1]) if len(args) > 1 else 1
    except ValueError:
        print("PID and COUNT must be integers.")
        return

    sampler = ProcessTreeSampler()
    for index in range(count):
        if index:
            time.sleep(1)
        sample = sampler.sample(pid)
        if not sample.root_present:
            print(f"Process {pid} is not running.")
            return
        print(f"PID {pid}: {format_percent(sample.total_cpu)}% over {len(sample.pids)} process(es) {list(sample.pids)}")


def handle_check_config_command(args: List[str]) -> bool:
    """
    Loads and validates a watch file without polling anything.
    Usage: check-config [WATCH_FILE]

    :return: True if every watch and condition is valid.
    """
    watch_file = args[0] if args else config.WATCH_FILE_PATH
    log.info(f"Validating watch file '{watch_file}'...")
    try:
        supervisor = build_supervisor(watch_file)
    except ConfigurationError as e:
        log.error(f"CONFIG CHECK FAILED: {e}")
        for problem in e.problems:
            log.error(f"  - {problem}")
        return False

    for watch in supervisor.watches.values():
        log.info(f"Config Check OK: watch '{watch.name}' with {len(watch.conditions)} condition(s)")
    return True


def handle_watch_command(args: List[str]) -> None:
    """
    Runs the supervisor in the foreground.
    Usage: watch [WATCH_FILE]
    """
    run_supervisor(args[0] if args else None, verbose=config.VERBOSE_LOGGING)


def toggle_verbose_logging() -> None:
    """Switches console logging between INFO and DEBUG."""
    config.VERBOSE_LOGGING = not config.VERBOSE_LOGGING
    level = logging.DEBUG if config.VERBOSE_LOGGING else logging.INFO
    setup_logging(level, config.LOG_FILE_PATH or None)
    log.info(f"Verbose logging {'enabled' if config.VERBOSE_LOGGING else 'disabled'}.")


def print_help() -> None:
    """Prints the list of console commands."""
    print("\nAvailable commands:")
    print("  sample PID [COUNT]         - Show the CPU usage of a process and its descendants.")
    print("  check-config [FILE]        - Validate a watch file.")
    print("  watch [FILE]               - Supervise the watches of a file until interrupted.")
    print("  verbose                    - Toggle DEBUG logging on the console.")
    print("  help                       - Show this help message.")
    print("  exit                       - Leave the console.")
    print(f"Without FILE, the watch file is '{config.WATCH_FILE_PATH}'.\n")
