import logging
from typing import List
from procwarden.console.handler import (
    handle_check_config_command, handle_sample_command, handle_watch_command,
    print_help, toggle_verbose_logging,
)

log = logging.getLogger(__name__)


def execute_command(command: str, args: List[str]) -> bool:
    """
    Executes a single command from the user.

    :param command: The main command string (e.g., 'sample', 'watch').
    :param args: A list of arguments for the command.
    :return bool: True if the console should exit, False otherwise.
    """
    log.debug(f"Executing command: {command}, args: {args}")
    command_map = {
        "sample": lambda: handle_sample_command(args),
        "check-config": lambda: handle_check_config_command(args),
        "watch": lambda: handle_watch_command(args),
        "verbose": toggle_verbose_logging,
        "help": print_help,
        "exit": lambda: True,
    }

    if command not in command_map:
        log.info(f"Unknown command: '{command}'. Type 'help' for a list of commands.")
        return False

    result = command_map[command]()
    return command == "exit" and result is True
