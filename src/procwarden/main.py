import sys
import logging

# Basic console logger for messages BEFORE full setup is complete.
# This logger will be replaced by the full setup later.
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(levelname)-8s - [console] - %(message)s',
    stream=sys.stdout
)
log = logging.getLogger("console")

import procwarden.console as console
from procwarden.config import effective_settings as config
from procwarden.log.setup import setup_logging


def main() -> None:
    """The main entry point for the console application."""
    setup_logging(logging.INFO, config.LOG_FILE_PATH or None)

    # Non-interactive mode for one-off commands
    if len(sys.argv) > 1:
        command, args = sys.argv[1].lower(), sys.argv[2:]
        if "--verbose" in args:
            args.remove("--verbose")
            console.toggle_verbose_logging()

        console.execute_command(command, args)
        return

    # Interactive mode
    print("--- procwarden console ---")
    print("Type 'help' for a list of commands.")
    while True:
        try:
            command_line = input("> ").strip().split()
            if not command_line:
                continue

            command, args = command_line[0].lower(), command_line[1:]
            log.debug(f"Received command: {command}, args: {args}")

            if console.execute_command(command, args):
                break

        except (KeyboardInterrupt, EOFError):
            log.warning("\nExiting console.")
            break
        except Exception as e:
            log.error(f"An unexpected error occurred in the console: {e}", exc_info=True)


if __name__ == "__main__":
    main()
