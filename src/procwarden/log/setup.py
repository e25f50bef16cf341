import sys
import logging
from pathlib import Path
from typing import Optional, Union

DEFAULT_FORMAT = '%(asctime)s - %(levelname)-8s - [%(name)s] - %(message)s'
WATCH_FORMAT = '%(asctime)s - %(levelname)-8s - [%(name)s] - <%(watch)s> %(message)s'


class MainFormatter(logging.Formatter):
    """
    Formats regular logs, and prefixes condition diagnostics with the name of
    the watch they belong to when the record carries a 'watch' extra.
    """

    def __init__(self) -> None:
        super().__init__(DEFAULT_FORMAT)

    def format(self, record: logging.LogRecord) -> str:
        if getattr(record, "watch", None) is None:
            return super().format(record)

        # Temporarily change the format string for the superclass call.
        original_format = self._style._fmt
        self._style._fmt = WATCH_FORMAT
        try:
            return super().format(record)
        finally:
            self._style._fmt = original_format


def setup_logging(console_level: int = logging.INFO, log_file: Optional[Union[str, Path]] = None) -> None:
    """
    Configures the root logger for the application.
    This sets up a console handler and, optionally, a file handler, clearing any
    previously configured handlers to prevent duplication.

    :param console_level: The logging level for the console output (e.g., logging.INFO).
    :param log_file: Optional path of a file that receives all DEBUG and above records.
    """
    root_logger = logging.getLogger()
    # Set root level to lowest to capture all messages for handler filtering
    root_logger.setLevel(logging.DEBUG)

    # Clear any existing handlers to prevent re-adding them on re-runs
    if root_logger.hasHandlers():
        root_logger.handlers.clear()

    # --- Console Handler ---
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(console_level)
    console_handler.setFormatter(MainFormatter())
    root_logger.addHandler(console_handler)

    # --- File Handler (optional) ---
    if log_file:
        try:
            log_path = Path(log_file)
            log_path.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(log_path, mode='a', encoding='utf-8')
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(MainFormatter())
            root_logger.addHandler(file_handler)
        except OSError as e:
            root_logger.error(f"Failed to initialize file logging handler for '{log_file}': {e}")
