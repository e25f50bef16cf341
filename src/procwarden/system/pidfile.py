import logging
from pathlib import Path
from typing import Union
from procwarden.exceptions import InvalidPidFile

log = logging.getLogger(__name__)


def read_pid_file(path: Union[str, Path]) -> int:
    """
    Reads a PID file containing a single integer, surrounding whitespace allowed.

    :param path: Path of the PID file.
    :return: The process id stored in the file.
    :raises InvalidPidFile: If the file is missing, unreadable or not an integer.
    """
    pid_path = Path(path)
    try:
        content = pid_path.read_text().strip()
    except FileNotFoundError:
        raise InvalidPidFile(pid_path, "file does not exist") from None
    except (IOError, OSError, UnicodeDecodeError) as e:
        raise InvalidPidFile(pid_path, f"could not be read ({e})") from None

    try:
        pid = int(content)
    except ValueError:
        raise InvalidPidFile(pid_path, f"content {content!r} is not an integer") from None

    if pid <= 0:
        raise InvalidPidFile(pid_path, f"{pid} is not a valid process id")
    return pid
