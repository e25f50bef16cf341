import logging
from pathlib import Path
from typing import Callable, List, Optional, Union
from procwarden.conditions import PollCondition, generate
from procwarden.exceptions import ConfigurationError, InvalidPidFile
from procwarden.system.pidfile import read_pid_file

log = logging.getLogger(__name__)


def log_trigger(watch: "Watch", condition: PollCondition, message: str) -> None:
    """Default trigger handler: reports the trigger and does nothing else."""
    log.warning(f"Condition {condition.friendly_name} triggered: {message}", extra={"watch": watch.name})


TriggerHandler = Callable[["Watch", PollCondition, str], None]


class Watch:
    """
    A supervised process that conditions are attached to.

    The process is identified either by an explicitly assigned pid or by a PID
    file that is re-read on every lookup, so a restarted process is picked up
    as soon as its PID file is rewritten.
    """

    def __init__(
        self,
        name: str,
        pid_file: Optional[Union[str, Path]] = None,
        pid: Optional[int] = None,
        on_trigger: Optional[TriggerHandler] = None,
    ) -> None:
        self.name = name
        self._pid_file = Path(pid_file) if pid_file else None
        self._pid = self._checked_pid(pid)
        self.conditions: List[PollCondition] = []
        self.on_trigger: TriggerHandler = on_trigger or log_trigger

    def pid_file(self) -> Optional[Path]:
        return self._pid_file

    def pid(self) -> Optional[int]:
        """
        Returns the currently known pid of the watched process.

        :return: The assigned pid, else the PID file's content, else None.
        """
        if self._pid is not None:
            return self._pid
        if self._pid_file is None:
            return None
        try:
            return read_pid_file(self._pid_file)
        except InvalidPidFile as e:
            log.debug(f"No pid for watch: {e}", extra={"watch": self.name})
            return None

    def set_pid(self, pid: Optional[int]) -> None:
        """Assigns the pid directly, e.g. after the host has launched the process."""
        self._pid = self._checked_pid(pid)

    def _checked_pid(self, pid: Optional[int]) -> Optional[int]:
        """
        :raises ConfigurationError: If pid is set but not a positive integer.
        """
        if pid is None:
            return None
        if not isinstance(pid, int) or isinstance(pid, bool) or pid <= 0:
            raise ConfigurationError(f"Watch '{self.name}' has an invalid pid: {pid!r}")
        return pid

    def add_condition(self, kind: str, **attrs) -> PollCondition:
        """Generates a condition by registered name and attaches it to this watch."""
        condition = generate(kind, self, **attrs)
        self.conditions.append(condition)
        return condition

    def attach(self, condition: PollCondition) -> PollCondition:
        """Attaches an already built condition to this watch."""
        condition.watch = self
        self.conditions.append(condition)
        return condition

    def __repr__(self) -> str:
        return f"Watch(name={self.name!r}, pid_file={self._pid_file!r}, pid={self._pid!r})"
