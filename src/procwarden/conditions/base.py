import logging
from typing import TYPE_CHECKING, List, Optional, Tuple
from procwarden.exceptions import ConfigurationError
from procwarden.conditions.policy import is_number

if TYPE_CHECKING:
    from procwarden.supervisor.watch import Watch

log = logging.getLogger(__name__)


class PollCondition:
    """
    Base class for conditions that the supervisor evaluates on a timer.

    The supervisor calls validate() once, prepare() once, then test() on every
    poll, and reset() whenever the condition's history should be discarded.
    """

    # Attributes that may be set from configuration.
    ATTRIBUTES: Tuple[str, ...] = ("interval",)

    def __init__(self) -> None:
        self.watch: Optional["Watch"] = None
        self.info: Optional[str] = None
        # Per-condition poll interval in seconds; None uses the supervisor's.
        self.interval: Optional[float] = None

    @property
    def watch_name(self) -> str:
        return self.watch.name if self.watch is not None else "-"

    @property
    def friendly_name(self) -> str:
        return f"{self.watch_name} [{self.__class__.__name__}]"

    def problems(self) -> List[str]:
        """Returns a description of every configuration problem, empty when valid."""
        if self.interval is not None and not (is_number(self.interval) and self.interval > 0):
            return [f"Attribute 'interval' must be a positive number of seconds, got {self.interval!r}"]
        return []

    def validate(self) -> None:
        """
        Checks the configuration before polling starts.

        :raises ConfigurationError: Listing every problem found.
        """
        problems = self.problems()
        if problems:
            raise ConfigurationError(f"{self.friendly_name}: {'; '.join(problems)}", problems)

    def is_valid(self) -> bool:
        """Like validate(), but logs each problem and returns a bool instead of raising."""
        valid = True
        for problem in self.problems():
            valid &= self.complain(problem)
        return valid

    def complain(self, text: str) -> bool:
        """Logs a configuration problem. Always returns False."""
        log.error(f"{text} for {self.friendly_name}", extra={"watch": self.watch_name})
        return False

    def prepare(self) -> None:
        pass

    def reset(self) -> None:
        pass

    def test(self) -> Tuple[bool, str]:
        raise NotImplementedError
