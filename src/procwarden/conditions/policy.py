from dataclasses import dataclass
from typing import Any, Tuple
from procwarden.exceptions import ConfigurationError
from procwarden.conditions.timeline import Timeline


def normalize_times(times: Any) -> Tuple[int, int]:
    """
    Turns a 'times' setting into an (occurrences, window) pair.
    An integer k means k of the last k samples.

    :raises ConfigurationError: If times is neither an integer nor a pair of integers.
    """
    if _is_int(times):
        return times, times
    if isinstance(times, (list, tuple)) and len(times) == 2 and all(_is_int(t) for t in times):
        return times[0], times[1]
    raise ConfigurationError(f"Attribute 'times' must be an integer or an [occurrences, window] pair, got {times!r}")


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def is_number(value: Any) -> bool:
    """True for ints and floats. Booleans are not numbers here."""
    return isinstance(value, (int, float)) and not isinstance(value, bool)


@dataclass(frozen=True)
class ThresholdPolicy:
    """
    Trigger when at least `occurrences` of the last `window` samples are
    strictly above `above`. The over-threshold samples may sit anywhere in
    the window; they do not have to be consecutive.
    """
    above: float
    occurrences: int = 1
    window: int = 1

    def __post_init__(self) -> None:
        if self.above is None:
            raise ConfigurationError("Attribute 'above' must be specified")
        if not is_number(self.above):
            raise ConfigurationError(f"Attribute 'above' must be a number of percent, got {self.above!r}")
        if self.occurrences < 1:
            raise ConfigurationError(f"occurrences must be at least 1, got {self.occurrences}")
        if self.window < self.occurrences:
            raise ConfigurationError(
                f"window ({self.window}) must not be smaller than occurrences ({self.occurrences})"
            )

    @classmethod
    def k_of_k(cls, above: float, k: int) -> "ThresholdPolicy":
        """Trigger when all of the last k samples are above the threshold."""
        return cls(above=above, occurrences=k, window=k)

    @classmethod
    def from_times(cls, above: float, times: Any) -> "ThresholdPolicy":
        """Builds a policy from the integer-or-pair 'times' setting."""
        occurrences, window = normalize_times(times)
        return cls(above=above, occurrences=occurrences, window=window)

    def is_over(self, sample: float) -> bool:
        return sample > self.above

    def triggered(self, timeline: Timeline) -> bool:
        return timeline.count_above(self.above) >= self.occurrences
