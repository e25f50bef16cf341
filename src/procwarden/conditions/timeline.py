from collections import deque
from typing import Deque, Iterator, Tuple


class Timeline:
    """
    A fixed-capacity window of samples, oldest first.
    Pushing onto a full timeline drops exactly the oldest sample.
    """

    def __init__(self, capacity: int) -> None:
        if capacity < 1:
            raise ValueError(f"Timeline capacity must be at least 1, got {capacity}")
        self._samples: Deque[float] = deque(maxlen=capacity)

    @property
    def capacity(self) -> int:
        return self._samples.maxlen

    def push(self, sample: float) -> None:
        self._samples.append(sample)

    def to_sequence(self) -> Tuple[float, ...]:
        return tuple(self._samples)

    def clear(self) -> None:
        self._samples.clear()

    def count_above(self, threshold: float) -> int:
        """Counts samples strictly greater than threshold."""
        return sum(1 for sample in self._samples if sample > threshold)

    def __len__(self) -> int:
        return len(self._samples)

    def __iter__(self) -> Iterator[float]:
        return iter(self._samples)

    def __repr__(self) -> str:
        return f"Timeline(capacity={self.capacity}, samples={list(self._samples)})"
