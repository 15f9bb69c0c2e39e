from __future__ import annotations
from collections import deque
from dataclasses import dataclass
from typing import Deque, Iterator, Tuple
import pandas as pd

DEFAULT_CAPACITY = 100


@dataclass(frozen=True)
class Sample:
    time: float
    desired: float
    actual: float


class HistoryBuffer:
    """Rolling desired-vs-actual series, oldest samples dropped first."""

    def __init__(self, capacity: int = DEFAULT_CAPACITY):
        if int(capacity) != capacity or capacity < 1:
            raise ValueError(f"history capacity must be a positive integer, got {capacity!r}")
        self.capacity = int(capacity)
        self._samples: Deque[Sample] = deque(maxlen=self.capacity)

    def append(self, time: float, desired: float, actual: float) -> None:
        self._samples.append(Sample(float(time), float(desired), float(actual)))

    def clear(self) -> None:
        self._samples.clear()

    def snapshot(self) -> Tuple[Sample, ...]:
        return tuple(self._samples)

    def __len__(self) -> int:
        return len(self._samples)

    def __iter__(self) -> Iterator[Sample]:
        return iter(tuple(self._samples))

    def to_dataframe(self) -> pd.DataFrame:
        return pd.DataFrame(
            {
                "time": [s.time for s in self._samples],
                "desired": [s.desired for s in self._samples],
                "actual": [s.actual for s in self._samples],
            }
        )
