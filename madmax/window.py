#!/usr/bin/env python3
"""
Window buffers for the MADmax scanner
Half-window sample buffers and the three-slot ring that slides along a reference
"""

import logging
from itertools import islice
from typing import Iterable, Iterator, List, Optional

from .models import Sample


class SampleStream:
    """Forward-only sample iterator that can tell when it has run dry"""

    _NOTHING = object()

    def __init__(self, samples: Iterable[Sample]):
        self._iterator = iter(samples)
        self._pending = self._NOTHING

    def __iter__(self) -> Iterator[Sample]:
        return self

    def __next__(self) -> Sample:
        if self._pending is not self._NOTHING:
            sample, self._pending = self._pending, self._NOTHING
            return sample
        return next(self._iterator)

    @property
    def exhausted(self) -> bool:
        if self._pending is self._NOTHING:
            self._pending = next(self._iterator, self._NOTHING)
        return self._pending is self._NOTHING


class WindowBuffer:
    """Fixed number of sample slots; a slot is either a Sample or None (empty)"""

    def __init__(self, capacity: int):
        if capacity < 1:
            raise ValueError(f"Window buffer capacity must be >= 1, got {capacity}")
        self.capacity = capacity
        self.slots: List[Optional[Sample]] = [None] * capacity

    def reload(self, source: Iterator[Sample], capacity: Optional[int] = None) -> int:
        """Clear every slot, then fill from source in order.

        Pulls at most ``capacity`` samples (the buffer size by default). When
        the source runs out first the trailing slots stay empty. Returns the
        number of samples loaded.
        """
        if capacity is None or capacity > self.capacity:
            capacity = self.capacity

        self.slots = [None] * self.capacity
        loaded = 0
        for i, sample in enumerate(islice(source, capacity)):
            self.slots[i] = sample
            loaded += 1
        return loaded

    def samples(self) -> List[Sample]:
        """Occupied slots, in order"""
        return [slot for slot in self.slots if slot is not None]

    def __iter__(self) -> Iterator[Optional[Sample]]:
        return iter(self.slots)

    def __len__(self) -> int:
        return self.capacity

    def __repr__(self) -> str:
        return f"WindowBuffer(capacity={self.capacity}, loaded={len(self.samples())})"


class WindowRing:
    """Older, middle and newer half-window buffers kept in a rotating ring"""

    SLOTS = 3

    def __init__(self, buffer_size: int):
        self.logger = logging.getLogger(__name__)
        self.buffers = [WindowBuffer(buffer_size) for _ in range(self.SLOTS)]
        self._head = 0  # index of the oldest buffer

    @property
    def older(self) -> WindowBuffer:
        return self.buffers[self._head]

    @property
    def middle(self) -> WindowBuffer:
        return self.buffers[(self._head + 1) % self.SLOTS]

    @property
    def newer(self) -> WindowBuffer:
        return self.buffers[(self._head + 2) % self.SLOTS]

    def prime(self, source: Iterator[Sample]) -> int:
        """Fill all three buffers from source, oldest first"""
        self._head = 0
        return sum(buffer.reload(source) for buffer in self.buffers)

    def slide(self, source: Iterator[Sample]) -> int:
        """Drop the oldest buffer and reuse it as the newest, reloaded from source"""
        recycled = self.older
        self._head = (self._head + 1) % self.SLOTS
        loaded = recycled.reload(source)
        self.logger.debug(f"Slid window ring, loaded {loaded} samples into newest buffer")
        return loaded
