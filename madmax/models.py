#!/usr/bin/env python3
"""
Data model for the MADmax scanner
Per-position depth samples and the regions they collapse into
"""

from dataclasses import dataclass


@dataclass(frozen=True, order=True)
class Sample:
    """Quality-filtered read depth at one 0-based position of a reference"""
    reference_id: int
    position: int
    depth: int


@dataclass
class Region:
    """Run of consecutive outlier positions (inclusive, 0-based)"""
    reference_id: int
    start: int
    end: int
    sample_count: int = 0
    depth_sum: int = 0

    @classmethod
    def open_at(cls, sample: Sample) -> 'Region':
        return cls(sample.reference_id, sample.position, sample.position, 1, sample.depth)

    def extend(self, sample: Sample) -> None:
        self.end += 1
        self.sample_count += 1
        self.depth_sum += sample.depth

    @property
    def length(self) -> int:
        return self.end - self.start + 1

    @property
    def average_depth(self) -> float:
        if self.sample_count == 0:
            return 0.0
        return self.depth_sum / self.sample_count

    @property
    def display_start(self) -> int:
        """1-based start, as written to reports"""
        return self.start + 1

    @property
    def display_end(self) -> int:
        return self.end + 1

    def key(self):
        return (self.reference_id, self.start, self.end)
