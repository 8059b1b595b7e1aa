#!/usr/bin/env python3
"""
Region Collapser for MADmax
Merges outlier positions from a window pair into runs of consecutive positions
"""

import logging
from typing import Iterable, List, Optional

from .models import Region, Sample

logger = logging.getLogger(__name__)


def is_consecutive(previous: Optional[Sample], current: Sample) -> bool:
    """True if current directly follows previous on the same reference"""
    if previous is None:
        return False
    return previous.reference_id == current.reference_id and previous.position + 1 == current.position


def passes_run_filter(region: Optional[Region], min_run_length: int) -> bool:
    if region is None:
        return False
    return region.length > min_run_length and region.depth_sum > 0


def sorted_unique(outliers_a: Iterable[Sample], outliers_b: Iterable[Sample]) -> List[Sample]:
    """Both outlier sets merged, ordered by (reference, position), exact repeats dropped"""
    merged = sorted(list(outliers_a) + list(outliers_b),
                    key=lambda s: (s.reference_id, s.position))
    unique = []
    for sample in merged:
        if unique and unique[-1] == sample:
            continue
        unique.append(sample)
    return unique


def collapse_outliers(outliers_a: Iterable[Sample], outliers_b: Iterable[Sample],
                      min_run_length: int) -> List[Region]:
    """Collapse two outlier sets into runs and keep those longer than min_run_length.

    Both sets are collapsed together so that a run crossing the seam between
    the two window pairs stays in one piece.
    """
    regions = []
    previous = None
    current = None

    for sample in sorted_unique(outliers_a, outliers_b):
        if current is not None and is_consecutive(previous, sample):
            current.extend(sample)
        else:
            if passes_run_filter(current, min_run_length):
                regions.append(current)
            current = Region.open_at(sample)
        previous = sample

    if passes_run_filter(current, min_run_length):
        regions.append(current)

    if regions:
        logger.debug(f"Collapsed outliers into {len(regions)} region(s)")
    return regions
