#!/usr/bin/env python3
"""
Robust Statistics Module for MADmax
Median / MAD baseline over a pair of adjacent window buffers and
classification of high-depth outlier positions
"""

import logging
from typing import Dict, Iterable, List, Optional

import numpy as np

from .models import Sample

logger = logging.getLogger(__name__)


def find_median(sorted_values) -> float:
    """Median of an already sorted sequence.

    Even length: mean of the two middle values. Odd length: the middle value.
    """
    values = np.asarray(sorted_values, dtype=np.float64)
    n = values.size
    if n == 0:
        raise ValueError("Cannot take the median of an empty sequence")
    if n > 1 and np.any(values[1:] < values[:-1]):
        raise ValueError("find_median requires sorted input")

    if n % 2 == 0:
        return float((values[n // 2 - 1] + values[n // 2]) / 2)
    return float(values[n // 2])


def _occupied(buffer_a: Iterable[Optional[Sample]], buffer_b: Iterable[Optional[Sample]]) -> List[Sample]:
    return [slot for slot in list(buffer_a) + list(buffer_b) if slot is not None]


def window_statistics(buffer_a: Iterable[Optional[Sample]],
                      buffer_b: Iterable[Optional[Sample]]) -> Dict:
    """Baseline depth and MAD over two adjacent buffers.

    Only depths above the baseline contribute deviations, so the MAD measures
    spread on the amplification side. ``baseline``/``mad`` are None when
    there is nothing to take a median of.
    """
    samples = _occupied(buffer_a, buffer_b)
    stats = {
        'samples': samples,
        'n_samples': len(samples),
        'baseline': None,
        'mad': None,
        'n_deviations': 0
    }
    if not samples:
        return stats

    depths = np.sort(np.array([s.depth for s in samples], dtype=np.float64))
    baseline = find_median(depths)
    stats['baseline'] = baseline

    above = depths[depths > baseline]
    stats['n_deviations'] = int(above.size)
    if above.size == 0:
        return stats

    deviations = np.sort(above - baseline)
    stats['mad'] = find_median(deviations)
    return stats


def compute_outliers(buffer_a: Iterable[Optional[Sample]],
                     buffer_b: Iterable[Optional[Sample]],
                     mad_constant: float) -> List[Sample]:
    """Samples from both buffers whose depth exceeds baseline by more than MAD * mad_constant.

    Empty slots are ignored. An all-empty pair, or a pair with nothing above
    the baseline, yields no outliers. Order follows the buffers.
    """
    stats = window_statistics(buffer_a, buffer_b)
    baseline, mad = stats['baseline'], stats['mad']

    if baseline is None or mad is None:
        return []

    samples = stats['samples']
    if samples:
        logger.debug(
            f"Window {samples[0].position}-{samples[-1].position}: "
            f"N = {stats['n_deviations']}; median depth = {baseline:f}; mad = {mad:f}"
        )

    threshold = mad * mad_constant
    return [s for s in samples if (s.depth - baseline) > threshold]
