#!/usr/bin/env python3
"""
Scan Driver for MADmax
Slides a three-buffer window along each reference sequence, flags high-depth
outliers against a median/MAD baseline and collapses them into regions
"""

import logging
from typing import Dict, Iterator, List, Optional, Tuple

from .depth_source import DepthSource
from .exceptions import ConfigurationError
from .mad_stats import compute_outliers
from .models import Region
from .region_collapser import collapse_outliers
from .utils import DEFAULT_CONFIG, validate_config
from .window import SampleStream, WindowRing


class ScanSession:
    """Window ring and stream for a single reference; discarded once the reference is done"""

    def __init__(self, reference_id: int, stream: SampleStream, buffer_size: int,
                 mad_constant: float, min_run_length: int):
        self.reference_id = reference_id
        self.stream = stream
        self.ring = WindowRing(buffer_size)
        self.mad_constant = mad_constant
        self.min_run_length = min_run_length
        self.iterations = 0

    def evaluate(self) -> List[Region]:
        """Outliers of (older, middle) and (middle, newer), collapsed together"""
        ring = self.ring
        outliers_left = compute_outliers(ring.older, ring.middle, self.mad_constant)
        outliers_right = compute_outliers(ring.middle, ring.newer, self.mad_constant)
        self.iterations += 1
        return collapse_outliers(outliers_left, outliers_right, self.min_run_length)

    def run(self) -> Iterator[Region]:
        if self.stream.exhausted:
            return

        self.ring.prime(self.stream)
        yield from self.evaluate()

        while not self.stream.exhausted:
            self.ring.slide(self.stream)
            yield from self.evaluate()


class MadScanner:
    """Finds regions of amplified read depth using the median absolute deviation"""

    def __init__(self, config: Optional[Dict] = None):
        merged = DEFAULT_CONFIG.copy()
        merged.update(config or {})
        self.config = validate_config(merged)
        self.logger = logging.getLogger(__name__)

        self.window_size = self.config['window_size']
        self.buffer_size = self.window_size // 2
        self.mad_constant = float(self.config['mad_constant'])
        self.min_run_length = self.config['min_run_length']
        self.suppress_repeats = self.config.get('suppress_repeat_regions', True)

    def scan_reference(self, source: DepthSource, reference_id: int) -> Iterator[Region]:
        """Regions for one reference, in the order they are found"""
        session = ScanSession(reference_id, SampleStream(source.iter_samples(reference_id)),
                              self.buffer_size, self.mad_constant, self.min_run_length)
        seen = set()
        for region in session.run():
            if self.suppress_repeats:
                if region.key() in seen:
                    continue
                seen.add(region.key())
            yield region

    def select_references(self, source: DepthSource) -> List[Tuple[int, str]]:
        references = source.references()
        wanted = self.config.get('references')
        if not wanted:
            return references

        known = {name for _, name in references}
        missing = [name for name in wanted if name not in known]
        if missing:
            raise ConfigurationError(f"Unknown reference sequence(s): {', '.join(missing)}")
        return [(ref_id, name) for ref_id, name in references if name in set(wanted)]

    def scan(self, source: DepthSource) -> Iterator[Region]:
        """Regions for every selected reference, in the source's reference order"""
        for reference_id, name in self.select_references(source):
            self.logger.info(f"Scanning {name} (window size {self.window_size})")
            found = 0
            for region in self.scan_reference(source, reference_id):
                found += 1
                yield region
            self.logger.info(f"Finished {name}: {found} region(s)")
