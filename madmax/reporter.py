#!/usr/bin/env python3
"""
Region Reporter for MADmax
Writes one line per amplified region and an optional TSV summary
"""

import sys
import logging
from pathlib import Path
from typing import Callable, Dict, List, Optional, TextIO

import pandas as pd

from .models import Region


def format_region(name: str, region: Region) -> str:
    """``<name>:<start>-<end>\\t<mean depth>`` with 1-based inclusive coordinates"""
    return f"{name}:{region.display_start}-{region.display_end}\t{region.average_depth:f}"


class RegionReporter:
    """Resolves reference names and writes region lines as they are found"""

    TSV_COLUMNS = ['reference', 'start', 'end', 'length', 'sample_count', 'mean_depth']

    def __init__(self, name_resolver: Callable[[int], str], stream: Optional[TextIO] = None):
        self.logger = logging.getLogger(__name__)
        self.name_resolver = name_resolver
        self.stream = stream if stream is not None else sys.stdout
        self.regions: List[Region] = []
        self._names: Dict[int, str] = {}

    def reference_name(self, reference_id: int) -> str:
        if reference_id not in self._names:
            self._names[reference_id] = self.name_resolver(reference_id)
        return self._names[reference_id]

    def report(self, region: Region) -> str:
        line = format_region(self.reference_name(region.reference_id), region)
        self.stream.write(line + '\n')
        self.regions.append(region)
        return line

    def report_all(self, regions) -> int:
        count = 0
        for region in regions:
            self.report(region)
            count += 1
        return count

    def to_dataframe(self) -> pd.DataFrame:
        rows = [{
            'reference': self.reference_name(r.reference_id),
            'start': r.display_start,
            'end': r.display_end,
            'length': r.length,
            'sample_count': r.sample_count,
            'mean_depth': r.average_depth
        } for r in self.regions]
        return pd.DataFrame(rows, columns=self.TSV_COLUMNS)

    def write_tsv(self, output_file: str) -> str:
        """Save every reported region to a tab-separated table"""
        Path(output_file).parent.mkdir(parents=True, exist_ok=True)
        df = self.to_dataframe()
        df.to_csv(output_file, sep='\t', index=False)

        self.logger.info(f"Region table saved to: {output_file}")
        return output_file
