#!/usr/bin/env python3
"""
Depth Source Module for MADmax
Produces quality-filtered per-position read depth, one reference sequence at a time
"""

import os
import logging
from abc import ABC, abstractmethod
from typing import Dict, Iterable, Iterator, List, Sequence, Tuple

import numpy as np
import pandas as pd
import pysam

from .exceptions import DepthSourceError, InputFileError
from .models import Sample


class DepthSource(ABC):
    """Interface shared by every depth source.

    ``references()`` lists (reference_id, name) pairs in scan order and
    ``iter_samples(reference_id)`` yields Samples for one reference in
    increasing position order. Uncovered positions are simply absent.
    """

    @abstractmethod
    def references(self) -> List[Tuple[int, str]]:
        pass

    @abstractmethod
    def reference_name(self, reference_id: int) -> str:
        pass

    @abstractmethod
    def iter_samples(self, reference_id: int) -> Iterator[Sample]:
        pass

    def reference_id(self, name: str) -> int:
        for ref_id, ref_name in self.references():
            if ref_name == name:
                return ref_id
        raise KeyError(name)

    def close(self):
        pass

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False


def read_passes_filter(pileup_read) -> bool:
    """Count a read unless it is a duplicate, failed QC, or a deletion/skip at this column"""
    alignment = pileup_read.alignment
    return not (
        alignment.is_duplicate
        or alignment.is_qcfail
        or pileup_read.is_del
        or pileup_read.is_refskip
    )


class PileupDepthSource(DepthSource):
    """Depth from a BAM/CRAM pileup via pysam"""

    def __init__(self, alignment_file: str, config: Dict):
        self.config = config
        self.logger = logging.getLogger(__name__)
        self.alignment_file = alignment_file
        self.max_depth = int(config.get('max_pileup_depth', 100000))
        self.bam = None

        if not os.path.exists(alignment_file):
            raise InputFileError(f"File {alignment_file} does not exist", path=alignment_file)

        mode = 'rc' if alignment_file.endswith('.cram') else 'rb'
        try:
            self.bam = pysam.AlignmentFile(alignment_file, mode)
        except (OSError, ValueError) as e:
            raise DepthSourceError(f"Could not open alignment file {alignment_file}: {e}")

        if not self.bam.has_index():
            self._ensure_index(config.get('create_index', True))

    def _ensure_index(self, create_index: bool):
        if not create_index:
            self.bam.close()
            raise DepthSourceError(f"Alignment file {self.alignment_file} has no index")

        self.logger.info(f"No index found for {self.alignment_file}, creating one")
        self.bam.close()
        try:
            pysam.index(self.alignment_file)
        except pysam.SamtoolsError as e:
            raise DepthSourceError(f"Could not index {self.alignment_file}: {e}")

        mode = 'rc' if self.alignment_file.endswith('.cram') else 'rb'
        self.bam = pysam.AlignmentFile(self.alignment_file, mode)

    def references(self) -> List[Tuple[int, str]]:
        return list(enumerate(self.bam.references))

    def reference_name(self, reference_id: int) -> str:
        return self.bam.get_reference_name(reference_id)

    def iter_samples(self, reference_id: int) -> Iterator[Sample]:
        contig = self.reference_name(reference_id)
        for column in self.bam.pileup(contig,
                                      stepper='nofilter',
                                      min_base_quality=0,
                                      ignore_orphans=False,
                                      max_depth=self.max_depth):
            depth = sum(1 for pileup_read in column.pileups if read_passes_filter(pileup_read))
            yield Sample(column.reference_id, column.reference_pos, depth)

    def close(self):
        if self.bam is not None:
            self.bam.close()


class DepthTableSource(DepthSource):
    """Depth from a ``samtools depth`` style table: reference, 1-based position, depth"""

    COLUMNS = ['reference', 'position', 'depth']

    def __init__(self, depth_file: str, config: Dict):
        self.config = config
        self.logger = logging.getLogger(__name__)
        self.depth_file = depth_file

        if not os.path.exists(depth_file):
            raise InputFileError(f"File {depth_file} does not exist", path=depth_file)

        self.table = self._load(depth_file)
        self._names = list(pd.unique(self.table['reference']))
        self._groups = {name: group for name, group in self.table.groupby('reference', sort=False)}

        self.logger.info(f"Loaded {len(self.table)} depth rows across {len(self._names)} references")

    def _load(self, depth_file: str) -> pd.DataFrame:
        try:
            table = pd.read_csv(depth_file, sep='\t', header=None, comment='#',
                                usecols=[0, 1, 2], names=self.COLUMNS,
                                dtype={'reference': str, 'position': np.int64, 'depth': np.int64})
        except pd.errors.EmptyDataError:
            return pd.DataFrame({c: pd.Series(dtype=t) for c, t in
                                 zip(self.COLUMNS, [str, np.int64, np.int64])})
        except ValueError as e:
            raise DepthSourceError(f"Malformed depth table {depth_file}: {e}")

        if (table['depth'] < 0).any():
            raise DepthSourceError(f"Negative depth in {depth_file}")
        if (table['position'] < 1).any():
            raise DepthSourceError(f"Positions in {depth_file} must be 1-based")

        increasing = table.groupby('reference', sort=False)['position'].apply(
            lambda p: bool((p.diff().dropna() > 0).all()))
        if not increasing.all():
            bad = list(increasing[~increasing].index)
            raise DepthSourceError(f"Positions are not strictly increasing for: {', '.join(bad)}")

        return table

    def references(self) -> List[Tuple[int, str]]:
        return list(enumerate(self._names))

    def reference_name(self, reference_id: int) -> str:
        return self._names[reference_id]

    def iter_samples(self, reference_id: int) -> Iterator[Sample]:
        group = self._groups[self._names[reference_id]]
        for row in group.itertuples(index=False):
            yield Sample(reference_id, int(row.position) - 1, int(row.depth))


class InMemoryDepthSource(DepthSource):
    """Depth held in memory, keyed by reference name; positions are 0-based"""

    def __init__(self, depths: Dict[str, Sequence[Tuple[int, int]]]):
        self._names = list(depths.keys())
        self._depths = depths

    @classmethod
    def from_depth_list(cls, name: str, depths: Iterable[int], start: int = 0) -> 'InMemoryDepthSource':
        return cls({name: [(start + i, d) for i, d in enumerate(depths)]})

    def references(self) -> List[Tuple[int, str]]:
        return list(enumerate(self._names))

    def reference_name(self, reference_id: int) -> str:
        return self._names[reference_id]

    def iter_samples(self, reference_id: int) -> Iterator[Sample]:
        for position, depth in self._depths[self._names[reference_id]]:
            yield Sample(reference_id, position, depth)
