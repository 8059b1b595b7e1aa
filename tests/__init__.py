"""
Test suite for MADmax
=====================

Unit tests for the window buffers, MAD statistics, region collapsing,
reporting, depth sources and the command line pipeline.

Usage:
------
Run all tests:
    python -m pytest tests/

Run with coverage:
    python -m pytest tests/ --cov=madmax --cov-report=html
"""

import os
import shutil
import tempfile

from madmax.models import Sample

TEST_CONFIG = {
    'window_size': 40,
    'mad_constant': 1.0,
    'min_run_length': 3,
    'log_level': 'WARNING'
}


class TestSetupMixin:
    """Mixin class for common test setup and teardown"""

    def setUp(self):
        """Set up test environment"""
        self.temp_dir = tempfile.mkdtemp(prefix='madmax_test_')
        self.test_config = TEST_CONFIG.copy()

    def tearDown(self):
        """Clean up test environment"""
        if hasattr(self, 'temp_dir') and os.path.exists(self.temp_dir):
            shutil.rmtree(self.temp_dir, ignore_errors=True)

    def temp_path(self, name):
        return os.path.join(self.temp_dir, name)


def make_samples(depths, start=0, reference_id=0):
    """Samples at consecutive positions from a list of depths"""
    return [Sample(reference_id, start + i, d) for i, d in enumerate(depths)]


def background_depth(position):
    """Depth 10, with 12 at every third position, so the MAD above baseline is 2"""
    return 12 if position % 3 == 0 else 10


def amplified_depths(length, run, depth=40, skip=()):
    """(position, depth) pairs over [0, length) with positions in run raised to depth"""
    pairs = []
    for p in range(length):
        if p in skip:
            continue
        pairs.append((p, depth if p in run else background_depth(p)))
    return pairs


def write_depth_table(path, rows):
    """Write (reference, 1-based position, depth) rows like samtools depth"""
    with open(path, 'w') as f:
        for reference, position, depth in rows:
            f.write(f"{reference}\t{position}\t{depth}\n")
    return path


__all__ = [
    'TEST_CONFIG',
    'TestSetupMixin',
    'make_samples',
    'background_depth',
    'amplified_depths',
    'write_depth_table'
]
