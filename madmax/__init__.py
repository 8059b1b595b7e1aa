"""
MADmax
======

Scan per-base read depth across a genome and report regions whose depth is
amplified relative to a local median baseline, using the median absolute
deviation (MAD) as the spread estimate.

Modules:
--------
- models: Sample and Region records
- depth_source: pysam pileup, depth-table and in-memory depth sources
- window: half-window buffers and the sliding three-buffer ring
- mad_stats: median / MAD baseline and outlier classification
- region_collapser: merges consecutive outliers into regions
- reporter: region lines and TSV summary
- scanner: per-reference scan driver
- utils: configuration and logging helpers

Version: 1.0.0
"""

__version__ = "1.0.0"

from .depth_source import DepthSource, DepthTableSource, InMemoryDepthSource, PileupDepthSource
from .exceptions import ConfigurationError, DepthSourceError, InputFileError, MadmaxError
from .mad_stats import compute_outliers, find_median, window_statistics
from .models import Region, Sample
from .region_collapser import collapse_outliers
from .reporter import RegionReporter, format_region
from .scanner import MadScanner
from .utils import load_config_with_defaults, setup_logging, validate_config, validate_inputs
from .window import SampleStream, WindowBuffer, WindowRing

__all__ = [
    'DepthSource',
    'DepthTableSource',
    'InMemoryDepthSource',
    'PileupDepthSource',
    'ConfigurationError',
    'DepthSourceError',
    'InputFileError',
    'MadmaxError',
    'compute_outliers',
    'find_median',
    'window_statistics',
    'Region',
    'Sample',
    'collapse_outliers',
    'RegionReporter',
    'format_region',
    'MadScanner',
    'load_config_with_defaults',
    'setup_logging',
    'validate_config',
    'validate_inputs',
    'SampleStream',
    'WindowBuffer',
    'WindowRing'
]

PIPELINE_INFO = {
    'name': 'MADmax',
    'version': __version__,
    'description': 'Scan for amplified read depth using the median absolute deviation',
    'license': 'MIT',
    'python_requires': '>=3.8',
    'dependencies': [
        'pysam>=0.21.0',
        'numpy>=1.21.0',
        'pandas>=1.5.0'
    ],
    'input_formats': ['BAM', 'CRAM', 'samtools depth TSV'],
    'output_formats': ['TXT', 'TSV']
}


def get_pipeline_info():
    """Get pipeline information dictionary"""
    return PIPELINE_INFO.copy()
