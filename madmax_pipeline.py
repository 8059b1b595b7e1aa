#!/usr/bin/env python3
"""
MADmax - scan for amplified read counts using MAD
Main pipeline script: reads depth from an alignment file (or a depth table),
runs the windowed MAD scan and writes one line per amplified region
"""

import sys
import argparse
import logging
from pathlib import Path
from typing import Dict, List, Optional

from madmax.depth_source import DepthTableSource, PileupDepthSource
from madmax.exceptions import ConfigurationError, DepthSourceError, InputFileError
from madmax.reporter import RegionReporter
from madmax.scanner import MadScanner
from madmax.utils import (DEFAULT_CONFIG, load_config_with_defaults, setup_logging, validate_config,
                          validate_inputs)

EXIT_OK = 0
EXIT_INPUT_ERROR = 1
EXIT_CONFIG_ERROR = 2


class MadmaxPipeline:
    """Wires a depth source, the scanner and a reporter together"""

    def __init__(self, config: Dict):
        self.config = validate_config(config)
        self.logger = logging.getLogger(__name__)
        self.scanner = MadScanner(self.config)

    def open_source(self, input_path: str, depth_table: bool = False):
        if depth_table:
            return DepthTableSource(input_path, self.config)
        return PileupDepthSource(input_path, self.config)

    def run(self, input_path: str, depth_table: bool = False, output_file: Optional[str] = None,
            tsv_file: Optional[str] = None) -> int:
        """Scan input_path and report regions; returns the number of regions written"""

        self.logger.info(f"Scanning {input_path} (window size {self.config['window_size']}, "
                         f"MAD constant {self.config['mad_constant']}, "
                         f"minimum run {self.config['min_run_length']})")

        with self.open_source(input_path, depth_table) as source:
            if output_file:
                Path(output_file).parent.mkdir(parents=True, exist_ok=True)
                out = open(output_file, 'w')
            else:
                out = sys.stdout
            try:
                reporter = RegionReporter(source.reference_name, out)
                n_regions = reporter.report_all(self.scanner.scan(source))
                if tsv_file:
                    reporter.write_tsv(tsv_file)
            finally:
                if output_file:
                    out.close()

        self.logger.info(f"Reported {n_regions} region(s)")
        return n_regions


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='madmax',
        description='MADmax - scan for amplified read counts using MAD'
    )
    parser.add_argument('-b', '--bamfile', required=True,
                        help='Path to BAM/CRAM file (or depth table with --depth-table)')
    parser.add_argument('-w', '--window-size', type=int,
                        help=f"Size of window used to compute MAD [Default: {DEFAULT_CONFIG['window_size']}]")
    parser.add_argument('-r', '--min-run', type=int,
                        help='Minimum number of consecutive positions above MAD required to call region '
                             f"[Default: {DEFAULT_CONFIG['min_run_length']}]")
    parser.add_argument('-c', '--mad-const', type=float,
                        help='Outliers are defined as those with deviation above (mad-const * MAD) '
                             f"[Default: {DEFAULT_CONFIG['mad_constant']}]")
    parser.add_argument('--depth-table', action='store_true',
                        help='Input is a samtools depth style table (reference, 1-based position, depth)')
    parser.add_argument('--reference', action='append', dest='references', metavar='NAME',
                        help='Only scan this reference sequence (repeatable)')
    parser.add_argument('--config', help='Configuration file (JSON)')
    parser.add_argument('-o', '--output', help='Write region lines here instead of stdout')
    parser.add_argument('--tsv', help='Also save regions as a TSV table')
    parser.add_argument('--no-index', action='store_true',
                        help='Fail instead of creating a missing alignment index')
    parser.add_argument('--log-level', help='Logging level [Default: INFO]')
    parser.add_argument('--log-file', help='Also write the log to this file')
    return parser


def config_from_args(args: argparse.Namespace) -> Dict:
    """Defaults, then the JSON config file, then command line values"""
    config = load_config_with_defaults(args.config)

    overrides = {
        'window_size': args.window_size,
        'min_run_length': args.min_run,
        'mad_constant': args.mad_const,
        'references': args.references,
        'log_level': args.log_level
    }
    config.update({k: v for k, v in overrides.items() if v is not None})
    if args.no_index:
        config['create_index'] = False
    return validate_config(config)


def main(argv: Optional[List[str]] = None) -> int:
    """Main function"""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = config_from_args(args)
        setup_logging(config['log_level'], args.log_file)
    except ConfigurationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return EXIT_CONFIG_ERROR

    try:
        validate_inputs(args.bamfile)
    except InputFileError:
        print(f"File {args.bamfile} does not exist. Exiting")
        return EXIT_INPUT_ERROR
    except ConfigurationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return EXIT_CONFIG_ERROR

    logger = logging.getLogger(__name__)
    try:
        pipeline = MadmaxPipeline(config)
        pipeline.run(args.bamfile, depth_table=args.depth_table,
                     output_file=args.output, tsv_file=args.tsv)
    except ConfigurationError as e:
        logger.error(f"Configuration error: {e}")
        return EXIT_CONFIG_ERROR
    except (InputFileError, DepthSourceError) as e:
        logger.error(str(e))
        return EXIT_INPUT_ERROR
    except OSError as e:
        logger.error(f"I/O error: {e}")
        return EXIT_INPUT_ERROR

    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
