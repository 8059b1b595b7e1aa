#!/usr/bin/env python3
"""
Utility functions for MADmax
Configuration defaults and validation, logging setup, input checks
"""

import os
import sys
import json
import logging
from pathlib import Path
from typing import Dict, Optional

from .exceptions import ConfigurationError, InputFileError

DEFAULT_CONFIG = {
    'window_size': 10000,
    'mad_constant': 1.4826,  # scales MAD to the standard deviation of a normal distribution
    'min_run_length': 5,
    'max_pileup_depth': 100000,
    'create_index': True,
    'suppress_repeat_regions': True,  # exact (reference, start, end) repeats only; overlapping fragments still reported
    'references': None,
    'log_level': 'INFO'
}

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def load_config_with_defaults(config_file: Optional[str] = None) -> Dict:
    """Load a JSON config file over the defaults"""
    config = DEFAULT_CONFIG.copy()
    if config_file is None:
        return config

    if not os.path.exists(config_file):
        raise ConfigurationError(f"Configuration file not found: {config_file}")

    try:
        with open(config_file, 'r') as f:
            user_config = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Invalid JSON in {config_file}: {e}")

    if not isinstance(user_config, dict):
        raise ConfigurationError(f"Configuration in {config_file} must be a JSON object")

    unknown = sorted(set(user_config) - set(DEFAULT_CONFIG))
    if unknown:
        logging.getLogger(__name__).warning(f"Ignoring unknown configuration keys: {', '.join(unknown)}")

    config.update({k: v for k, v in user_config.items() if k in DEFAULT_CONFIG})
    return config


def validate_config(config: Dict) -> Dict:
    """Check scan parameters; raises ConfigurationError on the first bad value"""
    window_size = config.get('window_size')
    if isinstance(window_size, bool) or not isinstance(window_size, int):
        raise ConfigurationError(f"window_size must be an integer, got {window_size!r}")
    if window_size < 2 or window_size % 2 != 0:
        raise ConfigurationError(f"window_size must be an even integer >= 2, got {window_size}")

    mad_constant = config.get('mad_constant')
    if isinstance(mad_constant, bool) or not isinstance(mad_constant, (int, float)):
        raise ConfigurationError(f"mad_constant must be a number, got {mad_constant!r}")
    if mad_constant <= 0:
        raise ConfigurationError(f"mad_constant must be positive, got {mad_constant}")

    min_run_length = config.get('min_run_length')
    if isinstance(min_run_length, bool) or not isinstance(min_run_length, int):
        raise ConfigurationError(f"min_run_length must be an integer, got {min_run_length!r}")
    if min_run_length < 0:
        raise ConfigurationError(f"min_run_length must be >= 0, got {min_run_length}")

    references = config.get('references')
    if references is not None and not isinstance(references, (list, tuple)):
        raise ConfigurationError("references must be a list of reference names")

    return config


def validate_inputs(input_path: str) -> str:
    if not input_path:
        raise ConfigurationError("An input file is required")
    if not os.path.exists(input_path):
        raise InputFileError(f"File {input_path} does not exist", path=input_path)
    return input_path


def setup_logging(level: str = 'INFO', log_file: Optional[str] = None) -> logging.Logger:
    """Log to stderr (stdout carries region lines) and optionally to a file"""
    numeric_level = getattr(logging, str(level).upper(), None)
    if not isinstance(numeric_level, int):
        raise ConfigurationError(f"Unknown log level: {level}")

    formatter = logging.Formatter(LOG_FORMAT)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(numeric_level)
    console_handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    root_logger.handlers = []
    root_logger.addHandler(console_handler)

    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)
        root_logger.setLevel(min(numeric_level, logging.DEBUG))

    logger = logging.getLogger('madmax')
    if log_file:
        logger.info(f"Logging to file: {log_file}")
    return logger
