"""Utility functions for cypar"""

import logging
import os


LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def get_float_env(key: str) -> float:
    """Get float value from environment variable, return 0.0 if not set or invalid."""
    val = os.getenv(key)
    if val is None:
        return 0.0
    try:
        return float(val)
    except ValueError:
        return 0.0


def get_str_env(key: str, default: str) -> str:
    """
    Get string from environment variable, return default if not set.

    Args:
        key: Environment variable name
        default: Default value if not set

    Returns:
        String value or default
    """
    return os.getenv(key, default)


def get_bool_env(key: str, default: bool) -> bool:
    """
    Get boolean from environment variable, return default if not set.

    Recognizes: true/false, yes/no, 1/0 (case-insensitive)
    """
    val = os.getenv(key)
    if val is None:
        return default
    val_lower = val.lower()
    if val_lower in ('true', 'yes', '1'):
        return True
    elif val_lower in ('false', 'no', '0'):
        return False
    return default


def setup_logging(verbose: bool = False) -> int:
    """Configure root logging from CYPAR_LOG_LEVEL.

    Args:
        verbose: Force DEBUG regardless of the environment

    Returns:
        The effective log level
    """
    if verbose:
        log_level = logging.DEBUG
    else:
        log_level_name = get_str_env('CYPAR_LOG_LEVEL', 'WARNING').upper()
        log_level = getattr(logging, log_level_name, logging.WARNING)
    logging.basicConfig(level=log_level, format=LOG_FORMAT)
    logging.getLogger('cypar').setLevel(log_level)
    return log_level
