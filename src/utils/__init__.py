"""
Utility modules.
"""

from .errors import ConfigurationError, ConfigMismatchError
from .logging import setup_logging, get_logger, log_config

__all__ = ['ConfigurationError', 'ConfigMismatchError', 'setup_logging', 'get_logger', 'log_config']
