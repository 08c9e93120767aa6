"""
Configuration management for SharedKey Python SDK

This module loads account credentials and SDK settings from JSON files,
environment variables and storage connection strings.
"""

from .sharedkey_config import (
    SharedKeyConfig,
    LoggingConfig,
    configure_logging,
    load_config,
    parse_connection_string,
    validate_config,
)

__all__ = [
    'SharedKeyConfig',
    'LoggingConfig',
    'configure_logging',
    'load_config',
    'parse_connection_string',
    'validate_config',
]
