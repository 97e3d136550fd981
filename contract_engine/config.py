"""
Configuration

Loads settings from the environment (and a .env file when present).
"""

import logging
import os
from typing import Any, Dict, Optional

from dotenv import load_dotenv

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

VALID_LOG_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')


class ConfigError(RuntimeError):
    """Raised when a configuration value is invalid."""


def load_config(env_file: Optional[str] = None) -> Dict[str, Any]:
    """
    Load and validate configuration.

    Args:
        env_file: Optional path to a .env file (defaults to searching from the cwd)

    Returns:
        Dictionary with configuration values

    Raises:
        ConfigError: If a value is invalid
    """
    load_dotenv(env_file)

    log_level = os.getenv('LOG_LEVEL', 'INFO').upper()
    if log_level not in VALID_LOG_LEVELS:
        raise ConfigError(
            f"Invalid LOG_LEVEL '{log_level}'. Expected one of: {', '.join(VALID_LOG_LEVELS)}"
        )

    config = {
        'storage_dir': os.getenv('CONTRACT_STORAGE_DIR', './data'),
        'blueprint_snapshot': os.getenv('BLUEPRINT_SNAPSHOT_NAME', 'blueprint-storage'),
        'contract_snapshot': os.getenv('CONTRACT_SNAPSHOT_NAME', 'contract-storage'),
        'log_level': log_level,
    }

    for key in ('storage_dir', 'blueprint_snapshot', 'contract_snapshot'):
        if not config[key].strip():
            raise ConfigError(f"Configuration value '{key}' must not be empty")

    return config


def configure_logging(level: str = 'INFO') -> None:
    logging.basicConfig(level=level, format=LOG_FORMAT)
