"""Utility modules: config, logging, errors."""
import os
import logging
import sys
from pathlib import Path
from typing import Dict, Any, Optional, TextIO

from dotenv import load_dotenv

# Load .env file for local development
load_dotenv()

logger = logging.getLogger(__name__)

RAW_METADATA_URL = "https://raw.githubusercontent.com/xsalazar/emoji-kitchen-backend/main/app/metadata.json"
IMAGE_BASE_URL = "https://www.gstatic.com/android/keyboard/emojikitchen"
DEFAULT_DATA_DIR = Path.home() / ".emoji-kitchen" / "data"


# ============================================================================
# ERRORS
# ============================================================================

class ConfigError(Exception):
    """Raised when configuration is invalid."""
    pass


class CodecError(ValueError):
    """Raised for malformed codepoint strings or encoded combinations."""
    pass


class MalformedDocumentError(Exception):
    """Raised when the raw metadata document does not have the expected shape."""
    pass


class CompactIndexError(Exception):
    """Raised when the compact index file exists but cannot be read."""
    pass


class AcquisitionError(Exception):
    """Base class for failures while acquiring metadata."""
    pass


class DownloadError(AcquisitionError):
    """Network failure, bad status, or incomplete download of the raw document."""
    pass


class CompactionError(AcquisitionError):
    """The compaction step failed.

    ``malformed`` is True when the raw document itself is broken and must be
    downloaded again; False for environment failures (disk, timeout, spawn).
    """

    def __init__(self, message: str, malformed: bool = False):
        super().__init__(message)
        self.malformed = malformed


# ============================================================================
# CONFIGURATION
# ============================================================================

def _parse_bool(value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in ('true', '1', 'yes', 'on'):
        return True
    if lowered in ('false', '0', 'no', 'off'):
        return False
    raise ValueError(f"not a boolean: {value!r}")


def validate_config() -> Dict[str, Any]:
    """
    Read configuration from environment variables, applying defaults.

    Returns:
        Dictionary of validated configuration values

    Raises:
        ConfigError: If any value cannot be parsed
    """
    optional_vars = {
        'data_dir': ('EMOJI_KITCHEN_DATA_DIR', str(DEFAULT_DATA_DIR), str),
        'metadata_url': ('EMOJI_KITCHEN_METADATA_URL', RAW_METADATA_URL, str),
        'image_base_url': ('EMOJI_KITCHEN_IMAGE_BASE_URL', IMAGE_BASE_URL, str),
        'include_empty': ('EMOJI_KITCHEN_INCLUDE_EMPTY', 'true', _parse_bool),
        'bidirectional': ('EMOJI_KITCHEN_BIDIRECTIONAL', 'false', _parse_bool),
        'download_timeout': ('EMOJI_KITCHEN_DOWNLOAD_TIMEOUT', '60', int),
        'download_retries': ('EMOJI_KITCHEN_DOWNLOAD_RETRIES', '3', int),
        'compaction_timeout': ('EMOJI_KITCHEN_COMPACTION_TIMEOUT', '600', int),
        'history_limit': ('EMOJI_KITCHEN_HISTORY_LIMIT', '50', int),
        'log_level': ('LOG_LEVEL', 'INFO', str),
    }

    config = {}
    invalid = []

    for key, (env_var, default, cast) in optional_vars.items():
        raw_value = os.getenv(env_var, '').strip() or default
        try:
            config[key] = cast(raw_value)
        except ValueError:
            invalid.append(env_var)

    if invalid:
        raise ConfigError(f"Invalid values for environment variables: {invalid}")

    for key in ('download_timeout', 'download_retries', 'compaction_timeout', 'history_limit'):
        if config[key] < 1:
            raise ConfigError(f"{key} must be at least 1, got {config[key]}")

    config['data_dir'] = os.path.expanduser(config['data_dir'])
    config['image_base_url'] = config['image_base_url'].rstrip('/')

    logger.debug(f"Configuration loaded: data_dir={config['data_dir']}")
    return config


# ============================================================================
# LOGGING
# ============================================================================

def setup_logging(level: str = "INFO", structured: bool = True, stream: Optional[TextIO] = None) -> None:
    """Configure logging for the application."""
    log_level = getattr(logging, level.upper(), logging.INFO)

    if structured:
        formatter = logging.Formatter(
            '{"timestamp": "%(asctime)s", "name": "%(name)s", "level": "%(levelname)s", "message": "%(message)s"}',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
    else:
        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    # Remove existing handlers
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(stream or sys.stdout)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    logging.getLogger('urllib3').setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance for the given name."""
    return logging.getLogger(name)
