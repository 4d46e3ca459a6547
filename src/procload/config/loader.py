"""
Reading config.toml from disk.

Parsing is done with the standard library `tomllib`. Validation of the parsed
tables lives in `validators`; this module only reads the file and flags
tables that procload does not know about.
"""

import logging
import tomllib
from pathlib import Path
from typing import Any, Dict

from ..validation import handle_config_error, ErrorSeverity

logger = logging.getLogger(__name__)

KNOWN_TABLES = ("general", "report", "collect", "export")


def load_toml_file(file_path: Path, description: str = "configuration file") -> Dict[str, Any]:
    """
    Read and parse a TOML file.

    Args:
        file_path: Path to the TOML file
        description: Name of the file used in log and error messages

    Returns:
        The parsed TOML document

    Raises:
        FileNotFoundError: If ``file_path`` does not exist
        tomllib.TOMLDecodeError: If the file is not valid TOML
    """
    file_path = Path(file_path)
    logger.debug(f"Reading {description}: {file_path}")

    if not file_path.exists():
        raise FileNotFoundError(f"{description} not found: {file_path}")

    try:
        with open(file_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        handle_config_error(
            error=e,
            context=f"parsing {description} {file_path}",
            severity=ErrorSeverity.ERROR,
            reraise=True,
            logger=logger
        )
        raise

    unknown = sorted(name for name in data if name not in KNOWN_TABLES)
    if unknown:
        logger.warning(f"Ignoring unknown tables in {file_path}: {', '.join(unknown)}")
    return data
