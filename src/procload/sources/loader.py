"""
Monitoring document loading.

This module turns JSON text or a JSON file into the in-memory mapping the
aggregator works on. Malformed JSON is reported as `ParseError`, distinct from
the `ValidationError` raised later for structurally incomplete documents.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, Union

from ..validation import ParseError, handle_file_error, ErrorSeverity

logger = logging.getLogger(__name__)


def parse_document(text: str, source: str = "<string>") -> Dict[str, Any]:
    """
    Parse monitoring document JSON text.

    Args:
        text: Raw JSON text
        source: Description of where the text came from, used in error messages

    Returns:
        The parsed top-level JSON object

    Raises:
        ParseError: If the text is not valid JSON or its top level is not an object
    """
    try:
        document = json.loads(text)
    except json.JSONDecodeError as e:
        raise ParseError(
            f"Invalid JSON in {source} at line {e.lineno} column {e.colno}: {e.msg}",
            source=source,
        ) from e

    if not isinstance(document, dict):
        raise ParseError(
            f"Monitoring document in {source} must be a JSON object, got {type(document).__name__}",
            source=source,
        )
    return document


def load_document(path: Union[str, Path]) -> Dict[str, Any]:
    """
    Load a monitoring document from a JSON file.

    Args:
        path: Path to the JSON log file

    Returns:
        The parsed document

    Raises:
        FileNotFoundError: If the file doesn't exist
        ParseError: If the file content is not a JSON object
    """
    file_path = Path(path)
    logger.info(f"Loading monitoring document from: {file_path}")

    if not file_path.is_file():
        raise FileNotFoundError(f"Monitoring document not found: {file_path}")

    try:
        text = file_path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise ParseError(f"{file_path} is not UTF-8 text: {e}", source=str(file_path)) from e
    except OSError as e:
        handle_file_error(
            error=e,
            context=f"reading {file_path}",
            severity=ErrorSeverity.ERROR,
            reraise=True,
            logger=logger,
        )
        raise

    return parse_document(text, source=str(file_path))
