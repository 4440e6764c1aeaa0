"""
Identifier File Reader - Extract Layer

Reads the instrument identifier input file as raw lines.
Validation happens in the transformation layer.
"""

import os
from typing import List
import logging

logger = logging.getLogger(__name__)

DEFAULT_INPUT_FILE = "companies.csv"


def input_file_exists(filepath: str) -> bool:
    """Check the input file exists, logging a hint when it does not"""
    if not os.path.isfile(filepath):
        logger.error(
            f"ERROR accessing {filepath}\nCheck if file and directory exist."
        )
        return False
    return True


def read_identifier_lines(filepath: str) -> List[str]:
    """
    Read all lines of the identifier input file

    Args:
        filepath: Path to the input file

    Returns:
        List[str]: Lines without their line terminators. Undecodable bytes are
            replaced with U+FFFD and left to line validation.
    """
    logger.info(f"Reading instrument identifiers from {filepath}")

    with open(filepath, "r", encoding="utf-8-sig", errors="replace", newline="") as f:
        lines = f.read().splitlines()

    logger.debug(f"Read {len(lines)} lines from {filepath}")
    return lines
