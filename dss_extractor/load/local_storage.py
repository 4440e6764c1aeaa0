"""
Local Storage - Load Layer

Pure functions for local file storage operations.
Handles the append-only text outputs and raw extraction snapshots.
"""

import polars as pl
import json
import os
from datetime import date
from typing import Dict, Iterable, Optional, Sequence
import logging

from ..extract.schemas import ExtractionOutcome, ExtractionRow
from ..transformation.notes_classifier import split_note_lines
from ..transformation.schemas import ParseError

logger = logging.getLogger(__name__)

DEFAULT_OUTPUT_FILE = "output.csv"
DEFAULT_ERROR_FILE = "error.txt"


def _ensure_parent_dir(filepath: str) -> None:
    parent = os.path.dirname(filepath)
    if parent:
        os.makedirs(parent, exist_ok=True)


def append_lines(filepath: str, lines: Iterable[str]) -> int:
    """
    Append lines to a text file, creating it if needed

    Args:
        filepath: Path of the file to append to
        lines: Lines to write, without line terminators

    Returns:
        int: Number of lines written
    """
    _ensure_parent_dir(filepath)
    written = 0
    with open(filepath, "a", encoding="utf-8") as f:
        for line in lines:
            f.write(line + "\n")
            written += 1
    return written


def delete_stale_output(filepath: str) -> bool:
    """Delete an output file left over from a previous run"""
    if not os.path.exists(filepath):
        return False
    logger.info(f"Delete an output file: {filepath}")
    os.remove(filepath)
    return True


def write_error_log(
    errors: Sequence[ParseError], error_file: str, input_file: str
) -> str:
    """
    Append parse errors to the error log, under a header naming the input file

    Args:
        errors: Parse errors in input order
        error_file: Path of the error log
        input_file: Input file the errors were found in

    Returns:
        str: Path to the error log
    """
    header = f"List of errors found in input file: {input_file}"
    append_lines(error_file, [header] + [error.message for error in errors])
    if errors:
        logger.info(f"Wrote {len(errors)} input errors to {error_file}")
    return error_file


def save_rows_parquet(rows: Sequence[ExtractionRow], filepath: str) -> str:
    """
    Save extraction rows to a Parquet file, one column per returned field

    Args:
        rows: Rows as returned by DSS
        filepath: Path to save file

    Returns:
        str: Path to saved file
    """
    # Values are loosely typed, so let polars pick a supertype per column
    df = pl.from_dicts(list(rows), strict=False, infer_schema_length=None)

    _ensure_parent_dir(filepath)
    df.write_parquet(filepath)

    logger.info(f"Saved {df.height} rows x {df.width} fields to {filepath}")
    return filepath


def save_notes_json(notes: Sequence[str], filepath: str) -> str:
    """Save the extraction notes, split into lines, as a JSON list per note"""
    _ensure_parent_dir(filepath)
    with open(filepath, "w", encoding="utf-8") as f:
        json.dump([split_note_lines([note]) for note in notes], f, indent=2)

    logger.info(f"Saved {len(notes)} extraction notes to {filepath}")
    return filepath


def save_extraction_snapshot(
    outcome: ExtractionOutcome, output_dir: str, date_str: Optional[str] = None
) -> Dict[str, str]:
    """
    Save the raw rows and notes of an extraction

    Args:
        outcome: Extraction result to save
        output_dir: Directory for the snapshot files
        date_str: Date suffix for the file names (defaults to today)

    Returns:
        Dict[str, str]: Paths of the saved files, keyed by "rows" and "notes"
    """
    date_str = date_str or date.today().strftime("%Y-%m-%d")
    logger.info(f"Saving extraction snapshot to {output_dir}")
    saved_files = {}

    if outcome.rows:
        saved_files["rows"] = save_rows_parquet(
            outcome.rows, os.path.join(output_dir, f"raw_extraction_{date_str}.parquet")
        )
    else:
        logger.warning("No rows to snapshot")

    saved_files["notes"] = save_notes_json(
        outcome.notes, os.path.join(output_dir, f"raw_notes_{date_str}.json")
    )
    return saved_files
