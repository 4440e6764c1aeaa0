"""
Report Writer - Load Layer

Renders extraction results: field names and row values are appended to the
output file, the notes report goes to a text stream (stdout by default).
"""

import sys
from dataclasses import dataclass
from typing import Any, List, Optional, Sequence, TextIO
import logging

from ..extract.schemas import ExtractionRow
from ..transformation.notes_classifier import NO_NOTES_MESSAGE
from ..transformation.schemas import NoteClassification
from .local_storage import append_lines

logger = logging.getLogger(__name__)

NO_DATA_MESSAGE = "No data returned ! Is it a banking holiday ?"
SUCCESS_BANNER = "SUCCESS: processing completed successfully."
RULE = "=" * 79

# Report sections in print order: (heading, NoteClassification field)
NOTE_SECTIONS = (
    ("ERROR messages:", "errors"),
    ("WARNING messages:", "warnings"),
    ("Inactive instruments messages:", "inactive_mentions"),
    ("Invalid instruments messages:", "invalid_mentions"),
    ("PERMISSION ISSUES messages:", "permission_issues"),
)


@dataclass(frozen=True)
class RowSummary:
    total_rows: int
    valid_rows: int


def format_value(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


def format_row(row: ExtractionRow) -> str:
    """Join the row values with ', ' in column order"""
    return ", ".join(format_value(value) for value in row.values())


def render_field_names(
    rows: Sequence[ExtractionRow], output_path: str
) -> Optional[str]:
    """
    Write the field names of the first row as the output header line

    Args:
        rows: Returned data rows (all rows share the first row's columns)
        output_path: Output file to append to

    Returns:
        Optional[str]: The header line, or None when there is no data
    """
    if not rows:
        logger.warning(NO_DATA_MESSAGE)
        return None

    header = ",".join(rows[0].keys())
    append_lines(output_path, [header])
    logger.info(f"Returned list of field names:\n{header}")
    return header


def render_field_values(
    rows: Sequence[ExtractionRow], output_path: str
) -> RowSummary:
    """
    Write one line per non-empty row to the output file

    Rows whose joined values are an empty string are counted but not written.

    Args:
        rows: Returned data rows
        output_path: Output file to append to

    Returns:
        RowSummary: Total rows and valid (non-empty) rows
    """
    if not rows:
        logger.warning(NO_DATA_MESSAGE)
        return RowSummary(total_rows=0, valid_rows=0)

    lines = [line for line in (format_row(row) for row in rows) if line != ""]
    append_lines(output_path, lines)

    logger.info("Returned field values:\n" + "\n".join(lines))
    summary = RowSummary(total_rows=len(rows), valid_rows=len(lines))
    # Fewer data rows than instruments means data was missing for some of them
    logger.info(
        f"Extraction completed. Number of data rows: {summary.total_rows}, "
        f"number of valid (non empty) data rows: {summary.valid_rows}. "
        f"Output was written to {output_path}"
    )
    return summary


def _write(stream: TextIO, lines: List[str]) -> List[str]:
    for line in lines:
        stream.write(line + "\n")
    return lines


def render_raw_notes(
    notes: Sequence[str], stream: Optional[TextIO] = None
) -> List[str]:
    """Dump the notes as returned, under an 'Extraction Notes:' heading"""
    if stream is None:
        stream = sys.stdout
    if not notes:
        logger.warning(NO_NOTES_MESSAGE)
        return []
    return _write(stream, ["Extraction Notes:", "================="] + list(notes))


def render_notes(
    classification: NoteClassification, stream: Optional[TextIO] = None
) -> List[str]:
    """
    Write the classified notes report

    The success banner comes first, then each non-empty category.

    Args:
        classification: Result of classify_notes()
        stream: Text stream to write to (defaults to stdout)

    Returns:
        List[str]: The lines written
    """
    if stream is None:
        stream = sys.stdout
    if not classification.notes_returned:
        return _write(stream, [NO_NOTES_MESSAGE])

    lines = [RULE]
    if classification.succeeded:
        lines.extend([SUCCESS_BANNER, ""])
    for heading, name in NOTE_SECTIONS:
        messages = getattr(classification, name)
        if messages:
            lines.append(heading)
            lines.extend(messages)
            lines.append("")
    lines.append(RULE)
    return _write(stream, lines)
