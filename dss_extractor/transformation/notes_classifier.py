"""
Notes Classifier - Transformation Layer

Sorts the free-text extraction notes returned by DSS into categories.
Each note may hold several lines; every line is tested against every
category, so a line can land in more than one of them.
"""

import re
from typing import Dict, List, Sequence
import logging

from .schemas import NoteClassification

logger = logging.getLogger(__name__)

SUCCESS_MARKER = "Processing completed successfully"
NOT_COMPLETED_ERROR = "ERROR: processing did not complete successfully !"
NO_NOTES_MESSAGE = "Error: no extraction notes returned"

# (case-sensitive substring, NoteClassification field)
NOTE_CATEGORIES = (
    ("ERROR", "errors"),
    ("WARNING", "warnings"),
    ("inactive", "inactive_mentions"),
    ("invalid", "invalid_mentions"),
    ("row suppressed for lack of", "permission_issues"),
)

_LINE_BREAK = re.compile(r"\r?\n")


def split_note_lines(notes: Sequence[str]) -> List[str]:
    """Split every note on line breaks, dropping empty fragments"""
    lines: List[str] = []
    for note in notes:
        lines.extend(line for line in _LINE_BREAK.split(note) if line)
    return lines


def classify_notes(notes: Sequence[str]) -> NoteClassification:
    """
    Classify extraction notes

    Args:
        notes: Notes as returned by the extraction

    Returns:
        NoteClassification: Success flag and matched lines per category
    """
    if not notes:
        logger.warning(NO_NOTES_MESSAGE)
        return NoteClassification(notes_returned=False)

    succeeded = False
    matches: Dict[str, List[str]] = {name: [] for _, name in NOTE_CATEGORIES}

    for line in split_note_lines(notes):
        succeeded = succeeded or SUCCESS_MARKER in line
        for marker, name in NOTE_CATEGORIES:
            if marker in line:
                matches[name].append(line)

    if not succeeded:
        matches["errors"].insert(0, NOT_COMPLETED_ERROR)

    logger.debug(
        "Notes classified: "
        + ", ".join(f"{name}={len(lines)}" for name, lines in matches.items())
    )
    return NoteClassification(
        succeeded=succeeded,
        **{name: tuple(lines) for name, lines in matches.items()},
    )
