"""
Transformation Layer Schemas

Result structures produced by identifier validation and notes analysis.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Tuple


class ParseErrorKind(Enum):
    EMPTY_FILE = "EmptyFile"
    BAD_LINE_FORMAT = "BadLineFormat"
    EMPTY_TYPE = "EmptyType"
    EMPTY_CODE = "EmptyCode"
    UNKNOWN_IDENTIFIER = "UnknownIdentifier"


@dataclass(frozen=True)
class ParseError:
    """A rejected input line"""

    line_number: int
    raw_line: str
    kind: ParseErrorKind
    detail: str

    @property
    def message(self) -> str:
        if self.kind is ParseErrorKind.EMPTY_FILE:
            return f"ERROR: empty file: {self.detail}"
        return f"ERROR line {self.line_number}: {self.detail}"


@dataclass(frozen=True)
class NoteClassification:
    """Extraction notes sorted into actionable categories"""

    succeeded: bool = False
    errors: Tuple[str, ...] = field(default_factory=tuple)
    warnings: Tuple[str, ...] = field(default_factory=tuple)
    inactive_mentions: Tuple[str, ...] = field(default_factory=tuple)
    invalid_mentions: Tuple[str, ...] = field(default_factory=tuple)
    permission_issues: Tuple[str, ...] = field(default_factory=tuple)
    notes_returned: bool = True
