"""
Identifier Parser - Transformation Layer

Validates raw input lines of the form <typeCode>,<identifierCode> and
converts them into InstrumentIdentifier objects.
"""

from typing import Iterable, List, Tuple
import logging

from ..extract.schemas import IDENTIFIER_TYPE_CODES, InstrumentIdentifier
from .schemas import ParseError, ParseErrorKind

logger = logging.getLogger(__name__)

COMMENT_PREFIX = "#"


def parse_identifier_line(
    line: str, line_number: int
) -> Tuple[InstrumentIdentifier | None, ParseError | None]:
    """
    Validate a single non-comment input line

    Args:
        line: Raw line, without line terminator
        line_number: 1-based position among non-comment lines

    Returns:
        Tuple: (identifier, None) when accepted, (None, error) when rejected
    """
    if "," not in line:
        return None, ParseError(
            line_number,
            line,
            ParseErrorKind.BAD_LINE_FORMAT,
            f"bad line format: {line}",
        )

    # Fields after the second are ignored
    fields = line.split(",")
    type_code, code = fields[0], fields[1]

    if not type_code:
        return None, ParseError(
            line_number,
            line,
            ParseErrorKind.EMPTY_TYPE,
            f"missing identifier type in line: {line}",
        )
    if not code:
        return None, ParseError(
            line_number,
            line,
            ParseErrorKind.EMPTY_CODE,
            f"missing identifier code in line: {line}",
        )

    identifier_type = IDENTIFIER_TYPE_CODES.get(type_code)
    if identifier_type is None:
        return None, ParseError(
            line_number,
            line,
            ParseErrorKind.UNKNOWN_IDENTIFIER,
            f"unknown identifier type: {type_code}",
        )

    return InstrumentIdentifier(identifier_type, code), None


def parse_identifier_lines(
    lines: Iterable[str], source_name: str = ""
) -> Tuple[List[InstrumentIdentifier], List[ParseError]]:
    """
    Parse input file lines into validated identifiers and an error log

    Comment lines (starting with '#') are skipped and not counted.
    A file without any non-comment line yields a single EmptyFile error.

    Args:
        lines: Input lines in file order
        source_name: Name of the input file, used in the EmptyFile message

    Returns:
        Tuple: (identifiers in input order, errors in input order)
    """
    identifiers: List[InstrumentIdentifier] = []
    errors: List[ParseError] = []
    line_number = 0

    for line in lines:
        if line.startswith(COMMENT_PREFIX):
            continue
        line_number += 1

        identifier, error = parse_identifier_line(line, line_number)
        if error is not None:
            logger.error(error.message)
            errors.append(error)
            continue

        logger.info(
            f"Line {line_number}: {line.split(',')[0]} {identifier.code} "
            f"loaded into array [{len(identifiers)}]"
        )
        identifiers.append(identifier)

    if line_number == 0:
        error = ParseError(1, "", ParseErrorKind.EMPTY_FILE, source_name)
        logger.error(error.message)
        errors.append(error)

    return identifiers, errors
