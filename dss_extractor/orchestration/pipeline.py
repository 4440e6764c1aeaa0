"""
Pipeline Orchestrator - Shareholding Extraction Workflow

One synchronous run, every step in sequence:
1. Connect to DSS and obtain a session token
2. Read and validate the instrument identifier file
3. Run one composite extraction (blocking)
4. Write field names and values to the output file
5. Classify and report the extraction notes
"""

from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Sequence, TextIO, Tuple
import logging

# Extract layer imports
from ..extract.data_fetcher import REQUESTED_FIELD_NAMES, fetch_extraction
from ..extract.dss_api import DssApiClient
from ..extract.identifier_file import (
    DEFAULT_INPUT_FILE,
    input_file_exists,
    read_identifier_lines,
)
from ..extract.schemas import InstrumentIdentifier

# Transform layer imports
from ..transformation.identifier_parser import parse_identifier_lines
from ..transformation.notes_classifier import classify_notes
from ..transformation.schemas import ParseError

# Load layer imports
from ..load.local_storage import (
    DEFAULT_ERROR_FILE,
    DEFAULT_OUTPUT_FILE,
    delete_stale_output,
    save_extraction_snapshot,
    write_error_log,
)
from ..load.report_writer import (
    render_field_names,
    render_field_values,
    render_notes,
    render_raw_notes,
)

logger = logging.getLogger(__name__)


class RunStatus(Enum):
    COMPLETED = "completed"
    NOTHING_TO_DO = "nothing_to_do"
    INPUT_MISSING = "input_missing"


@dataclass(frozen=True)
class PipelineResult:
    status: RunStatus
    identifiers: int = 0
    input_errors: int = 0
    total_rows: int = 0
    valid_rows: int = 0


def load_identifiers_from_file(
    input_file: str, error_file: str
) -> Tuple[List[InstrumentIdentifier], List[ParseError]]:
    """
    Read and validate the input file, appending rejected lines to the error log

    Args:
        input_file: Identifier input file
        error_file: Error log to append to

    Returns:
        Tuple: (valid identifiers, parse errors), both in file order
    """
    lines = read_identifier_lines(input_file)
    identifiers, errors = parse_identifier_lines(lines, source_name=input_file)
    write_error_log(errors, error_file, input_file)
    logger.info(
        f"Loaded {len(identifiers)} identifiers from {input_file} "
        f"({len(errors)} rejected)"
    )
    return identifiers, errors


def mask_token(token: Optional[str]) -> str:
    """Keep only the last 4 characters of a session token"""
    if not token:
        return ""
    if len(token) <= 4:
        return "*" * len(token)
    return "*" * (len(token) - 4) + token[-4:]


class ExtractionPipeline:
    """Orchestrates a single shareholding extraction run"""

    def __init__(
        self,
        input_file: str = DEFAULT_INPUT_FILE,
        output_file: str = DEFAULT_OUTPUT_FILE,
        error_file: str = DEFAULT_ERROR_FILE,
        client: Optional[DssApiClient] = None,
        field_names: Sequence[str] = REQUESTED_FIELD_NAMES,
        snapshot_dir: Optional[str] = None,
        dry_run: bool = False,
        notes_stream: Optional[TextIO] = None,
    ):
        """
        Initialize the extraction pipeline

        Args:
            input_file: Identifier input file
            output_file: Output CSV file (deleted at the start of each run)
            error_file: Error log for rejected input lines
            client: DSS client (created on demand if not provided)
            field_names: Content fields to extract
            snapshot_dir: If set, save raw rows and notes there
            dry_run: If true, validate the input but skip all DSS calls
            notes_stream: Where the notes report is written (stdout by default)
        """
        self.input_file = input_file
        self.output_file = output_file
        self.error_file = error_file
        self.field_names = tuple(field_names)
        self.snapshot_dir = snapshot_dir
        self.dry_run = dry_run
        self.notes_stream = notes_stream

        if self.dry_run:
            self.client = None
            logger.info("🔍 DRY RUN MODE: DSS client not initialized")
        else:
            self.client = client or DssApiClient()

    def run(self, username: str = "", password: str = "") -> PipelineResult:
        """
        Run the complete extraction

        Service errors (authentication, transport) are not handled here.

        Returns:
            PipelineResult: Run status and counts
        """
        logger.info("🚀 Starting shareholding extraction")

        if not self.dry_run:
            self.client.connect(username, password)
            logger.info("Connected to DSS, session token received")
            logger.debug(f"Session token: {mask_token(self.client.session_token)}")

        if not input_file_exists(self.input_file):
            return PipelineResult(status=RunStatus.INPUT_MISSING)

        delete_stale_output(self.output_file)

        logger.info("🔄 Step 1: Loading instrument identifiers...")
        identifiers, errors = load_identifiers_from_file(
            self.input_file, self.error_file
        )
        if not identifiers:
            logger.info("Exit program due to no identifiers in the list.")
            return PipelineResult(
                status=RunStatus.NOTHING_TO_DO, input_errors=len(errors)
            )

        if self.dry_run:
            logger.info(
                "🔍 DRY RUN: would extract the following fields:\n"
                + "\n".join(self.field_names)
            )
            return PipelineResult(
                status=RunStatus.COMPLETED,
                identifiers=len(identifiers),
                input_errors=len(errors),
            )

        logger.info("🔄 Step 2: Running extraction...")
        outcome = fetch_extraction(self.client, identifiers, self.field_names)

        if self.snapshot_dir:
            save_extraction_snapshot(outcome, self.snapshot_dir)

        logger.info("🔄 Step 3: Writing results...")
        render_field_names(outcome.rows, self.output_file)
        summary = render_field_values(outcome.rows, self.output_file)

        logger.info("🔄 Step 4: Analyzing extraction notes...")
        if outcome.notes:
            render_raw_notes(outcome.notes, self.notes_stream)
        render_notes(classify_notes(outcome.notes), self.notes_stream)

        logger.info("✅ Extraction pipeline completed")
        return PipelineResult(
            status=RunStatus.COMPLETED,
            identifiers=len(identifiers),
            input_errors=len(errors),
            total_rows=summary.total_rows,
            valid_rows=summary.valid_rows,
        )
