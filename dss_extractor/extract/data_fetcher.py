"""
Data Fetcher - Extract Layer

Functions that run the shareholding extraction against DSS.
No business logic, just I/O operations that return raw data.
"""

from typing import Sequence
import logging

from .dss_api import DssApiClient
from .schemas import ExtractionOutcome, InstrumentIdentifier

logger = logging.getLogger(__name__)

# Shareholding disclosure fields requested for every instrument
REQUESTED_FIELD_NAMES = (
    "RIC",
    "Ticker",
    "File Code",
    "Exchange Code",
    "Asset SubType",
    "Asset SubType Description",
    "Refinitiv Classification Scheme",
    "Refinitiv Classification Scheme Description",
    "Shares Amount",
    "Shares Amount Change Date",
    "Shares Amount Type",
    "Shares Amount Type Description",
    "Shares Outstanding",
    "Total Shares - Default",
    "Total Shares - Default - Audit",
    "Total Shares - Default - Effective Date",
    "Total Shares - Issued",
    "Total Shares - Issued - Audit",
    "Total Shares - Issued - Effective Date",
    "Total Shares - Listed",
    "Total Shares - Listed - Audit",
    "Total Shares - Listed - Effective Date",
    "Total Shares - Outstanding",
    "Total Shares - Outstanding - Audit",
    "Total Shares - Outstanding - Effective Date",
    "Total Voting Shares - Default",
    "Total Voting Shares - Issued",
    "Total Voting Shares - Listed",
    "Total Voting Shares - Outstanding",
    "Total Voting Shares - Treasury",
    "Total Voting Shares - Unlisted",
)


def fetch_extraction(
    client: DssApiClient,
    identifiers: Sequence[InstrumentIdentifier],
    field_names: Sequence[str] = REQUESTED_FIELD_NAMES,
) -> ExtractionOutcome:
    """
    Run one composite extraction for the given identifiers

    Args:
        client: Connected DSS client
        identifiers: Validated instrument identifiers
        field_names: Content field names to request

    Returns:
        ExtractionOutcome: Raw rows and notes as returned by DSS
    """
    logger.info("Extract the following fields:\n" + "\n".join(field_names))
    logger.info("🔄 Extracting CompositeExtractionRequest...")

    outcome = client.extract_with_notes(identifiers, field_names)

    logger.info(
        f"✅ Extraction returned {len(outcome.rows)} rows "
        f"and {len(outcome.notes)} notes"
    )
    return outcome
