"""
DataScope Select API Client - Pure I/O Operations

This module handles all calls to the DSS REST API with no business logic.
Returns raw extraction results that can be processed by the transform layer.
"""

import requests
import time
from typing import Any, Dict, List, Optional, Sequence
import logging

from ..coreutils.env import env_get
from ..coreutils.request import new_session
from .schemas import ExtractionOutcome, InstrumentIdentifier

logger = logging.getLogger(__name__)

# API Endpoints
DSS_BASE_URL = env_get(
    "DSS_BASE_URL", "https://selectapi.datascope.refinitiv.com/RestApi/v1/"
)
REQUEST_TOKEN_PATH = "Authentication/RequestToken"
EXTRACT_WITH_NOTES_PATH = "Extractions/ExtractWithNotes"

COMPOSITE_REQUEST_TYPE = (
    "#DataScope.Select.Api.Extractions.ExtractionRequests.CompositeExtractionRequest"
)
IDENTIFIER_LIST_TYPE = (
    "#DataScope.Select.Api.Extractions.ExtractionRequests.InstrumentIdentifierList"
)

# Seconds between checks of an in-progress extraction
POLL_INTERVAL = 5.0
REQUEST_TIMEOUT = 60


class DssAPIError(Exception):
    """Raised when the DSS service rejects or fails a request"""


class DssAuthenticationError(DssAPIError):
    """Raised when DSS refuses the supplied credentials"""


class DssApiClient:
    """Pure API client for DSS on demand extractions"""

    def __init__(
        self,
        base_url: Optional[str] = None,
        poll_interval: float = POLL_INTERVAL,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = (base_url or DSS_BASE_URL).rstrip("/") + "/"
        self.poll_interval = poll_interval
        self.session = session or new_session()
        self._session_token: Optional[str] = None

    @property
    def session_token(self) -> Optional[str]:
        """Token returned by DSS; only set once connect() succeeded"""
        return self._session_token

    def connect(self, username: str, password: str) -> str:
        """
        Request a session token from DSS

        Args:
            username: DSS user name
            password: DSS password

        Returns:
            str: Session token used to authorize further requests
        """
        url = self.base_url + REQUEST_TOKEN_PATH
        logger.info(f"Requesting session token from {url}")

        try:
            response = self.session.post(
                url,
                json={"Credentials": {"Username": username, "Password": password}},
                timeout=REQUEST_TIMEOUT,
            )
        except requests.exceptions.RequestException as e:
            logger.error(f"Error connecting to DSS: {e}")
            raise

        if response.status_code in (400, 401, 403):
            raise DssAuthenticationError(
                f"DSS authentication failed for user {username!r}: "
                f"{self._error_message(response)}"
            )
        self._raise_for_status(response)

        self._session_token = response.json()["value"]
        self.session.headers.update({"Authorization": f"Token {self._session_token}"})
        return self._session_token

    def extract_with_notes(
        self,
        identifiers: Sequence[InstrumentIdentifier],
        field_names: Sequence[str],
    ) -> ExtractionOutcome:
        """
        Create and run a composite extraction, blocking until it completes

        Args:
            identifiers: Validated instrument identifiers
            field_names: Content field names to extract

        Returns:
            ExtractionOutcome: Returned rows and processing notes
        """
        if self._session_token is None:
            raise DssAPIError("Not connected to DSS: call connect() first")

        url = self.base_url + EXTRACT_WITH_NOTES_PATH
        body = build_composite_request(identifiers, field_names)
        logger.info(
            f"Submitting composite extraction: {len(identifiers)} instruments, "
            f"{len(field_names)} fields"
        )
        start_time = time.time()

        try:
            response = self.session.post(url, json=body, timeout=REQUEST_TIMEOUT)
            while response.status_code == 202:
                monitor_url = response.headers.get("Location")
                if not monitor_url:
                    raise DssAPIError(
                        "DSS accepted the extraction without a monitor URL"
                    )
                logger.debug(f"Extraction in progress, checking {monitor_url}")
                time.sleep(self.poll_interval)
                response = self.session.get(monitor_url, timeout=REQUEST_TIMEOUT)
        except requests.exceptions.RequestException as e:
            logger.error(f"Error running extraction: {e}")
            raise

        self._raise_for_status(response)

        elapsed = time.time() - start_time
        logger.info(f"Extraction completed: {elapsed:.2f} seconds")
        return parse_extraction_result(response.json())

    def _raise_for_status(self, response: requests.Response) -> None:
        if response.status_code >= 400:
            message = self._error_message(response)
            logger.error(f"DSS request failed ({response.status_code}): {message}")
            raise DssAPIError(
                f"DSS request failed with status {response.status_code}: {message}"
            )

    @staticmethod
    def _error_message(response: requests.Response) -> str:
        try:
            return response.json()["error"]["message"]
        except (ValueError, KeyError, TypeError):
            return response.text or response.reason or ""


def build_composite_request(
    identifiers: Sequence[InstrumentIdentifier], field_names: Sequence[str]
) -> Dict[str, Any]:
    """Build the JSON body of a CompositeExtractionRequest"""
    return {
        "ExtractionRequest": {
            "@odata.type": COMPOSITE_REQUEST_TYPE,
            "ContentFieldNames": list(field_names),
            "IdentifierList": {
                "@odata.type": IDENTIFIER_LIST_TYPE,
                "InstrumentIdentifiers": [i.to_api() for i in identifiers],
            },
        }
    }


def parse_extraction_result(payload: Dict[str, Any]) -> ExtractionOutcome:
    """Convert an ExtractWithNotes JSON payload into an ExtractionOutcome"""
    rows: List[Dict[str, Any]] = []
    for content in payload.get("Contents") or []:
        rows.append({k: v for k, v in content.items() if not k.startswith("@odata")})
    notes = payload.get("Notes") or []
    return ExtractionOutcome(rows=tuple(rows), notes=tuple(notes))
