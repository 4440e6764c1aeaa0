"""
Extract Layer Schemas

Data structures exchanged with the DataScope Select (DSS) API.
Identifier types use the DSS wire names as their values.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Tuple


class IdentifierType(Enum):
    CHAIN_RIC = "ChainRIC"
    CUSIP = "Cusip"
    ISIN = "Isin"
    RIC = "Ric"
    SEDOL = "Sedol"
    FILE_CODE = "FileCode"
    UNKNOWN = "Unknown"


# Input file type codes supported by this client (DSS handles many more)
IDENTIFIER_TYPE_CODES: Dict[str, IdentifierType] = {
    "CHR": IdentifierType.CHAIN_RIC,
    "CSP": IdentifierType.CUSIP,
    "ISN": IdentifierType.ISIN,
    "RIC": IdentifierType.RIC,
    "SED": IdentifierType.SEDOL,
    "IPC": IdentifierType.FILE_CODE,
}


@dataclass(frozen=True)
class InstrumentIdentifier:
    """A validated instrument identifier ready to be sent to DSS."""

    identifier_type: IdentifierType
    code: str

    def to_api(self) -> Dict[str, str]:
        return {"Identifier": self.code, "IdentifierType": self.identifier_type.value}


# One returned data row: field name -> loosely typed value, in column order
ExtractionRow = Dict[str, Any]


@dataclass(frozen=True)
class ExtractionOutcome:
    """Rows and processing notes returned by one extraction"""

    rows: Tuple[ExtractionRow, ...] = field(default_factory=tuple)
    notes: Tuple[str, ...] = field(default_factory=tuple)
