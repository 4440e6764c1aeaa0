"""
Test Extraction Pipeline - Verify the orchestrated run end to end

The DSS client is mocked; files live in a temporary directory.
"""

import sys
import os
import io
import logging
from unittest.mock import Mock

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pytest
from dss_extractor.extract.dss_api import DssAuthenticationError
from dss_extractor.extract.schemas import (
    ExtractionOutcome,
    IdentifierType,
    InstrumentIdentifier,
)
from dss_extractor.orchestration.pipeline import (
    ExtractionPipeline,
    RunStatus,
    load_identifiers_from_file,
    mask_token,
)


def write_input(tmp_path, content):
    path = tmp_path / "companies.csv"
    path.write_text(content)
    return str(path)


def make_pipeline(tmp_path, input_file, client=None, **kwargs):
    return ExtractionPipeline(
        input_file=input_file,
        output_file=str(tmp_path / "output.csv"),
        error_file=str(tmp_path / "error.txt"),
        client=client,
        notes_stream=io.StringIO(),
        **kwargs,
    )


def mock_client(outcome):
    client = Mock()
    client.session_token = "token-123"
    client.extract_with_notes.return_value = outcome
    return client


def test_load_identifiers_from_file(tmp_path):
    input_file = write_input(tmp_path, "# comment\nRIC,IBM.N\nBAD\r\nSED,2005973\n")
    error_file = str(tmp_path / "error.txt")

    identifiers, errors = load_identifiers_from_file(input_file, error_file)

    assert identifiers == [
        InstrumentIdentifier(IdentifierType.RIC, "IBM.N"),
        InstrumentIdentifier(IdentifierType.SEDOL, "2005973"),
    ]
    assert len(errors) == 1
    with open(error_file) as f:
        assert f.read().splitlines() == [
            f"List of errors found in input file: {input_file}",
            "ERROR line 2: bad line format: BAD",
        ]


def test_full_run(tmp_path):
    input_file = write_input(tmp_path, "RIC,IBM.N\nXYZ,1\nRIC,MSFT.O\n")
    outcome = ExtractionOutcome(
        rows=(
            {"RIC": "IBM.N", "Ticker": "IBM"},
            {"RIC": "MSFT.O", "Ticker": "MSFT"},
        ),
        notes=("Processing completed successfully\nWARNING: slow response",),
    )
    client = mock_client(outcome)
    (tmp_path / "output.csv").write_text("stale line\n")
    pipeline = make_pipeline(
        tmp_path, input_file, client, field_names=["RIC", "Ticker"]
    )

    result = pipeline.run("user", "secret")

    assert result.status is RunStatus.COMPLETED
    assert result.identifiers == 2
    assert result.input_errors == 1
    assert result.total_rows == 2
    assert result.valid_rows == 2
    client.connect.assert_called_once_with("user", "secret")
    identifiers, field_names = client.extract_with_notes.call_args.args
    assert [i.code for i in identifiers] == ["IBM.N", "MSFT.O"]
    assert list(field_names) == ["RIC", "Ticker"]
    with open(tmp_path / "output.csv") as f:
        assert f.read().splitlines() == ["RIC,Ticker", "IBM.N, IBM", "MSFT.O, MSFT"]
    report = pipeline.notes_stream.getvalue()
    assert "SUCCESS: processing completed successfully." in report
    assert "WARNING: slow response" in report


def test_run_with_empty_results(tmp_path):
    input_file = write_input(tmp_path, "RIC,IBM.N\n")
    pipeline = make_pipeline(tmp_path, input_file, mock_client(ExtractionOutcome()))

    result = pipeline.run("user", "secret")

    assert result.status is RunStatus.COMPLETED
    assert result.total_rows == 0
    assert not os.path.exists(tmp_path / "output.csv")
    assert "Error: no extraction notes returned" in pipeline.notes_stream.getvalue()


def test_missing_input_file(tmp_path):
    client = mock_client(ExtractionOutcome())
    pipeline = make_pipeline(tmp_path, str(tmp_path / "missing.csv"), client)

    result = pipeline.run("user", "secret")

    assert result.status is RunStatus.INPUT_MISSING
    client.extract_with_notes.assert_not_called()


def test_no_valid_identifiers_ends_run_cleanly(tmp_path):
    input_file = write_input(tmp_path, "# only a comment\n")
    client = mock_client(ExtractionOutcome())
    pipeline = make_pipeline(tmp_path, input_file, client)

    result = pipeline.run("user", "secret")

    assert result.status is RunStatus.NOTHING_TO_DO
    assert result.input_errors == 1
    client.extract_with_notes.assert_not_called()
    with open(tmp_path / "error.txt") as f:
        assert f"ERROR: empty file: {input_file}" in f.read()


def test_service_errors_propagate(tmp_path):
    input_file = write_input(tmp_path, "RIC,IBM.N\n")
    client = mock_client(ExtractionOutcome())
    client.connect.side_effect = DssAuthenticationError("bad credentials")
    pipeline = make_pipeline(tmp_path, input_file, client)

    with pytest.raises(DssAuthenticationError):
        pipeline.run("user", "wrong")


def test_dry_run_skips_service(tmp_path):
    input_file = write_input(tmp_path, "RIC,IBM.N\nISN,US4592001014\n")
    pipeline = make_pipeline(tmp_path, input_file, dry_run=True)

    result = pipeline.run()

    assert pipeline.client is None
    assert result.status is RunStatus.COMPLETED
    assert result.identifiers == 2
    assert not os.path.exists(tmp_path / "output.csv")


def test_snapshot_is_saved(tmp_path):
    input_file = write_input(tmp_path, "RIC,IBM.N\n")
    outcome = ExtractionOutcome(rows=({"RIC": "IBM.N"},), notes=("note",))
    snapshot_dir = tmp_path / "snapshots"
    pipeline = make_pipeline(
        tmp_path, input_file, mock_client(outcome), snapshot_dir=str(snapshot_dir)
    )

    pipeline.run("user", "secret")

    saved = sorted(p.name for p in snapshot_dir.iterdir())
    assert len(saved) == 2
    assert saved[0].startswith("raw_extraction_") and saved[0].endswith(".parquet")
    assert saved[1].startswith("raw_notes_") and saved[1].endswith(".json")


def test_non_utf8_input_is_read_with_replacement(tmp_path):
    path = tmp_path / "companies.csv"
    path.write_bytes(b"# Soci\xe9t\xe9 G\xe9n\xe9rale list\nRIC,SOGN.PA\n")
    pipeline = make_pipeline(tmp_path, str(path), dry_run=True)

    result = pipeline.run()

    assert result.status is RunStatus.COMPLETED
    assert result.identifiers == 1
    assert result.input_errors == 0


def test_undecodable_bytes_in_data_line_are_rejected_per_line(tmp_path):
    path = tmp_path / "companies.csv"
    path.write_bytes(b"RIC,IBM.N\nX\xff,1\n")
    error_file = str(tmp_path / "error.txt")

    identifiers, errors = load_identifiers_from_file(str(path), error_file)

    assert [i.code for i in identifiers] == ["IBM.N"]
    assert len(errors) == 1
    assert errors[0].line_number == 2
    assert errors[0].message == "ERROR line 2: unknown identifier type: X\ufffd"


def test_session_token_is_not_logged_in_clear(tmp_path, caplog):
    input_file = write_input(tmp_path, "RIC,IBM.N\n")
    client = mock_client(ExtractionOutcome())
    client.session_token = "_secret-session-token-9f2A"
    pipeline = make_pipeline(tmp_path, input_file, client)

    with caplog.at_level(logging.DEBUG):
        pipeline.run("user", "secret")

    assert "Connected to DSS, session token received" in caplog.text
    assert "_secret-session-token-9f2A" not in caplog.text
    assert "9f2A" in caplog.text


def test_mask_token():
    assert mask_token("abcdefgh") == "****efgh"
    assert mask_token("abc") == "***"
    assert mask_token(None) == ""
