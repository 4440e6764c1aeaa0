"""
Main Entry Point - DSS Shareholding Extraction

Reads instrument identifiers from a CSV file, extracts shareholding data from
DataScope Select and writes the results to an output file.
"""

import argparse
import getpass
import logging
import sys
from typing import List, Optional, Tuple

from .coreutils.env import env_credentials, env_get
from .coreutils.logging import setup_logging
from .extract.identifier_file import DEFAULT_INPUT_FILE
from .load.local_storage import DEFAULT_ERROR_FILE, DEFAULT_OUTPUT_FILE
from .orchestration.pipeline import ExtractionPipeline, RunStatus

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dss-extract",
        description="Extract shareholding disclosure data from DataScope Select",
    )
    parser.add_argument("-u", "--username", default="", help="DSS Username")
    parser.add_argument("-p", "--password", default="", help="DSS Password")
    parser.add_argument(
        "-i",
        "--input",
        default=DEFAULT_INPUT_FILE,
        help=f"Input CSV file name ({DEFAULT_INPUT_FILE})",
    )
    parser.add_argument(
        "-o",
        "--output",
        default=DEFAULT_OUTPUT_FILE,
        help=f"Output file name ({DEFAULT_OUTPUT_FILE})",
    )
    parser.add_argument(
        "-e",
        "--error-file",
        default=DEFAULT_ERROR_FILE,
        help=f"Input error log file name ({DEFAULT_ERROR_FILE})",
    )
    parser.add_argument(
        "--snapshot-dir",
        default=env_get("DSS_SNAPSHOT_DIR"),
        help="Also save raw extraction rows and notes to this directory",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Validate the input file without contacting DSS",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser


def get_credentials(username: str = "", password: str = "") -> Tuple[str, str]:
    """
    Resolve DSS credentials: command line, then environment, then prompt

    Returns:
        Tuple[str, str]: (username, password)
    """
    env_username, env_password = env_credentials()
    username = username or env_username
    password = password or env_password

    if not username:
        username = input("Enter DSS UserName: ")
    if not password:
        password = getpass.getpass("Enter DSS Password: ")

    return username, password


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point"""
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(logging.DEBUG if args.verbose else logging.INFO)

    try:
        pipeline = ExtractionPipeline(
            input_file=args.input,
            output_file=args.output,
            error_file=args.error_file,
            snapshot_dir=args.snapshot_dir,
            dry_run=args.dry_run,
        )
        username, password = ("", "")
        if not args.dry_run:
            username, password = get_credentials(args.username, args.password)
        result = pipeline.run(username, password)
    except Exception as e:
        logger.error(f"❌ Extraction failed: {e}")
        return 1

    if result.status is RunStatus.INPUT_MISSING:
        parser.print_usage()
        return 1

    logger.info(f"✅ Run finished: {result}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
