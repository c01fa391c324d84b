"""Command line interface."""

from __future__ import annotations

import argparse
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from rttmlib import __version__
from rttmlib.config import load_config
from rttmlib.rttm import RichTranscriptionTimeMarked
from rttmlib.validation import has_errors

logger = logging.getLogger(__name__)


def _configure_logging(debug: bool) -> None:
    level = logging.DEBUG if debug else logging.INFO
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(message)s")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rttm-validate",
        description=(
            "Validate an RTTM file. All syntax errors are reported; logic "
            "checks stop after the first failing group of checks."
        ),
    )
    parser.add_argument("-i", "--input", required=True, help="RTTM file")
    parser.add_argument(
        "-u",
        dest="check_su_coverage",
        action="store_false",
        default=None,
        help="disable check that all LEXEMEs belong to some SU object",
    )
    parser.add_argument(
        "-s",
        dest="check_speaker_coverage",
        action="store_false",
        default=None,
        help="disable check that all LEXEMEs belong to some SPEAKER object",
    )
    parser.add_argument(
        "-e",
        dest="check_edit_ip",
        action="store_false",
        default=None,
        help="disable check that there is an IP for each EDIT object",
    )
    parser.add_argument(
        "-f",
        dest="check_filler_ip",
        action="store_false",
        default=None,
        help="disable check that there is an IP for each FILLER object",
    )
    parser.add_argument("--config", help="path to config TOML")
    parser.add_argument("--debug", action="store_true", help="enable debug logging")
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}"
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.debug)

    config = load_config(Path(args.config) if args.config else None)
    overrides = {
        name: False
        for name in (
            "check_su_coverage",
            "check_speaker_coverage",
            "check_edit_ip",
            "check_filler_ip",
        )
        if getattr(args, name) is False
    }
    config = config.with_overrides(**overrides)

    now = datetime.now()
    command_line = " ".join(sys.argv[1:] if argv is None else argv)
    print(
        f"{parser.prog} (version {__version__}) run on "
        f"{now:%Y %b %d} at {now:%H:%M:%S}"
    )
    print(f"command line: {parser.prog} {command_line}")

    try:
        rttm = RichTranscriptionTimeMarked.from_file(args.input)
    except FileNotFoundError as e:
        logger.error("%s", e)
        return 1

    logger.debug("Loaded %d record(s) from %s", len(rttm.records), args.input)
    issues = rttm.validate(config, raise_exception=False) or []
    for issue in issues:
        print(f"{issue.severity.value}: {issue}")

    if has_errors(issues):
        logger.info("Validation failed")
        return 1
    logger.info("Validation passed")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
