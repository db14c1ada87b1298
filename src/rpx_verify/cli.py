# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2026 MuVeraAI Corporation

"""
Command line interface for rpx-verify.

Three verification commands map the integrity status to a three-way exit
code — VALID 0, INVALID 1, INCOMPLETE 2 — so callers can tell tampering apart
from a chain whose continuity cannot be established.  Read failures and empty
chains exit 1.

Usage::

    rpx-verify record --in record.json
    rpx-verify chain --in log.jsonl --out chain-proof.json
    rpx-verify report --in log.jsonl --out verification-report.json --markdown report.md
    rpx-verify vectors --out tests/vectors
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from collections.abc import Callable
from typing import Any

from rpx_verify.chain import ChainVerifier
from rpx_verify.config import VerifierConfig
from rpx_verify.errors import RPXVerifyError
from rpx_verify.formatting import (
    export_report_markdown,
    format_chain_result,
    format_record_result,
    format_report,
)
from rpx_verify.record import RecordVerifier, record_id_of
from rpx_verify.report import ReportGenerator
from rpx_verify.storage.file import (
    JsonlFileSource,
    read_json_document,
    write_json_document,
    write_text,
)
from rpx_verify.types import IntegrityStatus
from rpx_verify.vectors import write_vectors

logger = logging.getLogger("rpx_verify.cli")

EXIT_VALID = 0
EXIT_INVALID = 1
EXIT_INCOMPLETE = 2

EXIT_CODES: dict[IntegrityStatus, int] = {
    "VALID": EXIT_VALID,
    "INVALID": EXIT_INVALID,
    "INCOMPLETE": EXIT_INCOMPLETE,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="rpx-verify",
        description="Independent integrity verification for RPX decision chains.",
    )
    parser.add_argument("--version", action="store_true", help="Print version and exit.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    parser.add_argument(
        "--max-workers",
        type=_positive_int,
        default=None,
        help="Worker threads for per-record verification.",
    )
    parser.add_argument(
        "--validate-outputs",
        action="store_true",
        help="Check generated proofs and reports against their schemas.",
    )

    sub = parser.add_subparsers(dest="command")

    p_record = sub.add_parser("record", help="Verify a single RPX record (schema + hash)")
    p_record.add_argument(
        "-i", "--in", dest="input", required=True, help="JSON file with one record."
    )

    p_chain = sub.add_parser("chain", help="Verify chain integrity and write a chain proof")
    p_chain.add_argument("-i", "--in", dest="input", required=True, help="JSONL record log.")
    p_chain.add_argument(
        "-o", "--out", dest="output", required=True, help="Chain proof output file."
    )
    p_chain.add_argument("--chain-id", default=None, help="Optional chain identifier.")

    p_report = sub.add_parser("report", help="Generate a full verification report")
    p_report.add_argument("-i", "--in", dest="input", required=True, help="JSONL record log.")
    p_report.add_argument(
        "-o", "--out", dest="output", required=True, help="Report output file."
    )
    p_report.add_argument("--chain-id", default=None, help="Optional chain identifier.")
    p_report.add_argument("--markdown", default=None, help="Also write a Markdown summary here.")

    p_vectors = sub.add_parser("vectors", help="Write the golden test vectors as JSONL files")
    p_vectors.add_argument("-o", "--out", dest="output", required=True, help="Output directory.")

    return parser


def _positive_int(value: str) -> int:
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {number}")
    return number


def _config_from_args(args: argparse.Namespace) -> VerifierConfig:
    return VerifierConfig(max_workers=args.max_workers, validate_outputs=args.validate_outputs)


def _print_version() -> None:
    from rpx_verify import __version__

    print(f"rpx-verify v{__version__}")


async def _cmd_record(args: argparse.Namespace) -> int:
    record: Any = await read_json_document(args.input)
    result = RecordVerifier(config=_config_from_args(args)).verify(record)
    output = format_record_result(record_id_of(record), result)
    print(output, file=sys.stdout if result.valid else sys.stderr)
    return EXIT_VALID if result.valid else EXIT_INVALID


async def _cmd_chain(args: argparse.Namespace) -> int:
    records = await JsonlFileSource(args.input).all()
    print(f"Verifying chain with {len(records)} records...")
    result = ChainVerifier(config=_config_from_args(args)).verify(records, chain_id=args.chain_id)

    if result.proof is None:
        print(format_chain_result(result), file=sys.stderr)
        return EXIT_INVALID

    await write_json_document(args.output, result.proof.to_document())
    print(f"Chain proof written to: {args.output}")
    print(format_chain_result(result))
    return EXIT_CODES[result.status]


async def _cmd_report(args: argparse.Namespace) -> int:
    records = await JsonlFileSource(args.input).all()
    print(f"Generating verification report for {len(records)} records...")
    report = ReportGenerator(config=_config_from_args(args)).generate(
        records, chain_id=args.chain_id
    )

    await write_json_document(args.output, report.to_document())
    print(f"Verification report written to: {args.output}")
    if args.markdown:
        await write_text(args.markdown, export_report_markdown(report))
        print(f"Markdown summary written to: {args.markdown}")
    print(format_report(report))
    return EXIT_CODES[report.integrity_status]


async def _cmd_vectors(args: argparse.Namespace) -> int:
    for path in await write_vectors(args.output):
        print(f"Wrote {path}")
    return EXIT_VALID


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.version:
        _print_version()
        return EXIT_VALID

    if not args.command:
        parser.print_help()
        return EXIT_INVALID

    dispatch: dict[str, Callable[[argparse.Namespace], Any]] = {
        "record": _cmd_record,
        "chain": _cmd_chain,
        "report": _cmd_report,
        "vectors": _cmd_vectors,
    }

    try:
        return int(asyncio.run(dispatch[args.command](args)))
    except RPXVerifyError as exc:
        logger.debug("Command %s failed", args.command, exc_info=True)
        print(f"Error: {exc.message}", file=sys.stderr)
        return EXIT_INVALID
    except OSError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return EXIT_INVALID


if __name__ == "__main__":
    raise SystemExit(main())
