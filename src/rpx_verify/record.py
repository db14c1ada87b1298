# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2026 MuVeraAI Corporation

"""
Single-record verification.

A record is checked in isolation, in two stages:

1. Structural conformance via the injected ``SchemaValidator``, followed by
   the checks every verifier relies on regardless of the validator: the
   record is a JSON object and its timestamp is a real calendar instant.  A
   structurally invalid record short-circuits — its hash cannot be
   meaningfully interpreted.
2. Hash integrity — the stored ``record_hash`` is compared against the
   recomputed canonical digest.

Missing optional fields produce advisory warnings that never affect validity.
The verifier holds no mutable state and is safe to share across threads.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Mapping

from rpx_verify.config import VerifierConfig
from rpx_verify.errors import CanonicalizationError
from rpx_verify.hashing import verify_record_hash
from rpx_verify.schema import SchemaValidator, default_record_validator
from rpx_verify.types import RecordVerificationResult, RPXRecord

OPTIONAL_FIELDS: tuple[str, ...] = ("action_type", "reason")


def as_document(record: Any) -> Any:
    """Return the JSON document form of ``record``; documents pass through unchanged."""
    if isinstance(record, RPXRecord):
        return record.to_document()
    return record


def field_of(record: Any, name: str) -> Any:
    """Read ``name`` from a record document, tolerating non-mapping input."""
    return record.get(name) if isinstance(record, Mapping) else None


def record_id_of(record: Any) -> str:
    """Best-effort identifier for messages about ``record``, even when malformed."""
    record_id = field_of(record, "record_id")
    return str(record_id) if record_id is not None else "<unknown>"


def parse_timestamp(value: Any) -> datetime | None:
    """
    Parse an ISO 8601 timestamp; naive values are taken as UTC.

    Returns None for non-strings and for strings that are not a real
    calendar instant (e.g. ``2025-02-30T00:00:00.000000Z``).
    """
    if not isinstance(value, str):
        return None
    text = value[:-1] + "+00:00" if value.endswith("Z") else value
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _structural_errors(record: Any) -> list[str]:
    if not isinstance(record, Mapping):
        return [f"/ {type(record).__name__} is not a JSON object"]
    if parse_timestamp(record.get("timestamp")) is None:
        return [f"/timestamp {record.get('timestamp')!r} is not a valid ISO 8601 date-time"]
    return []


class RecordVerifier:
    """
    Verifies one RPX record at a time.

    Parameters
    ----------
    validator:
        Structural validation capability.  Defaults to the bundled JSON Schema
        for RPX records.
    config:
        Verifier configuration; only ``warn_on_missing_optional`` is consulted.
    """

    def __init__(
        self,
        validator: SchemaValidator | None = None,
        config: VerifierConfig | None = None,
    ) -> None:
        self._validator: SchemaValidator = validator or default_record_validator()
        self._config = config or VerifierConfig()

    def verify(self, record: Any) -> RecordVerificationResult:
        """Check schema conformance, then hash integrity, of a single record."""
        record = as_document(record)
        schema_errors = self._validator.validate(record) or _structural_errors(record)
        if schema_errors:
            return RecordVerificationResult(valid=False, errors=schema_errors, failure="schema")

        record_id = record_id_of(record)
        try:
            hash_valid = verify_record_hash(record)
        except CanonicalizationError as exc:
            return RecordVerificationResult(valid=False, errors=[exc.message], failure="schema")

        if not hash_valid:
            return RecordVerificationResult(
                valid=False,
                errors=[
                    f"Hash mismatch for record {record_id}: "
                    "stored hash does not match computed hash"
                ],
                failure="hash",
            )

        warnings: list[str] = []
        if self._config.warn_on_missing_optional:
            for field_name in OPTIONAL_FIELDS:
                if not record.get(field_name):
                    warnings.append(f"No {field_name} specified (optional field)")

        return RecordVerificationResult(valid=True, warnings=warnings)


def verify_record(
    record: Any, validator: SchemaValidator | None = None
) -> RecordVerificationResult:
    """Verify a single record with a default-configured ``RecordVerifier``."""
    return RecordVerifier(validator=validator).verify(record)
