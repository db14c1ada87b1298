# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2026 MuVeraAI Corporation

"""
RPX chain verification.

Walks an ordered record sequence and collects every integrity violation it
can find — verification never stops at the first anomaly.  The passes run in
a fixed order, which is also the order of the returned tamper evidence:

1. Per-record pass (schema + hash) over every record.
2. Genesis check on record 0.
3. Continuity and timestamp-ordering checks for indices 1..N-1.

The overall status is then derived from the collected evidence by an explicit
decision table (``derive_status``) and a ``ChainProof`` is assembled.  The
input sequence is never modified.
"""

from __future__ import annotations

import logging
import uuid
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
from typing import Any, Callable, Iterable, Sequence

from rpx_verify.config import VerifierConfig
from rpx_verify.errors import SchemaValidationError
from rpx_verify.hashing import GENESIS_HASH, is_genesis_hash
from rpx_verify.record import (
    RecordVerifier,
    as_document,
    field_of,
    parse_timestamp,
    record_id_of,
)
from rpx_verify.schema import SchemaValidator, validate_chain_proof_document
from rpx_verify.types import (
    ChainProof,
    ChainVerificationResult,
    EvidenceTag,
    IntegrityStatus,
    RecordVerificationResult,
    SampleRecord,
    TamperEvidence,
    TamperingType,
)

logger = logging.getLogger("rpx_verify.chain")


# ---------------------------------------------------------------------------
# Status derivation
# ---------------------------------------------------------------------------


_WIRE_TYPE: dict[EvidenceTag, TamperingType] = {
    EvidenceTag.SCHEMA_INVALID: "schema-invalid",
    EvidenceTag.HASH_MISMATCH: "hash-mismatch",
    EvidenceTag.GENESIS_BREAK: "broken-link",
    EvidenceTag.CONTINUITY_BREAK: "broken-link",
    EvidenceTag.TIMESTAMP_VIOLATION: "timestamp-violation",
}


# First matching row wins.
STATUS_TABLE: tuple[tuple[str, Callable[[frozenset[EvidenceTag]], bool], IntegrityStatus], ...] = (
    ("no evidence", lambda tags: not tags, "VALID"),
    (
        "continuity cannot be established",
        lambda tags: EvidenceTag.CONTINUITY_BREAK in tags,
        "INCOMPLETE",
    ),
    ("tampering evident, linear shape intact", lambda tags: True, "INVALID"),
)


def derive_status(tags: Iterable[EvidenceTag]) -> IntegrityStatus:
    """Map a set of evidence tags to the chain's integrity status."""
    tag_set = frozenset(tags)
    for _rule, matches, status in STATUS_TABLE:
        if matches(tag_set):
            return status
    raise AssertionError("STATUS_TABLE has no catch-all row")


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def generate_id(prefix: str) -> str:
    epoch_ms = int(datetime.now(tz=timezone.utc).timestamp() * 1000)
    return f"{prefix}-{epoch_ms}-{uuid.uuid4().hex[:8]}"


def current_timestamp() -> str:
    return datetime.now(tz=timezone.utc).isoformat().replace("+00:00", "Z")


def _sample(records: Sequence[Any], position: int) -> SampleRecord:
    record = records[position]
    return SampleRecord(
        position=position,
        record_id=record_id_of(record),
        timestamp=str(field_of(record, "timestamp") or ""),
        record_hash=str(field_of(record, "record_hash") or ""),
    )


def _sample_positions(count: int) -> list[int]:
    """First, last (when more than one record), then middle (when more than two)."""
    positions = [0]
    if count > 1:
        positions.append(count - 1)
    if count > 2:
        positions.append(count // 2)
    return positions


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


class ChainVerifier:
    """
    Verifies the integrity of an ordered RPX record sequence.

    Each call to ``verify`` is independent and reentrant; the verifier holds
    only immutable configuration.

    Parameters
    ----------
    validator:
        Structural validation capability passed to the per-record verifier.
    config:
        Verifier configuration.  ``max_workers`` > 1 runs the per-record pass
        on a thread pool; results are merged in input order before the
        sequential continuity checks.
    """

    def __init__(
        self,
        validator: SchemaValidator | None = None,
        config: VerifierConfig | None = None,
    ) -> None:
        self._config = config or VerifierConfig()
        self._record_verifier = RecordVerifier(validator=validator, config=self._config)

    def verify(
        self,
        records: Sequence[Any],
        chain_id: str | None = None,
        now_iso: str | None = None,
    ) -> ChainVerificationResult:
        """
        Verify ``records`` (oldest first) and emit a chain proof.

        Args:
            records:  Record documents (or ``RPXRecord`` instances) in chain order.
            chain_id: Optional chain identifier.  Defaults to
                      ``chain-<first record_id>``.
            now_iso:  Optional verification timestamp; defaults to current UTC time.

        Returns:
            A ChainVerificationResult.  An empty sequence yields status
            ``INCOMPLETE`` with no proof.
        """
        if not records:
            logger.info("Chain verification requested for an empty sequence")
            return ChainVerificationResult(
                valid=False, status="INCOMPLETE", errors=["Chain is empty"]
            )

        documents = [as_document(record) for record in records]
        evidence: list[TamperEvidence] = []
        tags: list[EvidenceTag] = []
        errors: list[str] = []

        def report(position: int, tag: EvidenceTag, description: str, error: str) -> None:
            logger.debug(
                "Tamper evidence [%s] at position %d: %s", tag.value, position, description
            )
            tags.append(tag)
            evidence.append(
                TamperEvidence(
                    record_id=record_id_of(documents[position]),
                    tampering_type=_WIRE_TYPE[tag],
                    description=description,
                    position=position,
                )
            )
            errors.append(error)

        # 1. Per-record pass.
        for index, result in enumerate(self._verify_each(documents)):
            if result.valid:
                continue
            joined = "; ".join(result.errors)
            tag = (
                EvidenceTag.HASH_MISMATCH
                if result.failure == "hash"
                else EvidenceTag.SCHEMA_INVALID
            )
            report(
                index,
                tag,
                f"Record {index} failed validation: {joined}",
                f"Record {index} ({record_id_of(documents[index])}): {joined}",
            )

        # 2. Genesis check.
        genesis_previous = field_of(documents[0], "previous_hash")
        if not is_genesis_hash(genesis_previous):
            report(
                0,
                EvidenceTag.GENESIS_BREAK,
                f"Genesis record has invalid previous_hash: {genesis_previous} "
                f"(expected: {GENESIS_HASH})",
                "Genesis record has invalid previous_hash",
            )

        # 3. Continuity and timestamp ordering.
        for index in range(1, len(documents)):
            current = documents[index]
            previous = documents[index - 1]
            current_id = record_id_of(current)

            current_link = field_of(current, "previous_hash")
            previous_hash = field_of(previous, "record_hash")
            if current_link != previous_hash:
                report(
                    index,
                    EvidenceTag.CONTINUITY_BREAK,
                    f"Record {index} previous_hash ({current_link}) does not match "
                    f"record {index - 1} hash ({previous_hash})",
                    f"Broken chain link at position {index}: {current_id}",
                )

            # A record whose timestamp does not parse already failed the per-record pass.
            current_time = parse_timestamp(field_of(current, "timestamp"))
            previous_time = parse_timestamp(field_of(previous, "timestamp"))
            if (
                current_time is not None
                and previous_time is not None
                and current_time < previous_time
            ):
                report(
                    index,
                    EvidenceTag.TIMESTAMP_VIOLATION,
                    f"Record {index} timestamp ({field_of(current, 'timestamp')}) is before "
                    f"record {index - 1} timestamp ({field_of(previous, 'timestamp')}) "
                    "- possible reordering",
                    f"Timestamp violation at position {index}: {current_id}",
                )

        status = derive_status(tags)

        proof = ChainProof(
            schema_uri=self._config.proof_schema_uri,
            proof_id=generate_id("proof"),
            chain_id=chain_id or f"chain-{record_id_of(documents[0])}",
            genesis_hash=str(field_of(documents[0], "record_hash") or ""),
            current_head=str(field_of(documents[-1], "record_hash") or ""),
            record_count=len(documents),
            verification_timestamp=now_iso or current_timestamp(),
            integrity_status=status,
            tamper_evidence=evidence,
            sample_records=[_sample(documents, p) for p in _sample_positions(len(documents))],
        )

        if self._config.validate_outputs:
            proof_errors = validate_chain_proof_document(proof.to_document())
            if proof_errors:
                raise SchemaValidationError("chain-proof", proof_errors)

        logger.info(
            "Verified chain %s: %d records, status %s, %d findings",
            proof.chain_id,
            len(documents),
            status,
            len(evidence),
        )
        return ChainVerificationResult(
            valid=status == "VALID",
            status=status,
            errors=errors,
            evidence_tags=tags,
            proof=proof,
        )

    def _verify_each(self, documents: list[Any]) -> list[RecordVerificationResult]:
        workers = self._config.max_workers
        if workers is None or workers <= 1 or len(documents) < 2:
            return [self._record_verifier.verify(document) for document in documents]
        with ThreadPoolExecutor(max_workers=workers) as executor:
            return list(executor.map(self._record_verifier.verify, documents))


def verify_chain(
    records: Sequence[Any],
    chain_id: str | None = None,
    validator: SchemaValidator | None = None,
) -> ChainVerificationResult:
    """Verify ``records`` with a default-configured ``ChainVerifier``."""
    return ChainVerifier(validator=validator).verify(records, chain_id=chain_id)
