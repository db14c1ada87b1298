# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2026 MuVeraAI Corporation

"""
Verification report generation for RPX chains.

Wraps chain verification with an assessment of the constitutional guarantees
that can be established from a static record set, and derives the resulting
compliance level.

Only L1 is ever assigned here.  Two guarantees — fail-closed behaviour and
human escalation — describe the live agent, not its log, and are always
reported as False; L2 and L3 therefore require runtime verification.
"""

from __future__ import annotations

import logging
from typing import Any, Sequence

from rpx_verify.chain import ChainVerifier, current_timestamp, generate_id
from rpx_verify.config import VerifierConfig
from rpx_verify.errors import EmptyChainError, SchemaValidationError
from rpx_verify.record import as_document, field_of
from rpx_verify.schema import SchemaValidator, validate_report_document
from rpx_verify.types import (
    ChainMetadata,
    ComplianceDetails,
    ComplianceLevel,
    ConstitutionalGuarantees,
    IntegrityStatus,
    TimeRange,
    VerificationReport,
    VerificationScope,
)

logger = logging.getLogger("rpx_verify.report")

REQUIRED_PRESENCE_FIELDS: tuple[str, ...] = ("record_id", "timestamp", "decision_type", "outcome")

L1_NOTE = (
    "L1 (Basic): RPX records present with context capture. Cannot verify "
    "fail-closed or escalation from static chain; L2 and L3 require runtime verification."
)


# ---------------------------------------------------------------------------
# Guarantee and compliance derivation
# ---------------------------------------------------------------------------


def _has_context_hash(record: Any) -> bool:
    context_hash = field_of(record, "context_hash")
    return isinstance(context_hash, str) and len(context_hash) == 64


def assess_guarantees(
    records: Sequence[Any], status: IntegrityStatus
) -> ConstitutionalGuarantees:
    """
    Assess the guarantees derivable from ``records`` alone.

    ``hash_chain_intact`` mirrors the chain status; the two runtime guarantees
    are always False.
    """
    return ConstitutionalGuarantees(
        rpx_records_present=all(
            all(field_of(record, name) for name in REQUIRED_PRESENCE_FIELDS) for record in records
        ),
        fail_closed_verified=False,
        human_escalation_available=False,
        hash_chain_intact=status == "VALID",
        context_captured=all(_has_context_hash(record) for record in records),
    )


def derive_compliance(
    status: IntegrityStatus, guarantees: ConstitutionalGuarantees
) -> tuple[ComplianceLevel | None, str]:
    """Return ``(compliance_level, notes)`` for a verified chain."""
    if status != "VALID":
        return None, f"Chain integrity failed: {status}. Cannot assess compliance level."

    gaps: list[str] = []
    if not guarantees.rpx_records_present:
        gaps.append("one or more records lack " + ", ".join(REQUIRED_PRESENCE_FIELDS))
    if not guarantees.context_captured:
        gaps.append("one or more records lack a 64-character context_hash")

    if gaps:
        return None, f"L1 criteria not met: {'; '.join(gaps)}."
    return "L1", L1_NOTE


def _time_range(records: Sequence[Any]) -> TimeRange:
    # ISO 8601 in the fixed-width record format sorts lexicographically.
    timestamps = sorted(
        str(ts) for ts in (field_of(record, "timestamp") for record in records) if ts is not None
    )
    if not timestamps:
        return TimeRange(earliest="", latest="")
    return TimeRange(earliest=timestamps[0], latest=timestamps[-1])


def _distinct(records: Sequence[Any], name: str) -> list[str]:
    """Distinct values of ``name`` in first-seen order."""
    values = (field_of(record, name) for record in records)
    return list(dict.fromkeys(str(value) for value in values if value is not None))


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


class ReportGenerator:
    """
    Produces a ``VerificationReport`` for an ordered record sequence.

    Parameters
    ----------
    validator:
        Structural validation capability for records.
    config:
        Verifier configuration shared with the underlying chain verifier.
    """

    def __init__(
        self,
        validator: SchemaValidator | None = None,
        config: VerifierConfig | None = None,
    ) -> None:
        self._config = config or VerifierConfig()
        self._chain_verifier = ChainVerifier(validator=validator, config=self._config)

    def generate(
        self,
        records: Sequence[Any],
        chain_id: str | None = None,
        now_iso: str | None = None,
    ) -> VerificationReport:
        """
        Verify ``records`` and assemble the full verification report.

        Raises:
            EmptyChainError: If ``records`` is empty (no proof can be produced).
            SchemaValidationError: If ``validate_outputs`` is enabled and the
                report does not conform to its schema.
        """
        now_iso = now_iso or current_timestamp()
        result = self._chain_verifier.verify(records, chain_id=chain_id, now_iso=now_iso)
        if result.proof is None:
            raise EmptyChainError(chain_id)
        proof = result.proof

        documents = [as_document(record) for record in records]
        guarantees = assess_guarantees(documents, result.status)
        level, notes = derive_compliance(result.status, guarantees)

        report = VerificationReport(
            schema_uri=self._config.report_schema_uri,
            report_id=generate_id("report"),
            timestamp=now_iso,
            chain_id=chain_id or proof.chain_id,
            verification_scope=VerificationScope(
                records_verified=len(documents),
                time_range=_time_range(documents),
            ),
            integrity_status=result.status,
            compliance_details=ComplianceDetails(
                constitutional_guarantees=guarantees,
                compliance_level=level,
                notes=notes,
            ),
            tamper_evidence=proof.tamper_evidence,
            chain_metadata=ChainMetadata(
                genesis_hash=proof.genesis_hash,
                current_head=proof.current_head,
                decision_types=_distinct(documents, "decision_type"),
                agent_count=len(_distinct(documents, "agent_id")),
            ),
        )

        if self._config.validate_outputs:
            report_errors = validate_report_document(report.to_document())
            if report_errors:
                raise SchemaValidationError("verification-report", report_errors)

        logger.info(
            "Generated report %s for chain %s: status %s, compliance level %s",
            report.report_id,
            report.chain_id,
            report.integrity_status,
            level or "none",
        )
        return report


def generate_report(
    records: Sequence[Any],
    chain_id: str | None = None,
    validator: SchemaValidator | None = None,
) -> VerificationReport:
    """Generate a report with a default-configured ``ReportGenerator``."""
    return ReportGenerator(validator=validator).generate(records, chain_id=chain_id)
