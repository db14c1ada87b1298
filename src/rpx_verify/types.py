# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2026 MuVeraAI Corporation

"""
Shared type definitions for the rpx-verify package.

All result models are frozen Pydantic v2 models — a proof or report cannot be
mutated after construction, which mirrors the read-only nature of
verification.  Records themselves reach the engine as plain JSON documents so
that structurally invalid input can still be classified rather than rejected.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Literal, Mapping

from pydantic import BaseModel, ConfigDict, Field

# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------

Outcome = Literal["ALLOW", "DENY", "ESCALATE"]

OUTCOME_VALUES: frozenset[str] = frozenset({"ALLOW", "DENY", "ESCALATE"})

DecisionType = Literal["care_access", "vehicle_safety", "financial_transaction"]

DECISION_TYPE_VALUES: frozenset[str] = frozenset(
    {"care_access", "vehicle_safety", "financial_transaction"}
)

TamperingType = Literal["hash-mismatch", "broken-link", "timestamp-violation", "schema-invalid"]

IntegrityStatus = Literal["VALID", "INVALID", "INCOMPLETE"]

ComplianceLevel = Literal["L1", "L2", "L3"]

RecordFailure = Literal["schema", "hash"]


class EvidenceTag(Enum):
    """
    Finding kinds that drive status derivation.

    Finer than ``TamperingType``: a genesis break and a continuity break are
    both ``broken-link`` on the wire but carry different tags.
    """

    SCHEMA_INVALID = "schema-invalid"
    HASH_MISMATCH = "hash-mismatch"
    GENESIS_BREAK = "genesis-break"
    CONTINUITY_BREAK = "continuity-break"
    TIMESTAMP_VIOLATION = "timestamp-violation"


# A record as handed to the engine: one decoded JSON object.
RecordDocument = Mapping[str, Any]


# ---------------------------------------------------------------------------
# Record
# ---------------------------------------------------------------------------


class RPXRecord(BaseModel):
    """
    An immutable, hash-linked record of a single agent decision.

    ``record_hash`` is the SHA-256 digest of the canonical JSON form of every
    field except ``record_hash`` and ``metadata``.  Optional fields that are
    absent are omitted from the canonical form rather than hashed as null.
    """

    model_config = ConfigDict(frozen=True)

    record_id: str
    timestamp: str
    previous_hash: str
    decision_type: DecisionType
    agent_id: str
    outcome: Outcome
    context_hash: str
    policy_version: str
    action_type: str | None = None
    reason: str | None = None
    record_hash: str
    metadata: dict[str, Any] | None = None

    def to_document(self) -> dict[str, Any]:
        """Return the JSON document form, omitting absent optional fields."""
        return self.model_dump(mode="json", exclude_none=True)


# ---------------------------------------------------------------------------
# Verification results
# ---------------------------------------------------------------------------


class RecordVerificationResult(BaseModel, frozen=True):
    """
    Outcome of verifying one record in isolation.

    ``failure`` names the check that rejected the record: ``"schema"`` when
    structural validation failed (the hash was never inspected) or ``"hash"``
    when the stored hash disagrees with the recomputed one.
    """

    valid: bool
    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
    failure: RecordFailure | None = None


class TamperEvidence(BaseModel, frozen=True):
    """One detected integrity violation."""

    record_id: str = Field(..., description="ID of the record at which the violation was found.")
    tampering_type: TamperingType
    description: str = Field(..., description="Human-readable description of the violation.")
    position: int = Field(
        ..., ge=0, description="Zero-based index in the supplied record sequence."
    )


class SampleRecord(BaseModel, frozen=True):
    """A spot-check reference to one record of the verified sequence."""

    position: int = Field(..., ge=0)
    record_id: str
    timestamp: str
    record_hash: str


class ChainProof(BaseModel):
    """
    Immutable summary of a chain verification.

    ``genesis_hash`` and ``current_head`` report the hashes present at the
    first and last positions of the supplied sequence; whether those records
    are trustworthy is expressed by ``integrity_status`` and
    ``tamper_evidence``.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    schema_uri: str = Field(..., alias="$schema")
    proof_id: str
    chain_id: str
    genesis_hash: str
    current_head: str
    record_count: int = Field(..., ge=1)
    verification_timestamp: str
    integrity_status: IntegrityStatus
    tamper_evidence: list[TamperEvidence] = Field(default_factory=list)
    sample_records: list[SampleRecord] = Field(default_factory=list)

    def to_document(self) -> dict[str, Any]:
        """Return the JSON document form with canonical field names."""
        return self.model_dump(mode="json", by_alias=True)


class ChainVerificationResult(BaseModel, frozen=True):
    """
    Returned by ChainVerifier.verify.

    ``proof`` is ``None`` only for an empty record sequence.
    ``evidence_tags[i]`` is the tag assigned when ``proof.tamper_evidence[i]``
    was detected.
    """

    valid: bool
    status: IntegrityStatus
    errors: list[str] = Field(default_factory=list)
    evidence_tags: list[EvidenceTag] = Field(default_factory=list)
    proof: ChainProof | None = None


# ---------------------------------------------------------------------------
# Verification report
# ---------------------------------------------------------------------------


class TimeRange(BaseModel, frozen=True):
    earliest: str
    latest: str


class VerificationScope(BaseModel, frozen=True):
    records_verified: int = Field(..., ge=1)
    time_range: TimeRange


class ConstitutionalGuarantees(BaseModel, frozen=True):
    """
    Guarantees assessable from a static record set.

    ``fail_closed_verified`` and ``human_escalation_available`` describe
    runtime behaviour of the producing agent and are always False here.
    """

    rpx_records_present: bool
    fail_closed_verified: bool = False
    human_escalation_available: bool = False
    hash_chain_intact: bool
    context_captured: bool


class ComplianceDetails(BaseModel, frozen=True):
    constitutional_guarantees: ConstitutionalGuarantees
    compliance_level: ComplianceLevel | None = None
    notes: str = ""


class ChainMetadata(BaseModel, frozen=True):
    genesis_hash: str
    current_head: str
    decision_types: list[str] = Field(default_factory=list)
    agent_count: int = Field(..., ge=0)


class VerificationReport(BaseModel):
    """
    Complete audit-evidence report for one chain.

    Wraps the chain verification outcome with the constitutional guarantees
    derivable from the static records and the resulting compliance level.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    schema_uri: str = Field(..., alias="$schema")
    report_id: str
    timestamp: str
    chain_id: str
    verification_scope: VerificationScope
    integrity_status: IntegrityStatus
    compliance_details: ComplianceDetails
    tamper_evidence: list[TamperEvidence] = Field(default_factory=list)
    chain_metadata: ChainMetadata

    def to_document(self) -> dict[str, Any]:
        """Return the JSON document form with canonical field names."""
        return self.model_dump(mode="json", by_alias=True)
