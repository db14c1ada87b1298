# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2026 MuVeraAI Corporation
"""
Tests for chain verification, tamper classification and status derivation.
"""

from __future__ import annotations

import copy
import json
from typing import Any

import pytest

from rpx_verify.builder import ChainBuilder, hash_context
from rpx_verify.chain import ChainVerifier, derive_status, verify_chain
from rpx_verify.config import VerifierConfig
from rpx_verify.hashing import GENESIS_HASH, compute_record_hash
from rpx_verify.types import ChainVerificationResult, EvidenceTag
from rpx_verify.vectors import (
    bad_timestamp,
    generate_vectors,
    missing_link,
    reordered,
    tampered_record,
)


def _findings(result: ChainVerificationResult) -> list[tuple[str, int]]:
    assert result.proof is not None
    return [(item.tampering_type, item.position) for item in result.proof.tamper_evidence]


# ---------------------------------------------------------------------------
# TestStatusDerivation
# ---------------------------------------------------------------------------


class TestStatusDerivation:
    @pytest.mark.parametrize(
        ("tags", "expected"),
        [
            (set(), "VALID"),
            ({EvidenceTag.HASH_MISMATCH}, "INVALID"),
            ({EvidenceTag.SCHEMA_INVALID}, "INVALID"),
            ({EvidenceTag.GENESIS_BREAK}, "INVALID"),
            ({EvidenceTag.TIMESTAMP_VIOLATION}, "INVALID"),
            ({EvidenceTag.HASH_MISMATCH, EvidenceTag.TIMESTAMP_VIOLATION}, "INVALID"),
            ({EvidenceTag.CONTINUITY_BREAK}, "INCOMPLETE"),
            ({EvidenceTag.CONTINUITY_BREAK, EvidenceTag.HASH_MISMATCH}, "INCOMPLETE"),
            ({EvidenceTag.GENESIS_BREAK, EvidenceTag.CONTINUITY_BREAK}, "INCOMPLETE"),
        ],
    )
    def test_status_table(self, tags: set[EvidenceTag], expected: str) -> None:
        assert derive_status(tags) == expected

    def test_genesis_break_is_tagged_at_detection(
        self, valid_chain: list[dict[str, Any]]
    ) -> None:
        result = verify_chain(valid_chain[1:])
        assert result.evidence_tags == [EvidenceTag.GENESIS_BREAK]
        assert _findings(result) == [("broken-link", 0)]

    def test_continuity_break_is_tagged_at_detection(
        self, valid_chain: list[dict[str, Any]]
    ) -> None:
        result = verify_chain(missing_link(valid_chain))
        assert result.evidence_tags == [EvidenceTag.CONTINUITY_BREAK]

    def test_genesis_and_continuity_breaks_get_distinct_tags(
        self, valid_chain: list[dict[str, Any]]
    ) -> None:
        result = verify_chain(missing_link(valid_chain[1:], position=3))
        assert _findings(result) == [("broken-link", 0), ("broken-link", 3)]
        assert result.evidence_tags == [EvidenceTag.GENESIS_BREAK, EvidenceTag.CONTINUITY_BREAK]
        assert result.status == "INCOMPLETE"

    def test_tags_line_up_with_evidence(self) -> None:
        wire_types = {
            EvidenceTag.SCHEMA_INVALID: "schema-invalid",
            EvidenceTag.HASH_MISMATCH: "hash-mismatch",
            EvidenceTag.GENESIS_BREAK: "broken-link",
            EvidenceTag.CONTINUITY_BREAK: "broken-link",
            EvidenceTag.TIMESTAMP_VIOLATION: "timestamp-violation",
        }
        for name, records in generate_vectors().items():
            result = verify_chain(records)
            assert result.proof is not None
            assert len(result.evidence_tags) == len(result.proof.tamper_evidence), name
            for tag, item in zip(result.evidence_tags, result.proof.tamper_evidence):
                assert wire_types[tag] == item.tampering_type, name
            assert derive_status(result.evidence_tags) == result.status, name


# ---------------------------------------------------------------------------
# TestValidChain
# ---------------------------------------------------------------------------


class TestValidChain:
    def test_golden_chain_is_valid(self, valid_chain: list[dict[str, Any]]) -> None:
        result = verify_chain(valid_chain)
        assert result.valid is True
        assert result.status == "VALID"
        assert result.errors == []
        assert result.proof is not None
        assert result.proof.tamper_evidence == []

    def test_proof_summarises_the_sequence(self, valid_chain: list[dict[str, Any]]) -> None:
        result = ChainVerifier().verify(valid_chain, now_iso="2026-01-01T00:00:00Z")
        proof = result.proof
        assert proof is not None
        assert proof.record_count == 10
        assert proof.genesis_hash == valid_chain[0]["record_hash"]
        assert proof.current_head == valid_chain[-1]["record_hash"]
        assert proof.verification_timestamp == "2026-01-01T00:00:00Z"
        assert proof.integrity_status == "VALID"
        assert proof.chain_id == "chain-rpx_rec_000"
        assert proof.proof_id.startswith("proof-")

    def test_sample_records_are_first_last_middle(
        self, valid_chain: list[dict[str, Any]]
    ) -> None:
        proof = verify_chain(valid_chain).proof
        assert proof is not None
        assert [sample.position for sample in proof.sample_records] == [0, 9, 5]
        assert [sample.record_id for sample in proof.sample_records] == [
            "rpx_rec_000",
            "rpx_rec_009",
            "rpx_rec_005",
        ]
        assert proof.sample_records[2].record_hash == valid_chain[5]["record_hash"]

    @pytest.mark.parametrize(("count", "positions"), [(1, [0]), (2, [0, 1]), (3, [0, 2, 1])])
    def test_sample_positions_for_short_chains(
        self, valid_chain: list[dict[str, Any]], count: int, positions: list[int]
    ) -> None:
        proof = verify_chain(valid_chain[:count]).proof
        assert proof is not None
        assert [sample.position for sample in proof.sample_records] == positions

    def test_single_record_chain_is_valid(self, valid_chain: list[dict[str, Any]]) -> None:
        result = verify_chain(valid_chain[:1])
        assert result.status == "VALID"
        assert result.proof is not None
        assert result.proof.genesis_hash == result.proof.current_head

    def test_explicit_chain_id_is_used(self, valid_chain: list[dict[str, Any]]) -> None:
        proof = verify_chain(valid_chain, chain_id="clinic-42").proof
        assert proof is not None
        assert proof.chain_id == "clinic-42"

    def test_model_instances_are_accepted(self) -> None:
        builder = ChainBuilder()
        for index in range(4):
            builder.append(
                decision_type="care_access",
                agent_id="agent-001",
                outcome="ALLOW",
                context_hash=hash_context({"index": index}),
                policy_version="policy-v1.0.0",
                action_type="read",
                reason="scheduled",
            )
        assert verify_chain(builder.records).status == "VALID"

    def test_metadata_changes_keep_chain_valid(self, valid_chain: list[dict[str, Any]]) -> None:
        valid_chain[4]["metadata"] = {"rewritten": True}
        assert verify_chain(valid_chain).status == "VALID"

    def test_proof_document_uses_schema_key(self, valid_chain: list[dict[str, Any]]) -> None:
        proof = verify_chain(valid_chain).proof
        assert proof is not None
        document = proof.to_document()
        assert document["$schema"] == "../../schemas/chain-proof.schema.json"
        assert "schema_uri" not in document

    def test_output_validation_passes_for_valid_chain(
        self, valid_chain: list[dict[str, Any]]
    ) -> None:
        verifier = ChainVerifier(config=VerifierConfig(validate_outputs=True))
        assert verifier.verify(valid_chain).status == "VALID"


# ---------------------------------------------------------------------------
# TestEmptyChain
# ---------------------------------------------------------------------------


class TestEmptyChain:
    def test_empty_sequence_is_incomplete_without_proof(self) -> None:
        result = verify_chain([])
        assert result.valid is False
        assert result.status == "INCOMPLETE"
        assert result.errors == ["Chain is empty"]
        assert result.proof is None


# ---------------------------------------------------------------------------
# TestTamperDetection
# ---------------------------------------------------------------------------


class TestTamperDetection:
    def test_tampered_record_is_invalid(self, valid_chain: list[dict[str, Any]]) -> None:
        result = verify_chain(tampered_record(valid_chain))
        assert result.status == "INVALID"
        assert result.valid is False
        assert _findings(result) == [("hash-mismatch", 5)]
        assert result.proof is not None
        assert result.proof.tamper_evidence[0].record_id == "rpx_rec_005"
        assert result.errors == [
            "Record 5 (rpx_rec_005): Hash mismatch for record rpx_rec_005: "
            "stored hash does not match computed hash"
        ]

    @pytest.mark.parametrize("position", [0, 4, 9])
    @pytest.mark.parametrize(
        ("field_name", "value"),
        [
            ("agent_id", "impostor-agent"),
            ("policy_version", "policy-v9.9.9"),
            ("reason", "rewritten after the fact"),
            ("action_type", "different_action"),
            ("context_hash", "0" * 64),
        ],
    )
    def test_any_hashed_field_change_is_detected_at_its_position(
        self,
        valid_chain: list[dict[str, Any]],
        position: int,
        field_name: str,
        value: str,
    ) -> None:
        valid_chain[position][field_name] = value
        result = verify_chain(valid_chain)
        assert result.status == "INVALID"
        assert _findings(result) == [("hash-mismatch", position)]

    def test_missing_link_is_incomplete(self, valid_chain: list[dict[str, Any]]) -> None:
        result = verify_chain(missing_link(valid_chain))
        assert result.status == "INCOMPLETE"
        assert _findings(result) == [("broken-link", 5)]
        assert result.proof is not None
        assert result.proof.tamper_evidence[0].record_id == "rpx_rec_006"
        assert result.proof.record_count == 9
        assert result.errors == ["Broken chain link at position 5: rpx_rec_006"]

    @pytest.mark.parametrize("position", [1, 3, 8])
    def test_any_interior_deletion_breaks_continuity(
        self, valid_chain: list[dict[str, Any]], position: int
    ) -> None:
        result = verify_chain(missing_link(valid_chain, position))
        assert result.status == "INCOMPLETE"
        assert ("broken-link", position) in _findings(result)

    def test_deleting_the_first_record_breaks_genesis(
        self, valid_chain: list[dict[str, Any]]
    ) -> None:
        result = verify_chain(valid_chain[1:])
        assert result.status == "INVALID"
        assert _findings(result) == [("broken-link", 0)]
        assert result.proof is not None
        assert "Genesis" in result.proof.tamper_evidence[0].description
        assert result.errors == ["Genesis record has invalid previous_hash"]

    def test_reordered_records_are_incomplete(self, valid_chain: list[dict[str, Any]]) -> None:
        result = verify_chain(reordered(valid_chain))
        assert result.status == "INCOMPLETE"
        assert _findings(result) == [
            ("broken-link", 6),
            ("broken-link", 7),
            ("timestamp-violation", 7),
            ("broken-link", 8),
        ]

    @pytest.mark.parametrize("position", [1, 4, 8])
    def test_any_adjacent_swap_breaks_continuity(
        self, valid_chain: list[dict[str, Any]], position: int
    ) -> None:
        result = verify_chain(reordered(valid_chain, position))
        assert result.status == "INCOMPLETE"
        assert ("broken-link", position) in _findings(result)

    def test_bad_timestamp_is_incomplete(self, valid_chain: list[dict[str, Any]]) -> None:
        result = verify_chain(bad_timestamp(valid_chain))
        assert result.status == "INCOMPLETE"
        assert _findings(result) == [("timestamp-violation", 6), ("broken-link", 7)]
        assert result.errors == [
            "Timestamp violation at position 6: rpx_rec_006",
            "Broken chain link at position 7: rpx_rec_007",
        ]

    def test_non_genesis_start_is_invalid(self) -> None:
        builder = ChainBuilder(initial_hash="a" * 64)
        for index in range(3):
            builder.append(
                record_id=f"rpx_cont_{index:03d}",
                timestamp=f"2025-12-01T00:0{index}:00.000000Z",
                decision_type="financial_transaction",
                agent_id="agent-007",
                outcome="DENY",
                context_hash=hash_context(f"ctx-{index}"),
                policy_version="policy-v1.0.0",
                action_type="transfer",
                reason="limit exceeded",
            )
        result = verify_chain(builder.records)
        assert result.status == "INVALID"
        assert _findings(result) == [("broken-link", 0)]
        assert result.proof is not None
        assert GENESIS_HASH in result.proof.tamper_evidence[0].description

    def test_schema_invalid_record_is_classified_separately(
        self, valid_chain: list[dict[str, Any]]
    ) -> None:
        valid_chain[3]["outcome"] = "MAYBE"
        result = verify_chain(valid_chain)
        assert result.status == "INVALID"
        assert _findings(result) == [("schema-invalid", 3)]
        assert result.errors[0].startswith("Record 3 (rpx_rec_003): /outcome ")

    def test_schema_invalid_link_field_also_breaks_continuity(
        self, valid_chain: list[dict[str, Any]]
    ) -> None:
        del valid_chain[4]["previous_hash"]
        result = verify_chain(valid_chain)
        assert result.status == "INCOMPLETE"
        assert _findings(result) == [("schema-invalid", 4), ("broken-link", 4)]

    def test_malformed_record_is_reported_not_raised(
        self, valid_chain: list[dict[str, Any]]
    ) -> None:
        valid_chain[2] = {"unexpected": "shape"}
        result = verify_chain(valid_chain)
        assert result.status == "INCOMPLETE"
        findings = _findings(result)
        assert ("schema-invalid", 2) in findings
        assert ("broken-link", 2) in findings
        assert ("broken-link", 3) in findings
        assert result.proof is not None
        assert result.proof.tamper_evidence[0].record_id == "<unknown>"

    def test_lone_surrogate_in_tampered_field_is_a_hash_mismatch(
        self, valid_chain: list[dict[str, Any]]
    ) -> None:
        valid_chain[3]["reason"] = json.loads('"\\ud800"')
        result = verify_chain(valid_chain)
        assert result.status == "INVALID"
        assert _findings(result) == [("hash-mismatch", 3)]

    def test_record_hashed_with_lone_surrogate_verifies(
        self, valid_chain: list[dict[str, Any]]
    ) -> None:
        chain = valid_chain[:3]
        chain[2]["reason"] = json.loads('"\\udc00 truncated pair"')
        chain[2]["record_hash"] = compute_record_hash(chain[2])
        assert verify_chain(chain).status == "VALID"

    def _with_calendar_invalid_timestamp(
        self, valid_chain: list[dict[str, Any]]
    ) -> list[dict[str, Any]]:
        chain = valid_chain[:3]
        chain[2]["timestamp"] = "2025-02-30T00:00:00.000000Z"
        chain[2]["record_hash"] = compute_record_hash(chain[2])
        return chain

    def test_calendar_invalid_timestamp_is_schema_invalid(
        self, valid_chain: list[dict[str, Any]]
    ) -> None:
        result = verify_chain(self._with_calendar_invalid_timestamp(valid_chain))
        assert result.status == "INVALID"
        assert _findings(result) == [("schema-invalid", 2)]
        assert "/timestamp" in result.errors[0]

    def test_calendar_invalid_timestamp_is_caught_with_any_validator(
        self, valid_chain: list[dict[str, Any]], accept_all: Any
    ) -> None:
        chain = self._with_calendar_invalid_timestamp(valid_chain)
        result = verify_chain(chain, validator=accept_all)
        assert result.status == "INVALID"
        assert _findings(result) == [("schema-invalid", 2)]


# ---------------------------------------------------------------------------
# TestCollectEverything
# ---------------------------------------------------------------------------


class TestCollectEverything:
    def test_all_anomalies_are_reported(self, valid_chain: list[dict[str, Any]]) -> None:
        chain = tampered_record(valid_chain, position=2)
        del chain[7]
        result = verify_chain(chain)
        assert result.status == "INCOMPLETE"
        assert _findings(result) == [("hash-mismatch", 2), ("broken-link", 7)]
        assert len(result.errors) == 2

    def test_input_sequence_is_not_modified(self, valid_chain: list[dict[str, Any]]) -> None:
        chain = reordered(tampered_record(valid_chain))
        snapshot = copy.deepcopy(chain)
        verify_chain(chain)
        assert chain == snapshot

    def test_verification_is_deterministic(self, valid_chain: list[dict[str, Any]]) -> None:
        chain = bad_timestamp(tampered_record(valid_chain, position=2))
        first = verify_chain(chain)
        second = verify_chain(chain)
        assert first.status == second.status
        assert first.errors == second.errors
        assert _findings(first) == _findings(second)

    def test_parallel_pass_matches_sequential(self, valid_chain: list[dict[str, Any]]) -> None:
        chain = reordered(tampered_record(valid_chain, position=2), position=6)
        chain[4]["outcome"] = "MAYBE"
        sequential = ChainVerifier().verify(chain)
        parallel = ChainVerifier(config=VerifierConfig(max_workers=4)).verify(chain)
        assert parallel.status == sequential.status
        assert parallel.errors == sequential.errors
        assert _findings(parallel) == _findings(sequential)


# ---------------------------------------------------------------------------
# TestInjectedValidator
# ---------------------------------------------------------------------------


class TestInjectedValidator:
    def test_fake_validator_replaces_bundled_schema(self, accept_all: Any) -> None:
        builder = ChainBuilder()
        for index in range(3):
            builder.append(
                record_id=f"r{index}",
                decision_type="care_access",
                agent_id="agent-001",
                outcome="ALLOW",
                context_hash=hash_context(f"ctx-{index}"),
                policy_version="v1",
            )
        assert verify_chain(builder.records).status == "INVALID"
        assert verify_chain(builder.records, validator=accept_all).status == "VALID"
        assert accept_all.calls == 3

    def test_rejecting_validator_marks_every_record(
        self, valid_chain: list[dict[str, Any]], rejecting_validator: Any
    ) -> None:
        result = ChainVerifier(validator=rejecting_validator).verify(valid_chain[:3])
        assert result.status == "INVALID"
        assert _findings(result) == [
            ("schema-invalid", 0),
            ("schema-invalid", 1),
            ("schema-invalid", 2),
        ]
