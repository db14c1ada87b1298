# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2026 MuVeraAI Corporation

"""
Golden test vectors that lock the verifier's canonical behaviour.

Each vector is a list of record documents (what a JSONL log decodes to):

- ``valid-chain-10``   — clean, genesis-linked chain of ten records.
- ``tampered-record``  — record 5's outcome flipped, hash left unchanged.
- ``missing-link``     — record 5 deleted.
- ``reordered``        — records 6 and 7 swapped.
- ``bad-timestamp``    — record 6 re-hashed with a timestamp before record 5.
"""

from __future__ import annotations

import copy
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Callable

from rpx_verify.builder import ChainBuilder, build_record, format_timestamp, hash_context
from rpx_verify.storage.file import write_jsonl
from rpx_verify.types import IntegrityStatus

RecordDocuments = list[dict[str, Any]]

BASE_TIME = datetime(2025, 12, 1, tzinfo=timezone.utc)

_DECISION_TYPES = ("care_access", "vehicle_safety", "financial_transaction")
_OUTCOMES = ("ALLOW", "DENY", "ESCALATE")


def generate_valid_chain(count: int = 10, vector_name: str = "valid-chain-10") -> RecordDocuments:
    """Build ``count`` genesis-linked records, one minute apart."""
    builder = ChainBuilder()
    for index in range(count):
        builder.append(
            record_id=f"rpx_rec_{index:03d}",
            timestamp=format_timestamp(BASE_TIME + timedelta(minutes=index)),
            decision_type=_DECISION_TYPES[index % 3],
            agent_id=f"dealgo-v1.{index % 3}",
            outcome=_OUTCOMES[index % 3],
            context_hash=hash_context(f"context_{index}"),
            policy_version="policy-v1.0.0",
            action_type=f"action_type_{index % 3}",
            reason=f"Decision reason for record {index}",
            metadata={"test_vector": vector_name, "record_index": index},
        )
    return [record.to_document() for record in builder.records]


def tampered_record(chain: RecordDocuments, position: int = 5) -> RecordDocuments:
    """Flip the outcome of one record without re-hashing it."""
    tampered = copy.deepcopy(chain)
    record = tampered[position]
    record["outcome"] = "DENY" if record["outcome"] == "ALLOW" else "ALLOW"
    return tampered


def missing_link(chain: RecordDocuments, position: int = 5) -> RecordDocuments:
    """Delete one record."""
    return [copy.deepcopy(record) for index, record in enumerate(chain) if index != position]


def reordered(chain: RecordDocuments, position: int = 6) -> RecordDocuments:
    """Swap the record at ``position`` with its successor."""
    swapped = copy.deepcopy(chain)
    swapped[position], swapped[position + 1] = swapped[position + 1], swapped[position]
    return swapped


def bad_timestamp(chain: RecordDocuments, position: int = 6) -> RecordDocuments:
    """
    Re-hash one record with a timestamp a minute before its predecessor.

    The record's own hash stays valid, so the anomaly surfaces as a timestamp
    violation plus a broken link at the following record.
    """
    altered = copy.deepcopy(chain)
    original = altered[position]
    earlier = datetime.fromisoformat(altered[position - 1]["timestamp"].replace("Z", "+00:00"))
    rebuilt = build_record(
        record_id=original["record_id"],
        timestamp=format_timestamp(earlier - timedelta(minutes=1)),
        previous_hash=original["previous_hash"],
        decision_type=original["decision_type"],
        agent_id=original["agent_id"],
        outcome=original["outcome"],
        context_hash=original["context_hash"],
        policy_version=original["policy_version"],
        action_type=original.get("action_type"),
        reason=original.get("reason"),
        metadata=original.get("metadata"),
    )
    altered[position] = rebuilt.to_document()
    return altered


VECTORS: dict[str, tuple[Callable[[RecordDocuments], RecordDocuments], IntegrityStatus]] = {
    "valid-chain-10": (lambda chain: copy.deepcopy(chain), "VALID"),
    "tampered-record": (tampered_record, "INVALID"),
    "missing-link": (missing_link, "INCOMPLETE"),
    "reordered": (reordered, "INCOMPLETE"),
    "bad-timestamp": (bad_timestamp, "INCOMPLETE"),
}


def generate_vectors() -> dict[str, RecordDocuments]:
    """Return every golden vector keyed by name."""
    chain = generate_valid_chain()
    return {name: derive(chain) for name, (derive, _status) in VECTORS.items()}


def expected_status(name: str) -> IntegrityStatus:
    return VECTORS[name][1]


async def write_vectors(directory: str | Path) -> list[Path]:
    """Write each vector to ``<directory>/<name>.jsonl`` and return the paths."""
    target = Path(directory)
    written: list[Path] = []
    for name, records in generate_vectors().items():
        path = target / f"{name}.jsonl"
        await write_jsonl(path, records)
        written.append(path)
    return written
