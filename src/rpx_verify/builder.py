# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2026 MuVeraAI Corporation

"""
Helpers for producing well-formed, genesis-linked RPX records.

The verifier never builds or repairs chains for its inputs; these helpers
exist for fixtures, golden vectors, and producers that want to emit records
the verifier will accept.  Construction mirrors the verification rules
exactly:

1. Assemble every field except ``record_hash`` (absent optional fields are
   omitted, not nulled).
2. Hash the canonical form and attach the digest.
"""

from __future__ import annotations

import hashlib
import json
import uuid
from datetime import datetime, timezone
from typing import Any, Mapping

from rpx_verify.hashing import GENESIS_HASH, compute_record_hash
from rpx_verify.types import DecisionType, Outcome, RPXRecord


def _generate_record_id() -> str:
    return f"rpx_{uuid.uuid4().hex}"


def format_timestamp(moment: datetime) -> str:
    """Render ``moment`` in the fixed-width record format (UTC, microseconds, ``Z``)."""
    return moment.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%fZ")


def hash_context(context: str | Mapping[str, Any]) -> str:
    """
    Return a SHA-256 ``context_hash`` for a decision context.

    Mappings are hashed over their compact, key-sorted JSON form.
    """
    if not isinstance(context, str):
        context = json.dumps(context, sort_keys=True, ensure_ascii=False, separators=(",", ":"))
    return hashlib.sha256(context.encode("utf-8")).hexdigest()


def build_record(
    *,
    record_id: str,
    timestamp: str,
    previous_hash: str,
    decision_type: DecisionType,
    agent_id: str,
    outcome: Outcome,
    context_hash: str,
    policy_version: str,
    action_type: str | None = None,
    reason: str | None = None,
    metadata: dict[str, Any] | None = None,
) -> RPXRecord:
    """Assemble a record and attach its computed ``record_hash``."""
    pending: dict[str, Any] = {
        "record_id": record_id,
        "timestamp": timestamp,
        "previous_hash": previous_hash,
        "decision_type": decision_type,
        "agent_id": agent_id,
        "outcome": outcome,
        "context_hash": context_hash,
        "policy_version": policy_version,
    }
    if action_type is not None:
        pending["action_type"] = action_type
    if reason is not None:
        pending["reason"] = reason

    record_hash = compute_record_hash(pending)
    return RPXRecord.model_validate({**pending, "record_hash": record_hash, "metadata": metadata})


class ChainBuilder:
    """
    Appends records to a genesis-linked chain.

    Thread safety: this class is not thread-safe.  Callers must serialise
    calls to ``append``.

    Parameters
    ----------
    initial_hash:
        Seed the chain at a known head, e.g. when continuing an existing log.
        Defaults to the genesis hash.
    """

    def __init__(self, initial_hash: str | None = None) -> None:
        self._last_record_hash: str = initial_hash or GENESIS_HASH
        self._records: list[RPXRecord] = []

    def append(
        self,
        *,
        decision_type: DecisionType,
        agent_id: str,
        outcome: Outcome,
        context_hash: str,
        policy_version: str,
        record_id: str | None = None,
        timestamp: str | None = None,
        action_type: str | None = None,
        reason: str | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> RPXRecord:
        """Link a new record to the current head and advance the head."""
        record = build_record(
            record_id=record_id or _generate_record_id(),
            timestamp=timestamp or format_timestamp(datetime.now(tz=timezone.utc)),
            previous_hash=self._last_record_hash,
            decision_type=decision_type,
            agent_id=agent_id,
            outcome=outcome,
            context_hash=context_hash,
            policy_version=policy_version,
            action_type=action_type,
            reason=reason,
            metadata=metadata,
        )
        self._last_record_hash = record.record_hash
        self._records.append(record)
        return record

    def last_hash(self) -> str:
        """Hash of the most recent record, or the genesis hash for an empty chain."""
        return self._last_record_hash

    @property
    def records(self) -> list[RPXRecord]:
        return list(self._records)
