# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2026 MuVeraAI Corporation

"""
Canonical SHA-256 hashing for RPX records.

A record's hash covers every field except ``record_hash`` and ``metadata``.
The canonical form is compact JSON with keys in lexicographic order and all
strings encoded as UTF-8 without escaping, so the digest is reproducible by
any implementation that follows the same rules regardless of the key order of
its input.
"""

from __future__ import annotations

import hashlib
import json
from typing import Any, Mapping

from rpx_verify.errors import CanonicalizationError

# SHA-256 of the empty string.  Required as ``previous_hash`` of the first
# record in any chain that claims to start from genesis.
GENESIS_HASH: str = "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"

EXCLUDED_FIELDS: frozenset[str] = frozenset({"record_hash", "metadata"})


def hashable_fields(record: Mapping[str, Any]) -> dict[str, Any]:
    """Return a copy of ``record`` without the fields excluded from hashing."""
    return {key: value for key, value in record.items() if key not in EXCLUDED_FIELDS}


def canonicalise(record: Mapping[str, Any]) -> str:
    """
    Produce the canonical JSON string of a record's hash-relevant fields.

    Lone UTF-16 surrogates (valid in JSON text, not encodable as UTF-8) are
    written as lowercase ``\\uXXXX`` escapes, matching well-formed
    ``JSON.stringify`` output, so such records still hash.

    Raises:
        CanonicalizationError: If a field value is not representable as JSON
            (including NaN and infinities).
    """
    try:
        canonical = json.dumps(
            hashable_fields(record),
            sort_keys=True,
            ensure_ascii=False,
            separators=(",", ":"),
            allow_nan=False,
        )
        return canonical.encode("utf-8", errors="backslashreplace").decode("utf-8")
    except (TypeError, ValueError) as exc:
        raise CanonicalizationError(str(record.get("record_id", "<unknown>")), str(exc)) from exc


def compute_record_hash(record: Mapping[str, Any]) -> str:
    """Return the SHA-256 digest of the canonical form as 64 lowercase hex chars."""
    return hashlib.sha256(canonicalise(record).encode("utf-8")).hexdigest()


def verify_record_hash(record: Mapping[str, Any]) -> bool:
    """Return True when the stored ``record_hash`` equals the recomputed digest."""
    return compute_record_hash(record) == record.get("record_hash")


def is_genesis_hash(value: object) -> bool:
    return value == GENESIS_HASH
