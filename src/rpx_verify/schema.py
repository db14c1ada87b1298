# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2026 MuVeraAI Corporation

"""
Structural validation for RPX records and verification outputs.

The verifiers depend only on the narrow ``SchemaValidator`` protocol — one
``validate`` method returning a list of error strings — so tests can swap in a
fake validator without touching the bundled schema definitions.  The default
implementation is backed by ``jsonschema`` (Draft 2020-12).
"""

from __future__ import annotations

from typing import Any, Mapping, Protocol, runtime_checkable

from jsonschema import Draft202012Validator

_HEX_64 = "^[a-f0-9]{64}$"
_TIMESTAMP = r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d{6}Z$"

# ---------------------------------------------------------------------------
# Schemas
# ---------------------------------------------------------------------------

RPX_RECORD_SCHEMA: dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "$id": "rpx-record.schema.json",
    "title": "RPX Record",
    "type": "object",
    "required": [
        "record_id",
        "timestamp",
        "previous_hash",
        "decision_type",
        "agent_id",
        "outcome",
        "context_hash",
        "policy_version",
        "record_hash",
    ],
    "properties": {
        "record_id": {
            "type": "string",
            "minLength": 8,
            "maxLength": 64,
            "pattern": "^[A-Za-z0-9_.:-]+$",
        },
        "timestamp": {"type": "string", "pattern": _TIMESTAMP, "format": "date-time"},
        "previous_hash": {"type": "string", "pattern": _HEX_64},
        "decision_type": {
            "type": "string",
            "enum": ["care_access", "vehicle_safety", "financial_transaction"],
        },
        "agent_id": {"type": "string", "minLength": 1},
        "outcome": {"type": "string", "enum": ["ALLOW", "DENY", "ESCALATE"]},
        "context_hash": {"type": "string", "pattern": _HEX_64},
        "policy_version": {"type": "string", "minLength": 1},
        "action_type": {"type": "string"},
        "reason": {"type": "string"},
        "record_hash": {"type": "string", "pattern": _HEX_64},
        "metadata": {"type": "object"},
    },
    "additionalProperties": False,
}

_TAMPER_EVIDENCE_SCHEMA: dict[str, Any] = {
    "type": "object",
    "required": ["record_id", "tampering_type", "description", "position"],
    "properties": {
        "record_id": {"type": "string"},
        "tampering_type": {
            "enum": ["hash-mismatch", "broken-link", "timestamp-violation", "schema-invalid"]
        },
        "description": {"type": "string"},
        "position": {"type": "integer", "minimum": 0},
    },
    "additionalProperties": False,
}

_INTEGRITY_STATUS_SCHEMA: dict[str, Any] = {"enum": ["VALID", "INVALID", "INCOMPLETE"]}

CHAIN_PROOF_SCHEMA: dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "$id": "chain-proof.schema.json",
    "title": "RPX Chain Proof",
    "type": "object",
    "required": [
        "proof_id",
        "chain_id",
        "genesis_hash",
        "current_head",
        "record_count",
        "verification_timestamp",
        "integrity_status",
        "tamper_evidence",
    ],
    "properties": {
        "$schema": {"type": "string"},
        "proof_id": {"type": "string", "minLength": 1},
        "chain_id": {"type": "string", "minLength": 1},
        "genesis_hash": {"type": "string"},
        "current_head": {"type": "string"},
        "record_count": {"type": "integer", "minimum": 1},
        "verification_timestamp": {"type": "string"},
        "integrity_status": _INTEGRITY_STATUS_SCHEMA,
        "tamper_evidence": {"type": "array", "items": _TAMPER_EVIDENCE_SCHEMA},
        "sample_records": {
            "type": "array",
            "maxItems": 3,
            "items": {
                "type": "object",
                "required": ["position", "record_id", "timestamp", "record_hash"],
                "properties": {
                    "position": {"type": "integer", "minimum": 0},
                    "record_id": {"type": "string"},
                    "timestamp": {"type": "string"},
                    "record_hash": {"type": "string"},
                },
            },
        },
    },
    "additionalProperties": False,
}

VERIFICATION_REPORT_SCHEMA: dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "$id": "verification-report.schema.json",
    "title": "RPX Verification Report",
    "type": "object",
    "required": [
        "report_id",
        "timestamp",
        "chain_id",
        "verification_scope",
        "integrity_status",
        "compliance_details",
        "tamper_evidence",
        "chain_metadata",
    ],
    "properties": {
        "$schema": {"type": "string"},
        "report_id": {"type": "string", "minLength": 1},
        "timestamp": {"type": "string"},
        "chain_id": {"type": "string", "minLength": 1},
        "verification_scope": {
            "type": "object",
            "required": ["records_verified", "time_range"],
            "properties": {
                "records_verified": {"type": "integer", "minimum": 1},
                "time_range": {
                    "type": "object",
                    "required": ["earliest", "latest"],
                    "properties": {
                        "earliest": {"type": "string"},
                        "latest": {"type": "string"},
                    },
                },
            },
        },
        "integrity_status": _INTEGRITY_STATUS_SCHEMA,
        "compliance_details": {
            "type": "object",
            "required": ["constitutional_guarantees", "compliance_level", "notes"],
            "properties": {
                "constitutional_guarantees": {
                    "type": "object",
                    "required": [
                        "rpx_records_present",
                        "fail_closed_verified",
                        "human_escalation_available",
                        "hash_chain_intact",
                        "context_captured",
                    ],
                    "additionalProperties": {"type": "boolean"},
                },
                "compliance_level": {"enum": ["L1", "L2", "L3", None]},
                "notes": {"type": "string"},
            },
        },
        "tamper_evidence": {"type": "array", "items": _TAMPER_EVIDENCE_SCHEMA},
        "chain_metadata": {
            "type": "object",
            "required": ["genesis_hash", "current_head", "decision_types", "agent_count"],
            "properties": {
                "genesis_hash": {"type": "string"},
                "current_head": {"type": "string"},
                "decision_types": {"type": "array", "items": {"type": "string"}},
                "agent_count": {"type": "integer", "minimum": 0},
            },
        },
    },
    "additionalProperties": False,
}


# ---------------------------------------------------------------------------
# Validator capability
# ---------------------------------------------------------------------------


@runtime_checkable
class SchemaValidator(Protocol):
    """Structural validation capability consumed by the verifiers."""

    def validate(self, document: Any) -> list[str]:
        """Return one message per violation; an empty list means conformant."""
        ...


class JsonSchemaValidator:
    """
    ``SchemaValidator`` backed by a compiled JSON Schema.

    Every violation is collected (not just the first).  Messages are prefixed
    with the JSON Pointer of the offending instance, e.g.
    ``"/outcome 'MAYBE' is not one of ['ALLOW', 'DENY', 'ESCALATE']"``.
    """

    def __init__(self, schema: Mapping[str, Any]) -> None:
        Draft202012Validator.check_schema(schema)
        self._validator = Draft202012Validator(
            schema, format_checker=Draft202012Validator.FORMAT_CHECKER
        )

    def validate(self, document: Any) -> list[str]:
        errors = sorted(
            self._validator.iter_errors(document),
            key=lambda error: _pointer(error.absolute_path),
        )
        return [f"{_pointer(error.absolute_path)} {error.message}" for error in errors]


def _pointer(path: Any) -> str:
    return "".join(f"/{part}" for part in path) or "/"


_record_validator: JsonSchemaValidator | None = None


def default_record_validator() -> JsonSchemaValidator:
    """Return the shared validator for the bundled RPX record schema."""
    global _record_validator
    if _record_validator is None:
        _record_validator = JsonSchemaValidator(RPX_RECORD_SCHEMA)
    return _record_validator


def validate_chain_proof_document(document: Mapping[str, Any]) -> list[str]:
    """Validate a serialised chain proof against the bundled output schema."""
    return JsonSchemaValidator(CHAIN_PROOF_SCHEMA).validate(document)


def validate_report_document(document: Mapping[str, Any]) -> list[str]:
    """Validate a serialised verification report against the bundled output schema."""
    return JsonSchemaValidator(VERIFICATION_REPORT_SCHEMA).validate(document)
