# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2026 MuVeraAI Corporation

"""
rpx-verify — Independent integrity verification for hash-linked RPX decision chains.

Public API surface:

    Classes:
        RecordVerifier   — Schema + hash verification of one record
        ChainVerifier    — Continuity, ordering and tamper classification; emits a ChainProof
        ReportGenerator  — Chain verification plus compliance assessment
        ChainBuilder     — Produces genesis-linked records (fixtures, vectors)
        JsonlFileSource  — Strict JSONL record reader
        MemorySource     — In-memory record source

    Functions:
        compute_record_hash, verify_record_hash — Canonical SHA-256 hashing
        verify_record, verify_chain, generate_report — Default-configured entry points
        derive_status — Tamper evidence tags to integrity status

    Types:
        RPXRecord, TamperEvidence, ChainProof, VerificationReport,
        RecordVerificationResult, ChainVerificationResult, VerifierConfig
"""

from rpx_verify.builder import ChainBuilder, build_record, format_timestamp, hash_context
from rpx_verify.chain import ChainVerifier, derive_status, verify_chain
from rpx_verify.config import VerifierConfig
from rpx_verify.errors import (
    CanonicalizationError,
    EmptyChainError,
    RecordReadError,
    RPXVerifyError,
    SchemaValidationError,
)
from rpx_verify.hashing import (
    GENESIS_HASH,
    canonicalise,
    compute_record_hash,
    is_genesis_hash,
    verify_record_hash,
)
from rpx_verify.record import RecordVerifier, verify_record
from rpx_verify.report import ReportGenerator, generate_report
from rpx_verify.schema import JsonSchemaValidator, SchemaValidator, default_record_validator
from rpx_verify.storage import JsonlFileSource, MemorySource, RecordSource
from rpx_verify.types import (
    ChainProof,
    ChainVerificationResult,
    EvidenceTag,
    RecordVerificationResult,
    RPXRecord,
    TamperEvidence,
    VerificationReport,
)

__version__ = "1.0.0"

__all__ = [
    # Verifiers
    "RecordVerifier",
    "ChainVerifier",
    "ReportGenerator",
    "verify_record",
    "verify_chain",
    "generate_report",
    "derive_status",
    "EvidenceTag",
    # Hashing
    "GENESIS_HASH",
    "canonicalise",
    "compute_record_hash",
    "verify_record_hash",
    "is_genesis_hash",
    # Producing records
    "ChainBuilder",
    "build_record",
    "format_timestamp",
    "hash_context",
    # Schema validation
    "SchemaValidator",
    "JsonSchemaValidator",
    "default_record_validator",
    # Sources
    "RecordSource",
    "MemorySource",
    "JsonlFileSource",
    # Config and errors
    "VerifierConfig",
    "RPXVerifyError",
    "RecordReadError",
    "EmptyChainError",
    "CanonicalizationError",
    "SchemaValidationError",
    # Types
    "RPXRecord",
    "TamperEvidence",
    "ChainProof",
    "VerificationReport",
    "RecordVerificationResult",
    "ChainVerificationResult",
]
