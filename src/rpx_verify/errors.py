# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2026 MuVeraAI Corporation
from __future__ import annotations


class RPXVerifyError(Exception):
    """Base class for all rpx-verify errors."""

    def __init__(self, message: str, code: str = "RPX_VERIFY_ERROR") -> None:
        super().__init__(message)
        self.code = code
        self.message = message

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r})"


class RecordReadError(RPXVerifyError):
    """
    Raised when an input log cannot be read as an ordered record sequence.

    A read failure is fatal for the whole log: the verifier never hands a
    partial chain to the engine.

    Attributes:
        path: The file that was being read.
        line_number: 1-based line number of the offending line, when known.
    """

    def __init__(self, path: str, reason: str, line_number: int | None = None) -> None:
        location = f" line {line_number}" if line_number is not None else ""
        super().__init__(
            f"Failed to read '{path}'{location}: {reason}",
            code="RECORD_READ_FAILED",
        )
        self.path = path
        self.line_number = line_number
        self.reason = reason


class EmptyChainError(RPXVerifyError):
    """Raised when a report is requested for a chain with no records."""

    def __init__(self, chain_id: str | None = None) -> None:
        chain_text = f" '{chain_id}'" if chain_id else ""
        super().__init__(
            f"Chain{chain_text} is empty; verification did not produce a proof.",
            code="EMPTY_CHAIN",
        )
        self.chain_id = chain_id


class CanonicalizationError(RPXVerifyError):
    """Raised when a record's hash-relevant fields are not JSON-serialisable."""

    def __init__(self, record_id: str, reason: str) -> None:
        super().__init__(
            f"Record '{record_id}' cannot be canonicalised: {reason}",
            code="CANONICALIZATION_FAILED",
        )
        self.record_id = record_id


class SchemaValidationError(RPXVerifyError):
    """
    Raised when a generated document does not conform to its output schema.

    Attributes:
        document_kind: ``"chain-proof"`` or ``"verification-report"``.
        errors: The validator's error messages.
    """

    def __init__(self, document_kind: str, errors: list[str]) -> None:
        super().__init__(
            f"Generated {document_kind} failed schema validation: {'; '.join(errors)}",
            code="SCHEMA_VALIDATION_FAILED",
        )
        self.document_kind = document_kind
        self.errors = list(errors)
