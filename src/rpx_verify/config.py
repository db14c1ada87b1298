# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2026 MuVeraAI Corporation
from __future__ import annotations

from typing import Annotated

from pydantic import BaseModel, Field

DEFAULT_PROOF_SCHEMA_URI = "../../schemas/chain-proof.schema.json"
DEFAULT_REPORT_SCHEMA_URI = "../../schemas/verification-report.schema.json"


class VerifierConfig(BaseModel, frozen=True):
    """
    Configuration shared by the record, chain, and report verifiers.

    All fields are optional — the defaults reproduce a sequential,
    warning-emitting verifier that does not re-validate its own output.

    Attributes:
        max_workers: Number of worker threads for the per-record pass.
            ``None`` (or 1) runs the pass sequentially. Continuity and
            timestamp checks always run sequentially after it.
        warn_on_missing_optional: When True, valid records lacking
            ``action_type`` or ``reason`` produce advisory warnings.
        proof_schema_uri: Value written to the ``$schema`` field of proofs.
        report_schema_uri: Value written to the ``$schema`` field of reports.
        validate_outputs: When True, generated proofs and reports are checked
            against the bundled output schemas before being returned.

    Example::

        config = VerifierConfig(max_workers=4, validate_outputs=True)
        generator = ReportGenerator(config=config)
    """

    max_workers: Annotated[int, Field(ge=1)] | None = None
    warn_on_missing_optional: bool = True
    proof_schema_uri: str = DEFAULT_PROOF_SCHEMA_URI
    report_schema_uri: str = DEFAULT_REPORT_SCHEMA_URI
    validate_outputs: bool = False
