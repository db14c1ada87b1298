# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2026 MuVeraAI Corporation

"""
verify_chain.py — Demonstrates chain verification and reporting.

Shows how to:
- Build a genesis-linked chain of RPX records
- Verify it and inspect the chain proof
- Tamper with one record and see the evidence
- Produce a verification report with a compliance level

Run: python examples/verify_chain.py
"""

from __future__ import annotations

import asyncio

from rpx_verify import ChainBuilder, ChainVerifier, MemorySource, ReportGenerator, hash_context
from rpx_verify.formatting import format_chain_result, format_report


async def main() -> None:
    print("=== RPX Verify — Chain Verification Example ===\n")

    builder = ChainBuilder()
    decisions = [
        ("care_access", "ALLOW", "Clinician on duty for this ward"),
        ("care_access", "DENY", "Patient record outside assigned unit"),
        ("financial_transaction", "ESCALATE", "Refund above automatic approval limit"),
        ("vehicle_safety", "DENY", "Sensor disagreement during lane change"),
    ]
    for index, (decision_type, outcome, reason) in enumerate(decisions):
        builder.append(
            decision_type=decision_type,
            agent_id="dealgo-v1.0",
            outcome=outcome,
            context_hash=hash_context({"request": index, "decision_type": decision_type}),
            policy_version="policy-v1.0.0",
            action_type="evaluate",
            reason=reason,
        )

    source = MemorySource(record.to_document() for record in builder.records)
    records = await source.all()
    print(f"Built {await source.count()} records.\n")

    verifier = ChainVerifier()
    print(format_chain_result(verifier.verify(records, chain_id="example-chain")))

    print("\n--- Flipping the outcome of record 1 ---\n")
    records[1]["outcome"] = "ALLOW"
    print(format_chain_result(verifier.verify(records, chain_id="example-chain")))

    print()
    report = ReportGenerator().generate(await source.all(), chain_id="example-chain")
    print(format_report(report))


if __name__ == "__main__":
    asyncio.run(main())
