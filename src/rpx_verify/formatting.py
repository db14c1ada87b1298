# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2026 MuVeraAI Corporation

"""
Human-readable rendering of verification results.

Plain-text summaries for terminal output, plus a Markdown export of a full
verification report for attaching to audit evidence.  Rendering is purely
presentational: every value shown is taken verbatim from the result objects.
"""

from __future__ import annotations

from rpx_verify.types import (
    ChainVerificationResult,
    RecordVerificationResult,
    TamperEvidence,
    VerificationReport,
)

STATUS_DESCRIPTIONS: dict[str, str] = {
    "VALID": "no tampering detected",
    "INVALID": "tampering detected",
    "INCOMPLETE": "missing records or broken links",
}


def _evidence_lines(evidence: list[TamperEvidence]) -> list[str]:
    return [
        f"  [{item.tampering_type}] Position {item.position} "
        f"({item.record_id}): {item.description}"
        for item in evidence
    ]


def format_record_result(record_id: str, result: RecordVerificationResult) -> str:
    """Format a single-record verification result for CLI output."""
    lines: list[str] = []
    if result.valid:
        lines.append(f"Record {record_id} is VALID")
        if result.warnings:
            lines.append("Warnings:")
            lines.extend(f"  - {warning}" for warning in result.warnings)
    else:
        lines.append(f"Record {record_id} is INVALID")
        lines.append("Errors:")
        lines.extend(f"  - {error}" for error in result.errors)
    return "\n".join(lines)


def format_chain_result(result: ChainVerificationResult) -> str:
    """
    Format a chain verification result as a multi-line summary.

    Args:
        result: The chain verification result to format.

    Returns:
        A multi-line string suitable for CLI output.
    """
    lines: list[str] = []
    lines.append("=== RPX Chain Verification ===")
    lines.append(f"Status:         {result.status} ({STATUS_DESCRIPTIONS[result.status]})")

    proof = result.proof
    if proof is None:
        lines.extend(f"Error:          {error}" for error in result.errors)
        return "\n".join(lines)

    lines.append(f"Chain ID:       {proof.chain_id}")
    lines.append(f"Records:        {proof.record_count}")
    lines.append(f"Genesis hash:   {proof.genesis_hash}")
    lines.append(f"Current head:   {proof.current_head}")
    if proof.tamper_evidence:
        lines.append(f"Tamper evidence ({len(proof.tamper_evidence)} issues):")
        lines.extend(_evidence_lines(proof.tamper_evidence))
    return "\n".join(lines)


def format_report(report: VerificationReport) -> str:
    """Format a verification report summary for CLI output."""
    details = report.compliance_details
    lines: list[str] = []
    lines.append("=== RPX Verification Report ===")
    lines.append(f"Report ID:        {report.report_id}")
    lines.append(f"Chain ID:         {report.chain_id}")
    lines.append(f"Integrity status: {report.integrity_status}")
    lines.append(f"Compliance level: {details.compliance_level or 'N/A'}")
    lines.append("Constitutional guarantees:")
    for name, held in details.constitutional_guarantees.model_dump().items():
        marker = "x" if held else " "
        lines.append(f"  [{marker}] {name.replace('_', ' ')}")
    if report.tamper_evidence:
        lines.append(f"Tamper evidence ({len(report.tamper_evidence)} issues):")
        lines.extend(_evidence_lines(report.tamper_evidence))
    lines.append(f"Notes: {details.notes}")
    return "\n".join(lines)


def export_report_markdown(report: VerificationReport) -> str:
    """Export a VerificationReport to a human-readable Markdown string."""
    scope = report.verification_scope
    details = report.compliance_details
    metadata = report.chain_metadata
    lines: list[str] = []

    lines.append(f"# RPX Verification Report: {report.chain_id}")
    lines.append("")
    lines.append(f"**Report ID:** {report.report_id}")
    lines.append(f"**Generated:** {report.timestamp}")
    lines.append(f"**Period:** {scope.time_range.earliest} to {scope.time_range.latest}")
    lines.append("")
    lines.append("## Summary")
    lines.append("")
    lines.append(f"- **Integrity status:** {report.integrity_status}")
    lines.append(f"- **Records verified:** {scope.records_verified}")
    lines.append(f"- **Compliance level:** {details.compliance_level or 'None'}")
    lines.append(f"- **Genesis hash:** `{metadata.genesis_hash}`")
    lines.append(f"- **Current head:** `{metadata.current_head}`")
    lines.append(f"- **Decision types:** {', '.join(metadata.decision_types) or 'None'}")
    lines.append(f"- **Agents:** {metadata.agent_count}")
    lines.append("")
    lines.append("## Constitutional Guarantees")
    lines.append("")
    lines.append("| Guarantee | Held |")
    lines.append("|---|---|")
    for name, held in details.constitutional_guarantees.model_dump().items():
        lines.append(f"| {name} | {'Yes' if held else 'No'} |")
    lines.append("")
    lines.append(f"_{details.notes}_")
    lines.append("")
    lines.append("## Tamper Evidence")
    lines.append("")
    if not report.tamper_evidence:
        lines.append("No tamper evidence found.")
    else:
        lines.append("| Position | Record | Type | Description |")
        lines.append("|---|---|---|---|")
        for item in report.tamper_evidence:
            description = item.description.replace("|", "\\|")
            lines.append(
                f"| {item.position} | {item.record_id} | {item.tampering_type} | {description} |"
            )
    lines.append("")

    return "\n".join(lines)
