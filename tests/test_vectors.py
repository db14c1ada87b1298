# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2026 MuVeraAI Corporation
"""
Tests for the golden test vectors.
"""

from __future__ import annotations

import asyncio
from pathlib import Path

import pytest

from rpx_verify.hashing import GENESIS_HASH, verify_record_hash
from rpx_verify.report import generate_report
from rpx_verify.storage.file import JsonlFileSource
from rpx_verify.vectors import (
    VECTORS,
    expected_status,
    generate_valid_chain,
    generate_vectors,
    write_vectors,
)


class TestGoldenVectors:
    def test_valid_chain_shape(self) -> None:
        chain = generate_valid_chain()
        assert len(chain) == 10
        assert chain[0]["previous_hash"] == GENESIS_HASH
        assert [record["record_id"] for record in chain[:2]] == ["rpx_rec_000", "rpx_rec_001"]
        assert chain[0]["timestamp"] == "2025-12-01T00:00:00.000000Z"
        assert all(verify_record_hash(record) for record in chain)
        for previous, current in zip(chain, chain[1:]):
            assert current["previous_hash"] == previous["record_hash"]

    def test_generation_is_reproducible(self) -> None:
        assert generate_valid_chain() == generate_valid_chain()

    def test_metadata_names_the_vector(self) -> None:
        chain = generate_valid_chain(count=3, vector_name="custom")
        assert chain[2]["metadata"] == {"test_vector": "custom", "record_index": 2}

    @pytest.mark.parametrize("name", sorted(VECTORS))
    def test_vector_yields_expected_status(self, name: str) -> None:
        report = generate_report(generate_vectors()[name])
        assert report.integrity_status == expected_status(name)

    def test_tampered_vector_has_exactly_one_finding(self) -> None:
        report = generate_report(generate_vectors()["tampered-record"])
        assert len(report.tamper_evidence) == 1
        assert report.tamper_evidence[0].position == 5

    def test_bad_timestamp_record_keeps_a_valid_hash(self) -> None:
        record = generate_vectors()["bad-timestamp"][6]
        assert verify_record_hash(record) is True
        assert record["timestamp"] == "2025-12-01T00:04:00.000000Z"

    def test_write_vectors_round_trips_through_jsonl(self, tmp_path: Path) -> None:
        paths = asyncio.run(write_vectors(tmp_path / "vectors"))
        assert sorted(path.name for path in paths) == sorted(f"{name}.jsonl" for name in VECTORS)

        vectors = generate_vectors()
        for path in paths:
            records = asyncio.run(JsonlFileSource(path).all())
            assert records == vectors[path.stem]
