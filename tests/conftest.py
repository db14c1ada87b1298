# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2026 MuVeraAI Corporation
"""Shared fixtures for rpx-verify tests."""

from __future__ import annotations

import copy
from typing import Any

import pytest

from rpx_verify.vectors import generate_valid_chain


class AcceptAllValidator:
    """Schema validator stand-in that accepts every document."""

    def __init__(self) -> None:
        self.calls = 0

    def validate(self, document: Any) -> list[str]:
        self.calls += 1
        return []


class RejectingValidator:
    """Schema validator stand-in that rejects every document with fixed errors."""

    def __init__(self, errors: list[str]) -> None:
        self.errors = errors

    def validate(self, document: Any) -> list[str]:
        return list(self.errors)


_GOLDEN_CHAIN = generate_valid_chain()


@pytest.fixture
def valid_chain() -> list[dict[str, Any]]:
    """A fresh copy of the 10-record golden chain."""
    return copy.deepcopy(_GOLDEN_CHAIN)


@pytest.fixture
def valid_record(valid_chain: list[dict[str, Any]]) -> dict[str, Any]:
    """A single schema- and hash-valid record (position 3 of the golden chain)."""
    return valid_chain[3]


@pytest.fixture
def accept_all() -> AcceptAllValidator:
    return AcceptAllValidator()


@pytest.fixture
def rejecting_validator() -> RejectingValidator:
    return RejectingValidator(["/x is bad"])
