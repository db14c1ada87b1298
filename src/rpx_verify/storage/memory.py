# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2026 MuVeraAI Corporation

"""
In-memory record source.

Holds a snapshot of the supplied records in their original order.  Suitable
for tests and for callers that already have the log decoded.
"""

from __future__ import annotations

import copy
from typing import Any, Iterable, Mapping

from rpx_verify.storage.interface import RecordSource


class MemorySource(RecordSource):
    """In-memory, read-only RecordSource implementation."""

    def __init__(self, records: Iterable[Mapping[str, Any]] = ()) -> None:
        self._records: list[dict[str, Any]] = [dict(record) for record in records]

    async def all(self) -> list[dict[str, Any]]:
        return copy.deepcopy(self._records)

    async def count(self) -> int:
        return len(self._records)
