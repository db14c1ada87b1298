# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2026 MuVeraAI Corporation

"""
Abstract base class for record sources.

A source hands the verifier an in-memory, ordered record sequence.  Sources
are read-only: the verifier never writes back to the log it is checking.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class RecordSource(ABC):
    """
    Contract for anything that can supply an ordered RPX record sequence.

    Records are returned as decoded JSON documents in log order, oldest first.
    """

    @abstractmethod
    async def all(self) -> list[dict[str, Any]]:
        """
        Return every record in log order.

        Implementations must fail loudly on structural read errors rather than
        skipping records — a silently dropped record would surface as a
        misleading broken link.
        """
        ...

    @abstractmethod
    async def count(self) -> int:
        """Return the number of records in the source."""
        ...
