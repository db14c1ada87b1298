# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2026 MuVeraAI Corporation

"""
File-backed record source and JSON document helpers.

Logs are JSON Lines: one JSON object per line, blank lines ignored.  Unlike
an append-only audit store, the verifier never skips a malformed line — any
line that does not decode to a JSON object aborts the whole read with a
``RecordReadError`` naming the line.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Iterable, Mapping

import aiofiles

from rpx_verify.errors import RecordReadError
from rpx_verify.storage.interface import RecordSource

logger = logging.getLogger("rpx_verify.storage")


class JsonlFileSource(RecordSource):
    """
    Read-only JSONL record source.

    Parameters
    ----------
    file_path:
        Path to the JSONL log.  The file is read in full on every call so
        the result reflects the file as it is on disk.
    """

    def __init__(self, file_path: str | Path) -> None:
        self._file_path = Path(file_path)

    async def all(self) -> list[dict[str, Any]]:
        if not self._file_path.exists():
            raise RecordReadError(str(self._file_path), "file not found")

        records: list[dict[str, Any]] = []
        try:
            async with aiofiles.open(self._file_path, mode="r", encoding="utf-8") as file_handle:
                line_number = 0
                async for line in file_handle:
                    line_number += 1
                    stripped = line.strip()
                    if not stripped:
                        continue
                    records.append(_decode_line(self._file_path, stripped, line_number))
        except (OSError, UnicodeDecodeError) as exc:
            raise RecordReadError(str(self._file_path), str(exc)) from exc

        logger.debug("Read %d records from %s", len(records), self._file_path)
        return records

    async def count(self) -> int:
        return len(await self.all())


def _decode_line(path: Path, text: str, line_number: int) -> dict[str, Any]:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise RecordReadError(str(path), f"invalid JSON ({exc.msg})", line_number) from exc
    if not isinstance(data, dict):
        raise RecordReadError(
            str(path), f"expected a JSON object, got {type(data).__name__}", line_number
        )
    return data


async def write_jsonl(file_path: str | Path, records: Iterable[Mapping[str, Any]]) -> None:
    """Write ``records`` as JSON Lines, replacing any existing file."""
    path = Path(file_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    async with aiofiles.open(path, mode="w", encoding="utf-8") as file_handle:
        for record in records:
            await file_handle.write(json.dumps(dict(record), ensure_ascii=False) + "\n")


async def read_json_document(file_path: str | Path) -> Any:
    """Read a single JSON document (e.g. one record, a proof, or a report)."""
    path = Path(file_path)
    if not path.exists():
        raise RecordReadError(str(path), "file not found")
    try:
        async with aiofiles.open(path, mode="r", encoding="utf-8") as file_handle:
            content = await file_handle.read()
    except (OSError, UnicodeDecodeError) as exc:
        raise RecordReadError(str(path), str(exc)) from exc
    try:
        return json.loads(content)
    except json.JSONDecodeError as exc:
        raise RecordReadError(str(path), f"invalid JSON ({exc.msg})", exc.lineno) from exc


async def write_json_document(file_path: str | Path, data: Any) -> None:
    """Write ``data`` as 2-space indented JSON, creating parent directories."""
    path = Path(file_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    async with aiofiles.open(path, mode="w", encoding="utf-8") as file_handle:
        await file_handle.write(json.dumps(data, indent=2, ensure_ascii=False) + "\n")


async def write_text(file_path: str | Path, content: str) -> None:
    """Write ``content`` as UTF-8 text, creating parent directories."""
    path = Path(file_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    async with aiofiles.open(path, mode="w", encoding="utf-8") as file_handle:
        await file_handle.write(content)
