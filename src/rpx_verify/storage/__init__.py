# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2026 MuVeraAI Corporation

from .interface import RecordSource
from .memory import MemorySource
from .file import (
    JsonlFileSource,
    read_json_document,
    write_json_document,
    write_jsonl,
    write_text,
)

__all__ = [
    "RecordSource",
    "MemorySource",
    "JsonlFileSource",
    "read_json_document",
    "write_json_document",
    "write_jsonl",
    "write_text",
]
