"""Pydantic models for catalog rows."""
from __future__ import annotations

from pydantic import BaseModel


class HashRecord(BaseModel):
    id: int
    size: int
    digest: str


class FileRecord(BaseModel):
    id: int
    path: str
    size: int
    modified_time: int
    hash_id: int


class DuplicateRow(BaseModel):
    """One member of a duplicate group, as written to the report."""

    id: int
    path: str
    size: int
    modified_time: int
    hash_id: int
    content_size: int
    member_count: int
