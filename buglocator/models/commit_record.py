"""
Commit Record Model
===================
A normalised version-control log entry for one correlated file.

Fields:
    hash        — full commit hash
    author      — author name
    date        — author date as reported by the log (YYYY-MM-DD for git)
    message     — subject line
    files       — the correlated file(s) this record was found for
    suspicious  — True if the message matches a fix-related keyword
    reason      — human-readable explanation, set only when suspicious
"""
from typing import Optional

from pydantic import BaseModel, Field


class CommitRecord(BaseModel):
    hash: str
    author: str = ""
    date: str = ""
    message: str = ""
    files: list[str] = Field(default_factory=list)
    suspicious: bool = False
    reason: Optional[str] = None

    @property
    def short_hash(self) -> str:
        return self.hash[:7]
