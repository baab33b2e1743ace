from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

"""Validation result models for batch runs over BLM files."""

__all__ = [
    "FileStatus",
    "FileStat",
    "ValidationResult",
]


class FileStatus(Enum):
    """Outcome of validating one file."""
    VALID = "valid"
    INVALID = "invalid"  # parsed, but some rows failed validation
    FAILED = "failed"  # could not be read or parsed


@dataclass(frozen=True)
class FileStat:
    """Per-file validation statistics."""
    file_name: str
    status: FileStatus
    rows: int
    errors: int
    elapsed_seconds: float
    version: str | None = None
    error: str | None = None  # parse failure summary


@dataclass(frozen=True)
class ValidationResult:
    """Aggregated results of validating a batch of files."""
    file_stats: list[FileStat]
    start_time: datetime
    end_time: datetime
    elapsed_seconds: float

    def _count(self, status: FileStatus) -> int:
        return sum(1 for s in self.file_stats if s.status == status)

    @property
    def valid_files(self) -> int:
        return self._count(FileStatus.VALID)

    @property
    def invalid_files(self) -> int:
        return self._count(FileStatus.INVALID)

    @property
    def failed_files(self) -> int:
        return self._count(FileStatus.FAILED)

    @property
    def total_rows(self) -> int:
        return sum(s.rows for s in self.file_stats)

    @property
    def total_errors(self) -> int:
        return sum(s.errors for s in self.file_stats)
