from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import UTC, datetime

"""ErrorRecord model for structured validation logging.

One ErrorRecord describes either an invalid data row (row >= 0, the row's
positional index) or a document-level parse failure (row = -1 sentinel, the
failing position is unknown).
"""

__all__ = [
    "ErrorRecord",
    "INVALID_ROW",
    "PARSE_ERROR",
]

INVALID_ROW = "INVALID_ROW"
PARSE_ERROR = "PARSE_ERROR"


@dataclass(frozen=True)
class ErrorRecord:
    """Structured error record for JSON Lines logging.

    Attributes:
        timestamp: ISO8601 UTC timestamp with 'Z' suffix
        document: Document name (usually the file name)
        row: Row index (0-based). Use -1 for document-level errors
        error_type: Error classification in UPPER_SNAKE_CASE format
        message: Human readable description
    """
    timestamp: str
    document: str
    row: int
    error_type: str
    message: str

    @staticmethod
    def create(document: str, row: int, error_type: str, message: str) -> ErrorRecord:
        """Create a new ErrorRecord stamped with the current UTC time."""
        ts = datetime.now(UTC).isoformat().replace("+00:00", "Z")
        return ErrorRecord(
            timestamp=ts,
            document=document,
            row=row,
            error_type=error_type,
            message=message,
        )

    def to_json_line(self) -> str:
        return json.dumps(asdict(self), ensure_ascii=False)
