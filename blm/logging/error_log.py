from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path

from blm.models.error_record import ErrorRecord

"""Error log buffering for validation runs.

Invalid rows and document-level parse failures are collected as ErrorRecords
and written as JSON Lines (fixed schema, one record per line) to
``<log_dir>/errors-YYYYMMDD-HHMMSS.log`` (UTC). The file is only created when
there is something to write.
"""

__all__ = [
    "ErrorRecord",
    "ErrorLogBuffer",
]

LOGS_DIR = Path("./logs")
TIMESTAMP_FMT = "%Y%m%d-%H%M%S"


class ErrorLogBuffer:
    """In-memory buffer for error records. Flush appends JSON Lines.

    Not thread safe; validation runs are serial.
    """
    def __init__(self, log_dir: Path | None = None) -> None:
        self._records: list[ErrorRecord] = []
        self._log_dir = log_dir if log_dir is not None else LOGS_DIR
        self._file_path: Path | None = None

    @property
    def file_path(self) -> Path:
        if self._file_path is None:
            stamp = datetime.now(UTC).strftime(TIMESTAMP_FMT)
            self._file_path = self._log_dir / f"errors-{stamp}.log"
        return self._file_path

    def append(self, record: ErrorRecord) -> None:
        self._records.append(record)

    def extend(self, records: list[ErrorRecord]) -> None:
        self._records.extend(records)

    def __len__(self) -> int:
        return len(self._records)

    def flush(self) -> Path | None:
        """Write buffered records; returns the log path, or None if empty."""
        if not self._records:
            return None
        fp = self.file_path
        fp.parent.mkdir(parents=True, exist_ok=True)
        with fp.open("a", encoding="utf-8") as f:
            for r in self._records:
                f.write(r.to_json_line() + "\n")
        self._records.clear()
        return fp
