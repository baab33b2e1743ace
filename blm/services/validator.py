from __future__ import annotations

import logging
import time
from collections.abc import Sequence
from datetime import UTC, datetime
from pathlib import Path

from ..config.loader import DEFAULT_CONFIG, BLMConfig
from ..logging.error_log import ErrorLogBuffer
from ..models.document import Document, ParserError
from ..models.error_record import PARSE_ERROR, ErrorRecord
from ..models.validation_result import FileStat, FileStatus, ValidationResult
from .progress import ProgressTracker

"""Batch validation of BLM files.

Each file is read as bytes, decoded with the configured encoding and parsed
into a Document. A file ends up in one of three states:

- VALID: parsed and every row is valid
- INVALID: parsed, some rows failed validation (row errors are logged)
- FAILED: could not be read or parsed (one row=-1 error record)
"""

logger = logging.getLogger(__name__)


class ProcessingError(Exception):
    """Raised when the batch itself cannot run (not for per-file failures)."""


def load_document(path: Path, config: BLMConfig = DEFAULT_CONFIG) -> Document:
    """Read and parse one BLM file.

    Raises:
        ProcessingError: if the file cannot be read
        ParserError: if the document structure is malformed
    """
    try:
        raw = path.read_bytes()
    except OSError as e:
        raise ProcessingError(f"unable to read {path}: {e}") from e
    return Document(raw, name=path.name, encoding=config.encoding, decode_errors=config.decode_errors)


def validate_file(path: Path, config: BLMConfig, error_log: ErrorLogBuffer | None = None) -> FileStat:
    started = time.perf_counter()
    try:
        document = load_document(path, config)
        # force every derived field so structural errors surface here
        rows = len(document.rows)
        errors = document.errors
        version = document.version
    except (ParserError, ProcessingError) as e:
        reason = e.reason if isinstance(e, ParserError) else str(e)
        logger.error(f"{path.name}: {reason}")
        if error_log is not None:
            error_log.append(ErrorRecord.create(path.name, -1, PARSE_ERROR, reason))
        return FileStat(
            file_name=path.name,
            status=FileStatus.FAILED,
            rows=0,
            errors=1,
            elapsed_seconds=time.perf_counter() - started,
            error=reason,
        )

    if errors:
        status = FileStatus.INVALID
        logger.warning(f"{path.name}: {len(errors)} invalid row error(s)")
        for message in errors:
            logger.debug(f"{path.name}: {message}")
        if error_log is not None:
            error_log.extend(document.error_records())
    else:
        status = FileStatus.VALID
        logger.info(f"{path.name}: version={version} rows={rows} valid")
    return FileStat(
        file_name=path.name,
        status=status,
        rows=rows,
        errors=len(errors),
        elapsed_seconds=time.perf_counter() - started,
        version=version,
    )


def validate_files(
    paths: Sequence[Path], config: BLMConfig = DEFAULT_CONFIG, error_log: ErrorLogBuffer | None = None
) -> ValidationResult:
    if not paths:
        raise ProcessingError("no files given")
    start_time = datetime.now(UTC)
    started = time.perf_counter()
    stats: list[FileStat] = []
    with ProgressTracker(len(paths)) as progress:
        for path in paths:
            progress.start_file(path)
            stats.append(validate_file(path, config, error_log))
            progress.finish_file()
    return ValidationResult(
        file_stats=stats,
        start_time=start_time,
        end_time=datetime.now(UTC),
        elapsed_seconds=time.perf_counter() - started,
    )
