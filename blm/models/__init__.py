"""Domain models for the BLM document engine.

Document owns the section grammar; Row, Header and ErrorRecord are the
values it produces.
"""

from .document import Document, ParserError
from .error_record import ErrorRecord
from .header import Header, HeaderKey
from .row import MappedRow, ParsedRow, Row
from .validation_result import FileStat, FileStatus, ValidationResult

__all__ = [
    # Document engine
    "Document",
    "ParserError",
    "Header",
    "HeaderKey",
    # Records
    "Row",
    "ParsedRow",
    "MappedRow",
    "ErrorRecord",
    # Batch validation
    "FileStat",
    "FileStatus",
    "ValidationResult",
]
