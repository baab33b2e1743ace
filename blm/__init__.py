"""Parse, validate and write BLM property-listing documents."""

from .models.document import Document, ParserError
from .models.header import Header, HeaderKey
from .models.row import MappedRow, ParsedRow, Row

__all__ = [
    "Document",
    "ParserError",
    "Header",
    "HeaderKey",
    "Row",
    "ParsedRow",
    "MappedRow",
]
