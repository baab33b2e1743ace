from .frames import ConversionError, document_from_frame, document_to_frame, read_table, write_table

__all__ = [
    "ConversionError",
    "document_from_frame",
    "document_to_frame",
    "read_table",
    "write_table",
]
