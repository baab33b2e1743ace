from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping, Sequence
from typing import Any

from .error_record import INVALID_ROW, ErrorRecord

"""Row models for BLM data records.

A Row is one record of the DATA section. It comes in two variants that share
one contract (index, attributes, values, errors, is_valid):

- ParsedRow: built from a raw delimited line, a field separator and the
  document definition (Row.from_line).
- MappedRow: built from a field-name -> value mapping (Row.from_attributes),
  as produced by Document.from_records.
"""

__all__ = [
    "Row",
    "ParsedRow",
    "MappedRow",
]


class Row(ABC):
    """Common interface of both row variants."""

    index: int

    @staticmethod
    def from_line(index: int, line: str, separator: str, definition: Sequence[str]) -> ParsedRow:
        return ParsedRow(index=index, line=line, separator=separator, definition=tuple(definition))

    @staticmethod
    def from_attributes(
        attributes: Mapping[str, Any], index: int, definition: Sequence[str] | None = None
    ) -> MappedRow:
        return MappedRow(
            index=index,
            mapping=dict(attributes),
            definition=tuple(definition) if definition is not None else None,
        )

    @property
    @abstractmethod
    def attributes(self) -> dict[str, Any]:
        """Field name -> value, in definition order."""

    @property
    @abstractmethod
    def values(self) -> list[str]:
        """Ordered field values as written to the DATA section."""

    @property
    @abstractmethod
    def errors(self) -> list[str]:
        """Validation failures; empty iff the row is valid."""

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def error_records(self, document: str) -> list[ErrorRecord]:
        return [ErrorRecord.create(document, self.index, INVALID_ROW, msg) for msg in self.errors]


class ParsedRow(Row):
    def __init__(self, index: int, line: str, separator: str, definition: tuple[str, ...]) -> None:
        self.index = index
        self.line = line
        self.separator = separator
        self.definition = definition
        self._tokens = self._split()

    def _split(self) -> list[str]:
        tokens = self.line.strip("\r\n").split(self.separator)
        # "a^b^" ends with a field terminator, not an extra empty field
        if len(tokens) == len(self.definition) + 1 and tokens[-1] == "":
            tokens.pop()
        return tokens

    @property
    def attributes(self) -> dict[str, Any]:
        return dict(zip(self.definition, self._tokens))

    @property
    def values(self) -> list[str]:
        return list(self._tokens)

    @property
    def errors(self) -> list[str]:
        if not self.definition:
            return [f"Row {self.index}: no field definition to parse against"]
        expected, found = len(self.definition), len(self._tokens)
        if expected != found:
            return [f"Row {self.index}: incorrect number of fields: expected {expected}, got {found}"]
        return []

    def __repr__(self) -> str:
        return f"ParsedRow(index={self.index}, line={self.line!r})"


class MappedRow(Row):
    def __init__(self, index: int, mapping: dict[str, Any], definition: tuple[str, ...] | None = None) -> None:
        self.index = index
        self.mapping = mapping
        self.definition = definition

    @property
    def fields(self) -> tuple[str, ...]:
        return self.definition if self.definition is not None else tuple(self.mapping)

    @property
    def attributes(self) -> dict[str, Any]:
        return {name: self.mapping.get(name) for name in self.fields}

    @property
    def values(self) -> list[str]:
        return ["" if value is None else str(value) for value in self.attributes.values()]

    @property
    def errors(self) -> list[str]:
        if self.definition is None:
            return []
        errors = []
        missing = [name for name in self.definition if name not in self.mapping]
        unexpected = [name for name in self.mapping if name not in self.definition]
        if missing:
            errors.append(f"Row {self.index}: missing fields {missing}")
        if unexpected:
            errors.append(f"Row {self.index}: unexpected fields {unexpected}")
        return errors

    def __repr__(self) -> str:
        return f"MappedRow(index={self.index}, mapping={self.mapping!r})"
