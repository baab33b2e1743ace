from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from .cache import DerivedField
from .error_record import ErrorRecord
from .header import Header, HeaderKeyError, format_generated_date, normalize_key
from .row import Row

"""BLM document model: parsing, validation aggregation and serialization.

A BLM document is made of four sections bounded by literal markers:

    #HEADER#      KEY : value lines (version, separators, count, date)
    #DEFINITION#  one record of field names
    #DATA#        one record per line
    #END#

Each of HEADER, DEFINITION and DATA runs from its opening marker to the
nearest ``#END#`` that follows it. Documents built from text check that all
four markers are present at construction; header, definition and data are
then parsed lazily, once, and cached (see DerivedField).
"""

__all__ = [
    "Document",
    "ParserError",
    "SECTIONS",
]

logger = logging.getLogger(__name__)

SECTIONS = ("HEADER", "DEFINITION", "DATA", "END")
END_MARKER = "#END#"


class ParserError(Exception):
    """Raised when a document cannot be parsed.

    Attributes:
        reason: Human readable description of the failure
        document: Safe diagnostic string of the failing document
    """

    def __init__(self, reason: str, document: str) -> None:
        super().__init__(f"{document}: {reason}")
        self.reason = reason
        self.document = document


def _marker(section: str) -> str:
    return f"#{section.upper()}#"


class Document:
    """A BLM document including its header, definition and data content."""

    def __init__(
        self,
        source: str | bytes | None = None,
        *,
        header: Mapping[str, Any] | None = None,
        definition: Sequence[str] | None = None,
        data: Iterable[Row | Mapping[str, Any]] | None = None,
        name: str | None = None,
        encoding: str = "utf-8",
        decode_errors: str = "strict",
    ) -> None:
        self.name = name
        self._source: str | None = None
        if source is not None:
            self._source = self._decode(source, encoding, decode_errors)
            self._verify_structure(self._source)
        if data is not None:
            data = list(data)
            if definition is None and data and isinstance(data[0], Mapping):
                definition = list(data[0].keys())
        if definition is not None:
            definition = tuple(definition)

        if header is not None:
            header = Header.from_mapping(header)
            problem = header.separator_problem()
            if problem:
                raise ValueError(problem)

        self._header: DerivedField[Header] = (
            DerivedField.of(header) if header is not None else DerivedField(self._parse_header)
        )
        self._definition: DerivedField[tuple[str, ...]] = (
            DerivedField.of(definition) if definition is not None else DerivedField(self._parse_definition)
        )
        self._data: DerivedField[tuple[Row, ...]] = (
            DerivedField.of(self._wrap_rows(data, definition)) if data is not None else DerivedField(self._parse_data)
        )
        self._errors: DerivedField[tuple[str, ...]] = DerivedField(self._collect_errors)

    @classmethod
    def parse(cls, source: str | bytes, **kwargs: Any) -> Document:
        return cls(source, **kwargs)

    @classmethod
    def from_records(
        cls,
        records: Sequence[Mapping[str, Any]],
        *,
        international: bool = False,
        eor: str = "~",
        eof: str = "^",
        name: str | None = None,
    ) -> Document:
        """Build a document from field-name -> value mappings.

        The definition is taken from the first record's key order; every
        record is wrapped into a Row at its positional index.
        """
        header = {
            "version": "3i" if international else "3",
            "eof": eof,
            "eor": eor,
            "property count": str(len(records)),
            "generated date": format_generated_date(),
        }
        definition = list(records[0].keys()) if records else []
        return cls(header=header, definition=definition, data=records, name=name)

    @staticmethod
    def _wrap_rows(
        data: Iterable[Row | Mapping[str, Any]], definition: Sequence[str] | None
    ) -> tuple[Row, ...]:
        rows: list[Row] = []
        for index, item in enumerate(data):
            if isinstance(item, Row):
                rows.append(item)
            else:
                rows.append(Row.from_attributes(item, index=index, definition=definition))
        return tuple(rows)

    # -- diagnostics ---------------------------------------------------

    def describe(self, safe: bool = False, error: str | None = None) -> str:
        """Diagnostic string; never raises.

        Safe mode omits every derived field so it can be used while parsing.
        """
        name = "" if self.name is None else f' document="{self.name}"'
        error_string = "" if error is None else f' error="{error}"'
        basic = f"<#{type(self).__name__}{name}{error_string}>"
        if safe:
            return basic
        try:
            return (
                f"<#{type(self).__name__}{name}{error_string} version={self.version} "
                f"rows={len(self.rows)} valid={self.is_valid} errors={len(self.errors)}>"
            )
        except ParserError as e:
            return self.describe(safe=True, error=e.reason)

    def __repr__(self) -> str:
        return self.describe()

    def __str__(self) -> str:
        return self.describe()

    # -- derived fields ------------------------------------------------

    @property
    def source(self) -> str | None:
        return self._source

    @property
    def header(self) -> Header:
        return self._header.get()

    @property
    def definition(self) -> tuple[str, ...]:
        return self._definition.get()

    @property
    def data(self) -> tuple[Row, ...]:
        return self._data.get()

    @property
    def rows(self) -> tuple[Row, ...]:
        return self.data

    @property
    def errors(self) -> tuple[str, ...]:
        return self._errors.get()

    @property
    def is_valid(self) -> bool:
        return not self.errors

    @property
    def version(self) -> str | None:
        return self.header.version

    @property
    def is_international(self) -> bool:
        return self.header.is_international

    @property
    def eof(self) -> str:
        return self._separator("eof")

    @property
    def eor(self) -> str:
        return self._separator("eor")

    def error_records(self) -> list[ErrorRecord]:
        """Structured records for every error of every invalid row."""
        document = self.name or ""
        return [rec for row in self.data if not row.is_valid for rec in row.error_records(document)]

    # -- serialization -------------------------------------------------

    def to_blm(self) -> str:
        return "\n".join([*self._header_lines(), *self._definition_lines(), *self._data_lines()])

    def _header_lines(self) -> list[str]:
        generated_date = self.header.generated_date or format_generated_date()
        return [
            "#HEADER#",
            f"VERSION : {self.version or ''}",
            f"EOF : '{self.eof}'",
            f"EOR : '{self.eor}'",
            f"Property Count : {len(self.data)}",
            f"Generated Date : {generated_date}",
            "",
        ]

    def _definition_lines(self) -> list[str]:
        eof = self.eof
        return ["#DEFINITION#", f"{eof.join(self.definition)}{eof}{self.eor}", ""]

    def _data_lines(self) -> list[str]:
        eof, eor = self.eof, self.eor
        return ["#DATA#", *(f"{eof.join(row.values)}{eor}" for row in self.data), END_MARKER]

    # -- parsing -------------------------------------------------------

    def _decode(self, source: str | bytes, encoding: str, decode_errors: str) -> str:
        if isinstance(source, str):
            return source
        try:
            return source.decode(encoding, errors=decode_errors)
        except UnicodeDecodeError as e:
            raise self._parser_error("Unable to parse document due to encoding error.", e) from e

    def _verify_structure(self, source: str) -> None:
        for section in SECTIONS:
            if _marker(section) not in source:
                raise self._parser_error(
                    f"Unable to process document with this structure: could not detect {section} section."
                )

    def contents(self, section: str = "DATA") -> str:
        """Text strictly between a section marker and the next ``#END#``, trimmed."""
        if self._source is None:
            raise self._parser_error("Unable to parse document: no source text.")
        marker = _marker(section)
        start = self._source.find(marker)
        if start < 0:
            raise self._parser_error("Unable to parse document: could not detect start marker.")
        start += len(marker)
        finish = self._source.find(END_MARKER, start)
        if finish < 0:
            raise self._parser_error("Unable to parse document: could not detect end marker.")
        logger.debug("section %s spans [%d, %d)", section.upper(), start, finish)
        return self._source[start:finish].strip()

    def _parse_header(self) -> Header:
        pairs = []
        for line in self.contents("HEADER").splitlines():
            if not line.strip():
                continue
            key, sep, value = line.partition(":")
            if not sep:
                continue
            try:
                pairs.append((normalize_key(key), value.replace("'", "").strip()))
            except HeaderKeyError as e:
                raise self._parser_error(f"Unable to parse document. Error found in header for key `{key}`", e) from e
        header = Header.from_pairs(pairs)
        problem = header.separator_problem()
        if problem:
            raise self._parser_error(f"Unable to parse document: {problem}.")
        logger.debug("parsed header: %r", header)
        return header

    def _parse_definition(self) -> tuple[str, ...]:
        record = self.contents("DEFINITION").split(self.eor)[0]
        fields = [name.strip().lower() for name in record.split(self.eof)]
        return tuple(name for name in fields if name)

    def _parse_data(self) -> tuple[Row, ...]:
        eof, eor = self.eof, self.eor
        definition = self.definition
        lines = self.contents("DATA").split(eor)
        # only the empty tail after the final EOR; blank records are real rows
        if lines and lines[-1] == "":
            lines.pop()
        rows = tuple(Row.from_line(index, line, eof, definition) for index, line in enumerate(lines))
        logger.debug("parsed %d rows against %d fields", len(rows), len(definition))
        return rows

    def _collect_errors(self) -> tuple[str, ...]:
        return tuple(error for row in self.data if not row.is_valid for error in row.errors)

    def _separator(self, key: str) -> str:
        value = getattr(self.header, key)
        if not value:
            raise self._parser_error(f"Unable to parse document: header does not declare {key.upper()}.")
        return value

    def _parser_error(self, message: str, cause: BaseException | None = None) -> ParserError:
        reason = message if cause is None else f"{message} {cause}"
        return ParserError(reason, self.describe(safe=True))
