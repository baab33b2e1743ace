from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from types import MappingProxyType

"""Header model for BLM documents.

The HEADER section is a list of ``KEY : value`` lines. Keys the engine knows
about are parsed into a closed enumeration (HeaderKey); anything else is kept
verbatim in an ``extra`` bucket so no identifiers are created dynamically.

Header behaves as a read-only mapping keyed by the lower-cased key text, e.g.
``header["eof"]`` or ``header["property count"]``.
"""

__all__ = [
    "HeaderKey",
    "Header",
    "HeaderKeyError",
    "normalize_key",
    "format_generated_date",
    "INTERNATIONAL_VERSIONS",
]

INTERNATIONAL_VERSIONS = frozenset({"H1", "3I", "3i"})

# English abbreviations regardless of process locale (strftime %b is not)
_MONTHS = ("JAN", "FEB", "MAR", "APR", "MAY", "JUN", "JUL", "AUG", "SEP", "OCT", "NOV", "DEC")


class HeaderKeyError(ValueError):
    """Raised when a raw header key cannot be normalized."""

    def __init__(self, key: str) -> None:
        super().__init__(f"invalid header key {key!r}")
        self.key = key


class HeaderKey(Enum):
    """Header keys recognised by the document engine."""
    VERSION = "version"
    EOF = "eof"
    EOR = "eor"
    PROPERTY_COUNT = "property count"
    GENERATED_DATE = "generated date"

    @classmethod
    def lookup(cls, key: str) -> HeaderKey | None:
        try:
            return cls(key)
        except ValueError:
            return None


def normalize_key(key: str) -> str:
    """Trim and lower-case a raw header key.

    Raises:
        HeaderKeyError: if the key holds characters that cannot be encoded
            (lone surrogates left by a lenient byte decode).
    """
    try:
        key.encode("utf-8")
    except UnicodeEncodeError as e:
        raise HeaderKeyError(key) from e
    return key.strip().lower()


def format_generated_date(moment: datetime | None = None) -> str:
    """Render a timestamp as ``DD-MON-YYYY HH:MM`` (upper-cased)."""
    if moment is None:
        moment = datetime.now(UTC)
    return f"{moment.day:02d}-{_MONTHS[moment.month - 1]}-{moment.year:04d} {moment:%H:%M}"


@dataclass(frozen=True, eq=False)
class Header(Mapping[str, str]):
    """Parsed HEADER section.

    Equality follows Mapping semantics, so a Header compares equal to a plain
    dict holding the same key/value pairs.
    """
    version: str | None = None
    eof: str | None = None
    eor: str | None = None
    property_count: str | None = None
    generated_date: str | None = None
    extra: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        # read-only copy of the caller's mapping
        object.__setattr__(self, "extra", MappingProxyType(dict(self.extra)))

    @classmethod
    def from_pairs(cls, pairs: Iterable[tuple[str, str]]) -> Header:
        """Build a header from normalized (key, value) pairs; later keys win."""
        known: dict[str, str] = {}
        extra: dict[str, str] = {}
        for key, value in pairs:
            member = HeaderKey.lookup(key)
            if member is None:
                extra[key] = value
            else:
                known[member.name.lower()] = value
        return cls(**known, extra=extra)

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, object]) -> Header:
        """Build a header from a caller-supplied mapping.

        Keys are matched loosely: ``"Property Count"``, ``"property count"``
        and ``"property_count"`` all name the same field. Values are
        converted to strings; ``None`` values are dropped.
        """
        if isinstance(mapping, Header):
            return mapping
        pairs = []
        for key, value in mapping.items():
            if value is None:
                continue
            name = normalize_key(str(key)).replace("_", " ")
            pairs.append((name, str(value)))
        return cls.from_pairs(pairs)

    @property
    def is_international(self) -> bool:
        return self.version in INTERNATIONAL_VERSIONS

    def separator_problem(self) -> str | None:
        """Describe why EOF/EOR are unusable, or None if they are fine.

        Undeclared separators are not reported here; they fail when used.
        """
        for name in ("eof", "eor"):
            value = getattr(self, name)
            if value is not None and len(value) != 1:
                return f"{name.upper()} must be a single character, got {value!r}"
        if self.eof is not None and self.eof == self.eor:
            return f"EOF and EOR must differ, both are {self.eof!r}"
        return None

    def _as_dict(self) -> dict[str, str]:
        out = {}
        for member in HeaderKey:
            value = getattr(self, member.name.lower())
            if value is not None:
                out[member.value] = value
        out.update(self.extra)
        return out

    def __getitem__(self, key: str) -> str:
        return self._as_dict()[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._as_dict())

    def __len__(self) -> int:
        return len(self._as_dict())

    def __repr__(self) -> str:
        return f"Header({self._as_dict()!r})"
