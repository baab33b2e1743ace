from __future__ import annotations

import threading
from collections.abc import Callable
from enum import Enum
from typing import Generic, TypeVar

"""One-time derivation cache for lazily parsed document fields.

Each derived field (header, definition, data, errors) of a Document is held in
a DerivedField. The state machine mirrors the document lifecycle:

    UNPARSED -> PARSED   (value cached for the lifetime of the instance)
    UNPARSED -> ERRORED  (the failure is cached and re-raised on every access)

The compute callable runs at most once, guarded by a lock, so concurrent
readers all observe the same cached value or the same failure.
"""

__all__ = [
    "DerivationState",
    "DerivedField",
]

T = TypeVar("T")


class DerivationState(Enum):
    """Lifecycle of a single derived field."""
    UNPARSED = "unparsed"
    PARSED = "parsed"
    ERRORED = "errored"


class DerivedField(Generic[T]):
    def __init__(self, compute: Callable[[], T]) -> None:
        self._compute = compute
        self._lock = threading.Lock()
        self._state = DerivationState.UNPARSED
        self._value: T | None = None
        self._error: BaseException | None = None

    @classmethod
    def of(cls, value: T) -> DerivedField[T]:
        """Create a field that is already parsed (explicit construction)."""
        field: DerivedField[T] = cls(lambda: value)
        field._state = DerivationState.PARSED
        field._value = value
        return field

    @property
    def state(self) -> DerivationState:
        return self._state

    def get(self) -> T:
        if self._state is DerivationState.UNPARSED:
            with self._lock:
                # re-check: another thread may have finished while we waited
                if self._state is DerivationState.UNPARSED:
                    try:
                        self._value = self._compute()
                    except Exception as e:
                        self._error = e
                        self._state = DerivationState.ERRORED
                    else:
                        self._state = DerivationState.PARSED
        if self._error is not None:
            raise self._error
        return self._value  # type: ignore[return-value]
