"""Typed failure sentinels.

Python treats ``0 == False`` and ``hash(0) == hash(False)``, so every
comparison here checks the exact type before the value.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from safecalls.lib.errors import LastError


class Sentinel(Protocol):
    label: str

    def matches(self, result: object, last_error: LastError | None) -> bool: ...


def strictly_equal(left: object, right: object) -> bool:
    """Equality that never lets ``0``/``False``/``None``/``""`` stand in for each other."""

    if type(left) is not type(right):
        return False
    return left == right


@dataclass(frozen=True, slots=True)
class ValueSentinel:
    """Failure is one specific value, optionally only when an error was recorded."""

    value: object
    label: str
    requires_error: bool = False

    def matches(self, result: object, last_error: LastError | None) -> bool:
        if not strictly_equal(result, self.value):
            return False
        if self.requires_error:
            return last_error is not None
        return True


@dataclass(frozen=True, slots=True)
class ErrorNumberSentinel:
    """Failure is any plain ``int`` returned where a handle was expected."""

    label: str = "error number"

    def matches(self, result: object, last_error: LastError | None) -> bool:
        return type(result) is int


FALSE = ValueSentinel(False, label="false")
FALSE_WITH_ERROR = ValueSentinel(False, label="false with error", requires_error=True)
NONE = ValueSentinel(None, label="null")
MINUS_ONE = ValueSentinel(-1, label="-1")
MINUS_ONE_WITH_ERRNO = ValueSentinel(-1, label="-1 with errno", requires_error=True)
ERROR_NUMBER = ErrorNumberSentinel()
