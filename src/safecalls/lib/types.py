"""Shared value types."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, NewType, TypeVar

T = TypeVar("T")

ShmKey = NewType("ShmKey", int)
SignalInfo = dict[str, int]


@dataclass(slots=True)
class Ref(Generic[T]):
    """Caller-owned slot for a scalar in-out parameter."""

    value: T | None = None
