"""CLI output formatting utilities."""

from __future__ import annotations

import json
from dataclasses import asdict, is_dataclass
from typing import Any, Literal, Protocol, cast, runtime_checkable

OutputFormat = Literal["text", "json"]


@runtime_checkable
class TextFormattable(Protocol):
    """Output dataclasses that provide a human-readable text format."""

    def format_text(self) -> str: ...


def to_jsonable(value: Any) -> Any:
    """Convert dataclasses, enums and containers to JSON-serializable payloads."""

    if is_dataclass(value) and not isinstance(value, type):
        return to_jsonable(asdict(value))
    if isinstance(value, dict):
        typed_dict = cast("dict[object, object]", value)
        return {str(key): to_jsonable(item) for key, item in typed_dict.items()}
    if isinstance(value, (list, tuple, set)):
        typed_seq = cast("list[object] | tuple[object, ...] | set[object]", value)
        return [to_jsonable(item) for item in typed_seq]
    return value


def tabular(rows: list[list[str]], sep: str = "  ") -> str:
    """Align columns by the widest cell in each column.

    >>> tabular([["a", "bb"], ["ccc", "d"]])
    'a    bb\\nccc  d'
    """
    if not rows:
        return ""
    widths = [max(len(row[col]) for row in rows) for col in range(len(rows[0]))]
    return "\n".join(
        sep.join(cell.ljust(widths[col]) for col, cell in enumerate(row)).rstrip()
        for row in rows
    )


def emit(value: Any, output_format: OutputFormat) -> None:
    """Emit one payload according to the selected output format."""

    if output_format == "json":
        print(json.dumps(to_jsonable(value), sort_keys=True))
        return
    if isinstance(value, TextFormattable):
        print(value.format_text())
    else:
        print(json.dumps(to_jsonable(value), sort_keys=True, indent=2))
