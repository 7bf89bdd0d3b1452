"""Legacy zip directory and entry operations (raise ZipError)."""

from __future__ import annotations

import os
from collections.abc import Callable, Iterator
from typing import Any, Literal

from safecalls.lib.errors import ErrorKind
from safecalls.lib.native import legacy_zip
from safecalls.lib.native.legacy_zip import ZipDirectory, ZipEntry
from safecalls.lib.ops.invoke import call_operation
from safecalls.lib.ops.registry import NativeOperation, operation
from safecalls.lib.sentinel import ERROR_NUMBER, FALSE, FALSE_WITH_ERROR, Sentinel


def _zip_operation(
    call: str,
    native: Callable[..., Any],
    description: str,
    sentinel: Sentinel = FALSE,
) -> NativeOperation:
    return operation(
        NativeOperation(
            name=f"zip.{call}",
            native=native,
            sentinel=sentinel,
            kind=ErrorKind.ZIP,
            description=description,
        )
    )


ZIP_OPEN = _zip_operation(
    "open", legacy_zip.zip_open, "Open a zip archive.", sentinel=ERROR_NUMBER
)
ZIP_READ = _zip_operation(
    "read", legacy_zip.zip_read, "Read the next entry of a zip archive.", FALSE_WITH_ERROR
)
ZIP_ENTRY_OPEN = _zip_operation(
    "entry_open", legacy_zip.zip_entry_open, "Open a zip entry for reading."
)
ZIP_ENTRY_READ = _zip_operation("entry_read", legacy_zip.zip_entry_read, "Read from an open entry.")
ZIP_ENTRY_CLOSE = _zip_operation("entry_close", legacy_zip.zip_entry_close, "Close an entry.")
ZIP_ENTRY_NAME = _zip_operation("entry_name", legacy_zip.zip_entry_name, "Entry name.")
ZIP_ENTRY_FILESIZE = _zip_operation(
    "entry_filesize", legacy_zip.zip_entry_filesize, "Uncompressed entry size."
)
ZIP_ENTRY_COMPRESSEDSIZE = _zip_operation(
    "entry_compressedsize", legacy_zip.zip_entry_compressedsize, "Compressed entry size."
)
ZIP_ENTRY_COMPRESSIONMETHOD = _zip_operation(
    "entry_compressionmethod",
    legacy_zip.zip_entry_compressionmethod,
    "Compression method of an entry.",
)


def zip_open(filename: str | os.PathLike[str]) -> ZipDirectory:
    return call_operation(ZIP_OPEN.name, filename)


def zip_read(zip_dp: ZipDirectory) -> ZipEntry | Literal[False]:
    """Return the next entry, or ``False`` once every entry has been read."""

    return call_operation(ZIP_READ.name, zip_dp)


def zip_entries(zip_dp: ZipDirectory) -> Iterator[ZipEntry]:
    while (entry := zip_read(zip_dp)) is not False:
        yield entry


def zip_close(zip_dp: ZipDirectory) -> None:
    legacy_zip.zip_close(zip_dp)


def zip_entry_open(zip_dp: ZipDirectory, zip_entry: ZipEntry, mode: str = "rb") -> None:
    call_operation(ZIP_ENTRY_OPEN.name, zip_dp, zip_entry, mode)


def zip_entry_read(zip_entry: ZipEntry, length: int = 1024) -> bytes:
    """Read up to ``length`` bytes from an open entry; ``b""`` at its end."""

    return call_operation(ZIP_ENTRY_READ.name, zip_entry, length)


def zip_entry_close(zip_entry: ZipEntry) -> None:
    call_operation(ZIP_ENTRY_CLOSE.name, zip_entry)


def zip_entry_name(zip_entry: ZipEntry) -> str:
    return call_operation(ZIP_ENTRY_NAME.name, zip_entry)


def zip_entry_filesize(zip_entry: ZipEntry) -> int:
    return call_operation(ZIP_ENTRY_FILESIZE.name, zip_entry)


def zip_entry_compressedsize(zip_entry: ZipEntry) -> int:
    return call_operation(ZIP_ENTRY_COMPRESSEDSIZE.name, zip_entry)


def zip_entry_compressionmethod(zip_entry: ZipEntry) -> str:
    return call_operation(ZIP_ENTRY_COMPRESSIONMETHOD.name, zip_entry)
