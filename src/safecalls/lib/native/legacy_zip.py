"""Legacy, read-only zip directory/entry natives backed by :mod:`zipfile`.

Handles mirror the old procedural zip API: open a directory, read entries one
at a time, open an entry, read it in chunks, close it.
"""

from __future__ import annotations

import errno
import os
import zipfile
from dataclasses import dataclass, field
from typing import IO, Literal

from safecalls.lib.errstate import report

# libzip error numbers returned by zip_open() instead of a handle.
ER_READ = 5
ER_NOENT = 9
ER_OPEN = 11
ER_NOZIP = 19

_COMPRESSION_METHODS: dict[int, str] = {
    0: "stored",
    1: "shrunk",
    2: "reduced1",
    3: "reduced2",
    4: "reduced3",
    5: "reduced4",
    6: "imploded",
    7: "tokenized",
    8: "deflated",
    9: "deflatedX",
    10: "implodedX",
    12: "bzip2",
    14: "lzma",
}


@dataclass(slots=True, eq=False)
class ZipDirectory:
    path: str
    archive: zipfile.ZipFile | None
    position: int = 0

    @property
    def closed(self) -> bool:
        return self.archive is None


@dataclass(slots=True, eq=False)
class ZipEntry:
    directory: ZipDirectory
    info: zipfile.ZipInfo
    stream: IO[bytes] | None = field(default=None)

    @property
    def is_open(self) -> bool:
        return self.stream is not None


def _require_directory(directory: ZipDirectory) -> zipfile.ZipFile | None:
    if directory.archive is None:
        report(errno.EBADF, "Zip directory is closed")
        return None
    return directory.archive


def zip_open(filename: str | os.PathLike[str]) -> ZipDirectory | int:
    """Open an archive; failures return a libzip error number, not a sentinel value."""

    path = os.fspath(filename)
    try:
        archive = zipfile.ZipFile(path)
    except FileNotFoundError as exc:
        report(ER_NOENT, f"No such file: {exc.filename or path}")
        return ER_NOENT
    except zipfile.BadZipFile as exc:
        report(ER_NOZIP, f"Not a zip archive: {exc}")
        return ER_NOZIP
    except OSError as exc:
        report(ER_OPEN, f"Can't open file: {exc.strerror or exc}")
        return ER_OPEN
    return ZipDirectory(path=path, archive=archive)


def zip_read(directory: ZipDirectory) -> ZipEntry | Literal[False]:
    """Return the next entry; plain ``False`` marks the end of the directory."""

    archive = _require_directory(directory)
    if archive is None:
        return False
    infos = archive.infolist()
    if directory.position >= len(infos):
        return False
    info = infos[directory.position]
    directory.position += 1
    return ZipEntry(directory=directory, info=info)


def zip_close(directory: ZipDirectory) -> None:
    if directory.archive is not None:
        directory.archive.close()
        directory.archive = None


def zip_entry_open(directory: ZipDirectory, entry: ZipEntry, mode: str = "rb") -> bool:
    archive = _require_directory(directory)
    if archive is None:
        return False
    if entry.directory is not directory:
        report(errno.EINVAL, "Entry does not belong to this zip directory")
        return False
    if mode not in {"r", "rb"}:
        report(errno.EINVAL, f"Unsupported entry mode '{mode}'")
        return False
    if entry.stream is not None:
        return True
    try:
        entry.stream = archive.open(entry.info)
    except (zipfile.BadZipFile, NotImplementedError, RuntimeError) as exc:
        report(ER_READ, f"Unable to open entry '{entry.info.filename}': {exc}")
        return False
    except OSError as exc:
        report(exc.errno, f"Unable to open entry '{entry.info.filename}': {exc}")
        return False
    return True


def zip_entry_read(entry: ZipEntry, length: int = 1024) -> bytes | Literal[False]:
    """Read up to ``length`` bytes; ``b""`` once the entry is exhausted."""

    if length <= 0:
        report(errno.EINVAL, "Length must be greater than 0")
        return False
    if entry.stream is None:
        report(errno.EBADF, f"Entry '{entry.info.filename}' is not open")
        return False
    try:
        return entry.stream.read(length)
    except (zipfile.BadZipFile, EOFError) as exc:
        report(ER_READ, f"Read error on entry '{entry.info.filename}': {exc}")
        return False
    except OSError as exc:
        report(exc.errno, f"Read error on entry '{entry.info.filename}': {exc}")
        return False


def zip_entry_close(entry: ZipEntry) -> bool:
    if entry.stream is None:
        report(errno.EBADF, f"Entry '{entry.info.filename}' is not open")
        return False
    stream, entry.stream = entry.stream, None
    stream.close()
    return True


def zip_entry_name(entry: ZipEntry) -> str | Literal[False]:
    if _require_directory(entry.directory) is None:
        return False
    return entry.info.filename


def zip_entry_filesize(entry: ZipEntry) -> int | Literal[False]:
    if _require_directory(entry.directory) is None:
        return False
    return entry.info.file_size


def zip_entry_compressedsize(entry: ZipEntry) -> int | Literal[False]:
    if _require_directory(entry.directory) is None:
        return False
    return entry.info.compress_size


def zip_entry_compressionmethod(entry: ZipEntry) -> str | Literal[False]:
    if _require_directory(entry.directory) is None:
        return False
    return _COMPRESSION_METHODS.get(entry.info.compress_type, "unknown")
