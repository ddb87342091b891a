from __future__ import annotations

import os
import time

from plunge.models import FileStat


DIRECTORY_MODE = 0o775
_CHUNK_SIZE = 1024 * 1024


class CopyError(OSError):
    pass


class ShortReadError(CopyError):
    pass


class ShortWriteError(CopyError):
    pass


class DirectoryCreationError(CopyError):
    pass


def _read_exactly(source_file: str, size: int) -> bytes:
    chunks: list[bytes] = []
    remaining = size
    with open(source_file, "rb") as handle:
        while remaining > 0:
            chunk = handle.read(min(_CHUNK_SIZE, remaining))
            if not chunk:
                break
            chunks.append(chunk)
            remaining -= len(chunk)
        # Bytes past the stat'ed size mean the source changed too.
        overrun = remaining == 0 and handle.read(1) != b""

    if remaining or overrun:
        raise ShortReadError(f"{source_file}: expected {size} bytes, file changed while reading")
    return b"".join(chunks)


def ensure_parent_directory(path: str) -> None:
    parent = os.path.dirname(path)
    if not parent:
        raise DirectoryCreationError(f"No parent directory for {path}")
    missing: list[str] = []
    current = parent
    while current and not os.path.isdir(current):
        missing.append(current)
        current = os.path.dirname(current)

    # Every created level gets DIRECTORY_MODE, not just the leaf.
    for directory in reversed(missing):
        try:
            os.mkdir(directory, DIRECTORY_MODE)
        except FileExistsError:
            if not os.path.isdir(directory):
                raise DirectoryCreationError(f"Cannot create {directory}: not a directory") from None
        except OSError as exc:
            raise DirectoryCreationError(f"Cannot create {directory}: {exc.strerror or exc}") from exc


def copy_file(source_file: str, destination_file: str, source_stat: FileStat) -> None:
    data = _read_exactly(source_file, source_stat.size)

    ensure_parent_directory(destination_file)
    with open(destination_file, "wb") as handle:
        written = handle.write(data)
    if written != source_stat.size:
        raise ShortWriteError(f"{destination_file}: wrote {written} of {source_stat.size} bytes")

    os.utime(destination_file, (time.time(), source_stat.mtime))
