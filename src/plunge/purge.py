from __future__ import annotations

from contextlib import closing
import logging
import os
import sys
from typing import Iterable, Iterator, TextIO

from plunge.ignore_engine import IgnoreEngine
from plunge.models import PurgeReport
from plunge.paths import DEFAULT_MAX_PATH_LENGTH, MAX_LINE_LENGTH, PathTooLongError, format_path, resolve_path


logger = logging.getLogger("plunge.purge")

PURGE_BANNER = "\nThe following files in DEST may need to be purged:"


class PurgeListError(OSError):
    pass


def iter_directory(path: str) -> Iterator[tuple[str, bool]]:
    """Yield ``(name, is_directory)`` for each entry of ``path``.

    The listing handle stays open until the generator is exhausted or closed.
    Symbolic links are reported as non-directories.
    """
    try:
        scanner = os.scandir(path)
    except OSError as exc:
        raise PurgeListError(f"Cannot list {path}: {exc.strerror or exc}") from exc

    with scanner:
        while True:
            try:
                entry = next(scanner)
            except StopIteration:
                return
            except OSError as exc:
                raise PurgeListError(f"Cannot list {path}: {exc.strerror or exc}") from exc

            if entry.name in (".", ".."):
                continue
            try:
                is_dir = entry.is_dir(follow_symlinks=False)
            except OSError:
                is_dir = False
            yield entry.name, is_dir


def build_skip_list(
    source_root: str,
    relative_paths: Iterable[str],
    max_path_length: int = DEFAULT_MAX_PATH_LENGTH,
) -> list[str]:
    skip_list: list[str] = []
    for relative_path in relative_paths:
        try:
            skip_list.append(resolve_path(source_root, relative_path, max_path_length))
        except PathTooLongError as exc:
            logger.error("%s", exc)
    return skip_list


def destination_offset(destination_root: str) -> int:
    if destination_root.endswith(os.sep):
        return len(destination_root)
    return len(destination_root) + 1


def _exists_in_source(source_path: str) -> bool | None:
    try:
        os.stat(source_path)
    except (FileNotFoundError, NotADirectoryError):
        return False
    except OSError as exc:
        logger.error("stat %s: %s", source_path, exc.strerror or exc)
        return None
    return True


def _purge_entry(
    name: str,
    is_dir: bool,
    source_dir: str,
    destination_dir: str,
    offset: int,
    skip_list: list[str],
    report: PurgeReport,
    out: TextIO,
    ignore: IgnoreEngine | None,
    max_path_length: int,
) -> None:
    try:
        source_path = resolve_path(source_dir, name, max_path_length)
        destination_path = resolve_path(destination_dir, name, max_path_length)
    except PathTooLongError as exc:
        logger.error("%s", exc)
        return

    relative_path = destination_path[offset:]
    if ignore is not None and ignore.is_ignored(relative_path, is_dir=is_dir):
        return

    if is_dir:
        prefix = source_path + os.sep
        known = any(path.startswith(prefix) for path in skip_list)
    else:
        known = source_path in skip_list

    if not known:
        exists = _exists_in_source(source_path)
        if exists is None:
            return
        known = exists

    if known and not is_dir:
        return

    if not known:
        report.add(relative_path)
        out.write(format_path(relative_path, MAX_LINE_LENGTH))
        out.flush()
        return

    purge_files(
        source_path,
        destination_path,
        offset,
        skip_list,
        report,
        out=out,
        ignore=ignore,
        max_path_length=max_path_length,
    )


def purge_files(
    source_dir: str,
    destination_dir: str,
    offset: int,
    skip_list: list[str],
    report: PurgeReport,
    out: TextIO | None = None,
    ignore: IgnoreEngine | None = None,
    max_path_length: int = DEFAULT_MAX_PATH_LENGTH,
) -> PurgeReport:
    stream = out or sys.stdout
    try:
        with closing(iter_directory(destination_dir)) as entries:
            for name, is_dir in entries:
                _purge_entry(
                    name,
                    is_dir,
                    source_dir,
                    destination_dir,
                    offset,
                    skip_list,
                    report,
                    stream,
                    ignore,
                    max_path_length,
                )
    except PurgeListError as exc:
        logger.error("%s", exc)
        report.failed_directories += 1
    return report
