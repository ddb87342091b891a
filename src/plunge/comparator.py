from __future__ import annotations

import logging
import os
import stat

from plunge.models import CompareResult, FileStat


logger = logging.getLogger("plunge.comparator")


def _stat(path: str) -> os.stat_result | None:
    try:
        return os.lstat(path)
    except FileNotFoundError:
        return None


def compare_files(source_file: str, destination_file: str) -> tuple[CompareResult, FileStat | None]:
    try:
        source_stat = _stat(source_file)
    except OSError as exc:
        logger.error("stat %s: %s", source_file, exc.strerror or exc)
        return CompareResult.ERROR, None

    if source_stat is None:
        return CompareResult.SRC_MISSING, None
    if not stat.S_ISREG(source_stat.st_mode):
        return CompareResult.SRC_NOT_FILE, None

    source_info = FileStat(size=source_stat.st_size, mtime=int(source_stat.st_mtime))

    try:
        destination_stat = _stat(destination_file)
    except OSError as exc:
        logger.error("stat %s: %s", destination_file, exc.strerror or exc)
        return CompareResult.ERROR, source_info

    if destination_stat is None:
        return CompareResult.DST_MISSING, source_info
    if not stat.S_ISREG(destination_stat.st_mode):
        return CompareResult.DST_NOT_FILE, source_info

    destination_mtime = int(destination_stat.st_mtime)
    if source_info.mtime == destination_mtime:
        return CompareResult.SAME_AGE, source_info
    if source_info.mtime < destination_mtime:
        return CompareResult.DST_NEWER, source_info

    if source_info.size > destination_stat.st_size:
        return CompareResult.SRC_LARGER_NEWER, source_info
    return CompareResult.SRC_NEWER, source_info
