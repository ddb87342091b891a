from __future__ import annotations

from dataclasses import dataclass
import logging
import sys
from typing import TextIO

from plunge.comparator import compare_files
from plunge.copier import copy_file
from plunge.models import CompareResult, SyncDecision, SyncStats
from plunge.paths import DEFAULT_MAX_PATH_LENGTH, MAX_LINE_LENGTH, PathTooLongError, format_path, resolve_path


logger = logging.getLogger("plunge.sync")

TERSE_FIELD_WIDTH = MAX_LINE_LENGTH - 18
VERBOSE_FIELD_WIDTH = MAX_LINE_LENGTH - 26

TERSE_HEADING = (
    "                         Pathname                                 Status\n"
    "----------------------------------------------------------  ------------------"
)
VERBOSE_HEADING = (
    "                     Pathname                             Status        Action\n"
    "--------------------------------------------------  ------------------  ------"
)

TERSE_LABELS: dict[CompareResult, str] = {
    CompareResult.DST_MISSING: "New",
    CompareResult.SRC_LARGER_NEWER: "Newer and larger",
    CompareResult.SRC_NEWER: "Newer (not larger)",
}

VERBOSE_LABELS: dict[CompareResult, str] = {
    CompareResult.ERROR: "Error",
    CompareResult.SRC_MISSING: "Src not found. . . . Skip",
    CompareResult.SRC_NOT_FILE: "Src not a file . . . Skip",
    CompareResult.DST_MISSING: "Dst not found. . . . Copy",
    CompareResult.DST_NOT_FILE: "Dst not a file . . . Skip",
    CompareResult.SAME_AGE: "Same age . . . . . . Skip",
    CompareResult.DST_NEWER: "Dst newer! . . . . . Skip",
    CompareResult.SRC_LARGER_NEWER: "Src newer & larger . Copy",
    CompareResult.SRC_NEWER: "Src newer. . . . . . Copy",
}

COPY_RESULTS = frozenset(TERSE_LABELS)


@dataclass(slots=True)
class SyncRunOptions:
    verbose: bool = False
    dry_run: bool = False
    max_path_length: int = DEFAULT_MAX_PATH_LENGTH


def heading(verbose: bool) -> str:
    return VERBOSE_HEADING if verbose else TERSE_HEADING


def decide(result: CompareResult, verbose: bool) -> SyncDecision:
    labels = VERBOSE_LABELS if verbose else TERSE_LABELS
    return SyncDecision(label=labels.get(result), should_copy=result in COPY_RESULTS)


def _emit(out: TextIO, relative_path: str, label: str, verbose: bool) -> None:
    width = VERBOSE_FIELD_WIDTH if verbose else TERSE_FIELD_WIDTH
    out.write(format_path(relative_path, width) + label + "\n")
    out.flush()


def process_file(
    relative_path: str,
    source_root: str,
    destination_root: str,
    options: SyncRunOptions,
    stats: SyncStats,
    out: TextIO | None = None,
) -> CompareResult:
    stream = out or sys.stdout

    try:
        source_file = resolve_path(source_root, relative_path, options.max_path_length)
        destination_file = resolve_path(destination_root, relative_path, options.max_path_length)
    except PathTooLongError as exc:
        logger.error("%s", exc)
        result, source_stat = CompareResult.ERROR, None
    else:
        result, source_stat = compare_files(source_file, destination_file)

    decision = decide(result, options.verbose)
    if decision.label is not None:
        _emit(stream, relative_path, decision.label, options.verbose)

    if result is CompareResult.ERROR:
        stats.failed += 1
        return result
    if not decision.should_copy:
        stats.skipped += 1
        return result

    if options.dry_run:
        stats.copied += 1
        return result

    try:
        copy_file(source_file, destination_file, source_stat)
    except OSError as exc:
        logger.error("copy %s -> %s failed: %s", source_file, destination_file, exc.strerror or exc)
        stats.failed += 1
    else:
        stats.copied += 1
    return result

