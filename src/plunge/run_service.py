from __future__ import annotations

from dataclasses import dataclass
import logging
import os
import sys
from typing import Iterable, TextIO

from plunge.config import SyncConfig
from plunge.ignore_engine import build_ignore_engine
from plunge.models import PurgeReport, SyncStats
from plunge.purge import PURGE_BANNER, build_skip_list, destination_offset, purge_files
from plunge.sync_engine import SyncRunOptions, heading, process_file


EXIT_SUCCESS = 0
EXIT_RUNTIME_OR_CONFIG_ERROR = 1
EXIT_PARTIAL_FAILURES = 2
EXIT_INVALID_CONFIG = 3


@dataclass(slots=True)
class RunSummary:
    copied: int = 0
    skipped: int = 0
    failed: int = 0
    orphans: int = 0
    processed_files: int = 0
    partial_failures: bool = False

    def absorb(self, stats: SyncStats) -> None:
        self.copied += stats.copied
        self.skipped += stats.skipped
        self.failed += stats.failed
        self.processed_files += stats.copied + stats.skipped + stats.failed
        if stats.failed:
            self.partial_failures = True

    def absorb_purge(self, report: PurgeReport) -> None:
        self.orphans = len(report.entries)
        if report.failed_directories:
            self.partial_failures = True


def read_relative_paths(lines: Iterable[str]) -> list[str]:
    paths: list[str] = []
    for line in lines:
        stripped = line.strip()
        if not stripped:
            continue
        if os.sep != "/":
            stripped = stripped.replace("/", os.sep)
        paths.append(stripped)
    return paths


def _validate_roots(source_root: str, destination_root: str) -> None:
    if not os.path.isdir(source_root):
        raise ValueError(f"Source directory does not exist or is not a directory: {source_root}")
    if os.path.exists(destination_root) and not os.path.isdir(destination_root):
        raise ValueError(f"Destination exists and is not a directory: {destination_root}")


def run_sync(
    relative_paths: list[str],
    source_root: str,
    destination_root: str,
    config: SyncConfig,
    out: TextIO | None = None,
    logger: logging.Logger | None = None,
) -> tuple[int, RunSummary]:
    log = logger or logging.getLogger("plunge.run")
    stream = out or sys.stdout
    summary = RunSummary()

    if not relative_paths:
        return EXIT_SUCCESS, summary

    try:
        _validate_roots(source_root, destination_root)
    except ValueError as exc:
        log.error("%s", exc)
        return EXIT_RUNTIME_OR_CONFIG_ERROR, RunSummary(partial_failures=True)

    options = SyncRunOptions(
        verbose=config.verbose,
        dry_run=config.dry_run,
        max_path_length=config.max_path_length,
    )
    stats = SyncStats()

    stream.write("\n" + heading(options.verbose) + "\n")
    stream.flush()
    for relative_path in relative_paths:
        process_file(relative_path, source_root, destination_root, options, stats, out=stream)
    summary.absorb(stats)

    if config.purge:
        stream.write(PURGE_BANNER + "\n")
        stream.flush()
        report = PurgeReport()
        if os.path.isdir(destination_root):
            purge_files(
                source_root,
                destination_root,
                destination_offset(destination_root),
                build_skip_list(source_root, relative_paths, config.max_path_length),
                report,
                out=stream,
                ignore=build_ignore_engine(config.purge_excludes),
                max_path_length=config.max_path_length,
            )
        summary.absorb_purge(report)

    stream.write("\n")
    stream.flush()

    log.info(
        "%s -> %s | copied=%s skipped=%s failed=%s orphans=%s%s",
        source_root,
        destination_root,
        summary.copied,
        summary.skipped,
        summary.failed,
        summary.orphans,
        " (dry run)" if options.dry_run else "",
    )

    exit_code = EXIT_PARTIAL_FAILURES if summary.partial_failures else EXIT_SUCCESS
    return exit_code, summary
