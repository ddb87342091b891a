from __future__ import annotations

import argparse
import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
import sys
from typing import TextIO

from plunge.config import load_config
from plunge.run_service import EXIT_INVALID_CONFIG, read_relative_paths, run_sync


DESCRIPTION = "Synchronize (copy) newer files of corresponding names from SOURCE into DEST."
EPILOG = "Relative pathnames of the files to sync are read from standard input, one per line."


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="plunge", description=DESCRIPTION, epilog=EPILOG)
    parser.add_argument(
        "-n",
        "--dry-run",
        action="store_true",
        help="don't actually copy files; just output messages",
    )
    parser.add_argument(
        "-p",
        "--purge",
        action="store_true",
        help="report files in destination directory to purge",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="output messages for all files, whether copied or skipped",
    )
    parser.add_argument("--config", type=Path, default=None, help="YAML or JSON settings file")
    parser.add_argument("--log-file", type=Path, default=None, help="also append diagnostics to this file")
    parser.add_argument("source", metavar="SOURCE")
    parser.add_argument("dest", metavar="DEST")
    return parser


def _configure_logging(verbose: bool, log_file: Path | None) -> logging.Logger:
    logger = logging.getLogger("plunge")
    logger.setLevel(logging.INFO if verbose else logging.WARNING)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(logging.Formatter("plunge: %(message)s"))
    logger.addHandler(console_handler)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(log_file, maxBytes=1_000_000, backupCount=3, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(message)s"))
        logger.addHandler(file_handler)
    return logger


def main(
    argv: list[str] | None = None,
    stdin: TextIO | None = None,
    stdout: TextIO | None = None,
) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    try:
        config = load_config(args.config)
    except Exception as exc:
        print(f"Invalid config: {exc}", file=sys.stderr)
        return EXIT_INVALID_CONFIG

    config.verbose = config.verbose or args.verbose
    config.dry_run = config.dry_run or args.dry_run
    config.purge = config.purge or args.purge

    logger = _configure_logging(config.verbose, args.log_file)
    relative_paths = read_relative_paths(stdin or sys.stdin)

    exit_code, _ = run_sync(
        relative_paths,
        args.source,
        args.dest,
        config,
        out=stdout or sys.stdout,
        logger=logger.getChild("run"),
    )
    return exit_code


if __name__ == "__main__":
    raise SystemExit(main())
