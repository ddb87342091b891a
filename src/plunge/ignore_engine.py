from __future__ import annotations

from typing import Iterable

import pathspec


class IgnoreEngine:
    def __init__(self, patterns: Iterable[str]) -> None:
        lines = [line for line in patterns if line.strip()]
        self._empty = not lines
        self._spec = pathspec.GitIgnoreSpec.from_lines(lines)

    def is_ignored(self, relative_path: str, is_dir: bool = False) -> bool:
        if self._empty:
            return False
        unix_path = relative_path.replace("\\", "/")
        candidate = f"{unix_path}/" if is_dir and not unix_path.endswith("/") else unix_path
        return self._spec.match_file(candidate)


def build_ignore_engine(patterns: Iterable[str] | None) -> IgnoreEngine:
    return IgnoreEngine(patterns or [])
