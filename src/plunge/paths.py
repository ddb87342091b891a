from __future__ import annotations

import os


MAX_LINE_LENGTH = 78
DEFAULT_MAX_PATH_LENGTH = 4096

_ELLIPSIS_WIDTH = 3
_MIN_KEPT_WIDTH = 6


class PathTooLongError(ValueError):
    def __init__(self, path: str, limit: int) -> None:
        super().__init__(f"Path exceeds {limit} characters: {path}")
        self.path = path
        self.limit = limit


def resolve_path(
    root: str,
    relative: str,
    max_length: int = DEFAULT_MAX_PATH_LENGTH,
    separator: str = os.sep,
) -> str:
    if root.endswith(separator):
        joined = f"{root}{relative}"
    else:
        joined = f"{root}{separator}{relative}"

    if len(joined) > max_length:
        raise PathTooLongError(joined, max_length)
    return joined


def format_path(path: str, width: int, separator: str = os.sep) -> str:
    padded = width < MAX_LINE_LENGTH
    room = width - _ELLIPSIS_WIDTH if padded else width
    if room < _MIN_KEPT_WIDTH:
        raise ValueError(f"Field width too narrow: {width}")

    text = path
    length = len(path)
    if length > room:
        index = length - 1
        while index > _MIN_KEPT_WIDTH and path[index] != separator:
            index -= 1
        while room - (length - index) < _MIN_KEPT_WIDTH:
            index += 1
        tail = path[index:]
        head_room = room - len(tail)
        text = path[: head_room - _ELLIPSIS_WIDTH] + "." * _ELLIPSIS_WIDTH + tail

    if not padded:
        return text + "\n"

    leader = "".join(" " if (width - column) % 2 else "." for column in range(len(text), width))
    return text + leader
