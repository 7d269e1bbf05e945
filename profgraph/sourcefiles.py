"""Locating and reading the source files named in a profile."""

from __future__ import annotations

import os
import os.path
from typing import IO, Optional

__all__ = [
    "SourceReader",
    "open_source_file",
    "trim_path",
    "indentation",
]

# Prefixes that commonly show up on paths recorded in profiles.
_DEFAULT_TRIM_PREFIXES = ("/proc/self/cwd/./", "/proc/self/cwd/")


def _split_list(paths: str) -> list[str]:
    """Split a path list on the platform separator; an empty list gives no entries."""
    return paths.split(os.pathsep) if paths else []


def _to_slash(path: str) -> str:
    return path.replace(os.sep, "/") if os.sep != "/" else path


def _base_name(path: str) -> str:
    if not path:
        return "."
    stripped = path.rstrip("/" + os.sep)
    if not stripped:
        return os.sep
    return os.path.basename(stripped)


def _parent(directory: str) -> str:
    return os.path.normpath(os.path.dirname(directory) or ".")


def trim_path(path: str, trim: str, search_path: str) -> str:
    """Strip common and configured prefixes from ``path``.

    Without a configured ``trim`` list, the base name of each search
    directory is looked for inside ``path`` and everything up to and
    including it is removed.
    """
    slashed = _to_slash(path)
    search_path = _to_slash(search_path)
    if not trim:
        for directory in _split_list(search_path):
            want = "/" + _base_name(directory) + "/"
            found = slashed.find(want)
            if found != -1:
                return path[found + len(want):]

    prefixes = _split_list(_to_slash(trim)) + list(_DEFAULT_TRIM_PREFIXES)
    for prefix in prefixes:
        if not prefix.endswith("/"):
            prefix += "/"
        if slashed.startswith(prefix):
            return path[len(prefix):]
    return path


def open_source_file(path: str, search_path: str, trim: str) -> IO[str]:
    """Open a source file named in a profile and return it as a text stream.

    Relative names are searched in each directory of ``search_path`` and
    in all of their parents. Absolute names, after trimming, must exist
    as they are. Raises FileNotFoundError when nothing is found.
    """
    path = trim_path(path, trim, search_path)
    if os.path.isabs(path):
        return open(path, encoding="utf-8", errors="replace", newline="")

    for directory in _split_list(search_path):
        while True:
            candidate = os.path.normpath(os.path.join(directory, path))
            try:
                return open(candidate, encoding="utf-8", errors="replace", newline="")
            except OSError:
                pass
            parent = _parent(directory)
            if parent == directory:
                break
            directory = parent

    raise FileNotFoundError(f"could not find file {path} on path {search_path}")


def _split_lines(text: str) -> list[str]:
    lines = text.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


class SourceReader:
    """Reads lines of source files, caching each file's contents."""

    def __init__(self, search_path: str, trim_path: str) -> None:
        self.search_path = search_path
        self.trim_path = trim_path
        self._files: dict[str, list[str]] = {}
        self._errors: dict[str, OSError] = {}

    def file_error(self, path: str) -> Optional[OSError]:
        """Return the error met while reading ``path``, if any."""
        return self._errors.get(path)

    def _load(self, path: str) -> list[str]:
        lines = self._files.get(path)
        if lines is not None:
            return lines
        try:
            with open_source_file(path, self.search_path, self.trim_path) as stream:
                lines = _split_lines(stream.read())
        except OSError as err:
            self._errors[path] = err
            lines = []
        self._files[path] = lines
        return lines

    def line(self, path: str, lineno: int) -> Optional[str]:
        """Return line ``lineno`` (counted from 1) of ``path``, or None if absent."""
        lines = self._load(path)
        if lineno <= 0 or lineno > len(lines):
            return None
        return lines[lineno - 1]


def indentation(line: str) -> int:
    """Return the column at which the text of ``line`` starts, with tab stops of 8."""
    column = 0
    for char in line:
        if char == " ":
            column += 1
        elif char == "\t":
            column += 1
            column += -column % 8
        else:
            break
    return column