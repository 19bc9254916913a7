"""Library loading for PQLang imports.

This module handles:
- Building the library search path
- Locating `<name>.pq` files by library name
- Reading library sources for the parser
"""

__all__ = ["FileLoader", "LibrarySource", "search_paths", "PATH_VARIABLE"]

import logging
import os
import re
from dataclasses import dataclass
from pathlib import Path

import pqlang


log = logging.getLogger(__name__)

# Environment variable with extra search directories
PATH_VARIABLE = "PQLANG_PATH"

EXTENSION = ".pq"

# Maximum library file size (sanity check)
MAX_FILE_SIZE = 10 * 1024 * 1024

_NAME = re.compile(r"[A-Za-z_][A-Za-z0-9_]*(/[A-Za-z_][A-Za-z0-9_]*)*")


@dataclass
class LibrarySource:
    """Result of locating a library.

    Attributes:
        name: Library name requested by the import
        location: Absolute path of the file it came from
        content: Source text
    """

    name: str
    location: str
    content: str


def search_paths(extra=None, environ=None):
    """Build the ordered list of library search directories.

    Args:
        extra: (list[str] | None) Directories searched first
        environ: (dict | None) Environment to read `PQLANG_PATH` from,
            defaults to `os.environ`
    Returns:
        (list[str]) Search directories, the working directory last
    """
    environ = os.environ if environ is None else environ
    paths = [str(path) for path in extra or ()]
    configured = environ.get(PATH_VARIABLE, "")
    paths.extend(path for path in configured.split(os.pathsep) if path)
    paths.append(str(Path.cwd()))

    unique = []
    for path in paths:
        if path not in unique:
            unique.append(path)
    return unique


class FileLoader:
    """Loader that resolves library names to files on a search path.

    Calling the loader with a library name returns its `LibrarySource`.

    Args:
        search_paths: (list[str]) Directories searched in order
    """

    def __init__(self, search_paths):
        self.search_paths = [str(path) for path in search_paths]

    def __call__(self, name):
        return self.locate(name)

    def locate(self, name):
        """Locate a library and read its source.

        Args:
            name: (str) Identifier or relative path like "util/text"
        Returns:
            (LibrarySource) Location and content of the library
        Raises:
            LibraryNotFoundError: Invalid name or no matching file
        """
        if not _NAME.fullmatch(name):
            raise pqlang.LibraryNotFoundError(f'Invalid library name "{name}"')

        rel_name = name + EXTENSION
        candidates = [os.path.join(path, rel_name) for path in self.search_paths]
        for candidate in candidates:
            if not os.path.isfile(candidate):
                continue
            size = os.path.getsize(candidate)
            if size > MAX_FILE_SIZE:
                raise pqlang.LibraryNotFoundError(
                    f"Library file too large: {candidate} ({size} bytes, max {MAX_FILE_SIZE})"
                )
            location = os.path.abspath(candidate)
            log.debug("Located library %s at %s", name, location)
            content = Path(location).read_text(encoding="utf-8")
            return LibrarySource(name=name, location=location, content=content)

        searched = "\n".join(f"  - {path}" for path in candidates)
        raise pqlang.LibraryNotFoundError(f'Library "{name}" not found\nSearched:\n{searched}')

    def __repr__(self):
        return f"FileLoader<{os.pathsep.join(self.search_paths)}>"
