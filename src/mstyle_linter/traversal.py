"""
File system traversal: walk directories and collect source files.

Typical usage:
    from pathlib import Path
    from mstyle_linter.traversal import find_source_files

    files = find_source_files(Path("./toolbox"))
    files = find_source_files(Path("./toolbox"), ignore_dirs={"private"})
"""

import fnmatch
import logging
from pathlib import Path
from typing import Iterable

logger = logging.getLogger(__name__)

# Default directories to ignore during traversal
DEFAULT_IGNORE_DIRS: set[str] = {
    # Build and generated code
    "build",
    "dist",
    "out",
    "bin",
    "obj",
    "codegen",
    "slprj",
    "resources",
    # Version control
    ".git",
    ".svn",
    ".hg",
    # IDE and editor directories
    ".vscode",
    ".idea",
    # Tooling caches and environments
    "__pycache__",
    ".cache",
    ".pytest_cache",
    "node_modules",
    "venv",
    ".venv",
}


def should_ignore_directory(dir_path: Path, ignore_dirs: Iterable[str]) -> bool:
    """
    Check if a directory should be skipped.

    Entries of ``ignore_dirs`` are matched against the directory name and may
    be glob patterns (``+internal*``).
    """
    return any(fnmatch.fnmatchcase(dir_path.name, pattern) for pattern in ignore_dirs)


def is_test_file(path: Path, test_prefix: str = "test") -> bool:
    """
    Check if a file holds tests, by file name prefix (case-insensitive).

    Examples:
        >>> is_test_file(Path("tests/testSolver.m"))
        True
        >>> is_test_file(Path("solver.m"))
        False
    """
    return path.name.lower().startswith(test_prefix.lower())


def find_source_files(
    root: Path,
    extension: str = ".m",
    ignore_dirs: Iterable[str] | None = None,
) -> list[Path]:
    """
    Recursively find all source files with ``extension`` under ``root``.

    Args:
        root: Directory to start from.
        extension: File suffix to collect, compared case-insensitively.
        ignore_dirs: Directory names (or glob patterns) to skip. If None, uses
            DEFAULT_IGNORE_DIRS.

    Returns:
        Matching paths, sorted for deterministic ordering.

    Raises:
        FileNotFoundError: If ``root`` does not exist.
        NotADirectoryError: If ``root`` is not a directory.

    Notes:
        Symlinks are not followed. Permission errors on subdirectories are
        logged and do not stop the walk.
    """
    ignore = set(DEFAULT_IGNORE_DIRS if ignore_dirs is None else ignore_dirs)

    if not root.exists():
        raise FileNotFoundError(f"Root directory does not exist: {root}")
    if not root.is_dir():
        raise NotADirectoryError(f"Root path is not a directory: {root}")

    collected: list[Path] = []
    pending = [root]
    while pending:
        current = pending.pop()
        try:
            entries = list(current.iterdir())
        except OSError as e:
            logger.warning("Error accessing directory %s: %s", current, e)
            continue
        for entry in entries:
            if entry.is_symlink():
                logger.debug("Skipping symlink: %s", entry)
                continue
            if entry.is_dir():
                if should_ignore_directory(entry, ignore):
                    logger.debug("Ignoring directory: %s", entry)
                    continue
                pending.append(entry)
            elif entry.is_file() and entry.suffix.lower() == extension.lower():
                collected.append(entry)

    collected.sort()
    logger.debug("Found %d source file(s) in %s", len(collected), root)
    return collected
