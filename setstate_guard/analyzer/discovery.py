"""Source file discovery for the CLI."""
from pathlib import Path
from typing import Iterable, List, Optional, Set

from ..config import VENDORED_DIRS
from .parser import LanguageParser


def discover_files(paths: Iterable[str | Path], excluded_dirs: Set[str],
                   include_vendored: bool = False) -> List[Path]:
    """Expand files and directories into the sorted list of files to check.

    Args:
        paths: Files and/or directories given on the command line
        excluded_dirs: Directory names to skip while recursing
        include_vendored: Keep node_modules, vendor, ... in the walk

    Returns:
        De-duplicated, sorted list of supported source files. Files named
        explicitly are kept even inside excluded directories.
    """
    if include_vendored:
        excluded_dirs = excluded_dirs - VENDORED_DIRS

    files = set()
    for raw in paths:
        path = Path(raw)
        if path.is_file():
            if LanguageParser.is_supported(path):
                files.add(path)
            continue
        for extension in LanguageParser.SUPPORTED_LANGUAGES:
            for file_path in path.rglob(f'*{extension}'):
                relative = _relative_parts(file_path, path)
                if not any(part in excluded_dirs for part in relative):
                    files.add(file_path)

    return sorted(files)


def _relative_parts(file_path: Path, root: Path) -> tuple:
    try:
        return file_path.relative_to(root).parts
    except ValueError:
        return file_path.parts


def missing_paths(paths: Iterable[str | Path]) -> List[Path]:
    return [Path(p) for p in paths if not Path(p).exists()]


def display_path(file_path: str | Path, base: Optional[Path] = None) -> str:
    """Render `file_path` relative to `base` (default: cwd) when possible."""
    base = base or Path.cwd()
    try:
        return str(Path(file_path).resolve().relative_to(base.resolve()))
    except ValueError:
        return str(file_path)
