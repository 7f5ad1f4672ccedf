# src/periscope/core/ignore.py
from pathlib import PurePath
from typing import Iterable, List, Optional

import pathspec


def build_exclude_spec(
    excluded_dirs: Iterable[str], extra_patterns: Optional[List[str]] = None
) -> pathspec.PathSpec:
    """
    Compiles excluded directory names into a PathSpec.
    Each name becomes a 'name/' pattern, so it matches at any depth.
    Extra patterns are taken as gitignore-style lines.
    """
    lines = [f"{name.strip('/')}/" for name in sorted(excluded_dirs) if name.strip("/")]

    if extra_patterns:
        lines.extend(extra_patterns)

    try:
        return pathspec.PathSpec.from_lines("gitwildmatch", lines)
    except Exception as e:
        raise ValueError(f"Error parsing exclusion rules: {e}") from e


def is_dir_excluded(rel_path: PurePath, spec: pathspec.PathSpec) -> bool:
    """Checks a root-relative directory path against the exclusion spec."""
    # Trailing slash so 'name/' patterns only ever hit directories
    return spec.match_file(rel_path.as_posix() + "/")
