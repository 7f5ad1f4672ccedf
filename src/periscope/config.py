# src/periscope/config.py
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Mapping, Optional, Set

# Text formats the viewer can render: script, markup, stylesheet, data, docs, web page
DEFAULT_EXTENSIONS = {
    ".ts",
    ".tsx",
    ".js",
    ".jsx",
    ".css",
    ".md",
    ".json",
    ".html",
}

# Never descended into: VCS metadata, dependency cache, build output cache
DEFAULT_EXCLUDED_DIRS = {
    ".git",
    "node_modules",
    ".next",
}

# Files must be strictly smaller than this (bytes)
MAX_FILE_SIZE = 100_000

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 3001
DEFAULT_ROUTE = "/files"
DEFAULT_PROBE_NEEDLE = "page.tsx"

ERROR_MESSAGE = "Periscope Malfunction"


def parse_extensions(raw: str) -> Set[str]:
    """Turns 'ts, .TSX,md' into {'.ts', '.tsx', '.md'}."""
    exts = set()
    for part in raw.split(","):
        part = part.strip().lower()
        if not part:
            continue
        exts.add(part if part.startswith(".") else f".{part}")
    return exts


def parse_names(raw: str) -> Set[str]:
    return {p.strip() for p in raw.split(",") if p.strip()}


def parse_size(raw: str) -> int:
    try:
        size = int(raw)
    except ValueError:
        raise ValueError(f"Invalid max file size: {raw!r}")
    if size <= 0:
        raise ValueError(f"Max file size must be positive, got {size}")
    return size


@dataclass
class ScanSettings:
    """Everything a scan needs. Defaults mirror the constants above."""
    root: Path = field(default_factory=Path.cwd)
    extensions: Set[str] = field(default_factory=lambda: set(DEFAULT_EXTENSIONS))
    excluded_dirs: Set[str] = field(default_factory=lambda: set(DEFAULT_EXCLUDED_DIRS))
    max_file_size: int = MAX_FILE_SIZE
    # Extra gitignore-style patterns for directories to skip
    exclude_patterns: List[str] = field(default_factory=list)


def load_settings(environ: Optional[Mapping[str, str]] = None) -> ScanSettings:
    """
    Builds ScanSettings from PERISCOPE_* environment variables.
    Unset or empty variables keep the defaults.
    """
    env = os.environ if environ is None else environ
    settings = ScanSettings()

    if env.get("PERISCOPE_ROOT"):
        settings.root = Path(env["PERISCOPE_ROOT"])
    if env.get("PERISCOPE_EXTENSIONS"):
        settings.extensions = parse_extensions(env["PERISCOPE_EXTENSIONS"])
    if env.get("PERISCOPE_EXCLUDE_DIRS"):
        settings.excluded_dirs = parse_names(env["PERISCOPE_EXCLUDE_DIRS"])
    if env.get("PERISCOPE_MAX_FILE_SIZE"):
        settings.max_file_size = parse_size(env["PERISCOPE_MAX_FILE_SIZE"])
    if env.get("PERISCOPE_EXCLUDE_PATTERNS"):
        settings.exclude_patterns = sorted(parse_names(env["PERISCOPE_EXCLUDE_PATTERNS"]))

    return settings
