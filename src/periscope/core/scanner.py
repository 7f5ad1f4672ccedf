# src/periscope/core/scanner.py
import logging
import os
from pathlib import Path
from typing import Iterator, List, Set, Tuple

import pathspec

from periscope.config import ScanSettings
from periscope.core.ignore import build_exclude_spec, is_dir_excluded
from periscope.models import FileRecord

logger = logging.getLogger(__name__)


class ScanError(Exception):
    """The traversal as a whole failed. No partial snapshot is produced."""


class SnapshotScanner:
    def __init__(
        self,
        root_dir: Path,
        extensions: Set[str],
        exclude_spec: pathspec.PathSpec,
        max_file_size: int,
    ):
        self.root_dir = Path(root_dir)
        self.extensions = {e.lower() for e in extensions}
        self.exclude_spec = exclude_spec
        self.max_file_size = max_file_size

    def is_eligible(self, name: str, size: int) -> bool:
        """Allow-listed extension (any case) and strictly under the size cutoff."""
        return Path(name).suffix.lower() in self.extensions and size < self.max_file_size

    def _read_file(self, path: Path) -> str:
        # Undecodable bytes become U+FFFD instead of dropping the file
        return path.read_text(encoding="utf-8", errors="replace")

    def _raise_walk_error(self, err: OSError):
        # A subdirectory removed after its parent was listed counts as empty
        if isinstance(err, FileNotFoundError) and err.filename and Path(err.filename) != self.root_dir:
            logger.warning("Directory %s vanished during scan, skipping", err.filename)
            return
        raise ScanError(f"Cannot list '{err.filename}': {err.strerror or err}") from err

    def scan(self) -> Iterator[FileRecord]:
        """
        Walks the tree under root_dir, pruning excluded directories before
        descending, and yields a FileRecord for every eligible file.

        Symlinked directories are followed, each real directory at most once.
        A missing root yields nothing, and so does a subdirectory that
        disappears mid-scan. Any other listing failure raises ScanError.
        A file that cannot be stat'ed or read is skipped.
        """
        if not self.root_dir.exists():
            logger.info("Scan root %s does not exist, snapshot is empty", self.root_dir)
            return

        root_stat = self.root_dir.stat()
        visited: Set[Tuple[int, int]] = {(root_stat.st_dev, root_stat.st_ino)}

        for root, dirs, files in os.walk(self.root_dir, onerror=self._raise_walk_error, followlinks=True):
            root_path = Path(root)

            # In-place edit of dirs stops os.walk from entering them
            for d in list(dirs):
                dir_abs_path = root_path / d
                dir_rel_path = dir_abs_path.relative_to(self.root_dir)
                if is_dir_excluded(dir_rel_path, self.exclude_spec):
                    logger.debug("Pruning directory %s", dir_rel_path.as_posix())
                    dirs.remove(d)
                    continue

                try:
                    dir_stat = dir_abs_path.stat()
                except OSError as e:
                    logger.warning("Skipping directory %s: %s", dir_rel_path.as_posix(), e)
                    dirs.remove(d)
                    continue

                key = (dir_stat.st_dev, dir_stat.st_ino)
                if key in visited:
                    logger.debug("Already scanned %s, not following again", dir_rel_path.as_posix())
                    dirs.remove(d)
                    continue
                visited.add(key)

            for f in files:
                if Path(f).suffix.lower() not in self.extensions:
                    continue

                file_abs_path = root_path / f
                rel_path = file_abs_path.relative_to(self.root_dir).as_posix()

                try:
                    stat = file_abs_path.stat()
                    if not self.is_eligible(f, stat.st_size):
                        continue
                    content = self._read_file(file_abs_path)
                except OSError as e:
                    logger.warning("Skipping file %s: %s", rel_path, e)
                    continue

                yield FileRecord(
                    path=rel_path,
                    content=content,
                    timestamp=stat.st_mtime * 1000,
                )

    def snapshot(self) -> List[FileRecord]:
        return list(self.scan())


def take_snapshot(settings: ScanSettings) -> List[FileRecord]:
    """Runs one complete scan with the given settings."""
    spec = build_exclude_spec(settings.excluded_dirs, settings.exclude_patterns)
    scanner = SnapshotScanner(settings.root, settings.extensions, spec, settings.max_file_size)
    return scanner.snapshot()
