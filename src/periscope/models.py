# src/periscope/models.py
from dataclasses import dataclass
from typing import Any, Dict


@dataclass(frozen=True)
class FileRecord:
    """One captured file in a snapshot. Path is root-relative, posix style."""
    path: str
    content: str
    timestamp: float

    def to_dict(self) -> Dict[str, Any]:
        return {"path": self.path, "content": self.content, "timestamp": self.timestamp}
