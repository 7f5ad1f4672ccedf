# src/periscope/core/tree.py
from typing import Dict, Iterable, List


def build_tree(paths: Iterable[str]) -> Dict:
    """Nests posix-style snapshot paths into a dict of dicts (leaves are empty)."""
    tree: Dict = {}
    for path in sorted(paths):
        node = tree
        for part in path.strip("/").split("/"):
            node = node.setdefault(part, {})
    return tree


def render_tree(paths: Iterable[str], root_name: str) -> str:
    """Draws the snapshot as an indented tree under root_name/."""
    lines: List[str] = [f"{root_name}/"]

    def _walk(node: Dict, prefix: str):
        # Directories first, then files, each alphabetical
        entries = sorted(node.items(), key=lambda kv: (not kv[1], kv[0]))
        for i, (name, children) in enumerate(entries):
            is_last = i == len(entries) - 1
            connector = "└── " if is_last else "├── "
            lines.append(f"{prefix}{connector}{name}{'/' if children else ''}")
            if children:
                _walk(children, prefix + ("    " if is_last else "│   "))

    _walk(build_tree(paths), "")
    return "\n".join(lines) + "\n"
