"""Project file listing and text-content capture for status responses."""

from __future__ import annotations

import logging
from pathlib import Path

logger = logging.getLogger(__name__)

TEXT_EXTENSIONS = {
    ".txt", ".js", ".jsx", ".ts", ".tsx", ".py", ".html", ".css", ".scss",
    ".json", ".md", ".yaml", ".yml", ".xml", ".csv", ".sh", ".bat", ".ps1",
    ".gitignore", ".env", ".c", ".cpp", ".h", ".hpp", ".java", ".rb", ".php",
    ".go", ".rs", ".swift", ".kt", ".kts", ".sql", ".prisma", ".graphql",
}
LISTING_SKIP_DIRS = {"node_modules", ".git"}


def is_text_file(filename: str) -> bool:
    """True when the extension (or dotfile name, e.g. ``.gitignore``) is a known text type."""
    name = Path(filename).name.lower()
    suffix = Path(name).suffix or (name if name.startswith(".") else "")
    return suffix in TEXT_EXTENSIONS


def list_project_files(root: Path) -> list[str]:
    """Every file under ``root`` as a sorted relative POSIX path (dependency caches skipped)."""
    root = Path(root)
    files: list[str] = []
    for path in root.rglob("*"):
        rel = path.relative_to(root)
        if any(part in LISTING_SKIP_DIRS for part in rel.parts):
            continue
        if path.is_file():
            files.append(rel.as_posix())
    return sorted(files)


def read_text_contents(root: Path, files: list[str], max_bytes: int = 1024 * 1024) -> dict[str, str]:
    """Read small text files. Unreadable files are logged and left out."""
    root = Path(root)
    contents: dict[str, str] = {}
    for rel in files:
        if not is_text_file(rel):
            continue
        path = root / rel
        try:
            if path.stat().st_size >= max_bytes:
                continue
            contents[rel] = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.error("Error reading file %s: %s", rel, e)
    return contents
