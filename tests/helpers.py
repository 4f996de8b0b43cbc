"""Helpers shared across tsdocgen tests."""

from pathlib import Path


def write(path: Path, content: str) -> Path:
    """Write content to path, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)
    return path
