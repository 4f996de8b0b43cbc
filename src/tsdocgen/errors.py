"""Exceptions raised by tsdocgen."""

from __future__ import annotations

from pathlib import Path


class DocgenError(Exception):
    """Base exception for tsdocgen operations."""

    def __init__(self, message: str, path: Path | None = None):
        super().__init__(message)
        self.path = path


class ExtractionError(DocgenError):
    """Raised when a source file cannot be read."""

    pass


class ConfigError(DocgenError):
    """Raised when docgen.yaml is unparsable or a package entry is invalid."""

    pass
