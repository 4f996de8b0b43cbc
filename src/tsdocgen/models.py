"""Data models for documentation extraction."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

UNKNOWN_TYPE = "unknown"


class ExportKind(str, Enum):
    """Kind of exported symbol."""

    INTERFACE = "interface"
    TYPE = "type"
    FUNCTION = "function"
    CLASS = "class"
    ENUM = "enum"
    CONST = "const"
    VARIABLE = "variable"


class PackageKind(str, Enum):
    """Kind of package, supplied by configuration."""

    CORE = "core"
    ADAPTER = "adapter"
    FRONTEND = "frontend"
    MOBILE = "mobile"


@dataclass(frozen=True)
class Parameter:
    """Function parameter parsed from a signature."""

    name: str
    type_annotation: str = UNKNOWN_TYPE
    description: str | None = None  # From @param tag
    optional: bool = False
    default: str | None = None


@dataclass(frozen=True)
class ExportRecord:
    """One exported declaration found in a source file."""

    name: str
    kind: ExportKind
    source_file: Path
    line: int  # 1-based
    description: str | None = None
    signature: str | None = None
    params: list[Parameter] = field(default_factory=list)  # Functions only
    returns: str | None = None  # Return type annotation (functions only)
    examples: list[str] = field(default_factory=list)  # From @example tags
    deprecated: str | None = None  # From @deprecated tag


@dataclass(frozen=True)
class DocComment:
    """Parsed /** ... */ block."""

    description: str | None = None
    params: dict[str, str] = field(default_factory=dict)  # param -> description
    returns: str | None = None
    examples: list[str] = field(default_factory=list)
    deprecated: str | None = None


@dataclass(frozen=True)
class PackageModel:
    """Package metadata plus its exports."""

    name: str
    version: str
    description: str
    path: Path
    kind: PackageKind
    internal_deps: list[str] = field(default_factory=list)
    exports: list[ExportRecord] = field(default_factory=list)

    def exports_of(self, *kinds: ExportKind) -> list[ExportRecord]:
        """Exports matching any of the given kinds, in package order."""
        return [e for e in self.exports if e.kind in kinds]


@dataclass(frozen=True)
class ExtractedDocs:
    """Results from extracting one package."""

    package: PackageModel
    files: dict[Path, list[ExportRecord]]  # Ordered by path
    readme: str | None = None
    changelog: str | None = None


@dataclass
class PackageConfig:
    """Configuration for a single package."""

    name: str
    path: Path
    kind: PackageKind
    entry_points: list[str] = field(default_factory=list)
    exclude: list[str] = field(default_factory=list)


@dataclass
class OutputConfig:
    """Output configuration."""

    dir: Path = Path("docs")
    api_reference: bool = True
    changelog: bool = True
    package_readme: bool = True


@dataclass
class DocgenConfig:
    """Configuration for documentation generation."""

    packages: list[PackageConfig] = field(default_factory=list)
    output: OutputConfig = field(default_factory=OutputConfig)
    templates: Path | None = None
    scope: str | None = None  # e.g. "@acme/", stripped from output slugs


class IssueSeverity(str, Enum):
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


@dataclass
class ValidationIssue:
    """A single problem found while validating generated docs."""

    severity: IssueSeverity
    message: str
    file: Path | None = None
    line: int | None = None
    suggestion: str | None = None

    def location(self) -> str:
        if self.file is not None and self.line is not None:
            return f" at {self.file}:{self.line}"
        if self.file is not None:
            return f" in {self.file}"
        return ""


@dataclass
class ValidationResult:
    """Results from documentation validation."""

    passed: bool = True
    errors: list[ValidationIssue] = field(default_factory=list)  # Build fails if non-empty
    warnings: list[ValidationIssue] = field(default_factory=list)  # Fail only in strict mode
    info: list[str] = field(default_factory=list)
