"""Markdown generators for extracted documentation.

Every ``render_*`` function is pure: it takes extracted models and returns
markdown text. Writing files is left to ``write_package_docs`` and
``write_api_index``.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path

from .models import (
    DocgenConfig,
    ExportKind,
    ExportRecord,
    ExtractedDocs,
    PackageConfig,
    PackageKind,
)

log = logging.getLogger(__name__)

_SCOPE_PREFIX = re.compile(r"^@[^/]+/")

# (kind, section heading), in output order
_API_INDEX_SECTIONS = [
    (PackageKind.CORE, "Core Packages"),
    (PackageKind.ADAPTER, "Database Adapters"),
    (PackageKind.FRONTEND, "Frontend SDKs"),
    (PackageKind.MOBILE, "Mobile SDKs"),
]

_SUMMARY_ROWS = [
    (ExportKind.INTERFACE, "Interfaces"),
    (ExportKind.TYPE, "Types"),
    (ExportKind.FUNCTION, "Functions"),
    (ExportKind.CLASS, "Classes"),
]

_TYPES_SECTIONS = [
    (ExportKind.INTERFACE, "Interfaces"),
    (ExportKind.TYPE, "Type Aliases"),
    (ExportKind.ENUM, "Enums"),
    (ExportKind.CLASS, "Classes"),
]


def package_slug(name: str, scope: str | None = None) -> str:
    """Convert package name to its output directory name.

    ``@acme/fastify-auth`` becomes ``fastify_auth``. When ``scope`` is given
    only that prefix is removed; otherwise any leading ``@scope/`` is.
    """
    if scope:
        name = name.replace(scope, "")
    else:
        name = _SCOPE_PREFIX.sub("", name)
    return name.replace("-", "_")


def _escape_cell(text: str) -> str:
    return text.replace("|", "\\|")


def render_export(export: ExportRecord) -> list[str]:
    """Render the shared block for one export."""
    lines = [f"### `{export.name}`", ""]

    if export.deprecated is not None:
        lines.extend([f"> ⚠️ **Deprecated:** {export.deprecated}", ""])

    if export.description:
        lines.extend([export.description, ""])

    if export.signature:
        lines.extend(["```typescript", export.signature, "```", ""])

    lines.extend(
        [
            f"*Defined in [`{export.source_file.name}`]"
            f"({export.source_file}:{export.line})*",
            "",
        ]
    )

    if export.params:
        lines.extend(
            [
                "**Parameters:**",
                "",
                "| Name | Type | Required | Description |",
                "|------|------|----------|-------------|",
            ]
        )
        for param in export.params:
            required = "No" if param.optional else "Yes"
            desc = _escape_cell(param.description) if param.description else "-"
            lines.append(
                f"| `{param.name}` | `{_escape_cell(param.type_annotation)}` "
                f"| {required} | {desc} |"
            )
        lines.append("")

    if export.returns:
        lines.extend([f"**Returns:** `{export.returns}`", ""])

    if export.examples:
        lines.extend(["**Example:**", ""])
        for example in export.examples:
            lines.extend(["```typescript", example, "```", ""])

    lines.extend(["---", ""])
    return lines


def _skip_duplicate_heading(readme: str, package_name: str) -> str:
    """Drop the README's first heading if it repeats the package name."""
    lines = readme.splitlines()
    if lines and lines[0].startswith("#"):
        heading = lines[0].lstrip("#").strip()
        if heading in package_name or package_name in heading:
            return "\n".join(lines[1:]).lstrip()
    return readme


def render_package_index(docs: ExtractedDocs) -> str:
    """Generate index.md for one package."""
    pkg = docs.package
    lines = [f"# {pkg.name}", ""]

    if pkg.description:
        lines.extend([pkg.description, ""])

    lines.extend(
        [
            f"**Version:** {pkg.version}",
            "",
            "## Installation",
            "",
            "```bash",
            f"npm install {pkg.name}",
            "# or",
            f"pnpm add {pkg.name}",
            "```",
            "",
            "## Exports",
            "",
            "| Category | Count |",
            "|----------|-------|",
        ]
    )

    for kind, label in _SUMMARY_ROWS:
        count = len(pkg.exports_of(kind))
        if count:
            lines.append(f"| {label} | {count} |")
    lines.append("")

    lines.extend(["## Documentation", "", "- [Types Reference](./types.md)"])
    if pkg.exports_of(ExportKind.FUNCTION):
        lines.append("- [Functions Reference](./functions.md)")
    lines.append("")

    if docs.readme is not None:
        lines.extend(["---", ""])
        lines.append(_skip_duplicate_heading(docs.readme, pkg.name))

    return "\n".join(lines)


def render_types_page(docs: ExtractedDocs) -> str:
    """Generate types.md: interfaces, type aliases, enums and classes."""
    lines = [f"# {docs.package.name} - Types", ""]

    for kind, heading in _TYPES_SECTIONS:
        exports = docs.package.exports_of(kind)
        if not exports:
            continue
        lines.extend([f"## {heading}", ""])
        for export in exports:
            lines.extend(render_export(export))

    return "\n".join(lines)


def render_functions_page(functions: list[ExportRecord], package_name: str) -> str:
    """Generate functions.md from the function exports of a package."""
    lines = [f"# {package_name} - Functions", ""]
    for export in functions:
        lines.extend(render_export(export))
    return "\n".join(lines)


def render_api_index(packages: list[PackageConfig], scope: str | None = None) -> str:
    """Generate api/index.md linking every configured package by kind."""
    lines = [
        "# API Reference",
        "",
        "Complete API documentation for the monorepo packages.",
        "",
    ]

    for kind, heading in _API_INDEX_SECTIONS:
        group = [p for p in packages if p.kind == kind]
        if not group:
            continue
        lines.extend([f"## {heading}", ""])
        for pkg in group:
            lines.append(f"- [{pkg.name}](./{package_slug(pkg.name, scope)}/)")
        lines.append("")

    return "\n".join(lines)


def render_file_types(source: Path, exports: list[ExportRecord]) -> str:
    """Generate a single-file types page grouped by every export kind."""
    lines = [f"# Types from {source}", ""]

    sections = [
        ((ExportKind.INTERFACE,), "Interfaces"),
        ((ExportKind.TYPE,), "Types"),
        ((ExportKind.FUNCTION,), "Functions"),
        ((ExportKind.CLASS,), "Classes"),
        ((ExportKind.ENUM,), "Enums"),
        ((ExportKind.CONST, ExportKind.VARIABLE), "Constants"),
    ]
    for kinds, heading in sections:
        group = [e for e in exports if e.kind in kinds]
        if not group:
            continue
        lines.extend([f"## {heading}", ""])
        for export in group:
            lines.extend(_render_file_export(export))

    return "\n".join(lines)


def _render_file_export(export: ExportRecord) -> list[str]:
    """Compact block used by render_file_types."""
    lines = [f"### `{export.name}`", ""]

    if export.description:
        lines.extend([export.description, ""])

    if export.signature:
        lines.extend(["```typescript", export.signature, "```", ""])

    if export.params:
        lines.extend(["**Parameters:**", ""])
        for param in export.params:
            optional = " (optional)" if param.optional else ""
            lines.append(f"- `{param.name}`: `{param.type_annotation}`{optional}")
            if param.description:
                lines.append(f"  - {param.description}")
        lines.append("")

    if export.returns:
        lines.extend([f"**Returns:** `{export.returns}`", ""])

    if export.examples:
        lines.extend(["**Examples:**", ""])
        for example in export.examples:
            lines.extend(["```typescript", example, "```", ""])

    if export.deprecated is not None:
        lines.extend([f"> ⚠️ **Deprecated:** {export.deprecated}", ""])

    lines.extend(["---", ""])
    return lines


# =============================================================================
# Writers
# =============================================================================


def write_package_docs(
    output_dir: Path, docs: ExtractedDocs, logger: logging.Logger | None = None
) -> list[Path]:
    """Write index.md, types.md and functions.md for one package.

    types.md is skipped when the package has no exports and functions.md
    when it has no function exports.
    """
    logger = logger or log
    output_dir.mkdir(parents=True, exist_ok=True)
    written: list[Path] = []

    pages = [("index.md", render_package_index(docs))]
    if docs.package.exports:
        pages.append(("types.md", render_types_page(docs)))
    functions = docs.package.exports_of(ExportKind.FUNCTION)
    if functions:
        pages.append(("functions.md", render_functions_page(functions, docs.package.name)))

    for filename, content in pages:
        path = output_dir / filename
        path.write_text(content, encoding="utf-8")
        logger.info("Generated %s", path)
        written.append(path)

    return written


def write_api_index(
    output_dir: Path, config: DocgenConfig, logger: logging.Logger | None = None
) -> Path:
    """Write OUTPUT/api/index.md."""
    logger = logger or log
    index_path = output_dir / "api" / "index.md"
    index_path.parent.mkdir(parents=True, exist_ok=True)
    index_path.write_text(render_api_index(config.packages, config.scope), encoding="utf-8")
    logger.info("Generated API index at %s", index_path)
    return index_path


def write_file_types(
    source: Path, output: Path, exports: list[ExportRecord], logger: logging.Logger | None = None
) -> Path:
    """Write the single-file types page produced by render_file_types."""
    logger = logger or log
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(render_file_types(source, exports), encoding="utf-8")
    logger.info("Extracted types to %s", output)
    return output
