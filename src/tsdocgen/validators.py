"""Documentation validation and quality checks."""

from __future__ import annotations

import logging
import re
from pathlib import Path

import yaml

from .models import IssueSeverity, ValidationIssue, ValidationResult

log = logging.getLogger(__name__)

REQUIRED_FILES = [
    "index.md",
    "getting-started/installation.md",
    "getting-started/quickstart.md",
]

_LINK_RE = re.compile(r"\[([^\]]+)\]\(([^)]+)\)")


def _error(message: str, file: Path | None = None, suggestion: str | None = None) -> ValidationIssue:
    return ValidationIssue(IssueSeverity.ERROR, message, file=file, suggestion=suggestion)


def _warning(
    message: str,
    file: Path | None = None,
    line: int | None = None,
    suggestion: str | None = None,
) -> ValidationIssue:
    return ValidationIssue(
        IssueSeverity.WARNING, message, file=file, line=line, suggestion=suggestion
    )


def _markdown_files(docs_path: Path) -> list[Path]:
    return sorted(p for p in docs_path.rglob("*.md") if p.is_file())


def _read_markdown(path: Path, result: ValidationResult) -> str | None:
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        result.errors.append(
            _error(f"Unreadable documentation file: {e}", path, "Save the file as UTF-8")
        )
        return None


def validate_markdown_file(path: Path, result: ValidationResult) -> None:
    """Check a single markdown file for structural problems."""
    content = _read_markdown(path, result)
    if content is None:
        return
    lines = content.splitlines()

    if not content.strip():
        result.warnings.append(
            _warning("Empty documentation file", path, suggestion="Add content or remove the file")
        )
    elif not any(line.startswith("# ") for line in lines):
        result.warnings.append(
            _warning("Missing H1 title", path, suggestion="Add a title starting with '# '")
        )

    for i, line in enumerate(lines, start=1):
        if "TODO" in line or "FIXME" in line:
            result.warnings.append(_warning(f"Found TODO/FIXME: {line.strip()}", path, line=i))

    if content.count("```") % 2 != 0:
        result.errors.append(
            _error(
                "Unmatched code block delimiter",
                path,
                "Check that all ``` blocks are properly closed",
            )
        )


def check_required_files(docs_path: Path, result: ValidationResult) -> None:
    for name in REQUIRED_FILES:
        file_path = docs_path / name
        if not file_path.exists():
            result.errors.append(
                _error(
                    f"Required file missing: {name}",
                    file_path,
                    "Create the required documentation file",
                )
            )


def _link_exists(target: Path) -> bool:
    return (
        target.exists()
        or target.with_suffix(".md").exists()
        or (target.is_dir() and (target / "index.md").exists())
    )


def check_internal_links(docs_path: Path, result: ValidationResult) -> None:
    """Warn about relative links whose target does not exist."""
    for md_file in _markdown_files(docs_path):
        try:
            content = md_file.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError):
            # Already reported by validate_markdown_file
            continue
        for match in _LINK_RE.finditer(content):
            link = match.group(2)
            if link.startswith("http") or link.startswith("#"):
                continue

            if link.startswith("/"):
                target = docs_path / link[1:]
            else:
                target = md_file.parent / link
            target = Path(str(target).split("#", 1)[0])

            if not _link_exists(target):
                result.warnings.append(
                    _warning(
                        f"Broken internal link: {link}",
                        md_file,
                        suggestion=f"Check that {target} exists",
                    )
                )


def validate_mkdocs_config(root: Path, result: ValidationResult) -> None:
    mkdocs_path = root / "mkdocs.yml"
    if not mkdocs_path.exists():
        result.errors.append(
            _error("mkdocs.yml not found", mkdocs_path, "Create mkdocs.yml configuration file")
        )
        return

    try:
        yaml.safe_load(mkdocs_path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        result.errors.append(
            _error(f"Invalid YAML in mkdocs.yml: {e}", mkdocs_path, "Fix YAML syntax errors")
        )
        return

    result.info.append("mkdocs.yml validated successfully")


def validate_docs(root: Path, strict: bool = False) -> ValidationResult:
    """Validate the generated docs/ tree under root.

    Checks:
    1. Every markdown file has content, an H1 title and balanced code fences
    2. Required pages exist
    3. Relative links resolve
    4. mkdocs.yml exists and parses

    Args:
        root: Monorepo root containing docs/ and mkdocs.yml
        strict: If True, warnings also fail validation

    Returns:
        ValidationResult with errors, warnings and info messages
    """
    docs_path = root / "docs"
    result = ValidationResult()

    if not docs_path.exists():
        result.errors.append(
            _error(
                "Documentation directory does not exist",
                docs_path,
                "Run `tsdocgen generate` to create documentation",
            )
        )
    else:
        for md_file in _markdown_files(docs_path):
            validate_markdown_file(md_file, result)
        check_required_files(docs_path, result)
        check_internal_links(docs_path, result)
        validate_mkdocs_config(root, result)

    result.passed = not result.errors and not (strict and result.warnings)
    return result


def report_results(
    result: ValidationResult, strict: bool = False, logger: logging.Logger | None = None
) -> None:
    """Log errors, warnings and info messages with a summary line."""
    logger = logger or log

    if result.errors:
        logger.error("❌ Errors (%d):", len(result.errors))
        for issue in result.errors:
            logger.error("  • %s%s", issue.message, issue.location())
            if issue.suggestion:
                logger.error("    → %s", issue.suggestion)

    if result.warnings:
        report = logger.error if strict else logger.warning
        report("%s Warnings (%d):", "❌" if strict else "⚠️", len(result.warnings))
        for issue in result.warnings:
            report("  • %s%s", issue.message, issue.location())
            if issue.suggestion:
                report("    → %s", issue.suggestion)

    for msg in result.info:
        logger.info("  ℹ️  %s", msg)

    logger.info("Summary: %d errors, %d warnings", len(result.errors), len(result.warnings))
