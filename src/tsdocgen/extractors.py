"""Documentation extractors for TypeScript sources.

Declarations are recognized with one regular expression per kind rather
than a full parser. Each matcher owns its capture groups and is applied
independently; results are concatenated in a fixed kind order.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from fnmatch import fnmatch
from pathlib import Path
from typing import Callable

from .errors import ExtractionError
from .models import (
    UNKNOWN_TYPE,
    DocComment,
    ExportKind,
    ExportRecord,
    ExtractedDocs,
    PackageConfig,
    PackageModel,
    Parameter,
)

log = logging.getLogger(__name__)

SOURCE_SUFFIXES = (".ts", ".tsx")

# A single /** ... */ block, optionally preceding the declaration on its line.
_DOC_PREFIX = r"(?:/\*\*(?:(?!\*/)[\s\S])*\*/\s*)?"
_GENERICS = r"(?:<[^>]+>)?"

_TAG_LINE = re.compile(r"^@(\w*)(.*)$")
_DEFAULT_SPLIT = re.compile(r"\s*=(?!>)\s*")


def _decl(pattern: str) -> re.Pattern[str]:
    """Compile a declaration pattern anchored at line start.

    The declaration itself (from ``export`` on) is captured as ``decl`` so
    doc comment lookup and line numbers use the keyword's offset.
    """
    return re.compile(rf"^{_DOC_PREFIX}(?P<decl>{pattern})", re.MULTILINE)


_INTERFACE_RE = _decl(rf"export\s+interface\s+(?P<name>\w+){_GENERICS}\s*\{{(?P<body>[^}}]*)\}}")
_TYPE_RE = _decl(rf"export\s+type\s+(?P<name>\w+){_GENERICS}\s*=\s*(?P<value>[^;]+);")
_FUNCTION_RE = _decl(
    rf"export\s+(?:async\s+)?function\s+(?P<name>\w+)\s*{_GENERICS}\s*"
    r"\((?P<params>[^)]*)\)(?:\s*:\s*(?P<returns>[^{]+))?\s*\{"
)
# A declaration without an initializer ends at ``;`` and its type stays on one line.
_CONST_RE = _decl(
    r"export\s+(?P<keyword>const|let|var)\s+(?P<name>\w+)"
    r"(?:\s*:\s*(?P<type>[^=;\n]+))?\s*[=;]"
)
_CLASS_RE = _decl(
    rf"export\s+(?:abstract\s+)?class\s+(?P<name>\w+){_GENERICS}"
    r"(?:\s+extends\s+[^{]+)?(?:\s+implements\s+[^{]+)?\s*\{"
)
_ENUM_RE = _decl(r"export\s+(?:const\s+)?enum\s+(?P<name>\w+)\s*\{")


# =============================================================================
# Doc comments
# =============================================================================


@dataclass
class _DocCommentBuilder:
    description: list[str]
    params: dict[str, str]
    examples: list[str]
    returns: str | None = None
    deprecated: str | None = None
    example: list[str] | None = None  # Open @example block

    def close_example(self) -> None:
        if self.example is None:
            return
        text = "\n".join(self.example).strip()
        if text:
            self.examples.append(text)
        self.example = None

    def build(self) -> DocComment:
        self.close_example()
        return DocComment(
            description=" ".join(self.description) or None,
            params=self.params,
            returns=self.returns,
            examples=self.examples,
            deprecated=self.deprecated,
        )


def _param_tag(text: str) -> tuple[str, str] | None:
    """Split ``{Type} name description`` into (name, description)."""
    if text.startswith("{"):
        close = text.find("}")
        text = text[close + 1 :].strip() if close != -1 else text[1:]
    parts = text.split(None, 1)
    if len(parts) < 2:
        return None
    return parts[0], parts[1]


def parse_doc_comment(body: str) -> DocComment:
    """Parse the text between ``/**`` and ``*/``."""
    doc = _DocCommentBuilder(description=[], params={}, examples=[])

    for raw in body.splitlines():
        line = raw.strip().lstrip("*").strip()

        tag = _TAG_LINE.match(line)
        if tag:
            doc.close_example()
            name, rest = tag.group(1), tag.group(2).strip()
            if name == "param":
                param = _param_tag(rest)
                if param:
                    doc.params[param[0]] = param[1]
            elif name in ("returns", "return"):
                doc.returns = rest
            elif name == "example":
                # Text on the tag line itself is not part of the example
                doc.example = []
            elif name == "deprecated":
                doc.deprecated = rest
            continue

        if doc.example is not None:
            doc.example.append(line)
        elif line:
            doc.description.append(line)

    return doc.build()


def extract_doc_comment(content: str, offset: int) -> DocComment:
    """Find and parse the nearest ``/** ... */`` block before ``offset``.

    Adjacency is not required: the closest preceding doc comment wins even
    if other code sits between it and the declaration.
    """
    before = content[:offset]
    end = before.rfind("*/")
    if end == -1:
        return DocComment()
    start = before.rfind("/**", 0, end)
    if start == -1:
        return DocComment()
    return parse_doc_comment(before[start + 3 : end])


# =============================================================================
# Declarations
# =============================================================================


def parse_params(params: str, doc: DocComment) -> list[Parameter]:
    """Parse a raw parameter list.

    Splits on every comma, so generic arguments or defaults that contain a
    comma are mis-split. Kept as is: changing it alters existing output.
    """
    result: list[Parameter] = []
    if not params.strip():
        return result

    for segment in params.split(","):
        segment = segment.strip()
        if not segment:
            continue

        optional = "?" in segment
        segment = segment.replace("?", "")

        default = None
        pieces = _DEFAULT_SPLIT.split(segment, maxsplit=1)
        if len(pieces) == 2:
            segment, default = pieces[0], pieces[1].strip() or None

        name, sep, type_annotation = segment.partition(":")
        name = name.strip()
        type_annotation = type_annotation.strip() if sep else UNKNOWN_TYPE

        result.append(
            Parameter(
                name=name,
                type_annotation=type_annotation or UNKNOWN_TYPE,
                description=doc.params.get(name),
                optional=optional,
                default=default,
            )
        )

    return result


def _interface(m: re.Match[str], doc: DocComment) -> dict:
    return {"kind": ExportKind.INTERFACE, "signature": f"interface {m['name']}"}


def _type_alias(m: re.Match[str], doc: DocComment) -> dict:
    value = m["value"].strip()
    return {"kind": ExportKind.TYPE, "signature": f"type {m['name']} = {value}"}


def _function(m: re.Match[str], doc: DocComment) -> dict:
    returns = m["returns"].strip() if m["returns"] else None
    return {
        "kind": ExportKind.FUNCTION,
        "signature": f"function {m['name']}({m['params']})",
        "params": parse_params(m["params"], doc),
        "returns": returns or None,
    }


def _const(m: re.Match[str], doc: DocComment) -> dict:
    keyword = m["keyword"]
    type_annotation = m["type"].strip() if m["type"] else None
    return {
        "kind": ExportKind.CONST if keyword == "const" else ExportKind.VARIABLE,
        "signature": f"{keyword} {m['name']}: {type_annotation}" if type_annotation else None,
    }


def _class(m: re.Match[str], doc: DocComment) -> dict:
    return {"kind": ExportKind.CLASS, "signature": f"class {m['name']}"}


def _enum(m: re.Match[str], doc: DocComment) -> dict:
    return {"kind": ExportKind.ENUM, "signature": f"enum {m['name']}"}


# Order matters: results are concatenated pass by pass, not sorted by line.
_MATCHERS: list[tuple[re.Pattern[str], Callable[[re.Match[str], DocComment], dict]]] = [
    (_INTERFACE_RE, _interface),
    (_TYPE_RE, _type_alias),
    (_FUNCTION_RE, _function),
    (_CONST_RE, _const),
    (_CLASS_RE, _class),
    (_ENUM_RE, _enum),
]


def scan_source(content: str, source_file: Path) -> list[ExportRecord]:
    """Extract every exported declaration from TypeScript source text."""
    exports: list[ExportRecord] = []

    for pattern, build in _MATCHERS:
        for m in pattern.finditer(content):
            start = m.start("decl")
            doc = extract_doc_comment(content, start)
            exports.append(
                ExportRecord(
                    name=m["name"],
                    description=doc.description,
                    source_file=source_file,
                    line=content.count("\n", 0, start) + 1,
                    examples=doc.examples,
                    deprecated=doc.deprecated,
                    **build(m, doc),
                )
            )

    return exports


def _read_source(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ExtractionError(
            f"Failed to read {path}: {e.__class__.__name__}: {e}", path
        ) from e


def extract_file(path: Path, logger: logging.Logger | None = None) -> list[ExportRecord]:
    """Extract exports from a single TypeScript file."""
    logger = logger or log
    content = _read_source(path)
    logger.debug("Extracting from %s", path)
    return scan_source(content, path)


# =============================================================================
# Packages
# =============================================================================


def is_excluded(path: Path, patterns: list[str]) -> bool:
    """Check whether path matches any exclude glob."""
    path_str = str(path)
    return any(fnmatch(path_str, pattern) for pattern in patterns)


def _read_manifest(path: Path, logger: logging.Logger) -> tuple[str, str, str]:
    """Read (name, version, description) from package.json, with defaults."""
    manifest = path / "package.json"
    try:
        data = json.loads(manifest.read_text(encoding="utf-8"))
    except FileNotFoundError:
        data = {}
    except (OSError, ValueError) as e:
        logger.warning("Ignoring unreadable %s: %s", manifest, e)
        data = {}
    if not isinstance(data, dict):
        data = {}

    def text(key: str, default: str) -> str:
        value = data.get(key)
        return value if isinstance(value, str) else default

    return text("name", "unknown"), text("version", "0.0.0"), text("description", "")


def _read_optional(path: Path) -> str | None:
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError):
        return None


def extract_package(
    path: Path, config: PackageConfig, logger: logging.Logger | None = None
) -> ExtractedDocs:
    """Extract documentation from a TypeScript package.

    Entry points are scanned first and any read failure there aborts the
    package. The ``src`` tree is walked afterwards; files already scanned,
    excluded files and files without exports are skipped.
    """
    logger = logger or log
    logger.info("Extracting TypeScript documentation from %s", path)

    files: dict[Path, list[ExportRecord]] = {}

    for entry_point in config.entry_points:
        entry_path = (path / entry_point).resolve()
        if entry_path.is_file():
            files[entry_path] = extract_file(entry_path, logger)
        else:
            logger.debug("Entry point %s does not exist", entry_path)

    src_dir = path / "src"
    if src_dir.is_dir():
        for file_path in sorted(src_dir.rglob("*")):
            if file_path.suffix not in SOURCE_SUFFIXES or not file_path.is_file():
                continue
            if is_excluded(file_path, config.exclude):
                continue
            file_path = file_path.resolve()
            if file_path in files:
                continue
            try:
                exports = extract_file(file_path, logger)
            except ExtractionError as e:
                logger.warning("Skipping %s", e)
                continue
            if exports:
                files[file_path] = exports

    files = dict(sorted(files.items(), key=lambda item: str(item[0])))
    name, version, description = _read_manifest(path, logger)

    package = PackageModel(
        name=name,
        version=version,
        description=description,
        path=path,
        kind=config.kind,
        internal_deps=[],
        exports=[export for exports in files.values() for export in exports],
    )
    logger.debug("%s: %d exports in %d files", name, len(package.exports), len(files))

    return ExtractedDocs(
        package=package,
        files=files,
        readme=_read_optional(path / "README.md"),
        changelog=_read_optional(path / "CHANGELOG.md"),
    )
