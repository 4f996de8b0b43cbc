"""Tests for markdown generation."""

from pathlib import Path

import pytest

from tsdocgen.generators import (
    package_slug,
    render_api_index,
    render_export,
    render_file_types,
    render_functions_page,
    render_package_index,
    render_types_page,
    write_api_index,
    write_package_docs,
)
from tsdocgen.models import (
    DocgenConfig,
    ExportKind,
    ExportRecord,
    ExtractedDocs,
    PackageConfig,
    PackageKind,
    PackageModel,
    Parameter,
)

SRC = Path("/repo/packages/core/src/index.ts")


def export(name, kind, **kwargs):
    kwargs.setdefault("line", 1)
    return ExportRecord(name=name, kind=kind, source_file=SRC, **kwargs)


def docs_for(exports, name="@acme/core", description="", readme=None):
    package = PackageModel(
        name=name,
        version="1.0.0",
        description=description,
        path=Path("/repo/packages/core"),
        kind=PackageKind.CORE,
        exports=exports,
    )
    return ExtractedDocs(package=package, files={SRC: exports}, readme=readme)


ADD = export(
    "add",
    ExportKind.FUNCTION,
    line=6,
    description="Adds two numbers.",
    signature="function add(a: number, b?: number)",
    params=[
        Parameter("a", "number", description="first number"),
        Parameter("b", "number", optional=True),
    ],
    returns="number",
    examples=["add(1, 2);", "add(3);"],
)


class TestExportBlock:
    def test_field_order(self):
        deprecated = export(
            "old",
            ExportKind.FUNCTION,
            description="Old thing.",
            signature="function old()",
            deprecated="Use add",
        )
        text = "\n".join(render_export(deprecated))
        assert text.index("### `old`") < text.index("**Deprecated:** Use add")
        assert text.index("**Deprecated:**") < text.index("Old thing.")
        assert text.index("Old thing.") < text.index("```typescript\nfunction old()\n```")
        assert text.rstrip().endswith("---")

    def test_parameters_table(self):
        text = "\n".join(render_export(ADD))
        assert "| Name | Type | Required | Description |" in text
        assert "| `a` | `number` | Yes | first number |" in text
        assert "| `b` | `number` | No | - |" in text
        assert "**Returns:** `number`" in text

    def test_examples_each_fenced(self):
        text = "\n".join(render_export(ADD))
        assert "```typescript\nadd(1, 2);\n```" in text
        assert "```typescript\nadd(3);\n```" in text
        assert text.index("**Returns:**") < text.index("add(1, 2);")

    def test_source_location(self):
        text = "\n".join(render_export(ADD))
        assert f"*Defined in [`index.ts`]({SRC}:6)*" in text

    def test_minimal_export(self):
        lines = render_export(export("Thing", ExportKind.CONST))
        text = "\n".join(lines)
        assert "**Parameters:**" not in text
        assert "**Returns:**" not in text
        assert "```" not in text
        assert "Deprecated" not in text

    def test_pipe_in_type_escaped(self):
        record = export(
            "pick",
            ExportKind.FUNCTION,
            params=[Parameter("mode", "'a' | 'b'")],
        )
        text = "\n".join(render_export(record))
        assert "`'a' \\| 'b'`" in text


class TestPackageIndex:
    def test_header_and_install(self):
        text = render_package_index(docs_for([ADD], description="Core bits"))
        assert text.startswith("# @acme/core\n\nCore bits\n\n**Version:** 1.0.0\n")
        assert "npm install @acme/core" in text
        assert "pnpm add @acme/core" in text

    def test_empty_description_omitted(self):
        text = render_package_index(docs_for([]))
        assert text.startswith("# @acme/core\n\n**Version:** 1.0.0\n")

    def test_summary_rows_only_for_non_empty_kinds(self):
        exports = [
            export("I", ExportKind.INTERFACE),
            export("J", ExportKind.INTERFACE),
            export("E", ExportKind.ENUM),
            ADD,
        ]
        text = render_package_index(docs_for(exports))
        assert "| Interfaces | 2 |" in text
        assert "| Functions | 1 |" in text
        assert "| Types |" not in text
        assert "| Classes |" not in text

    def test_functions_link_only_with_functions(self):
        with_fn = render_package_index(docs_for([ADD]))
        without_fn = render_package_index(docs_for([export("T", ExportKind.TYPE)]))
        assert "- [Types Reference](./types.md)" in with_fn
        assert "- [Functions Reference](./functions.md)" in with_fn
        assert "- [Types Reference](./types.md)" in without_fn
        assert "functions.md" not in without_fn

    def test_readme_duplicate_heading_stripped(self):
        text = render_package_index(docs_for([], readme="# @acme/core\n\nUsage notes.\n"))
        assert text.endswith("---\n\nUsage notes.")
        assert text.count("# @acme/core") == 1

    def test_readme_heading_contained_in_name(self):
        text = render_package_index(docs_for([], readme="# core\nBody"))
        assert text.endswith("---\n\nBody")

    def test_readme_unrelated_heading_kept(self):
        text = render_package_index(docs_for([], readme="# Getting Started\nBody"))
        assert text.endswith("---\n\n# Getting Started\nBody")

    def test_readme_heading_check_is_case_sensitive(self):
        text = render_package_index(docs_for([], readme="# CORE\nBody"))
        assert "# CORE" in text


class TestTypesPage:
    def test_sections_in_fixed_order(self):
        exports = [
            export("Svc", ExportKind.CLASS),
            export("Color", ExportKind.ENUM),
            export("Id", ExportKind.TYPE),
            export("User", ExportKind.INTERFACE),
            export("LIMIT", ExportKind.CONST),
            ADD,
        ]
        text = render_types_page(docs_for(exports))
        assert text.startswith("# @acme/core - Types\n")
        positions = [
            text.index(h)
            for h in ("## Interfaces", "## Type Aliases", "## Enums", "## Classes")
        ]
        assert positions == sorted(positions)
        assert "LIMIT" not in text
        assert "`add`" not in text

    def test_empty_sections_omitted(self):
        text = render_types_page(docs_for([export("User", ExportKind.INTERFACE)]))
        assert "## Interfaces" in text
        assert "## Type Aliases" not in text
        assert "## Enums" not in text
        assert "## Classes" not in text


def test_functions_page():
    other = export("sub", ExportKind.FUNCTION, signature="function sub()")
    text = render_functions_page([ADD, other], "@acme/core")
    assert text.startswith("# @acme/core - Functions\n")
    assert text.index("### `add`") < text.index("### `sub`")
    assert not any(line.startswith("## ") for line in text.splitlines())


class TestApiIndex:
    def test_grouping_and_order(self):
        packages = [
            PackageConfig("@acme/ios-kit", Path("p/ios"), PackageKind.MOBILE),
            PackageConfig("@acme/auth-core", Path("p/core"), PackageKind.CORE),
            PackageConfig("@acme/drizzle-adapter", Path("p/d"), PackageKind.ADAPTER),
        ]
        text = render_api_index(packages)
        assert text.startswith("# API Reference\n")
        assert "- [@acme/auth-core](./auth_core/)" in text
        assert "- [@acme/drizzle-adapter](./drizzle_adapter/)" in text
        assert "- [@acme/ios-kit](./ios_kit/)" in text
        positions = [text.index(h) for h in ("## Core Packages", "## Database Adapters", "## Mobile SDKs")]
        assert positions == sorted(positions)
        assert "## Frontend SDKs" not in text

    def test_empty(self):
        text = render_api_index([])
        assert not any(line.startswith("## ") for line in text.splitlines())


@pytest.mark.parametrize(
    "name, scope, slug",
    [
        ("@acme/fastify-apple-auth", None, "fastify_apple_auth"),
        ("@acme/fastify-apple-auth", "@acme/", "fastify_apple_auth"),
        ("@other/pkg-name", "@acme/", "@other/pkg_name"),
        ("plain-name", None, "plain_name"),
    ],
)
def test_package_slug(name, scope, slug):
    assert package_slug(name, scope) == slug


def test_file_types_page():
    exports = [
        export("LIMIT", ExportKind.CONST, signature="const LIMIT: number"),
        export("count", ExportKind.VARIABLE),
        ADD,
        export("User", ExportKind.INTERFACE, deprecated="gone"),
    ]
    text = render_file_types(Path("src/index.ts"), exports)
    assert text.startswith("# Types from src/index.ts\n")
    assert text.index("## Interfaces") < text.index("## Functions") < text.index("## Constants")
    assert "- `b`: `number` (optional)" in text
    assert "  - first number" in text
    assert "**Examples:**" in text
    assert "> ⚠️ **Deprecated:** gone" in text
    assert "### `count`" in text


class TestWriters:
    def test_no_functions_no_functions_page(self, tmp_path):
        written = write_package_docs(tmp_path / "out", docs_for([export("T", ExportKind.TYPE)]))
        assert [p.name for p in written] == ["index.md", "types.md"]
        assert not (tmp_path / "out" / "functions.md").exists()

    def test_with_functions(self, tmp_path):
        written = write_package_docs(tmp_path / "out", docs_for([ADD]))
        assert [p.name for p in written] == ["index.md", "types.md", "functions.md"]
        index = (tmp_path / "out" / "index.md").read_text()
        assert "./functions.md" in index

    def test_no_exports_only_index(self, tmp_path):
        written = write_package_docs(tmp_path / "out", docs_for([]))
        assert [p.name for p in written] == ["index.md"]

    def test_api_index(self, tmp_path):
        config = DocgenConfig(
            packages=[PackageConfig("@acme/core", Path("p"), PackageKind.CORE)],
        )
        path = write_api_index(tmp_path, config)
        assert path == tmp_path / "api" / "index.md"
        assert "- [@acme/core](./core/)" in path.read_text()
