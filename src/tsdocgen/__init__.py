"""tsdocgen - API reference documentation for TypeScript monorepos."""

from tsdocgen.errors import ConfigError, DocgenError, ExtractionError
from tsdocgen.extractors import (
    extract_doc_comment,
    extract_file,
    extract_package,
    parse_doc_comment,
    scan_source,
)
from tsdocgen.generators import (
    render_api_index,
    render_functions_page,
    render_package_index,
    render_types_page,
)
from tsdocgen.models import (
    DocComment,
    ExportKind,
    ExportRecord,
    ExtractedDocs,
    PackageConfig,
    PackageKind,
    PackageModel,
    Parameter,
)

__all__ = [
    "ConfigError",
    "DocgenError",
    "ExtractionError",
    "DocComment",
    "ExportKind",
    "ExportRecord",
    "ExtractedDocs",
    "PackageConfig",
    "PackageKind",
    "PackageModel",
    "Parameter",
    "extract_doc_comment",
    "extract_file",
    "extract_package",
    "parse_doc_comment",
    "scan_source",
    "render_api_index",
    "render_functions_page",
    "render_package_index",
    "render_types_page",
]
