"""Documentation generator for TypeScript monorepos.

Generates:
    docs/api/index.md                  - Packages grouped by kind
    docs/api/{package}/index.md        - Overview, export counts, README
    docs/api/{package}/types.md        - Interfaces, type aliases, enums, classes
    docs/api/{package}/functions.md    - Exported functions
"""

from __future__ import annotations

import argparse
import logging
import sys
import time
from pathlib import Path

from .config import load_or_create_config
from .errors import DocgenError
from .extractors import SOURCE_SUFFIXES, extract_file, extract_package
from .generators import package_slug, write_api_index, write_file_types, write_package_docs
from .models import DocgenConfig, PackageConfig
from .validators import report_results, validate_docs

log = logging.getLogger(__name__)

# Non-source files whose changes also trigger regeneration in watch mode
_WATCHED_FILES = {"package.json", "README.md", "CHANGELOG.md"}


def _package_path(root: Path, config: PackageConfig) -> Path:
    return config.path if config.path.is_absolute() else root / config.path


def process_package(
    root: Path,
    output: Path,
    config: PackageConfig,
    scope: str | None = None,
    logger: logging.Logger | None = None,
) -> list[Path]:
    """Extract one package and write its markdown pages."""
    logger = logger or log
    extracted = extract_package(_package_path(root, config), config, logger)
    output_dir = output / "api" / package_slug(config.name, scope)
    return write_package_docs(output_dir, extracted, logger)


def generate(
    root: Path,
    output: Path,
    package_filter: str | None = None,
    logger: logging.Logger | None = None,
) -> list[Path]:
    """Generate documentation for every configured package.

    Returns the paths written, in order.
    """
    logger = logger or log
    logger.info("Generating documentation from %s", root)
    logger.info("Output directory: %s", output)

    config = load_or_create_config(root, logger)

    packages = [
        p for p in config.packages if package_filter is None or package_filter in p.name
    ]
    if not packages:
        logger.warning("No packages found matching filter")
        return []

    logger.info("Processing %d packages", len(packages))

    written: list[Path] = []
    for pkg in packages:
        logger.info("Processing package: %s", pkg.name)
        written.extend(process_package(root, output, pkg, config.scope, logger))

    written.append(write_api_index(output, config, logger))

    logger.info("Documentation generation complete!")
    return written


def validate(root: Path, strict: bool = False, logger: logging.Logger | None = None) -> bool:
    """Validate root/docs and report the results. Returns True on success."""
    logger = logger or log
    logger.info("Validating documentation in %s", root / "docs")

    result = validate_docs(root, strict=strict)
    report_results(result, strict=strict, logger=logger)

    if result.passed:
        logger.info("✅ Documentation validation passed!")
    else:
        logger.error("❌ Documentation validation failed!")
    return result.passed


def extract_types(source: Path, output: Path, logger: logging.Logger | None = None) -> Path:
    """Extract one TypeScript file into a standalone markdown page."""
    logger = logger or log
    exports = extract_file(source, logger)
    return write_file_types(source, output, exports, logger)


def _snapshot(root: Path, config: DocgenConfig) -> dict[Path, float]:
    """Modification times of every watched file."""
    mtimes: dict[Path, float] = {}
    config_file = root / "docgen.yaml"
    if config_file.exists():
        mtimes[config_file] = config_file.stat().st_mtime

    for pkg in config.packages:
        pkg_path = _package_path(root, pkg)
        if not pkg_path.is_dir():
            continue
        for path in pkg_path.rglob("*"):
            if "node_modules" in path.parts:
                continue
            if path.suffix in SOURCE_SUFFIXES or path.name in _WATCHED_FILES:
                try:
                    mtimes[path] = path.stat().st_mtime
                except OSError:
                    continue
    return mtimes


def _try_snapshot(
    root: Path, previous: dict[Path, float], logger: logging.Logger
) -> dict[Path, float]:
    """Snapshot watched files, keeping ``previous`` when the config is broken."""
    try:
        return _snapshot(root, load_or_create_config(root, logger))
    except DocgenError as e:
        logger.warning("Cannot read configuration: %s", e)
        return previous


def watch(
    root: Path,
    output: Path,
    interval: float = 2.0,
    max_cycles: int | None = None,
    logger: logging.Logger | None = None,
) -> None:
    """Regenerate documentation whenever a watched file changes.

    Polls every ``interval`` seconds until interrupted, or for
    ``max_cycles`` polls when given.
    """
    logger = logger or log
    logger.info("Starting watch mode...")
    logger.info("Watching for changes in: %s", root)
    logger.info("Output directory: %s", output)
    logger.info("Press Ctrl+C to stop")

    try:
        generate(root, output, logger=logger)
    except DocgenError as e:
        logger.warning("Initial generation failed: %s", e)

    previous = _try_snapshot(root, {}, logger)
    cycles = 0
    while max_cycles is None or cycles < max_cycles:
        time.sleep(interval)
        cycles += 1

        current = _try_snapshot(root, previous, logger)
        if current == previous:
            continue

        changed = sorted(p for p in current.keys() | previous.keys() if current.get(p) != previous.get(p))
        logger.info("Detected %d changed files, regenerating", len(changed))
        for path in changed:
            logger.debug("  changed: %s", path)

        try:
            generate(root, output, logger=logger)
        except DocgenError as e:
            logger.warning("Regeneration failed: %s", e)
        previous = current


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tsdocgen",
        description="Generate and validate documentation for a TypeScript monorepo",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable verbose output")
    parser.add_argument("-r", "--root", default=".", help="Root directory of the monorepo")

    sub = parser.add_subparsers(dest="command", required=True)

    gen = sub.add_parser("generate", help="Generate documentation from source code")
    gen.add_argument("-o", "--output", default="docs", help="Output directory for generated docs")
    gen.add_argument("-p", "--package", help="Only generate specific package docs")
    gen.add_argument(
        "--no-validate", action="store_true", help="Skip validation after generation"
    )

    val = sub.add_parser("validate", help="Validate documentation against source code")
    val.add_argument("--strict", action="store_true", help="Strict mode - fail on warnings")

    wat = sub.add_parser("watch", help="Watch for changes and regenerate docs")
    wat.add_argument("-o", "--output", default="docs", help="Output directory for generated docs")

    ext = sub.add_parser("extract-types", help="Extract TypeScript types to documentation")
    ext.add_argument("-s", "--source", required=True, help="Source file")
    ext.add_argument("-o", "--output", required=True, help="Output markdown file")

    return parser


def main(argv: list[str] | None = None) -> int:
    """Entry point for the tsdocgen command."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(message)s",
    )
    logger = logging.getLogger("tsdocgen")

    root = Path(args.root)
    logger.info("TypeScript monorepo documentation generator")

    try:
        if args.command == "generate":
            generate(root, Path(args.output), args.package, logger)
            if not args.no_validate and not validate(root, strict=False, logger=logger):
                return 1
        elif args.command == "validate":
            if not validate(root, strict=args.strict, logger=logger):
                return 1
        elif args.command == "watch":
            watch(root, Path(args.output), logger=logger)
        elif args.command == "extract-types":
            extract_types(Path(args.source), Path(args.output), logger)
    except DocgenError as e:
        logger.error("%s", e)
        return 1
    except KeyboardInterrupt:
        logger.info("Stopped")
    return 0


if __name__ == "__main__":
    sys.exit(main())
