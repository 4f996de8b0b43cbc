"""Loading docgen.yaml, or discovering packages when it is absent."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import yaml

from .errors import ConfigError
from .models import DocgenConfig, OutputConfig, PackageConfig, PackageKind

log = logging.getLogger(__name__)

CONFIG_FILENAME = "docgen.yaml"

DEFAULT_ENTRY_POINT = "src/index.ts"

DEFAULT_EXCLUDE = [
    "**/*.test.ts",
    "**/*.spec.ts",
    "**/test/**",
    "**/tests/**",
]

# Substrings of a package name that decide its kind, checked in order.
_KIND_HINTS = [
    (PackageKind.ADAPTER, ("adapter", "oracle", "drizzle", "mongodb")),
    (PackageKind.FRONTEND, ("sveltekit", "frontend")),
    (PackageKind.MOBILE, ("swift", "ios", "kit")),
]


def infer_kind(name: str) -> PackageKind:
    """Guess a package kind from its name."""
    for kind, hints in _KIND_HINTS:
        if any(hint in name for hint in hints):
            return kind
    return PackageKind.CORE


def _parse_kind(value: Any, name: str) -> PackageKind:
    try:
        return PackageKind(str(value).lower())
    except ValueError:
        choices = ", ".join(k.value for k in PackageKind)
        raise ConfigError(
            f"Package {name!r} has unknown kind {value!r} (expected one of: {choices})"
        ) from None


def _parse_package(raw: Any, index: int) -> PackageConfig:
    if not isinstance(raw, dict):
        raise ConfigError(f"packages[{index}] must be a mapping")
    name = raw.get("name")
    path = raw.get("path")
    if not name or not path:
        raise ConfigError(f"packages[{index}] requires 'name' and 'path'")
    return PackageConfig(
        name=str(name),
        path=Path(path),
        kind=_parse_kind(raw.get("kind", PackageKind.CORE.value), name),
        entry_points=[str(e) for e in raw.get("entry_points") or [DEFAULT_ENTRY_POINT]],
        exclude=[str(e) for e in raw.get("exclude") or DEFAULT_EXCLUDE],
    )


def parse_config(data: Any, root: Path) -> DocgenConfig:
    """Build a DocgenConfig from the mapping loaded out of docgen.yaml."""
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping")

    packages = [_parse_package(raw, i) for i, raw in enumerate(data.get("packages") or [])]

    output_data = data.get("output") or {}
    output = OutputConfig(
        dir=Path(output_data.get("dir", root / "docs")),
        api_reference=bool(output_data.get("api_reference", True)),
        changelog=bool(output_data.get("changelog", True)),
        package_readme=bool(output_data.get("package_readme", True)),
    )

    templates = data.get("templates")
    return DocgenConfig(
        packages=packages,
        output=output,
        templates=Path(templates) if templates else None,
        scope=data.get("scope"),
    )


def parse_package_json(path: Path) -> PackageConfig | None:
    """Build a PackageConfig from a package directory's package.json.

    Returns None for packages without a name.
    """
    pkg_json_path = path / "package.json"
    try:
        pkg = json.loads(pkg_json_path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        raise ConfigError(f"Failed to read {pkg_json_path}: {e}", pkg_json_path) from e

    name = pkg.get("name") if isinstance(pkg, dict) else None
    if not name or not isinstance(name, str):
        return None

    entry_points = [DEFAULT_ENTRY_POINT]
    exports = pkg.get("exports")
    if isinstance(exports, dict):
        for value in exports.values():
            import_path = value.get("import") if isinstance(value, dict) else None
            if isinstance(import_path, str):
                import_path = import_path.replace("./", "")
                if import_path not in entry_points:
                    entry_points.append(import_path)

    return PackageConfig(
        name=name,
        path=path,
        kind=infer_kind(name),
        entry_points=entry_points,
        exclude=list(DEFAULT_EXCLUDE),
    )


def discover_packages(root: Path) -> list[PackageConfig]:
    """Find packages up to two levels below ``packages/``."""
    packages_dir = root / "packages"
    if not packages_dir.is_dir():
        return []

    candidates = [packages_dir]
    candidates.extend(sorted(p for p in packages_dir.glob("*") if p.is_dir()))
    candidates.extend(sorted(p for p in packages_dir.glob("*/*") if p.is_dir()))

    packages: list[PackageConfig] = []
    for path in candidates:
        if (path / "package.json").is_file():
            pkg = parse_package_json(path)
            if pkg is not None:
                packages.append(pkg)
    return packages


def load_or_create_config(root: Path, logger: logging.Logger | None = None) -> DocgenConfig:
    """Load docgen.yaml from root, or auto-discover packages."""
    logger = logger or log
    config_path = root / CONFIG_FILENAME

    if config_path.exists():
        try:
            data = yaml.safe_load(config_path.read_text(encoding="utf-8"))
        except OSError as e:
            raise ConfigError(f"Failed to read {config_path}: {e}", config_path) from e
        except yaml.YAMLError as e:
            raise ConfigError(f"Failed to parse {config_path}: {e}", config_path) from e
        return parse_config(data, root)

    logger.info("No %s found, auto-discovering packages...", CONFIG_FILENAME)
    return DocgenConfig(
        packages=discover_packages(root),
        output=OutputConfig(dir=root / "docs"),
    )
