"""Shared pytest fixtures for tsdocgen tests."""

import json

import pytest

from tsdocgen.models import PackageConfig, PackageKind

from tests.helpers import write


@pytest.fixture
def make_package(tmp_path):
    """
    Build a package directory under tmp_path.

    Example:
        pkg_dir, config = make_package(
            "core",
            files={"src/index.ts": "export const A = 1;"},
            manifest={"name": "@acme/core", "version": "1.2.3"},
        )
    """

    def _make(
        dirname="pkg",
        files=None,
        manifest=None,
        kind=PackageKind.CORE,
        entry_points=("src/index.ts",),
        exclude=("**/*.test.ts",),
        name="@acme/pkg",
    ):
        pkg_dir = tmp_path / dirname
        pkg_dir.mkdir(parents=True, exist_ok=True)
        for rel, content in (files or {}).items():
            write(pkg_dir / rel, content)
        if manifest is not None:
            write(pkg_dir / "package.json", json.dumps(manifest))
        config = PackageConfig(
            name=name,
            path=pkg_dir,
            kind=kind,
            entry_points=list(entry_points),
            exclude=list(exclude),
        )
        return pkg_dir, config

    return _make
