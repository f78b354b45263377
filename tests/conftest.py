"""Shared fixtures: Scarb metadata documents for a small workspace."""

from pathlib import Path
from typing import Any, Dict

import pytest


def package_id(name: str, version: str, root: Path) -> str:
    return f"{name} {version} (path+file://{root}/{name}/Scarb.toml)"


CORE_ID = "core 2.6.3 (std)"


@pytest.fixture
def workspace_dir(tmp_path: Path) -> Path:
    root = tmp_path / "ws"
    for crate in ["app", "lib"]:
        (root / crate / "src").mkdir(parents=True)
    return root


@pytest.fixture
def scarb_metadata(workspace_dir: Path) -> Dict[str, Any]:
    """``scarb metadata`` output for ``app`` depending on ``lib`` and core."""
    root = workspace_dir
    app_id = package_id("app", "0.1.0", root)
    lib_id = package_id("lib", "0.2.0", root)

    components = [
        {
            "id": "app_comp",
            "package": app_id,
            "name": "app",
            "source_path": str(root / "app" / "src" / "lib.cairo"),
            "cfg": None,
            "discriminator": None,
            "dependencies": [{"id": "lib_comp"}, {"id": "core_comp"}],
        },
        {
            "id": "lib_comp",
            "package": lib_id,
            "name": "lib",
            "source_path": str(root / "lib" / "src" / "lib.cairo"),
            "cfg": None,
            "discriminator": "lib 0.2.0",
            "dependencies": [{"id": "core_comp"}],
        },
        {
            "id": "core_comp",
            "package": CORE_ID,
            "name": "core",
            "source_path": "/opt/scarb/core/src/lib.cairo",
            "cfg": None,
            "discriminator": None,
            "dependencies": [],
        },
    ]

    return {
        "version": 1,
        "app_exe": "/usr/bin/scarb",
        "target_dir": str(root / "target"),
        "workspace": {
            "manifest_path": str(root / "Scarb.toml"),
            "root": str(root),
            "members": [app_id],
        },
        "packages": [
            {
                "id": app_id,
                "name": "app",
                "version": "0.1.0",
                "edition": "2023_11",
                "root": str(root / "app"),
                "manifest_path": str(root / "app" / "Scarb.toml"),
                "dependencies": [
                    {"name": "lib", "version_req": "*", "source": "path"},
                ],
                "experimental_features": ["negative_impls"],
            },
            {
                "id": lib_id,
                "name": "lib",
                "version": "0.2.0",
                "edition": "2023_10",
                "root": str(root / "lib"),
                "manifest_path": str(root / "lib" / "Scarb.toml"),
                "dependencies": [],
                "experimental_features": [],
            },
            {
                "id": CORE_ID,
                "name": "core",
                "version": "2.6.3",
                "dependencies": [],
            },
        ],
        "compilation_units": [
            {
                "id": "app_test_unit",
                "package": app_id,
                "target": {"kind": "test", "name": "app_unittest", "params": {}},
                "cfg": ["test"],
                "components": components,
            },
            {
                "id": "app_lib_unit",
                "package": app_id,
                "target": {"kind": "lib", "name": "app", "params": {}},
                "cfg": [["target", "lib"]],
                "components": components,
            },
            {
                "id": "lib_lib_unit",
                "package": lib_id,
                "target": {"kind": "lib", "name": "lib", "params": {}},
                "cfg": [["target", "lib"]],
                "components": components[1:],
            },
        ],
    }
