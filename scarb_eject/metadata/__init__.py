"""Package metadata sources."""

from scarb_eject.metadata.scarb import (
    Metadata,
    build_package_graph,
    load_metadata_file,
    run_scarb_metadata,
    select_compilation_unit,
    select_package,
    workspace_root,
)

__all__ = [
    "Metadata",
    "build_package_graph",
    "load_metadata_file",
    "run_scarb_metadata",
    "select_compilation_unit",
    "select_package",
    "workspace_root",
]
