"""Public graph API surface."""

from scarb_eject.graph.models import (
    CrateEntry,
    CrateSettings,
    DependencySettings,
    Edition,
    ExperimentalFeatures,
    PackageNode,
    ProjectDescriptor,
    is_valid_crate_name,
)
from scarb_eject.graph.package_graph import PackageGraph
from scarb_eject.graph.projector import project_crates

__all__ = [
    "CrateEntry",
    "CrateSettings",
    "DependencySettings",
    "Edition",
    "ExperimentalFeatures",
    "PackageGraph",
    "PackageNode",
    "ProjectDescriptor",
    "is_valid_crate_name",
    "project_crates",
]
