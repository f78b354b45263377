"""Project a package graph onto the flat crate-root list of a descriptor."""

from __future__ import annotations

import logging
from collections import deque
from typing import Dict, List, Optional, Set

from scarb_eject.errors import (
    DuplicateCrateName,
    InvalidCrateName,
    MissingSourceRoot,
    UnknownPackage,
)
from scarb_eject.graph.models import CrateEntry, PackageNode, is_valid_crate_name
from scarb_eject.graph.package_graph import PackageGraph

logger = logging.getLogger("scarb_eject.graph.projector")


def _dedupe(paths) -> tuple:
    seen: Set[str] = set()
    unique: List[str] = []
    for path in paths:
        if path in seen:
            continue
        seen.add(path)
        unique.append(path)
    return tuple(unique)


def _to_entry(node: PackageNode) -> CrateEntry:
    if not is_valid_crate_name(node.name):
        raise InvalidCrateName(node.name, node.id)
    roots = _dedupe(node.source_roots)
    if not roots:
        raise MissingSourceRoot(node.name)
    return CrateEntry(
        name=node.name,
        roots=roots,
        package_id=node.id,
        discriminator=node.discriminator,
    )


def project_crates(
    graph: PackageGraph,
    root_id: str,
    exclude: Optional[Set[str]] = None,
) -> List[CrateEntry]:
    """Collect crate entries for ``root_id`` and its transitive dependencies.

    Traversal is breadth-first from the root, following dependencies in
    declared order, and visits every package at most once. The returned list
    starts with the root crate.

    Args:
        graph: Package graph to walk.
        root_id: Id of the main package.
        exclude: Crate names to leave out of the result. Excluded packages are
            still traversed so their dependencies are reached.

    Returns:
        List[CrateEntry]: One entry per reachable package.

    Raises:
        UnknownPackage: ``root_id`` is not in the graph.
        MissingSourceRoot: A reachable package has no source roots.
        InvalidCrateName: A reachable package name is not an identifier.
        DuplicateCrateName: Two reachable packages share a crate name.
    """
    if root_id not in graph:
        raise UnknownPackage(root_id)

    excluded = exclude or set()
    entries: List[CrateEntry] = []
    owners: Dict[str, str] = {}
    visited: Set[str] = {root_id}
    queue = deque([root_id])

    while queue:
        current = queue.popleft()
        node = graph.get(current)

        if node.name in excluded:
            logger.debug("Skipping excluded crate %s (%s)", node.name, node.id)
        else:
            entry = _to_entry(node)
            owner = owners.get(entry.name)
            if owner is not None:
                raise DuplicateCrateName(entry.name, owner, node.id)
            owners[entry.name] = node.id
            entries.append(entry)

        for dep_id in graph.dependencies_of(current):
            if dep_id not in visited:
                visited.add(dep_id)
                queue.append(dep_id)

    logger.debug(
        "Projected %d crate(s) from %s: %s",
        len(entries),
        root_id,
        ", ".join(entry.name for entry in entries),
    )
    return entries


__all__ = ["project_crates"]
