"""Read-only package graph keyed by package id."""

from __future__ import annotations

import logging
from typing import Iterable, List, Set

import networkx as nx

from scarb_eject.errors import UnknownPackage
from scarb_eject.graph.models import PackageNode

logger = logging.getLogger("scarb_eject.graph.package_graph")


class PackageGraph:
    """Immutable adjacency structure over :class:`PackageNode` records.

    Nodes are stored in a ``networkx.DiGraph`` under their package id with the
    ``PackageNode`` kept in the ``package`` attribute. Edges point from a
    package to each of its direct dependencies. Successor order follows the
    order in which dependencies were declared.
    """

    def __init__(self, packages: Iterable[PackageNode]) -> None:
        graph = nx.DiGraph()
        nodes: List[PackageNode] = list(packages)

        for node in nodes:
            if graph.has_node(node.id):
                raise ValueError(f"duplicate package id in graph: {node.id}")
            graph.add_node(node.id, package=node)

        for node in nodes:
            for dep_id in node.dependencies:
                if not graph.has_node(dep_id):
                    raise UnknownPackage(
                        dep_id, context=f"dependencies of `{node.name}`"
                    )
                graph.add_edge(node.id, dep_id)

        self._graph = nx.freeze(graph)
        logger.debug(
            "Built package graph: %d packages, %d edges",
            graph.number_of_nodes(),
            graph.number_of_edges(),
        )

    @property
    def native_graph(self) -> nx.DiGraph:
        """Frozen networkx view of the graph."""
        return self._graph

    def __contains__(self, package_id: object) -> bool:
        return self._graph.has_node(package_id)

    def __len__(self) -> int:
        return self._graph.number_of_nodes()

    def get(self, package_id: str) -> PackageNode:
        """Return the package stored under ``package_id``.

        Raises:
            UnknownPackage: If the id is not part of the graph.
        """
        if not self._graph.has_node(package_id):
            raise UnknownPackage(package_id)
        return self._graph.nodes[package_id]["package"]

    def dependencies_of(self, package_id: str) -> List[str]:
        """Direct dependency ids of a package, in declared order."""
        if not self._graph.has_node(package_id):
            raise UnknownPackage(package_id)
        return list(self._graph.successors(package_id))

    def reachable_from(self, package_id: str) -> Set[str]:
        """Ids reachable from ``package_id``, the package itself included."""
        if not self._graph.has_node(package_id):
            raise UnknownPackage(package_id)
        return {package_id} | nx.descendants(self._graph, package_id)


__all__ = ["PackageGraph"]
