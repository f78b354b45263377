"""Scarb metadata source.

Obtains ``scarb metadata --format-version 1`` output, picks the main package
and its compilation unit, and turns the unit's components into a
:class:`PackageGraph`. Only the fields listed below are read; everything else
in the metadata document is ignored:

* ``workspace.root`` / ``workspace.members``
* ``packages[].{id, name, version, edition, experimental_features}``
* ``compilation_units[].{package, target, cfg, components}``
"""

from __future__ import annotations

import json
import logging
import os
import subprocess
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple

from scarb_eject.errors import MetadataError, PackageSelectionError, UnknownPackage
from scarb_eject.graph.models import (
    CfgItem,
    Edition,
    ExperimentalFeatures,
    PackageNode,
)
from scarb_eject.graph.package_graph import PackageGraph

logger = logging.getLogger("scarb_eject.metadata.scarb")

METADATA_FORMAT_VERSION = 1

Metadata = Dict[str, Any]


def _parse_metadata_output(stdout: str) -> Metadata:
    """Parse Scarb stdout, skipping any non-JSON lines Scarb may print."""
    try:
        data = json.loads(stdout)
    except json.JSONDecodeError:
        data = None
        for line in stdout.splitlines():
            if not line.lstrip().startswith("{"):
                continue
            try:
                data = json.loads(line)
                break
            except json.JSONDecodeError:
                continue
    if not isinstance(data, dict):
        raise MetadataError("scarb metadata did not produce a JSON object")
    return data


def _check_version(data: Metadata) -> Metadata:
    version = data.get("version")
    if version != METADATA_FORMAT_VERSION:
        raise MetadataError(
            f"unsupported scarb metadata format version: {version!r} "
            f"(expected {METADATA_FORMAT_VERSION})"
        )
    return data


def run_scarb_metadata(
    scarb_path: str = "scarb", manifest_path: Optional[Path] = None
) -> Metadata:
    """Run ``scarb metadata`` and return the parsed document.

    Scarb's stderr is inherited so its diagnostics reach the user directly.

    Raises:
        MetadataError: If Scarb cannot be run, fails, or prints no metadata.
    """
    cmd = [scarb_path]
    if manifest_path is not None:
        cmd += ["--manifest-path", str(manifest_path)]
    cmd += ["metadata", "--format-version", str(METADATA_FORMAT_VERSION)]

    logger.debug("Running %s", " ".join(cmd))
    try:
        res = subprocess.run(cmd, stdout=subprocess.PIPE, text=True, check=False)
    except OSError as exc:
        raise MetadataError(f"failed to run `{scarb_path}`: {exc}") from exc

    if res.returncode != 0:
        raise MetadataError(
            f"`{' '.join(cmd)}` exited with status {res.returncode}"
        )
    return _check_version(_parse_metadata_output(res.stdout))


def load_metadata_file(path: Path) -> Metadata:
    """Load a metadata document previously saved from ``scarb metadata``."""
    try:
        text = Path(path).read_text(encoding="utf-8")
    except OSError as exc:
        raise MetadataError(f"cannot read metadata file {path}: {exc}") from exc
    return _check_version(_parse_metadata_output(text))


def workspace_root(metadata: Metadata) -> Path:
    """Root directory of the Scarb workspace."""
    try:
        return Path(metadata["workspace"]["root"])
    except (KeyError, TypeError) as exc:
        raise MetadataError("metadata has no workspace root") from exc


def _packages_by_id(metadata: Metadata) -> Dict[str, Dict[str, Any]]:
    by_id: Dict[str, Dict[str, Any]] = {}
    for pkg in metadata.get("packages") or []:
        if not isinstance(pkg, dict) or not isinstance(pkg.get("id"), str):
            raise MetadataError("metadata lists a package without an id")
        if not isinstance(pkg.get("name"), str):
            raise MetadataError(f"package {pkg['id']} has no name")
        by_id[pkg["id"]] = pkg
    return by_id


def select_package(metadata: Metadata, selector: Optional[str] = None) -> Dict[str, Any]:
    """Pick the main package among workspace members.

    Args:
        metadata: Scarb metadata document.
        selector: Package name or full package id. When omitted the
            workspace must have exactly one member.

    Raises:
        MetadataError: A package entry has no string ``id`` or ``name``.
        UnknownPackage: No member matches ``selector``.
        PackageSelectionError: No selector and several (or no) members.
    """
    packages = _packages_by_id(metadata)
    member_ids = (metadata.get("workspace") or {}).get("members") or []
    members = [packages[mid] for mid in member_ids if mid in packages]

    if selector is None:
        if len(members) == 1:
            return members[0]
        if not members:
            raise PackageSelectionError("workspace has no member packages")
        names = ", ".join(sorted(pkg["name"] for pkg in members))
        raise PackageSelectionError(
            f"could not determine which package to work on; use --package "
            f"to specify one of: {names}"
        )

    matches = [pkg for pkg in members if selector in (pkg["id"], pkg["name"])]
    if not matches:
        raise UnknownPackage(selector, context="workspace members")
    if len(matches) > 1:
        ids = ", ".join(pkg["id"] for pkg in matches)
        raise PackageSelectionError(
            f"package selector `{selector}` is ambiguous, matches: {ids}"
        )
    return matches[0]


def select_compilation_unit(
    metadata: Metadata,
    package_id: str,
    kind_priority: Sequence[str] = ("starknet-contract", "lib"),
) -> Dict[str, Any]:
    """Choose the compilation unit to eject for ``package_id``.

    Units whose target kind appears earlier in ``kind_priority`` win; any
    other kind ranks after them. Ties are broken by target name.

    Raises:
        MetadataError: The package has no compilation units.
    """
    units = [
        unit
        for unit in metadata.get("compilation_units") or []
        if unit.get("package") == package_id
    ]
    if not units:
        raise MetadataError(
            f"could not find a compilation unit suitable for ejection for "
            f"package {package_id}"
        )

    def rank(unit: Dict[str, Any]) -> Tuple[int, str]:
        target = unit.get("target") or {}
        kind = target.get("kind", "")
        position = (
            kind_priority.index(kind) if kind in kind_priority else len(kind_priority)
        )
        return position, target.get("name", "")

    unit = min(units, key=rank)
    logger.debug(
        "Selected compilation unit %s (target kind %s)",
        unit.get("id", "?"),
        (unit.get("target") or {}).get("kind"),
    )
    return unit


def component_source_root(component: Dict[str, Any]) -> str:
    """Directory containing the component's main source file."""
    source_path = component.get("source_path")
    if not source_path:
        return ""
    return os.path.dirname(source_path)


def _component_id(component: Dict[str, Any]) -> str:
    comp_id = component.get("id") or component.get("package")
    if not isinstance(comp_id, str) or not comp_id:
        raise MetadataError(f"component {component.get('name', '?')} has no id")
    return comp_id


def _dependency_ids(component: Dict[str, Any], comp_id: str) -> List[str]:
    ids: List[str] = []
    for dep in component.get("dependencies") or []:
        dep_id = dep.get("id") if isinstance(dep, dict) else None
        if not isinstance(dep_id, str) or not dep_id:
            raise MetadataError(f"component {comp_id} has a dependency without an id")
        ids.append(dep_id)
    return ids


def build_package_graph(unit: Dict[str, Any]) -> Tuple[PackageGraph, str]:
    """Build the package graph of a compilation unit.

    Every component becomes a :class:`PackageNode`. Component dependency
    edges are taken from ``components[].dependencies`` when Scarb reports
    them. Older metadata without component dependencies is treated as flat:
    the main component depends on every other component in order.

    Returns:
        Tuple[PackageGraph, str]: The graph and the id of the main component.

    Raises:
        MetadataError: A component is malformed or two components share an id.
    """
    components: List[Dict[str, Any]] = list(unit.get("components") or [])
    if not components:
        raise MetadataError(f"compilation unit {unit.get('id', '?')} has no components")
    if not all(isinstance(c, dict) for c in components):
        raise MetadataError(f"compilation unit {unit.get('id', '?')} has malformed components")

    try:
        main = next(c for c in components if c.get("package") == unit.get("package"))
    except StopIteration:
        main = components[0]
    root_id = _component_id(main)

    has_edges = any(c.get("dependencies") is not None for c in components)
    nodes: List[PackageNode] = []
    seen: set = set()
    for component in components:
        comp_id = _component_id(component)
        if comp_id in seen:
            raise MetadataError(f"component id {comp_id} appears more than once")
        seen.add(comp_id)

        if has_edges:
            deps = _dependency_ids(component, comp_id)
        elif comp_id == root_id:
            deps = [_component_id(c) for c in components if _component_id(c) != root_id]
        else:
            deps = []

        name = component.get("name")
        if not isinstance(name, str):
            raise MetadataError(f"component {comp_id} has no name")
        discriminator = component.get("discriminator")
        if discriminator is not None and not isinstance(discriminator, str):
            raise MetadataError(f"component {comp_id} has a malformed discriminator")
        source_path = component.get("source_path")
        if source_path is not None and not isinstance(source_path, str):
            raise MetadataError(f"component {comp_id} has a malformed source path")

        root = component_source_root(component)
        nodes.append(
            PackageNode(
                id=comp_id,
                name=name,
                source_roots=(root,) if root else (),
                dependencies=tuple(deps),
                discriminator=discriminator,
            )
        )

    if not has_edges:
        logger.debug("Metadata has no component dependencies; using flat graph")
    graph = PackageGraph(nodes)
    logger.debug("Built package graph with %d package(s)", len(graph))
    return graph, root_id


def convert_cfg_set(cfg: Any, crate_name: str) -> Optional[Tuple[CfgItem, ...]]:
    """Convert Scarb cfg entries into compiler cfg items.

    Scarb reports a cfg either as a bare name (``"test"``), a key/value pair
    (``["target", "lib"]``) or an object with ``name``/``value`` keys.
    Entries that do not fit these shapes make the whole set unusable, which
    is logged and reported as None.
    """
    if cfg is None:
        return None

    items: List[CfgItem] = []
    for entry in cfg:
        if isinstance(entry, str):
            items.append(entry)
        elif isinstance(entry, (list, tuple)) and len(entry) == 2:
            items.append((str(entry[0]), str(entry[1])))
        elif isinstance(entry, dict) and "name" in entry:
            value = entry.get("value")
            items.append(entry["name"] if value is None else (entry["name"], value))
        else:
            logger.warning(
                "scarb metadata cfg did not convert identically to cairo one "
                "for crate: %s",
                crate_name,
            )
            return None
    return tuple(items)


def package_edition(
    package: Dict[str, Any], default: Optional[Edition] = None
) -> Edition:
    """Edition of ``package``, falling back to ``default`` or the global default."""
    value = package.get("edition")
    if value is not None:
        try:
            return Edition(value)
        except ValueError:
            logger.warning(
                "failed to parse edition of package %s: unknown edition %r",
                package.get("name", package.get("id", "?")),
                value,
            )
    return default or Edition.default()


def package_experimental_features(package: Dict[str, Any]) -> ExperimentalFeatures:
    return ExperimentalFeatures.from_names(package.get("experimental_features"))


__all__ = [
    "METADATA_FORMAT_VERSION",
    "Metadata",
    "build_package_graph",
    "component_source_root",
    "convert_cfg_set",
    "load_metadata_file",
    "package_edition",
    "package_experimental_features",
    "run_scarb_metadata",
    "select_compilation_unit",
    "select_package",
    "workspace_root",
]
