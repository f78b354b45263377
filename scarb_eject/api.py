"""Library-facing helpers for ejecting a Scarb package.

The CLI goes through these functions as well: metadata in, descriptor out.
Callers that already hold a metadata document (for example from a saved
``scarb metadata`` run) can skip the subprocess entirely.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, TextIO, Union

from scarb_eject.config import EjectConfig
from scarb_eject.export.descriptor import export_descriptor
from scarb_eject.graph.models import CrateSettings, DependencySettings, ProjectDescriptor
from scarb_eject.graph.projector import project_crates
from scarb_eject.metadata.scarb import (
    Metadata,
    build_package_graph,
    convert_cfg_set,
    package_edition,
    package_experimental_features,
    select_compilation_unit,
    select_package,
    workspace_root,
)

logger = logging.getLogger("scarb_eject.api")


def build_descriptor(
    metadata: Metadata,
    package: Optional[str] = None,
    config: Optional[EjectConfig] = None,
) -> ProjectDescriptor:
    """Build the project descriptor for one workspace package.

    Args:
        metadata: Scarb metadata document.
        package: Package name or id; defaults to the only workspace member.
        config: Optional EjectConfig. When omitted, ``EjectConfig.default()``
            is used.

    Returns:
        ProjectDescriptor: Crate roots of the package's dependency closure
        and the package's crate settings.
    """
    config = config or EjectConfig.default()

    main_package = select_package(metadata, package)
    unit = select_compilation_unit(
        metadata, main_package["id"], config.target_kind_priority
    )
    graph, root_id = build_package_graph(unit)
    entries = project_crates(graph, root_id, exclude=set(config.exclude_crates))

    dependencies = {}
    if not config.no_deps:
        dependencies = {
            entry.name: DependencySettings(discriminator=entry.discriminator)
            for entry in entries
        }

    settings = CrateSettings(
        edition=package_edition(main_package, config.default_edition),
        version=main_package.get("version"),
        cfg_set=convert_cfg_set(unit.get("cfg"), main_package["name"]),
        dependencies=dependencies,
        experimental_features=package_experimental_features(main_package),
    )
    logger.info(
        "Ejecting %s: %d crate(s), edition %s",
        main_package["name"],
        len(entries),
        settings.edition.value,
    )
    return ProjectDescriptor(crates=tuple(entries), settings=settings)


def default_output_path(metadata: Metadata, config: Optional[EjectConfig] = None) -> Path:
    """``cairo_project.toml`` (or the configured name) in the workspace root."""
    config = config or EjectConfig.default()
    return workspace_root(metadata) / config.output_file_name


def eject(
    metadata: Metadata,
    output: Union[str, Path, None] = None,
    package: Optional[str] = None,
    config: Optional[EjectConfig] = None,
    stream: Optional[TextIO] = None,
) -> str:
    """Build the descriptor and write it to ``output``.

    Args:
        metadata: Scarb metadata document.
        output: Destination file, ``"-"`` for standard output, or None for
            :func:`default_output_path`.
        package: Package name or id to eject.
        config: Optional EjectConfig.
        stream: Stream used instead of ``sys.stdout`` when output is ``"-"``.

    Returns:
        str: The rendered descriptor text.
    """
    config = config or EjectConfig.default()
    descriptor = build_descriptor(metadata, package, config)
    target = output if output is not None else default_output_path(metadata, config)
    return export_descriptor(
        descriptor,
        target,
        absolute_paths=config.absolute_paths,
        include_dependencies=not config.no_deps,
        stream=stream,
    )


__all__ = ["build_descriptor", "default_output_path", "eject"]
