"""TOML export for project descriptors (``cairo_project.toml``)."""

from __future__ import annotations

import logging
import os
import shutil
import sys
import tempfile
from pathlib import Path
from typing import Any, Dict, List, Optional, TextIO, Union

import toml

from scarb_eject.errors import SinkWriteFailure
from scarb_eject.graph.models import CrateSettings, ProjectDescriptor
from scarb_eject.utils.path_utils import absolute_path, render_source_root

logger = logging.getLogger("scarb_eject.export.descriptor")

STDOUT = "-"

OutputTarget = Union[str, Path]


def is_stdout(output: OutputTarget) -> bool:
    """Return True when ``output`` designates standard output."""
    return str(output) == STDOUT


def descriptor_base_dir(output: OutputTarget) -> Optional[str]:
    """Directory that relative crate roots are resolved against.

    Returns None for standard output, which has no location.
    """
    if is_stdout(output):
        return None
    return os.path.dirname(absolute_path(output))


def _settings_table(settings: CrateSettings, include_dependencies: bool) -> Dict[str, Any]:
    table: Dict[str, Any] = {"edition": settings.edition.value}
    if settings.version is not None:
        table["version"] = settings.version
    if settings.cfg_set is not None:
        table["cfg_set"] = [
            item if isinstance(item, str) else list(item)
            for item in settings.cfg_set
        ]
    if include_dependencies:
        table["dependencies"] = {
            name: dep.model_dump(exclude_none=True)
            for name, dep in settings.dependencies.items()
        }
    table["experimental_features"] = settings.experimental_features.model_dump()
    return table


def build_document(
    descriptor: ProjectDescriptor,
    base_dir: Optional[str],
    *,
    include_dependencies: bool = True,
) -> Dict[str, Any]:
    """Convert a descriptor into the mapping written as TOML.

    Args:
        descriptor: Descriptor to convert.
        base_dir: Directory of the output file, or None for absolute paths.
        include_dependencies: Emit ``[config.global.dependencies]``.

    Returns:
        Dict[str, Any]: ``crate_roots`` followed by ``config.global``.
    """
    crate_roots: Dict[str, Union[str, List[str]]] = {}
    for entry in descriptor.crates:
        rendered = [render_source_root(root, base_dir) for root in entry.roots]
        crate_roots[entry.name] = rendered[0] if len(rendered) == 1 else rendered

    return {
        "crate_roots": crate_roots,
        "config": {
            "global": _settings_table(descriptor.settings, include_dependencies),
        },
    }


def render_descriptor(
    descriptor: ProjectDescriptor,
    output: OutputTarget,
    *,
    absolute_paths: bool = False,
    include_dependencies: bool = True,
) -> str:
    """Render descriptor text for the given output target.

    Crate roots are relative to the output file's directory unless the
    output is standard output or ``absolute_paths`` is set.
    """
    base_dir = None if absolute_paths else descriptor_base_dir(output)
    document = build_document(
        descriptor, base_dir, include_dependencies=include_dependencies
    )
    return toml.dumps(document).rstrip("\n") + "\n"


def _new_file_mode() -> int:
    mask = os.umask(0)
    os.umask(mask)
    return 0o666 & ~mask


def _write_file_atomically(text: str, path: Path) -> None:
    # Replace the file a symlink points at, not the link itself.
    path = Path(os.path.realpath(path))
    directory = path.parent
    if not directory.is_dir():
        raise SinkWriteFailure(f"output directory does not exist: {directory}")

    try:
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{path.name}.", suffix=".tmp", dir=directory
        )
    except OSError as exc:
        raise SinkWriteFailure(f"cannot write {path}: {exc}") from exc

    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as handle:
            handle.write(text)
        if path.exists():
            shutil.copymode(path, tmp_name)
        else:
            os.chmod(tmp_name, _new_file_mode())
        os.replace(tmp_name, path)
    except OSError as exc:
        try:
            os.unlink(tmp_name)
        except FileNotFoundError:
            pass
        raise SinkWriteFailure(f"cannot write {path}: {exc}") from exc


def write_descriptor(
    text: str, output: OutputTarget, stream: Optional[TextIO] = None
) -> None:
    """Deliver rendered descriptor text to a file or standard output.

    File output is written to a temporary file next to the target and then
    moved into place, so the target is either fully replaced or untouched.

    Raises:
        SinkWriteFailure: If the destination cannot be written.
    """
    if is_stdout(output):
        sink = stream if stream is not None else sys.stdout
        try:
            sink.write(text)
            sink.flush()
        except OSError as exc:
            raise SinkWriteFailure(f"cannot write to standard output: {exc}") from exc
        return

    path = Path(output)
    _write_file_atomically(text, path)
    logger.info("Wrote %s", path)


def export_descriptor(
    descriptor: ProjectDescriptor,
    output: OutputTarget,
    *,
    absolute_paths: bool = False,
    include_dependencies: bool = True,
    stream: Optional[TextIO] = None,
) -> str:
    """Render ``descriptor`` and write it to ``output``.

    Returns:
        str: The rendered text.
    """
    text = render_descriptor(
        descriptor,
        output,
        absolute_paths=absolute_paths,
        include_dependencies=include_dependencies,
    )
    write_descriptor(text, output, stream=stream)
    logger.info(
        "Exported descriptor: %d crate(s), edition %s",
        len(descriptor.crates),
        descriptor.edition.value,
    )
    return text


__all__ = [
    "STDOUT",
    "build_document",
    "descriptor_base_dir",
    "export_descriptor",
    "is_stdout",
    "render_descriptor",
    "write_descriptor",
]
