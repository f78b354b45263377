"""Eject command implementation."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict

from pydantic import ValidationError

from scarb_eject.api import eject
from scarb_eject.config import load_eject_config
from scarb_eject.errors import EjectError
from scarb_eject.metadata.scarb import load_metadata_file, run_scarb_metadata

logger = logging.getLogger("scarb_eject.cli.eject")


def eject_command(args) -> int:
    """Execute the eject command.

    Args:
        args: Parsed command-line arguments containing:
            - output: Output path, "-" for stdout, or None
            - package: Package selector (optional)
            - no_deps: Omit the dependencies table
            - absolute_paths: Render absolute crate roots
            - manifest_path: Scarb.toml forwarded to scarb (optional)
            - metadata: Saved metadata JSON to use instead of scarb (optional)
            - config: Config file or inline TOML/JSON (optional)

    Returns:
        int: Exit code (0 for success, non-zero for failure).
    """
    try:
        config = load_eject_config(getattr(args, "config", None))
    except (ValidationError, ValueError, OSError) as err:
        logger.error("Invalid configuration: %s", err)
        return 1

    overrides: Dict[str, Any] = {}
    if getattr(args, "no_deps", False):
        overrides["no_deps"] = True
    if getattr(args, "absolute_paths", False):
        overrides["absolute_paths"] = True
    if overrides:
        config = config.model_copy(update=overrides)

    metadata_arg = getattr(args, "metadata", None)
    manifest_arg = getattr(args, "manifest_path", None)

    try:
        if metadata_arg:
            logger.info("Reading metadata from %s", metadata_arg)
            metadata = load_metadata_file(Path(metadata_arg))
        else:
            metadata = run_scarb_metadata(
                config.scarb_path,
                Path(manifest_arg) if manifest_arg else None,
            )

        eject(
            metadata,
            output=getattr(args, "output", None),
            package=getattr(args, "package", None),
            config=config,
        )
        return 0

    except EjectError as err:
        logger.error("%s: %s", type(err).__name__, err)
        return 1
