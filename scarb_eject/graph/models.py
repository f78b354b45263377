"""Data models for package graphs and project descriptors.

``PackageNode`` is what the metadata source hands to the projector,
``CrateEntry`` is what the projector emits, and ``ProjectDescriptor`` bundles
entries with crate settings for serialization. All models are frozen: a
descriptor is created once per run and never mutated.
"""

from __future__ import annotations

import re
from enum import Enum
from typing import Annotated, Dict, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

CRATE_NAME_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

# A cfg item is either a bare name (``test``) or a key/value pair
# (``("target", "lib")``).
CfgItem = Union[str, Tuple[str, str]]


class Edition(str, Enum):
    """Cairo language editions understood by the compiler."""

    V2023_01 = "2023_01"
    V2023_10 = "2023_10"
    V2023_11 = "2023_11"
    V2024_07 = "2024_07"

    @classmethod
    def default(cls) -> "Edition":
        return cls.V2023_01


def is_valid_crate_name(name: str) -> bool:
    """Return True when ``name`` can be used as a crate identifier."""
    return bool(CRATE_NAME_PATTERN.match(name))


class PackageNode(BaseModel):
    """A single resolved package as reported by the metadata source."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    id: Annotated[str, Field(..., description="Unique package id within the graph")]
    name: Annotated[str, Field(..., description="Crate name")]
    source_roots: Annotated[
        Tuple[str, ...],
        Field(default=(), description="Source root directories of the crate"),
    ]
    dependencies: Annotated[
        Tuple[str, ...],
        Field(default=(), description="Direct dependency ids, in declared order"),
    ]
    discriminator: Annotated[
        Optional[str],
        Field(
            default=None,
            description="Scarb discriminator distinguishing same-named packages",
        ),
    ]

    @field_validator("id")
    @classmethod
    def _check_id_non_empty(cls, value: str) -> str:
        if not value:
            raise ValueError("Package id must be a non-empty string")
        return value


class CrateEntry(BaseModel):
    """A crate name and its ordered, deduplicated source roots."""

    model_config = ConfigDict(frozen=True)

    name: str
    roots: Tuple[str, ...]
    package_id: Optional[str] = None
    discriminator: Optional[str] = None


class DependencySettings(BaseModel):
    """Per-dependency settings stored under ``config.global.dependencies``."""

    model_config = ConfigDict(frozen=True)

    discriminator: Optional[str] = None


class ExperimentalFeatures(BaseModel):
    """Compiler experimental feature switches for the main package."""

    model_config = ConfigDict(frozen=True)

    negative_impls: bool = False
    coupons: bool = False

    @classmethod
    def from_names(cls, names) -> "ExperimentalFeatures":
        enabled = set(names or ())
        return cls(
            negative_impls="negative_impls" in enabled,
            coupons="coupons" in enabled,
        )


class CrateSettings(BaseModel):
    """Global crate settings written to ``[config.global]``."""

    model_config = ConfigDict(frozen=True)

    edition: Edition = Field(default_factory=Edition.default)
    version: Optional[str] = None
    cfg_set: Optional[Tuple[CfgItem, ...]] = None
    dependencies: Dict[str, DependencySettings] = Field(default_factory=dict)
    experimental_features: ExperimentalFeatures = Field(
        default_factory=ExperimentalFeatures
    )


class ProjectDescriptor(BaseModel):
    """Everything needed to render one ``cairo_project.toml``."""

    model_config = ConfigDict(frozen=True)

    crates: Tuple[CrateEntry, ...]
    settings: CrateSettings = Field(default_factory=CrateSettings)

    @property
    def edition(self) -> Edition:
        return self.settings.edition


__all__ = [
    "CRATE_NAME_PATTERN",
    "CfgItem",
    "CrateEntry",
    "CrateSettings",
    "DependencySettings",
    "Edition",
    "ExperimentalFeatures",
    "PackageNode",
    "ProjectDescriptor",
    "is_valid_crate_name",
]
