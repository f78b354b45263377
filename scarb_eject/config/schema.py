"""Configuration schema for scarb-eject using Pydantic for validation.

Settings can come from a TOML/JSON file or an inline string passed with
``--config``. Command-line flags take precedence over values loaded here.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

from scarb_eject.graph.models import Edition


class EjectConfig(BaseModel):
    """Top-level configuration for an eject run.

    Attributes:
        output_file_name: File name used when no output path is given; the
            file is placed in the workspace root.
        absolute_paths: Render crate roots as absolute paths even when
            writing to a file.
        no_deps: Omit the ``[config.global.dependencies]`` table.
        exclude_crates: Crate names never written to ``crate_roots``.
        default_edition: Edition used when the main package has none.
        target_kind_priority: Compilation unit target kinds, most preferred
            first. Kinds not listed rank after all listed ones.
        scarb_path: Scarb executable used to query metadata.
    """

    output_file_name: str = "cairo_project.toml"
    absolute_paths: bool = False
    no_deps: bool = False
    exclude_crates: List[str] = Field(default_factory=lambda: ["core"])
    default_edition: Optional[Edition] = None
    target_kind_priority: List[str] = Field(
        default_factory=lambda: ["starknet-contract", "lib"]
    )
    scarb_path: str = "scarb"

    model_config = {"extra": "forbid"}

    @field_validator("output_file_name")
    @classmethod
    def validate_output_file_name(cls, v: str) -> str:
        """Validate that the output file name is a bare file name."""
        if not v or v in {".", ".."} or "/" in v or "\\" in v:
            raise ValueError(f"Invalid output file name '{v}'")
        return v

    @field_validator("scarb_path")
    @classmethod
    def validate_scarb_path(cls, v: str) -> str:
        """Reject empty executables and values that look like options."""
        if not v or v.startswith("-"):
            raise ValueError(f"Invalid scarb executable '{v}'")
        return v

    @classmethod
    def default(cls) -> "EjectConfig":
        return cls()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EjectConfig":
        """Create configuration from dictionary.

        Raises:
            ValidationError: If configuration is invalid.
        """
        return cls.model_validate(data)
