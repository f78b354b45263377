"""scarb-eject - generate cairo_project.toml from Scarb workspace metadata."""

__version__ = "0.3.0"
