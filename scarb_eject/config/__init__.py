"""Configuration schema and loading for scarb-eject."""

from .loader import ConfigSource, load_eject_config
from .schema import EjectConfig

__all__ = ["ConfigSource", "EjectConfig", "load_eject_config"]
