"""Site configuration."""

from bakehouse.config.loader import CONFIG_FILE_NAME, inspect_config, load_config
from bakehouse.config.settings import BakeConfig

__all__ = ["CONFIG_FILE_NAME", "BakeConfig", "inspect_config", "load_config"]
