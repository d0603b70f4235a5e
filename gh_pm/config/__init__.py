"""Configuration file handling."""

from .loader import CONFIG_FILE_NAME, find_config_file, load_config, save_config
from .models import (
    ConfigMetadata,
    FieldMapping,
    FieldMetadata,
    PMConfig,
    ProjectConfig,
    TriageApply,
    TriageConfig,
    TriageInteractive,
    default_config,
)

__all__ = [
    "CONFIG_FILE_NAME",
    "ConfigMetadata",
    "FieldMapping",
    "FieldMetadata",
    "PMConfig",
    "ProjectConfig",
    "TriageApply",
    "TriageConfig",
    "TriageInteractive",
    "default_config",
    "find_config_file",
    "load_config",
    "save_config",
]
