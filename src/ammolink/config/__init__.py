"""Application configuration helpers."""

from __future__ import annotations

from .artifacts import ArtifactsConfig, get_artifacts_config
from .env import env_flag, env_int, env_list, require_env_vars
from .errors import ConfigurationError, MissingConfigurationError
from .exclusions import (
    BASE_MASTER,
    DLC_MASTERS,
    ExclusionConfig,
    ExclusionSettingsFile,
    get_exclusion_config,
    load_exclusion_config,
)
from .logging import configure_logging, resolve_log_level
from .pipeline import PipelineConfig, get_pipeline_config

__all__ = [
    "BASE_MASTER",
    "DLC_MASTERS",
    "ArtifactsConfig",
    "ConfigurationError",
    "ExclusionConfig",
    "ExclusionSettingsFile",
    "MissingConfigurationError",
    "PipelineConfig",
    "configure_logging",
    "env_flag",
    "env_int",
    "env_list",
    "get_artifacts_config",
    "get_exclusion_config",
    "get_pipeline_config",
    "load_exclusion_config",
    "require_env_vars",
    "resolve_log_level",
]
