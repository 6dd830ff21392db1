"""Plugin exclusion settings.

Exclusions come from three layers, later layers extending earlier ones:

1. environment variables (``AMMOLINK_EXCLUDED_PLUGINS`` and the two switches)
2. an optional ``.env`` style file read with python-dotenv
3. an optional JSON settings file validated with pydantic
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Final

from dotenv import dotenv_values
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .env import env_flag, env_list
from .errors import ConfigurationError

if TYPE_CHECKING:
    from collections.abc import Mapping
    from pathlib import Path

log = logging.getLogger(__name__)

BASE_MASTER: Final[str] = "Fallout4.esm"
DLC_MASTERS: Final[tuple[str, ...]] = (
    "DLCRobot.esm",
    "DLCworkshop01.esm",
    "DLCCoast.esm",
    "DLCworkshop02.esm",
    "DLCworkshop03.esm",
    "DLCNukaWorld.esm",
)

ENV_EXCLUDED_PLUGINS: Final[str] = "AMMOLINK_EXCLUDED_PLUGINS"
ENV_EXCLUDE_BASE_MASTER: Final[str] = "AMMOLINK_EXCLUDE_BASE_MASTER"
ENV_EXCLUDE_DLC_MASTERS: Final[str] = "AMMOLINK_EXCLUDE_DLC_MASTERS"


@dataclass(frozen=True, slots=True)
class ExclusionConfig:
    """Which plugins are ignored as record sources during a run."""

    excluded_plugins: tuple[str, ...] = field(default_factory=tuple)
    exclude_base_master: bool = False
    exclude_dlc_masters: bool = False

    def excluded_plugin_set(self) -> frozenset[str]:
        names = {name.strip() for name in self.excluded_plugins if name.strip()}
        if self.exclude_base_master:
            names.add(BASE_MASTER)
        if self.exclude_dlc_masters:
            names.update(DLC_MASTERS)
        return frozenset(names)


class ExclusionSettingsFile(BaseModel):
    """Shape of the ``exclusions`` section of a JSON settings file."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    excluded_plugins: list[str] = Field(default_factory=list, alias="excludedPlugins")
    exclude_base_master: bool | None = Field(default=None, alias="excludeFallout4Esm")
    exclude_dlc_masters: bool | None = Field(default=None, alias="excludeDlcEsms")


def get_exclusion_config(
    *,
    environ: Mapping[str, str] | None = None,
    dotenv_path: Path | None = None,
) -> ExclusionConfig:
    """Build exclusions from the environment, optionally layered with a ``.env`` file."""

    source: dict[str, str] = dict(os.environ if environ is None else environ)
    if dotenv_path is not None:
        file_values = {
            key: value for key, value in dotenv_values(dotenv_path).items() if value is not None
        }
        source = {**file_values, **source}

    return ExclusionConfig(
        excluded_plugins=env_list(ENV_EXCLUDED_PLUGINS, environ=source),
        exclude_base_master=env_flag(ENV_EXCLUDE_BASE_MASTER, default=False, environ=source),
        exclude_dlc_masters=env_flag(ENV_EXCLUDE_DLC_MASTERS, default=False, environ=source),
    )


def load_exclusion_config(path: Path, *, base: ExclusionConfig | None = None) -> ExclusionConfig:
    """Merge the ``exclusions`` section of a JSON settings file into ``base``."""

    setting = str(path)
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise ConfigurationError(f"Settings file not found: {path}", setting=setting) from exc
    except json.JSONDecodeError as exc:
        raise ConfigurationError(
            f"Settings file is not valid JSON: {path}", setting=setting
        ) from exc

    section = payload.get("exclusions", payload) if isinstance(payload, dict) else None
    if not isinstance(section, dict):
        raise ConfigurationError(
            f"Settings file has no exclusions object: {path}", setting=setting
        )

    try:
        settings = ExclusionSettingsFile.model_validate(section)
    except ValidationError as exc:
        raise ConfigurationError(
            f"Invalid exclusion settings in {path}: {exc}", setting=setting
        ) from exc

    current = base or ExclusionConfig()
    merged = replace(
        current,
        excluded_plugins=(*current.excluded_plugins, *settings.excluded_plugins),
    )
    if settings.exclude_base_master is not None:
        merged = replace(merged, exclude_base_master=settings.exclude_base_master)
    if settings.exclude_dlc_masters is not None:
        merged = replace(merged, exclude_dlc_masters=settings.exclude_dlc_masters)
    log.debug("Loaded exclusion settings from %s", path)
    return merged
