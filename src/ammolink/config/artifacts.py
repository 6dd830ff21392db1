"""Where diagnostic artifacts (markers, CSV reports) are written."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Final

if TYPE_CHECKING:
    from collections.abc import Mapping

APP_DIR_NAME: Final[str] = "ammolink"
ARTIFACTS_DIR_NAME: Final[str] = "artifacts"
ENV_ARTIFACTS_DIR: Final[str] = "AMMOLINK_ARTIFACTS_DIR"


@dataclass(frozen=True, slots=True)
class ArtifactsConfig:
    directory: Path

    def resolve_directory(self) -> Path:
        return self.directory.expanduser().resolve()

    def ensure_directory(self) -> Path:
        directory = self.resolve_directory()
        directory.mkdir(parents=True, exist_ok=True)
        return directory


def _default_artifacts_dir(environ: Mapping[str, str]) -> Path:
    if os.name == "nt":
        base = environ.get("LOCALAPPDATA")
        base_path = Path(base) if base else (Path.home() / "AppData" / "Local")
    else:
        base = environ.get("XDG_DATA_HOME")
        base_path = Path(base) if base else (Path.home() / ".local" / "share")
    return (base_path / APP_DIR_NAME / ARTIFACTS_DIR_NAME).expanduser().resolve()


def get_artifacts_config(*, environ: Mapping[str, str] | None = None) -> ArtifactsConfig:
    source = os.environ if environ is None else environ
    env_dir = source.get(ENV_ARTIFACTS_DIR)
    directory = Path(env_dir) if env_dir else _default_artifacts_dir(source)
    return ArtifactsConfig(directory=directory)
