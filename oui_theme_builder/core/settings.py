from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, ValidationError

from .errors import SettingsError
from .logger import get_logger

log = get_logger(__name__)

SETTINGS_ENV_VAR = "OUI_THEME_SETTINGS"


class EngineSettings(BaseModel):
    # Only custom properties with this prefix are reported by the inspector.
    variable_prefix: str = "oui-"
    # Classes injected by the trading SDK; skipped when building element paths.
    framework_class_prefix: str = "orderly-"
    max_path_classes: int = Field(2, ge=0)
    max_ancestors: int = Field(5, ge=0)
    default_theme_path: Optional[str] = None


def load_settings(path: Optional[Path] = None) -> EngineSettings:
    """
    Load engine settings.

    Uses ``path`` when given, otherwise the file named by the
    ``OUI_THEME_SETTINGS`` environment variable, otherwise the defaults.
    """
    if path is None:
        env_path = os.environ.get(SETTINGS_ENV_VAR)
        if not env_path:
            return EngineSettings()
        path = Path(env_path)
        log.debug(f"Using settings file from {SETTINGS_ENV_VAR}: {path}")

    if not path.exists():
        raise SettingsError(f"Settings file not found: {path}")

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        return EngineSettings.model_validate(data)
    except (json.JSONDecodeError, ValidationError) as exc:
        raise SettingsError(f"Invalid settings file {path}: {exc}") from exc
