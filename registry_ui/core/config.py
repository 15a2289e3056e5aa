"""
Settings for the registry browser.

Resolution order:
1. Built-in defaults
2. Optional YAML file named by REGISTRY_UI_CONFIG
3. Environment variables REGISTRY_UI_API_URL and REGISTRY_UI_DATA_DIR
"""
from __future__ import annotations

import os
from pathlib import Path
from typing import Mapping, Optional

import yaml
from pydantic import BaseModel, Field

CONFIG_FILE_ENV_VAR = "REGISTRY_UI_CONFIG"
API_URL_ENV_VAR = "REGISTRY_UI_API_URL"
DATA_DIR_ENV_VAR = "REGISTRY_UI_DATA_DIR"

_REPO_ROOT = Path(__file__).resolve().parents[2]
_DEFAULT_DATA_DIR = _REPO_ROOT / "data"


class BrowserSettings(BaseModel):
    api_url: str = Field(
        default="http://localhost:4873/-/verdaccio",
        description="Base URL of the registry web API; resources are resolved below it.",
    )
    request_timeout: float = Field(
        default=30.0,
        gt=0,
        description="Timeout in seconds for each registry request.",
    )
    data_dir: Path = Field(
        default=_DEFAULT_DATA_DIR,
        description="Directory holding session.json.",
    )
    token_leeway_seconds: float = Field(
        default=0,
        ge=0,
        description="Report tokens as expired this many seconds before their exp claim.",
    )

    @property
    def session_file(self) -> Path:
        return self.data_dir / "session.json"


def load_settings(environ: Optional[Mapping[str, str]] = None) -> BrowserSettings:
    """
    Build settings from the optional YAML config file and the environment.
    The data directory is created if it does not exist yet.
    """
    env = os.environ if environ is None else environ
    values: dict = {}

    config_path = env.get(CONFIG_FILE_ENV_VAR)
    if config_path:
        path = Path(config_path).expanduser()
        loaded = yaml.safe_load(path.read_text(encoding="utf-8"))
        if loaded is not None and not isinstance(loaded, dict):
            raise ValueError(f"Config file {path} must contain a mapping")
        values.update(loaded or {})

    if env.get(API_URL_ENV_VAR):
        values["api_url"] = env[API_URL_ENV_VAR]
    if env.get(DATA_DIR_ENV_VAR):
        values["data_dir"] = Path(env[DATA_DIR_ENV_VAR]).expanduser()

    settings = BrowserSettings(**values)
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    return settings
