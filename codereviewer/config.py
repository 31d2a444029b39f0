"""Configuration loading for the code review assistant."""

import copy
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from dotenv import load_dotenv

from codereviewer.console import warn

# Load environment variables from .env file
load_dotenv()

CONFIG_FILENAME = ".codereviewer.yaml"

DEFAULT_CONFIG: Dict[str, Dict[str, Any]] = {
    "review": {
        "model": "gemini-2.5-pro",
    },
    "service": {
        "host": "127.0.0.1",
        "port": 8765,
    },
    "auth": {
        "supabase_url": None,
        "supabase_anon_key": None,
        "redirect_to": "http://127.0.0.1:8765/auth/callback",
        "providers": ["google", "github"],
    },
}

# Environment variable -> (section, key, converter)
ENV_OVERRIDES = {
    "CODEREVIEWER_MODEL": ("review", "model", str),
    "CODEREVIEWER_HOST": ("service", "host", str),
    "CODEREVIEWER_PORT": ("service", "port", int),
    "CODEREVIEWER_REDIRECT_URL": ("auth", "redirect_to", str),
    "SUPABASE_URL": ("auth", "supabase_url", str),
    "SUPABASE_ANON_KEY": ("auth", "supabase_anon_key", str),
}


def find_config_file(start: Optional[Path] = None) -> Optional[Path]:
    """Find the nearest config file, walking up from ``start`` (cwd by default)."""
    current = (start or Path.cwd()).resolve()
    while True:
        candidate = current / CONFIG_FILENAME
        if candidate.exists():
            return candidate
        if current == current.parent:
            return None
        current = current.parent


def load_config(config_path: Optional[Path] = None) -> Dict[str, Dict[str, Any]]:
    """Load configuration.

    Merges, in order of precedence:
      1. Environment variable overrides
      2. The config file (explicit path, or the nearest .codereviewer.yaml)
      3. Built-in defaults

    Args:
        config_path: Optional path to config file

    Returns:
        Configuration dictionary keyed by section
    """
    config = copy.deepcopy(DEFAULT_CONFIG)

    if config_path is None:
        config_path = find_config_file()

    if config_path and Path(config_path).exists():
        try:
            with open(config_path, "r") as f:
                user_config = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            warn(f"Could not load config file: {e}")
            user_config = {}

        for section, values in user_config.items():
            if isinstance(values, dict) and isinstance(config.get(section), dict):
                config[section].update(values)
            else:
                config[section] = values

    for env_name, (section, key, convert) in ENV_OVERRIDES.items():
        value = os.environ.get(env_name)
        if value:
            try:
                config[section][key] = convert(value)
            except ValueError:
                warn(f"Ignoring invalid value for {env_name}: {value!r}")

    return config


def auth_configured(config: Dict[str, Dict[str, Any]]) -> bool:
    """Return True when both Supabase settings are present."""
    auth = config.get("auth", {})
    return bool(auth.get("supabase_url") and auth.get("supabase_anon_key"))
