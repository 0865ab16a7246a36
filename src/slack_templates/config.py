from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

# Regex for ${VAR_NAME} substitution
_ENV_RE = re.compile(r"\$\{([^}]+)\}")

DEFAULT_STORAGE_PATH = "~/.local/share/slack-templates/slack-templates.json"
DEFAULT_EXPORT_PATH = "~/Downloads/slack-templates.json"

DEFAULTS: dict[str, Any] = {
    "slack": {"token": "${SLACK_TOKEN}"},
    "storage": {"path": DEFAULT_STORAGE_PATH},
    "export": {"path": DEFAULT_EXPORT_PATH},
    "logging": {"level": "INFO", "dir": "logs"},
}


def _substitute(value: Any) -> Any:
    """Recursively replace ${VAR} with environment variable values in strings."""
    if isinstance(value, str):
        return _ENV_RE.sub(lambda m: os.environ.get(m.group(1), m.group(0)), value)
    if isinstance(value, dict):
        return {k: _substitute(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_substitute(item) for item in value]
    return value


def _merge_defaults(defaults: dict, data: dict) -> dict:
    merged = dict(defaults)
    for key, value in data.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge_defaults(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_config(path: str | Path | None = "config.yaml") -> dict:
    """Load config.yaml with ${ENV_VAR} substitution and built-in defaults.

    ``path=None`` skips the file and returns the defaults, still substituted
    from the environment (and ``.env``).
    """
    load_dotenv()
    data: dict = {}
    if path is not None:
        raw = Path(path).read_text(encoding="utf-8")
        data = yaml.safe_load(raw) or {}
        if not isinstance(data, dict):
            raise ValueError(f"{path}: top level must be a mapping")
    return _substitute(_merge_defaults(DEFAULTS, data))


def slack_token(config: dict) -> str | None:
    """Return the configured token, or None when the placeholder is unresolved."""
    token = (config.get("slack") or {}).get("token")
    if not token or _ENV_RE.search(token):
        return None
    return token
