#!/usr/bin/env python3
"""GEMCHAT v1 — config.py"""

import json
import os
from pathlib import Path
from datetime import datetime
from typing import Any, Dict, Optional, Tuple

from dotenv import dotenv_values, set_key
from loguru import logger

CONFIG_DIR  = Path(os.environ.get("GEMCHAT_HOME") or (Path.home() / ".gemchat"))
CONFIG_FILE = CONFIG_DIR / "config.json"

API_KEY_NAME = "GEMINI_API_KEY"
ENV_FILENAME = ".env"

GEMINI_MODELS = {
    "gemini-2.0-flash": {
        "alias": "flash", "context_window": 1_048_576, "max_output": 8_192,
        "description": "Fast general-purpose chat",
    },
    "gemini-2.0-flash-lite": {
        "alias": "lite", "context_window": 1_048_576, "max_output": 8_192,
        "description": "Cheapest, lowest latency",
    },
    "gemini-2.5-flash": {
        "alias": "2.5-flash", "context_window": 1_048_576, "max_output": 65_536,
        "description": "Thinking model, balanced",
    },
    "gemini-2.5-pro": {
        "alias": "pro", "context_window": 1_048_576, "max_output": 65_536,
        "description": "Strongest reasoning",
    },
}

DEFAULT_CONFIG: dict[str, Any] = {
    "version": "1.2.0",
    "created_at": "",
    "model": "gemini-2.0-flash",
    "temperature": 0.7,
    "max_tokens": 8192,
    "chat_history_limit": 60,
    "code_theme": "monokai",
    "system_prompt": "",
    "show_banner": True,
    "hyperlinks": True,
}

_RULES: dict[str, tuple] = {
    "temperature":        (float, 0.0, 2.0,   None),
    "max_tokens":         (int,   64,  65536, None),
    "chat_history_limit": (int,   2,   400,   None),
    "model":              (str,   None, None, None),
    "code_theme":         (str,   None, None, None),
    "system_prompt":      (str,   None, None, None),
}

_BOOL_KEYS = {"show_banner", "hyperlinks"}
SETTABLE_KEYS = sorted(set(_RULES) | _BOOL_KEYS)


class ConfigError(RuntimeError):
    """Raised when startup configuration cannot be resolved."""


KEY_HELP = (
    f"No {API_KEY_NAME} found.\n"
    f"  Looked in:  ./{ENV_FILENAME}, ~/{ENV_FILENAME}, then the environment\n"
    f"  Run:  gemchat --setkey YOUR_GEMINI_KEY\n"
    f"  Or:   export {API_KEY_NAME}=YOUR_GEMINI_KEY\n"
    f"  Keys: https://aistudio.google.com/app/apikey"
)


class GemConfig:
    def __init__(self, path: Optional[Path] = None):
        self._path = Path(path) if path else CONFIG_FILE
        self._data: dict[str, Any] = {}
        self._load()

    def _load(self):
        if self._path.exists():
            try:
                saved = json.loads(self._path.read_text("utf-8"))
                self._data = {**DEFAULT_CONFIG, **saved}
                return
            except (OSError, ValueError) as exc:
                logger.warning("ignoring unreadable config {}: {}", self._path, exc)
        self._data = DEFAULT_CONFIG.copy()
        self._data["created_at"] = datetime.now().isoformat()

    def _save(self):
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._data["_updated_at"] = datetime.now().isoformat()
        self._path.write_text(
            json.dumps(self._data, indent=2, ensure_ascii=False), "utf-8"
        )

    def _validate(self, key: str, value: Any) -> Any:
        if key in _BOOL_KEYS:
            if isinstance(value, str):
                return value.lower() in ("true", "1", "yes", "on")
            return bool(value)
        if key not in _RULES:
            return value
        typ, vmin, vmax, allowed = _RULES[key]
        try: value = typ(value)
        except (TypeError, ValueError): raise ValueError(f"'{key}' must be {typ.__name__}")
        if vmin is not None and value < vmin: raise ValueError(f"'{key}' >= {vmin}")
        if vmax is not None and value > vmax: raise ValueError(f"'{key}' <= {vmax}")
        if allowed and value not in allowed:
            raise ValueError(f"'{key}' must be: {', '.join(str(a) for a in allowed)}")
        return value

    def get(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default)

    def set(self, key: str, value: Any) -> None:
        value = self._validate(key, value)
        self._data[key] = value
        self._save()

    def override(self, key: str, value: Any) -> None:
        """Set a value for this process only, without touching the file."""
        self._data[key] = self._validate(key, value)

    def model_info(self, model: Optional[str] = None) -> dict:
        m = model or self._data.get("model", DEFAULT_CONFIG["model"])
        return GEMINI_MODELS.get(m, {})

    def path(self) -> Path:
        return self._path


# ── Credentials ────────────────────────────────────────────────────────────────

def _key_sources(cwd: Path, home: Path) -> list:
    return [
        (f"./{ENV_FILENAME}", cwd / ENV_FILENAME),
        (f"~/{ENV_FILENAME}", home / ENV_FILENAME),
    ]


def resolve_api_key(
    cwd: Optional[Path] = None,
    home: Optional[Path] = None,
    environ: Optional[Dict[str, str]] = None,
) -> Tuple[str, str]:
    """
    Find GEMINI_API_KEY. Returns (key, source_label).
    Order: ./.env, ~/.env, process environment. Empty values don't count.
    """
    cwd  = Path(cwd) if cwd else Path.cwd()
    home = Path(home) if home else Path.home()
    environ = os.environ if environ is None else environ

    for label, env_file in _key_sources(cwd, home):
        if not env_file.is_file():
            continue
        value = (dotenv_values(env_file).get(API_KEY_NAME) or "").strip()
        if value:
            logger.debug("api key resolved from {}", label)
            return value, label

    value = (environ.get(API_KEY_NAME) or "").strip()
    if value:
        logger.debug("api key resolved from environment")
        return value, "environment"
    raise ConfigError(KEY_HELP)


def save_api_key(key: str, home: Optional[Path] = None) -> Path:
    """Store the key in ~/.env so later runs resolve it."""
    key = (key or "").strip()
    if not key:
        raise ConfigError("Refusing to save an empty key.")
    env_file = (Path(home) if home else Path.home()) / ENV_FILENAME
    env_file.touch(exist_ok=True)
    set_key(str(env_file), API_KEY_NAME, key)
    return env_file


cfg = GemConfig()
