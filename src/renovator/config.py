"""Run settings: built-in defaults, optional YAML config file, CLI overrides.

Precedence is CLI flag > config file > default. Tokens are only taken from the
command line or the environment, never from the config file. Fatal problems
raise SystemExit with a message before any remote call is made.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

import yaml

from renovator.github.client import DEFAULT_API_URL
from renovator.triage.driver import DEFAULT_RETRY_DELAY
from renovator.triage.prompt import DEFAULT_COMMENT
from renovator.triage.search import DEFAULT_AUTHOR

log = logging.getLogger(__name__)

CONFIG_KEYS = frozenset(
    {
        "org",
        "user",
        "author",
        "dependency",
        "message",
        "token_variable",
        "retry_until_all_merged",
        "retry_delay",
        "max_rounds",
        "max_retries",
        "api_url",
    }
)
STRING_KEYS = ("org", "user", "author", "dependency", "message", "token", "token_variable", "api_url")
BOOL_KEYS = ("yes", "debug", "retry_until_all_merged")


@dataclass
class Settings:
    org: str = ""
    user: str = ""
    author: str = DEFAULT_AUTHOR
    dependency: str = ""
    message: str = DEFAULT_COMMENT
    token: str = ""
    token_variable: str = ""
    yes: bool = False
    debug: bool = False
    retry_until_all_merged: bool = False
    retry_delay: float = DEFAULT_RETRY_DELAY
    max_rounds: int | None = None
    max_retries: int = 5
    api_url: str = DEFAULT_API_URL

    def validate(self) -> None:
        """Raise SystemExit on settings that make a run impossible."""
        if not self.org or not self.user:
            msg = "org and user flags are required"
            raise SystemExit(msg)
        if self.retry_delay < 0:
            msg = f"retry delay must be >= 0, got {self.retry_delay}"
            raise SystemExit(msg)
        if self.max_rounds is not None and self.max_rounds < 1:
            msg = f"max rounds must be >= 1, got {self.max_rounds}"
            raise SystemExit(msg)
        if self.max_retries < 1:
            msg = f"max retries must be >= 1, got {self.max_retries}"
            raise SystemExit(msg)


def load_config_file(path: Path) -> dict[str, Any]:
    """Read a YAML mapping of settings. Unknown keys are logged and dropped."""
    try:
        with path.open(encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        msg = f"Could not read config file {path}: {e}"
        raise SystemExit(msg) from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        msg = f"Config file {path} must contain a mapping, got {type(data).__name__}"
        raise SystemExit(msg)
    values: dict[str, Any] = {}
    for key, value in data.items():
        norm = str(key).replace("-", "_")
        if norm not in CONFIG_KEYS:
            log.warning("Ignoring unknown config key %r in %s", key, path)
            continue
        values[norm] = value
    return values


def resolve_token(token: str | None, token_variable: str | None) -> str:
    """Token from --token, else from the environment variable named by --token-variable."""
    if not token and not token_variable:
        msg = "Either token or token-variable must be provided"
        raise SystemExit(msg)
    if token:
        return token
    value = os.environ.get(token_variable or "", "")
    if not value:
        msg = "GitHub token is required"
        raise SystemExit(msg)
    return value


def _check_types(values: dict[str, Any]) -> None:
    for key in STRING_KEYS:
        if key in values and not isinstance(values[key], str):
            msg = f"Setting {key} must be a string, got {type(values[key]).__name__}"
            raise SystemExit(msg)
    for key in BOOL_KEYS:
        # YAML "false" in quotes is a non-empty, truthy string
        if key in values and not isinstance(values[key], bool):
            msg = f"Setting {key} must be true or false, got {values[key]!r}"
            raise SystemExit(msg)


def build_settings(
    cli_values: dict[str, Any], file_values: dict[str, Any] | None = None
) -> Settings:
    """Merge config-file values and CLI values (None means "not given") over the defaults."""
    merged: dict[str, Any] = {}
    for source in (file_values or {}, cli_values):
        merged.update({k: v for k, v in source.items() if v is not None})
    _check_types(merged)
    known = {f.name for f in fields(Settings)}
    settings = Settings(**{k: v for k, v in merged.items() if k in known})
    try:
        settings.retry_delay = float(settings.retry_delay)
        settings.max_retries = int(settings.max_retries)
        if settings.max_rounds is not None:
            settings.max_rounds = int(settings.max_rounds)
    except (TypeError, ValueError) as e:
        msg = f"Invalid numeric setting: {e}"
        raise SystemExit(msg) from e
    settings.validate()
    return settings
