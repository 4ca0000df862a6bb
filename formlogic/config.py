"""Configuration utilities for the form logic engine.

This module loads application configuration with the following rules:
- Primary source: `formlogic_config.json` at the project root.
- Overrides: environment variables, then optional text files under `config/`.
- Validation: Pydantic models enforce required fields and value constraints.

The evaluation functions never read configuration themselves; callers pass an
`EngineConfig` (or rely on its defaults) so evaluation stays free of I/O.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, ValidationError as PydanticValidationError, field_validator


CONFIG_DIR = Path("config")
ROOT_CONFIG = Path("formlogic_config.json")
logger = logging.getLogger(__name__)


def _read_config_file(rel_path: str) -> Optional[str]:
    path = CONFIG_DIR / rel_path
    try:
        if path.exists():
            return path.read_text(encoding="utf-8").strip()
    except (OSError, UnicodeDecodeError) as e:
        # Recoverable: log and ignore unreadable override
        logger.warning("Failed to read override %s: %s", path, e)
        return None
    return None


def _env(key: str, default: Optional[str] = None) -> Optional[str]:
    return os.environ.get(key, default)


class EngineConfig(BaseModel):
    # Condition groups nested deeper than this are rejected at load time and
    # evaluate to false if they reach the evaluator anyway.
    max_condition_depth: int = Field(default=32, gt=0)


class ApiConfig(BaseModel):
    prefix: str = Field(default="/api/v1")

    @field_validator("prefix")
    @classmethod
    def prefix_must_be_rooted(cls, v: str) -> str:
        v = v.strip()
        if v and not v.startswith("/"):
            raise ValueError("api.prefix must be empty or start with '/'")
        return v.rstrip("/")


class AppConfig(BaseModel):
    engine: EngineConfig = Field(default_factory=EngineConfig)
    api: ApiConfig = Field(default_factory=ApiConfig)


def _read_json_file(path: Path) -> dict:
    try:
        if path.exists():
            return json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        logger.error("Failed to read JSON config %s: %s", path, e)
    return {}


def load_config() -> AppConfig:
    """Load configuration with validation.

    Precedence (highest first):
    1) Environment variables
    2) Text files in `config/` (optional)
    3) formlogic_config.json at project root
    4) Model defaults
    """

    base = _read_json_file(ROOT_CONFIG)

    def _base(path: str, default: Optional[str] = None) -> Optional[str]:
        cur: object = base
        for key in path.split("."):
            if not isinstance(cur, dict) or key not in cur:
                return default
            cur = cur[key]
        return str(cur) if cur is not None else default

    depth_text = (
        _env("FORMLOGIC_MAX_CONDITION_DEPTH")
        or _read_config_file("engine.max_condition_depth")
        or _base("engine.max_condition_depth", "32")
    )
    prefix = _env("FORMLOGIC_API_PREFIX")
    if prefix is None:
        prefix = _read_config_file("api.prefix")
    if prefix is None:
        prefix = _base("api.prefix", "/api/v1")

    try:
        cfg = AppConfig(
            engine=EngineConfig(max_condition_depth=str(depth_text).strip()),
            api=ApiConfig(prefix=prefix),
        )
        return cfg
    except PydanticValidationError as e:
        logger.error("Invalid application configuration: %s", e)
        raise


__all__ = [
    "AppConfig",
    "ApiConfig",
    "EngineConfig",
    "load_config",
]
