"""Configuration management for merkle-diff."""

import json
import os
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field

from . import CONFIG_DIR, CONFIG_FILE

TRUTHY = ("1", "true", "yes", "on")


class MerkleDiffConfig(BaseModel):
    """Configuration for merkle-diff."""

    version: int = Field(default=1, ge=1)
    hash_algorithm: Literal["sha256", "sha3_256", "blake2s"] = "sha256"
    encoding: str = "utf-8"
    prune: bool = False
    strip_newlines: bool = True


def get_config_dir(project_root: Path) -> Path:
    """Get the .merkle-diff directory path."""
    return project_root / CONFIG_DIR


def get_config_path(project_root: Path) -> Path:
    """Get the config file path."""
    return get_config_dir(project_root) / CONFIG_FILE


def load_config(project_root: Path) -> MerkleDiffConfig:
    """Load configuration from the project's config file.

    Falls back to defaults if file doesn't exist.
    Environment variables can override config values.
    """
    config_path = get_config_path(project_root)

    if config_path.exists():
        with open(config_path) as f:
            data = json.load(f)
        config = MerkleDiffConfig.model_validate(data)
    else:
        config = MerkleDiffConfig()

    return _apply_env_overrides(config)


def save_config(config: MerkleDiffConfig, project_root: Path) -> None:
    """Save configuration to the project's config file."""
    config_path = get_config_path(project_root)
    config_path.parent.mkdir(parents=True, exist_ok=True)

    with open(config_path, "w") as f:
        json.dump(config.model_dump(), f, indent=2)


def _apply_env_overrides(config: MerkleDiffConfig) -> MerkleDiffConfig:
    """Apply environment variable overrides to config."""
    data = config.model_dump()

    if algorithm := os.environ.get("MERKLE_DIFF_HASH_ALGORITHM"):
        data["hash_algorithm"] = algorithm

    if encoding := os.environ.get("MERKLE_DIFF_ENCODING"):
        data["encoding"] = encoding

    if (prune := os.environ.get("MERKLE_DIFF_PRUNE")) is not None:
        data["prune"] = prune.strip().lower() in TRUTHY

    return MerkleDiffConfig.model_validate(data)
