"""Configuration management."""

import os
from pathlib import Path
from typing import Dict, Literal, MutableMapping, Optional

from dotenv import dotenv_values
from pydantic import Field
from pydantic_settings import BaseSettings

BASE_DIR = Path(__file__).resolve().parent.parent
env_file = BASE_DIR / ".env"


def load_env_file(path: Path, environ: Optional[MutableMapping[str, str]] = None) -> Dict[str, str]:
    """
    Copy values from a .env file into the environment.

    Keys already present in the environment win over the file.

    Args:
        path: .env file to read
        environ: Target mapping, defaults to ``os.environ``

    Returns:
        The keys and values that were applied
    """
    if environ is None:
        environ = os.environ
    if not path.exists():
        return {}

    applied = {}
    for key, value in dotenv_values(path).items():
        if key not in environ and value is not None:
            environ[key] = value
            applied[key] = value
    return applied


# The repo-root .env is the only file source; Settings reads the environment
load_env_file(env_file)


class Settings(BaseSettings):
    """Transform settings pulled from ``EDT_*`` environment variables."""

    # Logging
    log_level: str = Field(default="INFO", description="Log level")
    log_format: Literal["json", "plain"] = Field(
        default="json", description="Log renderer (json or plain)"
    )

    # Transform
    distance_mode: Literal["squared", "euclidean"] = Field(
        default="squared",
        description="Default distance map: squared integer or true Euclidean distance",
    )
    max_voxels: Optional[int] = Field(
        default=None, gt=0, description="Reject grids with more voxels than this"
    )

    class Config:
        env_prefix = "EDT_"
        extra = "ignore"


settings = Settings()
