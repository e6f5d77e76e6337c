"""Application configuration read from a .env file and the environment."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

DEFAULT_PORT = "8080"


@dataclass(frozen=True)
class Config:
    """Settings needed to start the server."""

    db_driver: str
    db_source: str
    server_address: str


def load_config(env_file: str | os.PathLike[str] | None = None) -> Config:
    """Load settings; values already in the environment win over the file."""
    path = Path(env_file) if env_file is not None else Path(".env")
    if not path.is_file() or not load_dotenv(path, override=False):
        logger.info("No .env file found, reading from environment variables")

    port = os.environ.get("PORT") or DEFAULT_PORT
    return Config(
        db_driver=os.environ.get("DB_DRIVER", ""),
        db_source=os.environ.get("DB_SOURCE", ""),
        server_address=f":{port}",
    )