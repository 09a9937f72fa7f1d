# shopcart/config.py
import logging
import os
from pathlib import Path
from typing import Optional

from pydantic import BaseModel
from rich.logging import RichHandler

DEFAULT_STORAGE_PATH = Path.home() / ".pycart" / "cart.json"


class Settings(BaseModel):
    storage_path: Path = DEFAULT_STORAGE_PATH
    storage_key: str = "cart"
    catalog_path: Optional[Path] = None
    base_url: str = "http://127.0.0.1:8085"
    log_level: str = "INFO"


def get_settings() -> Settings:
    """Build settings from PYCART_* environment variables."""
    env = os.environ
    return Settings(
        storage_path=env.get("PYCART_STORAGE_PATH", str(DEFAULT_STORAGE_PATH)),
        storage_key=env.get("PYCART_STORAGE_KEY", "cart"),
        catalog_path=env.get("PYCART_CATALOG_PATH") or None,
        base_url=env.get("PYCART_BASE_URL", "http://127.0.0.1:8085"),
        log_level=env.get("PYCART_LOG_LEVEL", "INFO").upper(),
    )


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
    )
