from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv


def load_dotenv_if_present(path: str | Path = ".env") -> None:
    """Load environment variables from a .env file if it exists."""
    dotenv_path = Path(path)
    if dotenv_path.exists():
        load_dotenv(dotenv_path=dotenv_path, override=False)


def configure_logging(default_level: str = "INFO") -> None:
    """Configure root logging level from LOG_LEVEL env (default INFO)."""
    level_name = os.getenv("LOG_LEVEL", default_level).upper()
    level = getattr(logging, level_name, logging.INFO)
    logging.basicConfig(level=level)


@dataclass
class LabelerConfig:
    base_url: str
    vision_model: Optional[str]
    timeout: float
    max_candidates: int
    top_n: int
    image_max_size: int
    live_min_interval: float

    @classmethod
    def from_env(cls) -> "LabelerConfig":
        return cls(
            base_url=os.getenv("OLLAMA_BASE_URL", "http://localhost:11434"),
            vision_model=os.getenv("OLLAMA_VISION_MODEL") or None,
            timeout=float(os.getenv("OLLAMA_HTTP_TIMEOUT", "60")),
            max_candidates=int(os.getenv("LABELER_MAX_CANDIDATES", "5")),
            top_n=int(os.getenv("LABELER_TOP_N", "3")),
            image_max_size=int(os.getenv("LABELER_IMAGE_MAX_SIZE", "512")),
            live_min_interval=float(os.getenv("LIVE_MIN_INTERVAL", "0.5")),
        )
