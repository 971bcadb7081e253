"""
Configuration module for SlideReader (configs).
"""

import os
from pathlib import Path
from typing import Any

from dotenv import load_dotenv
from loguru import logger

load_dotenv()

DEFAULT_SLIDE_CONCURRENCY = 10
DEFAULT_JPEG_QUALITY = 60
MAX_JPEG_QUALITY = 95
DEFAULT_MAX_SHAPE_DEPTH = 64


def _int_env(key: str, default: int, minimum: int = 1) -> int:
    raw = os.getenv(key)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning(f"Ignoring non-integer {key}={raw!r}; using {default}")
        return default
    if value < minimum:
        logger.warning(f"Ignoring {key}={value} below {minimum}; using {default}")
        return default
    return value


class Config:
    def __init__(self) -> None:
        self._output_dir: Path | None = None

        # Logging / runtime
        self.log_level = os.getenv("LOG_LEVEL", "INFO").upper()
        self.log_file = os.getenv("LOG_FILE")
        self.log_dir = os.getenv("LOG_DIR", "logs")

        # Extraction
        self.slide_concurrency = _int_env(
            "SLIDE_CONCURRENCY", DEFAULT_SLIDE_CONCURRENCY
        )
        self.max_shape_depth = _int_env("MAX_SHAPE_DEPTH", DEFAULT_MAX_SHAPE_DEPTH)

        # Image normalization
        self.image_jpeg_quality = min(
            _int_env("IMAGE_JPEG_QUALITY", DEFAULT_JPEG_QUALITY), MAX_JPEG_QUALITY
        )
        self.image_output_subdir = os.getenv("IMAGE_OUTPUT_SUBDIR", "images")

        self.storage_provider = os.getenv("STORAGE_PROVIDER", "local")

    @property
    def output_dir(self) -> Path:
        if self._output_dir is None:
            output_dir_env = os.getenv("OUTPUT_DIR")
            if output_dir_env:
                self._output_dir = Path(output_dir_env).resolve()
            else:
                self._output_dir = Path.cwd() / "output"
        return self._output_dir

    @property
    def image_output_dir(self) -> Path:
        return self.output_dir / self.image_output_subdir

    def get_storage_config(self, base_path: Path | None = None) -> dict[str, Any]:
        if self.storage_provider == "local":
            return {"base_path": str(base_path or self.image_output_dir)}
        raise ValueError(f"Unsupported storage provider: {self.storage_provider}")


config = Config()
