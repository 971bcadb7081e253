"""
Unit tests for environment-driven configuration.
"""

from pathlib import Path

import pytest

from slidereader.configs.config import (
    DEFAULT_JPEG_QUALITY,
    DEFAULT_SLIDE_CONCURRENCY,
    Config,
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in (
        "SLIDE_CONCURRENCY",
        "IMAGE_JPEG_QUALITY",
        "MAX_SHAPE_DEPTH",
        "OUTPUT_DIR",
        "IMAGE_OUTPUT_SUBDIR",
        "STORAGE_PROVIDER",
        "LOG_LEVEL",
    ):
        monkeypatch.delenv(key, raising=False)


def test_defaults() -> None:
    cfg = Config()
    assert cfg.slide_concurrency == DEFAULT_SLIDE_CONCURRENCY == 10
    assert cfg.image_jpeg_quality == DEFAULT_JPEG_QUALITY == 60
    assert cfg.max_shape_depth == 64
    assert cfg.log_level == "INFO"
    assert cfg.image_output_dir == Path.cwd() / "output" / "images"


def test_env_overrides(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("SLIDE_CONCURRENCY", "3")
    monkeypatch.setenv("IMAGE_JPEG_QUALITY", "80")
    monkeypatch.setenv("OUTPUT_DIR", str(tmp_path))
    monkeypatch.setenv("IMAGE_OUTPUT_SUBDIR", "pics")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    cfg = Config()
    assert cfg.slide_concurrency == 3
    assert cfg.image_jpeg_quality == 80
    assert cfg.image_output_dir == tmp_path.resolve() / "pics"
    assert cfg.log_level == "DEBUG"


@pytest.mark.parametrize("raw", ["abc", "0", "-4", " "])
def test_invalid_concurrency_falls_back(
    monkeypatch: pytest.MonkeyPatch, raw: str
) -> None:
    monkeypatch.setenv("SLIDE_CONCURRENCY", raw)
    assert Config().slide_concurrency == DEFAULT_SLIDE_CONCURRENCY


def test_quality_is_capped(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("IMAGE_JPEG_QUALITY", "120")
    assert Config().image_jpeg_quality == 95


def test_config_has_no_filesystem_side_effects(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    monkeypatch.setenv("OUTPUT_DIR", str(tmp_path / "out"))
    cfg = Config()
    assert cfg.image_output_dir == (tmp_path / "out").resolve() / "images"
    assert not (tmp_path / "out").exists()


def test_storage_config(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    cfg = Config()
    assert cfg.get_storage_config(tmp_path) == {"base_path": str(tmp_path)}

    monkeypatch.setenv("STORAGE_PROVIDER", "s3")
    with pytest.raises(ValueError, match="Unsupported storage provider"):
        Config().get_storage_config()
