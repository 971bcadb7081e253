"""
Shared fixtures for the SlideReader test suite.
"""

from pathlib import Path

import pytest

from pptx_factory import make_image
from slidereader.image.normalizer import ImageNormalizer
from slidereader.storage.local_storage import LocalStorage


@pytest.fixture
def png_bytes() -> bytes:
    return make_image("PNG")


@pytest.fixture
def jpeg_bytes() -> bytes:
    return make_image("JPEG", color=(10, 120, 220))


@pytest.fixture
def image_dir(tmp_path: Path) -> Path:
    """Output directory for normalized images; not created up front."""
    return tmp_path / "output" / "images"


@pytest.fixture
def storage(image_dir: Path) -> LocalStorage:
    return LocalStorage(image_dir)


@pytest.fixture
def normalizer(storage: LocalStorage) -> ImageNormalizer:
    return ImageNormalizer(storage=storage, quality=60)
