"""
Storage module for SlideReader.

Normalized images are written through a :class:`StorageProvider` so the
extraction core never deals with directories itself. Only the local
filesystem backend ships with the package.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any


class StorageProvider(ABC):
    """Interface every image storage backend implements."""

    @abstractmethod
    def upload_bytes(
        self,
        data: bytes,
        object_key: str,
        content_type: str | None = None,
        overwrite: bool = True,
    ) -> str:
        """Store ``data`` under ``object_key``.

        Args:
            data: Encoded image bytes
            object_key: Name of the stored object, e.g. ``slide2_image1.png``
            content_type: MIME type recorded by backends that keep one
            overwrite: When False an existing object is kept and
                ``FileExistsError`` is raised

        Returns:
            Durable location of the stored object
        """

    @abstractmethod
    def download_bytes(self, object_key: str) -> bytes:
        """Return the stored bytes; raises ``FileNotFoundError`` if absent."""

    @abstractmethod
    def file_exists(self, object_key: str) -> bool:
        pass

    @abstractmethod
    def get_file_path(self, object_key: str) -> str:
        """Return the durable location an object key maps to."""

    @abstractmethod
    def delete_file(self, object_key: str) -> None:
        pass


class StorageConfig:
    """Provider name plus the keyword arguments its constructor takes."""

    def __init__(self, provider: str = "local", **kwargs: Any) -> None:
        self.provider = provider
        self.config = kwargs


def create_storage_provider(config: StorageConfig) -> StorageProvider:
    """Instantiate the backend named by ``config.provider``.

    Raises:
        ValueError: for providers other than ``local``
    """
    if config.provider != "local":
        raise ValueError(f"Unsupported storage provider: {config.provider}")

    from .local_storage import LocalStorage

    return LocalStorage(**config.config)


def get_image_storage(base_path: str | Path | None = None) -> StorageProvider:
    """Storage for normalized images, rooted at the configured image directory."""
    from slidereader.configs.config import config

    storage_config = StorageConfig(
        provider=config.storage_provider,
        **config.get_storage_config(Path(base_path) if base_path else None),
    )
    return create_storage_provider(storage_config)
