"""
Filesystem-backed storage for normalized slide images.

The base directory is created lazily on the first write, so constructing a
provider never touches the disk.
"""

import logging
from pathlib import Path

from . import StorageProvider

logger = logging.getLogger(__name__)


class LocalStorage(StorageProvider):
    """Stores objects as plain files below ``base_path``."""

    def __init__(self, base_path: str | Path):
        """
        Args:
            base_path: Directory that object keys are resolved against
        """
        self.base_path = Path(base_path)

    def _resolve(self, object_key: str) -> Path:
        key = Path(object_key)
        if key.is_absolute() or ".." in key.parts:
            raise ValueError(f"Object key escapes storage root: {object_key!r}")
        return self.base_path / key

    def get_file_path(self, object_key: str) -> str:
        return str(self._resolve(object_key))

    def file_exists(self, object_key: str) -> bool:
        return self._resolve(object_key).is_file()

    def delete_file(self, object_key: str) -> None:
        self._resolve(object_key).unlink(missing_ok=True)

    def upload_bytes(
        self,
        data: bytes,
        object_key: str,
        content_type: str | None = None,
        overwrite: bool = True,
    ) -> str:
        """Write ``data`` to ``base_path/object_key`` and return that path.

        With ``overwrite=False`` the file is opened in exclusive-create mode,
        so a concurrent writer of the same key loses with ``FileExistsError``.
        """
        target = self._resolve(object_key)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
        except FileExistsError as e:
            # Only an existing object may surface as FileExistsError
            raise NotADirectoryError(
                f"Storage path is not a directory: {target.parent}"
            ) from e

        try:
            with open(target, "wb" if overwrite else "xb") as fh:
                fh.write(data)
        except FileExistsError:
            logger.debug(f"Keeping existing file {target}")
            raise
        except OSError as e:
            logger.error(f"Failed to write {target}: {e}")
            raise

        logger.debug(f"Stored {len(data)} bytes ({content_type}) at {target}")
        return str(target)

    def download_bytes(self, object_key: str) -> bytes:
        source = self._resolve(object_key)
        try:
            return source.read_bytes()
        except FileNotFoundError:
            logger.error(f"File not found in storage: {source}")
            raise FileNotFoundError(
                f"File not found in storage: {object_key}"
            ) from None
