"""
Normalization of extracted slide images to JPEG.

JPEG sources are stored byte-for-byte; every other raster is decoded with
Pillow and re-encoded at a fixed quality. Output names follow
``slide{N}_{basename(target)}`` and existing files are never overwritten.
"""

from __future__ import annotations

import io
import posixpath

from loguru import logger
from PIL import Image, UnidentifiedImageError

from slidereader.configs.config import MAX_JPEG_QUALITY, config
from slidereader.core.errors import ImageDecodeError, ImageWriteError
from slidereader.core.models import NormalizedImage
from slidereader.storage import StorageProvider, get_image_storage

CANONICAL_FORMAT = "JPEG"
CANONICAL_EXTENSIONS = frozenset({".jpg", ".jpeg"})
FLATTEN_BACKGROUND = (255, 255, 255)


def output_name(slide_number: int, target: str) -> str:
    return f"slide{slide_number}_{posixpath.basename(target)}"


class ImageNormalizer:
    """Writes slide images to durable storage in the canonical format."""

    def __init__(
        self,
        storage: StorageProvider | None = None,
        quality: int | None = None,
    ) -> None:
        self.storage = storage or get_image_storage()
        self.quality = (
            quality if quality is not None else config.image_jpeg_quality
        )
        if not 1 <= self.quality <= MAX_JPEG_QUALITY:
            raise ValueError(f"JPEG quality must be 1..{MAX_JPEG_QUALITY}")

    def normalize(
        self,
        data: bytes,
        original_extension: str,
        *,
        slide_number: int,
        target: str,
        source_path: str | None = None,
    ) -> NormalizedImage:
        """
        Store one image and return where it landed.

        Raises:
            ImageDecodeError: if a non-JPEG source cannot be decoded or encoded.
            ImageWriteError: if storage cannot hold the output file.
        """
        object_key = output_name(slide_number, target)
        if original_extension.lower() in CANONICAL_EXTENSIONS:
            payload = data
        else:
            payload = self.reencode(data)

        try:
            output_path = self.storage.upload_bytes(
                payload, object_key, content_type="image/jpeg", overwrite=False
            )
        except FileExistsError as e:
            if not self.storage.file_exists(object_key):
                raise ImageWriteError(
                    f"Cannot write {object_key}: name taken by a non-file",
                    slide_number=slide_number,
                ) from e
            output_path = self.storage.get_file_path(object_key)
            logger.debug(f"Reusing existing normalized image {output_path}")
        except OSError as e:
            raise ImageWriteError(
                f"Cannot write {object_key}: {e}", slide_number=slide_number
            ) from e

        return NormalizedImage(
            source_path=source_path or target,
            output_path=output_path,
            format=CANONICAL_FORMAT,
        )

    def reencode(self, data: bytes) -> bytes:
        try:
            with Image.open(io.BytesIO(data)) as image:
                image.load()
                rgb = _to_rgb(image)
                buffer = io.BytesIO()
                rgb.save(buffer, format=CANONICAL_FORMAT, quality=self.quality)
        except (
            UnidentifiedImageError,
            Image.DecompressionBombError,
            OSError,
            ValueError,
        ) as e:
            raise ImageDecodeError(f"Cannot re-encode image: {e}") from e
        return buffer.getvalue()


def _to_rgb(image: Image.Image) -> Image.Image:
    has_alpha = image.mode in ("RGBA", "LA", "PA") or (
        image.mode == "P" and "transparency" in image.info
    )
    if has_alpha:
        rgba = image.convert("RGBA")
        background = Image.new("RGB", rgba.size, FLATTEN_BACKGROUND)
        background.paste(rgba, mask=rgba.getchannel("A"))
        return background
    if image.mode != "RGB":
        return image.convert("RGB")
    return image
