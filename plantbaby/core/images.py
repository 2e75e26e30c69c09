"""PlantBaby Image Store — local JPEG files and display resolution."""

import base64
import io
import logging
import uuid
from enum import Enum
from pathlib import Path

from PIL import Image, UnidentifiedImageError
from pydantic import BaseModel

from plantbaby.core.errors import ImageConversionError, StorageError

logger = logging.getLogger("plantbaby.images")


class ImageKind(str, Enum):
    LOCAL_FILE = "local_file"
    REMOTE_URL = "remote_url"
    BUNDLED_ASSET = "bundled_asset"
    NONE = "none"


class ImageRef(BaseModel):
    kind: ImageKind
    ref: str | None = None


def to_jpeg(image_bytes: bytes, quality: int = 80) -> bytes:
    """Decode any Pillow-readable image and re-encode it as JPEG."""
    try:
        with Image.open(io.BytesIO(image_bytes)) as img:
            buffer = io.BytesIO()
            img.convert("RGB").save(buffer, format="JPEG", quality=quality)
            return buffer.getvalue()
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as e:
        raise ImageConversionError(f"The image could not be converted to JPEG: {e}") from e


def encode_jpeg_base64(image_bytes: bytes, quality: int = 80) -> str:
    """JPEG-encode an image and return it as base64 text for an API payload."""
    return base64.b64encode(to_jpeg(image_bytes, quality)).decode("ascii")


class ImageStore:
    """Saves plant photos as JPEG files in one application directory.

    Plants reference saved photos by file name only (image_path); the
    directory is resolved here.
    """

    def __init__(self, images_dir: str | Path, quality: int = 80):
        self.images_dir = Path(images_dir)
        self.quality = quality

    def path_for(self, filename: str) -> Path:
        return self.images_dir / Path(filename).name

    def save(self, image_bytes: bytes, name: str) -> str:
        """Write the image as <name>-<uuid>.jpg and return the file name."""
        data = to_jpeg(image_bytes, self.quality)
        filename = f"{name}-{uuid.uuid4()}.jpg"
        try:
            self.images_dir.mkdir(parents=True, exist_ok=True)
            self.path_for(filename).write_bytes(data)
        except OSError as e:
            raise StorageError(f"Could not save image {filename!r}: {e}") from e
        logger.info(f"Saved image {filename} ({len(data)} bytes)")
        return filename

    def resolve(self, plant) -> ImageRef:
        """Pick the image a plant should display.

        Order: saved local file, then a remote URL (fetched by the client),
        then any other image_url as a bundled asset name.
        """
        if plant.image_path and self.path_for(plant.image_path).is_file():
            return ImageRef(kind=ImageKind.LOCAL_FILE, ref=str(self.path_for(plant.image_path)))
        if plant.image_url and plant.image_url.startswith("http"):
            return ImageRef(kind=ImageKind.REMOTE_URL, ref=plant.image_url)
        if plant.image_url:
            return ImageRef(kind=ImageKind.BUNDLED_ASSET, ref=plant.image_url)
        return ImageRef(kind=ImageKind.NONE)
