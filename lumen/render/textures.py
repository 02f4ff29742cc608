"""
Texture Images

Decodes the image named by a material's ``map_Kd`` into tightly packed
RGBA8 bytes ready for a GPU upload.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Tuple
import logging

from PIL import Image

from ..core.errors import AssetError, AssetNotFoundError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TextureImage:
    """Decoded image, rows top to bottom, 4 bytes per pixel."""
    size: Tuple[int, int]
    data: bytes

    @property
    def components(self) -> int:
        return 4


def load_texture_image(path: str) -> TextureImage:
    """
    Read an image file and convert it to RGBA.

    Raises:
        AssetNotFoundError: The file cannot be opened.
        AssetError: The file is not a readable image.
    """
    try:
        with Image.open(path) as img:
            rgba = img.convert('RGBA')
    except FileNotFoundError as e:
        raise AssetNotFoundError(f"Cannot open texture {path}: {e}") from e
    except OSError as e:
        raise AssetError(f"Cannot decode texture {path}: {e}") from e

    logger.info(f"Loaded texture {path} ({rgba.width}x{rgba.height})")
    return TextureImage(size=rgba.size, data=rgba.tobytes())
