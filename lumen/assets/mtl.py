"""Parser for Wavefront MTL material libraries."""
import logging
import os
from typing import Iterable

from ..core.errors import AssetNotFoundError
from .types import MaterialAsset

logger = logging.getLogger(__name__)


def parse_material_lines(lines: Iterable[str], directory: str) -> MaterialAsset:
    """Build a MaterialAsset from MTL lines.

    Only ``map_Kd`` is interpreted; every other directive is ignored.

    Args:
        lines: Text lines of the material library
        directory: Directory the texture name is resolved against

    Returns:
        MaterialAsset with the last ``map_Kd`` seen, or an empty path
    """
    texture_path = ""

    for line in lines:
        tokens = line.split()
        if not tokens:
            continue

        if tokens[0] == "map_Kd" and len(tokens) > 1:
            texture_path = os.path.join(directory, tokens[1])
        else:
            logger.debug(f"Ignoring MTL directive {tokens[0]!r}")

    return MaterialAsset(diffuse_texture_path=texture_path)


def parse_material(directory: str, filename: str) -> MaterialAsset:
    """Parse ``directory/filename`` as a material library.

    Raises:
        AssetNotFoundError: If the file cannot be opened
    """
    path = os.path.join(directory, filename)
    try:
        f = open(path, "r", encoding="utf-8")
    except OSError as e:
        raise AssetNotFoundError(f"Cannot open material library {path}: {e}") from e

    with f:
        material = parse_material_lines(f, directory)

    logger.info(f"Loaded material {path}: texture={material.diffuse_texture_path!r}")
    return material
