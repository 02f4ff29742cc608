"""Parser for Wavefront OBJ triangle meshes.

Supported directives: ``v``, ``vt``, ``vn``, ``f`` (triangles, ``p/t/n``
references) and ``mtllib``. Anything else is skipped without error.

Coordinates are converted on read for a left-handed target: X of positions
and normals is negated, V of texcoords becomes ``1 - v``, and each face is
emitted in reverse order to keep its front face.
"""
import logging
import os
from typing import Iterable, List, Sequence, Tuple

from ..core.errors import AssetNotFoundError, IndexOutOfRangeError, MalformedDirectiveError
from .mtl import parse_material
from .types import MaterialAsset, ModelAsset, Vertex

logger = logging.getLogger(__name__)


def _floats(tokens: Sequence[str], count: int, line_no: int) -> List[float]:
    if len(tokens) < count:
        raise MalformedDirectiveError(
            f"line {line_no}: expected {count} values, got {len(tokens)}"
        )
    try:
        return [float(t) for t in tokens[:count]]
    except ValueError as e:
        raise MalformedDirectiveError(f"line {line_no}: {e}") from e


def _resolve(items: list, reference: str, kind: str, line_no: int):
    """Look up a 1-based reference among elements declared so far."""
    try:
        index = int(reference) - 1
    except ValueError as e:
        raise MalformedDirectiveError(
            f"line {line_no}: bad {kind} index {reference!r}"
        ) from e

    if index < 0 or index >= len(items):
        raise IndexOutOfRangeError(
            f"line {line_no}: {kind} index {reference} out of range (have {len(items)})"
        )
    return items[index]


class ObjParser:
    """Accumulates OBJ elements in file order and builds a ModelAsset."""

    def __init__(self, directory: str):
        self.directory = directory
        self.positions: List[Tuple[float, float, float, float]] = []
        self.texcoords: List[Tuple[float, float]] = []
        self.normals: List[Tuple[float, float, float]] = []
        self.vertices: List[Vertex] = []
        self.material = MaterialAsset()

    def parse_lines(self, lines: Iterable[str]) -> ModelAsset:
        for line_no, line in enumerate(lines, start=1):
            tokens = line.split()
            if not tokens:
                continue
            self.parse_directive(tokens[0], tokens[1:], line_no)

        return ModelAsset(vertices=list(self.vertices), material=self.material)

    def parse_directive(self, directive: str, args: List[str], line_no: int):
        if directive == "v":
            x, y, z = _floats(args, 3, line_no)
            self.positions.append((-x, y, z, 1.0))

        elif directive == "vt":
            u, v = _floats(args, 2, line_no)
            self.texcoords.append((u, 1.0 - v))

        elif directive == "vn":
            x, y, z = _floats(args, 3, line_no)
            self.normals.append((-x, y, z))

        elif directive == "f":
            self.vertices.extend(reversed(self.parse_face(args, line_no)))

        elif directive == "mtllib":
            if not args:
                raise MalformedDirectiveError(f"line {line_no}: mtllib without a file name")
            self.material = parse_material(self.directory, args[0])

        else:
            logger.debug(f"line {line_no}: ignoring OBJ directive {directive!r}")

    def parse_face(self, args: List[str], line_no: int) -> List[Vertex]:
        """Build the three vertices of a face, in file order."""
        if len(args) < 3:
            raise MalformedDirectiveError(
                f"line {line_no}: face needs 3 vertex references, got {len(args)}"
            )

        triangle = []
        for reference in args[:3]:
            parts = reference.split("/")
            if len(parts) != 3:
                raise MalformedDirectiveError(
                    f"line {line_no}: expected position/texcoord/normal, got {reference!r}"
                )
            triangle.append(Vertex(
                position=_resolve(self.positions, parts[0], "position", line_no),
                texcoord=_resolve(self.texcoords, parts[1], "texcoord", line_no),
                normal=_resolve(self.normals, parts[2], "normal", line_no),
            ))
        return triangle


def parse_model(directory: str, filename: str) -> ModelAsset:
    """Parse ``directory/filename`` as an OBJ model.

    ``mtllib`` names are resolved against the same directory.

    Raises:
        AssetNotFoundError: If the OBJ (or a referenced MTL) cannot be opened
        IndexOutOfRangeError: If a face references an undeclared element
        MalformedDirectiveError: If a directive's operands cannot be parsed
    """
    path = os.path.join(directory, filename)
    try:
        f = open(path, "r", encoding="utf-8")
    except OSError as e:
        raise AssetNotFoundError(f"Cannot open model {path}: {e}") from e

    with f:
        model = ObjParser(directory).parse_lines(f)

    logger.info(
        f"Loaded model {path}: {len(model.vertices)} vertices, "
        f"texture={model.material.diffuse_texture_path!r}"
    )
    return model
