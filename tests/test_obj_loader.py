import os

import numpy as np
import pytest

from lumen.assets import ObjParser, parse_material, parse_material_lines, parse_model
from lumen.core.errors import (
    AssetError,
    AssetNotFoundError,
    IndexOutOfRangeError,
    MalformedDirectiveError,
)

TRIANGLE_OBJ = """\
# one triangle
v 1.0 0.0 0.0
v 0.0 1.0 0.0
v 0.0 0.0 1.0
vt 0.0 0.0
vt 1.0 0.25
vn 1.0 0.0 0.0
f 1/1/1 2/2/1 3/1/1
"""


def write(tmp_path, name, text):
    path = tmp_path / name
    path.write_text(text, encoding="utf-8")
    return path


def test_parse_triangle_converts_handedness():
    model = ObjParser(".").parse_lines(TRIANGLE_OBJ.splitlines())

    assert len(model.vertices) == 3
    assert model.triangle_count == 1

    # Emitted in reverse face order
    first, second, third = model.vertices
    assert first.position == (-0.0, 0.0, 1.0, 1.0)
    assert second.position == (-0.0, 1.0, 0.0, 1.0)
    assert third.position == (-1.0, 0.0, 0.0, 1.0)

    assert second.texcoord == (1.0, 0.75)
    assert third.texcoord == (0.0, 1.0)
    assert third.normal == (-1.0, 0.0, 0.0)


def test_two_faces_keep_file_order():
    lines = TRIANGLE_OBJ.splitlines() + ["f 3/1/1 2/1/1 1/1/1"]
    model = ObjParser(".").parse_lines(lines)

    assert model.triangle_count == 2
    # Second face reversed: 1, 2, 3
    assert model.vertices[3].position == (-1.0, 0.0, 0.0, 1.0)
    assert model.vertices[5].position == (-0.0, 0.0, 1.0, 1.0)


def test_unknown_directives_are_ignored():
    lines = ["o Plane", "g group", "s off", "usemtl Material"] + TRIANGLE_OBJ.splitlines()
    model = ObjParser(".").parse_lines(lines)
    assert model.triangle_count == 1


def test_face_before_declaration_is_out_of_range():
    lines = ["f 1/1/1 1/1/1 1/1/1", "v 0 0 0", "vt 0 0", "vn 0 0 1"]
    with pytest.raises(IndexOutOfRangeError):
        ObjParser(".").parse_lines(lines)


def test_face_index_past_end():
    lines = TRIANGLE_OBJ.splitlines() + ["f 1/1/1 2/1/1 4/1/1"]
    with pytest.raises(IndexOutOfRangeError) as info:
        ObjParser(".").parse_lines(lines)
    assert "line 9" in str(info.value)


def test_zero_index_is_out_of_range():
    lines = TRIANGLE_OBJ.splitlines() + ["f 0/1/1 1/1/1 2/1/1"]
    with pytest.raises(IndexOutOfRangeError):
        ObjParser(".").parse_lines(lines)


def test_out_of_range_is_also_an_index_error():
    assert issubclass(IndexOutOfRangeError, IndexError)
    assert issubclass(IndexOutOfRangeError, AssetError)


def test_bad_number_is_malformed():
    with pytest.raises(MalformedDirectiveError):
        ObjParser(".").parse_lines(["v 1.0 abc 0.0"])


def test_missing_operands_is_malformed():
    with pytest.raises(MalformedDirectiveError):
        ObjParser(".").parse_lines(["vn 1.0 0.0"])


def test_face_without_texcoord_is_malformed():
    lines = TRIANGLE_OBJ.splitlines() + ["f 1//1 2//1 3//1"]
    with pytest.raises(MalformedDirectiveError):
        ObjParser(".").parse_lines(lines)


def test_face_with_too_few_references():
    lines = TRIANGLE_OBJ.splitlines() + ["f 1/1/1 2/1/1"]
    with pytest.raises(MalformedDirectiveError):
        ObjParser(".").parse_lines(lines)


def test_quad_uses_first_three_references():
    lines = TRIANGLE_OBJ.splitlines() + ["v 1 1 1", "f 1/1/1 2/1/1 3/1/1 4/1/1"]
    model = ObjParser(".").parse_lines(lines)
    assert model.triangle_count == 2


def test_to_array_layout():
    model = ObjParser(".").parse_lines(TRIANGLE_OBJ.splitlines())
    arr = model.to_array()

    assert arr.shape == (3, 9)
    assert arr.dtype == np.float32
    assert np.allclose(arr[2], [-1, 0, 0, 1, 0, 1, -1, 0, 0])


def test_empty_model_array():
    model = ObjParser(".").parse_lines([])
    assert model.to_array().shape == (0, 9)


# =============================================================================
# MTL
# =============================================================================

def test_material_lines_last_map_kd_wins():
    material = parse_material_lines(
        ["newmtl Material", "Kd 0.8 0.8 0.8", "map_Kd first.png", "map_Kd uvChecker.png"],
        "resources",
    )
    assert material.diffuse_texture_path == os.path.join("resources", "uvChecker.png")


def test_material_without_texture():
    material = parse_material_lines(["newmtl Material", "Ns 250"], "resources")
    assert material.diffuse_texture_path == ""


def test_parse_material_missing_file(tmp_path):
    with pytest.raises(AssetNotFoundError):
        parse_material(str(tmp_path), "missing.mtl")


def test_parse_model_with_mtllib(tmp_path):
    write(tmp_path, "plane.mtl", "newmtl Material\nmap_Kd uvChecker.png\n")
    write(tmp_path, "plane.obj", "mtllib plane.mtl\n" + TRIANGLE_OBJ)

    model = parse_model(str(tmp_path), "plane.obj")
    assert model.triangle_count == 1
    assert model.material.diffuse_texture_path == os.path.join(str(tmp_path), "uvChecker.png")


def test_parse_model_last_mtllib_wins(tmp_path):
    write(tmp_path, "a.mtl", "map_Kd a.png\n")
    write(tmp_path, "b.mtl", "map_Kd b.png\n")
    write(tmp_path, "m.obj", "mtllib a.mtl\nmtllib b.mtl\n" + TRIANGLE_OBJ)

    model = parse_model(str(tmp_path), "m.obj")
    assert model.material.diffuse_texture_path.endswith("b.png")


def test_parse_model_missing_mtllib(tmp_path):
    write(tmp_path, "m.obj", "mtllib gone.mtl\n" + TRIANGLE_OBJ)
    with pytest.raises(AssetNotFoundError):
        parse_model(str(tmp_path), "m.obj")


def test_parse_model_missing_file(tmp_path):
    with pytest.raises(AssetNotFoundError):
        parse_model(str(tmp_path), "missing.obj")


def test_position_and_texcoord_conversion():
    lines = ["v 1.0 2.0 3.0", "vt 0.2 0.8", "vn 0 0 1", "f 1/1/1 1/1/1 1/1/1"]
    model = ObjParser(".").parse_lines(lines)

    assert model.vertices[0].position == (-1.0, 2.0, 3.0, 1.0)
    assert model.vertices[0].texcoord == pytest.approx((0.2, 0.2))


def test_face_emits_reverse_order():
    lines = [
        "v 1 0 0", "v 2 0 0", "v 3 0 0",
        "vt 0 0", "vt 0 0", "vt 0 0",
        "vn 0 0 1", "vn 0 0 1", "vn 0 0 1",
        "f 1/1/1 2/2/2 3/3/3",
    ]
    model = ObjParser(".").parse_lines(lines)
    assert [v.position[0] for v in model.vertices] == [-3.0, -2.0, -1.0]


def test_single_triangle_without_mtllib(tmp_path):
    write(tmp_path, "tri.obj", TRIANGLE_OBJ)
    model = parse_model(str(tmp_path), "tri.obj")
    assert model.material.diffuse_texture_path == ""
    assert len(model.vertices) == 3


if __name__ == "__main__":
    test_parse_triangle_converts_handedness()
    test_two_faces_keep_file_order()
    test_to_array_layout()
