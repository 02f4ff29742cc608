import math

import numpy as np
import pytest

from lumen.core.errors import SingularCameraTransformError
from lumen.core.math3d import (
    Transform,
    affine,
    identity,
    inverse,
    make_rotate_y,
    make_rotate_z,
    orthographic,
    perspective,
    uv_transform,
    view,
    world_view_projection,
)

from conftest import transform_point


def test_affine_identity():
    m = affine((1, 1, 1), (0, 0, 0), (0, 0, 0))
    assert m.dtype == np.float32
    assert np.allclose(m, np.eye(4))


def test_affine_scale_then_translate():
    m = affine((2, 2, 2), (0, 0, 0), (1, 2, 3))
    # Translation lives in the last row
    assert np.allclose(m[3, :3], [1, 2, 3])
    assert np.allclose(transform_point(m, (1, 1, 1)), [3, 4, 5])


def test_affine_rotation_order():
    rotate = (0.3, -0.7, 1.1)
    m = affine((1, 1, 1), rotate, (0, 0, 0))

    c, s = math.cos, math.sin
    rx = np.array([[1, 0, 0, 0], [0, c(0.3), s(0.3), 0], [0, -s(0.3), c(0.3), 0], [0, 0, 0, 1]])
    expected = rx @ make_rotate_y(-0.7) @ make_rotate_z(1.1)
    assert np.allclose(m, expected, atol=1e-6)


def test_rotate_z_quarter_turn():
    # Row vector convention: +X rotates to +Y
    p = transform_point(make_rotate_z(math.pi / 2), (1, 0, 0))
    assert np.allclose(p, [0, 1, 0], atol=1e-6)


def test_inverse_roundtrip():
    m = affine((1, 2, 3), (0.1, 0.2, 0.3), (4, 5, 6))
    assert np.allclose(m @ inverse(m), np.eye(4), atol=1e-5)


def test_inverse_singular_raises():
    with pytest.raises(SingularCameraTransformError):
        inverse(affine((0, 1, 1), (0, 0, 0), (0, 0, 0)))


def test_inverse_non_finite_raises():
    m = identity()
    m[0, 0] = np.inf
    with pytest.raises(SingularCameraTransformError):
        inverse(m)


def test_view_moves_camera_to_origin():
    camera = Transform(translate=(0, 0, -10))
    v = view(camera)
    assert np.allclose(v[3, :3], [0, 0, 10])
    assert np.allclose(transform_point(v, (0, 0, -10)), [0, 0, 0])


def test_wvp_with_identity_world_and_view():
    p = perspective(0.45, 1280 / 720, 0.1, 100.0)
    wvp = world_view_projection(identity(), identity(), p)
    assert np.allclose(wvp, p)


def test_perspective_depth_range():
    p = perspective(0.45, 16 / 9, 0.1, 100.0)
    near = transform_point(p, (0, 0, 0.1))
    far = transform_point(p, (0, 0, 100.0))
    assert near[2] == pytest.approx(0.0, abs=1e-5)
    assert far[2] == pytest.approx(1.0, abs=1e-5)


def test_perspective_aspect():
    p = perspective(0.45, 2.0, 0.1, 100.0)
    cot = 1.0 / math.tan(0.225)
    assert p[0, 0] == pytest.approx(cot / 2.0, rel=1e-6)
    assert p[1, 1] == pytest.approx(cot, rel=1e-6)
    assert p[2, 3] == 1.0
    assert p[3, 3] == 0.0


def test_orthographic_maps_client_rect():
    o = orthographic(0, 0, 1280, 720, 0, 100)
    assert np.allclose(transform_point(o, (0, 0, 0)), [-1, 1, 0])
    assert np.allclose(transform_point(o, (1280, 720, 100)), [1, -1, 1])


def test_uv_transform_identity():
    assert np.allclose(uv_transform((1, 1, 1), 0.0, (0, 0, 0)), np.eye(4))


def test_uv_transform_translate():
    m = uv_transform((2, 2, 1), 0.0, (0.5, 0.25, 0))
    assert np.allclose(transform_point(m, (1, 1, 0))[:2], [2.5, 2.25])


def test_transform_pads_short_vectors():
    t = Transform(scale=(2, 3), translate=(1, 1))
    assert np.allclose(t.scale, [2, 3, 1])
    assert np.allclose(t.translate, [1, 1, 0])


def test_transform_dict_roundtrip():
    t = Transform(scale=(1, 2, 3), rotate=(0.1, 0.2, 0.3), translate=(4, 5, 6))
    restored = Transform.from_dict(t.to_dict())
    assert np.allclose(restored.to_matrix(), t.to_matrix())


def test_transform_copy_is_independent():
    t = Transform()
    c = t.copy()
    c.translate[0] = 5.0
    assert t.translate[0] == 0.0


if __name__ == "__main__":
    test_affine_identity()
    test_affine_scale_then_translate()
    test_view_moves_camera_to_origin()
    test_perspective_depth_range()
