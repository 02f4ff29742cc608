from unittest import mock

import pytest
from PIL import Image

from lumen.core.errors import AssetError, AssetNotFoundError
from lumen.render.gl_backend import ModernGLBackend
from lumen.render.textures import load_texture_image


def write_png(path, size=(2, 1), color=(255, 0, 0)):
    Image.new('RGB', size, color).save(path)
    return str(path)


def test_load_texture_image_converts_to_rgba(tmp_path):
    path = write_png(tmp_path / "red.png")
    image = load_texture_image(path)

    assert image.size == (2, 1)
    assert image.components == 4
    assert image.data == b"\xff\x00\x00\xff" * 2


def test_load_texture_image_missing(tmp_path):
    with pytest.raises(AssetNotFoundError):
        load_texture_image(str(tmp_path / "missing.png"))


def test_load_texture_image_not_an_image(tmp_path):
    path = tmp_path / "notes.png"
    path.write_bytes(b"not an image")
    with pytest.raises(AssetError):
        load_texture_image(str(path))


# =============================================================================
# Backend texture cache
# =============================================================================

def make_context():
    ctx = mock.MagicMock()
    ctx.texture.side_effect = lambda *args, **kwargs: mock.MagicMock()
    return ctx


def test_backend_uploads_each_texture_once(tmp_path):
    ctx = make_context()
    gl = ModernGLBackend(ctx)
    white = gl.texture("")

    path = write_png(tmp_path / "red.png")
    first = gl.texture(path)
    second = gl.texture(path)

    assert first is second
    assert first is not white
    # 1x1 white fallback plus the uploaded image
    assert ctx.texture.call_count == 2
    ctx.texture.assert_called_with((2, 1), 4, b"\xff\x00\x00\xff" * 2)


def test_backend_empty_path_uses_white():
    ctx = make_context()
    gl = ModernGLBackend(ctx)
    gl.preload_textures(["", ""])
    assert ctx.texture.call_count == 1
    ctx.texture.assert_called_with((1, 1), 4, b"\xff\xff\xff\xff")


if __name__ == "__main__":
    import tempfile
    from pathlib import Path
    with tempfile.TemporaryDirectory() as d:
        test_load_texture_image_converts_to_rgba(Path(d))
