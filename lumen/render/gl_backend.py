"""
ModernGL Backend

RenderBackend implementation on a moderngl context, optionally attached
to a moderngl-window window for close/input polling.

Constant buffers are bound as std140 uniform blocks. Matrices are written
row-major and read column-major, so shaders multiply ``M * v``.
"""

from __future__ import annotations
from typing import Dict, Iterable, Mapping
import logging

import moderngl
import numpy as np

from ..assets.types import VERTEX_FORMAT
from ..scene.input import BOUND_KEYS
from .resources import LIGHT_DTYPE, DrawBindings
from .textures import load_texture_image

logger = logging.getLogger(__name__)

BLOCK_TRANSFORM = 0
BLOCK_MATERIAL = 1
BLOCK_LIGHT = 2
BLOCK_CAMERA = 3


VERTEX_SHADER = """
#version 330

layout(std140) uniform TransformationMatrix {
    mat4 WVP;
    mat4 World;
};

in vec4 in_pos;
in vec2 in_uv;
in vec3 in_nrm;

out vec2 v_uv;
out vec3 v_normal;
out vec3 v_world;

void main() {
    gl_Position = WVP * in_pos;
    v_uv = in_uv;
    v_normal = normalize(mat3(World) * in_nrm);
    v_world = (World * in_pos).xyz;
}
"""

FRAGMENT_SHADER = """
#version 330

layout(std140) uniform Material {
    vec4 color;
    int enableLighting;
    mat4 uvTransform;
    float shininess;
};

layout(std140) uniform DirectionalLight {
    vec4 lightColor;
    vec3 direction;
    float intensity;
};

layout(std140) uniform Camera {
    vec3 worldPosition;
};

uniform sampler2D u_tex;

in vec2 v_uv;
in vec3 v_normal;
in vec3 v_world;

out vec4 fragColor;

void main() {
    vec2 uv = (uvTransform * vec4(v_uv, 0.0, 1.0)).xy;
    vec4 tex = texture(u_tex, uv);

    if (enableLighting != 0) {
        vec3 n = normalize(v_normal);
        float cos_term = clamp(dot(n, -direction), 0.0, 1.0);
        vec3 diffuse = color.rgb * tex.rgb * lightColor.rgb * cos_term * intensity;

        vec3 specular = vec3(0.0);
        if (shininess > 0.0) {
            vec3 to_eye = normalize(worldPosition - v_world);
            vec3 reflected = reflect(direction, n);
            float highlight = pow(clamp(dot(reflected, to_eye), 0.0, 1.0), shininess);
            specular = lightColor.rgb * intensity * highlight;
        }

        fragColor.rgb = diffuse + specular;
        fragColor.a = color.a * tex.a;
    } else {
        fragColor = color * tex;
    }
}
"""


class GLBuffer:
    """BufferHandle over a moderngl.Buffer."""

    def __init__(self, buffer: moderngl.Buffer):
        self.buffer = buffer

    def write(self, data: bytes, offset: int = 0) -> None:
        self.buffer.write(data, offset=offset)

    def release(self) -> None:
        self.buffer.release()


class ModernGLBackend:
    """
    Draws entities with a single lit/unlit textured pipeline.

    Textures are decoded on first use and cached by path. Entities with
    no texture sample a 1x1 white texture so the material color shows
    through.
    """

    def __init__(self, ctx: moderngl.Context, wnd=None):
        self.ctx = ctx
        self.wnd = wnd
        self.program = ctx.program(vertex_shader=VERTEX_SHADER, fragment_shader=FRAGMENT_SHADER)
        self.program['TransformationMatrix'].binding = BLOCK_TRANSFORM
        self.program['Material'].binding = BLOCK_MATERIAL
        self.program['DirectionalLight'].binding = BLOCK_LIGHT
        self.program['Camera'].binding = BLOCK_CAMERA

        self._white = ctx.texture((1, 1), 4, b'\xff\xff\xff\xff')
        self._no_light = ctx.buffer(np.zeros(1, dtype=LIGHT_DTYPE).tobytes())
        self._vaos: Dict[int, moderngl.VertexArray] = {}
        self._textures: Dict[str, moderngl.Texture] = {}

        # Mesh winding is clockwise after the OBJ handedness flip
        ctx.front_face = 'cw'
        ctx.enable(moderngl.DEPTH_TEST | moderngl.BLEND)

    # -------------------------------------------------------------------------
    # Buffers
    # -------------------------------------------------------------------------

    def create_vertex_buffer(self, size_bytes: int) -> GLBuffer:
        return GLBuffer(self.ctx.buffer(reserve=size_bytes))

    def create_index_buffer(self, size_bytes: int) -> GLBuffer:
        return GLBuffer(self.ctx.buffer(reserve=size_bytes))

    def create_constant_buffer(self, size_bytes: int) -> GLBuffer:
        return GLBuffer(self.ctx.buffer(reserve=size_bytes, dynamic=True))

    # -------------------------------------------------------------------------
    # Textures
    # -------------------------------------------------------------------------

    def texture(self, path: str) -> moderngl.Texture:
        """Get the GPU texture for an image path, uploading it on first use."""
        if not path:
            return self._white

        tex = self._textures.get(path)
        if tex is None:
            image = load_texture_image(path)
            tex = self.ctx.texture(image.size, image.components, image.data)
            tex.filter = (moderngl.LINEAR, moderngl.LINEAR)
            self._textures[path] = tex
        return tex

    def preload_textures(self, paths: Iterable[str]) -> None:
        for path in paths:
            self.texture(path)

    # -------------------------------------------------------------------------
    # Drawing
    # -------------------------------------------------------------------------

    def _vertex_array(self, bindings: DrawBindings) -> moderngl.VertexArray:
        key = id(bindings.vertex)
        vao = self._vaos.get(key)
        if vao is None:
            vao = self.ctx.vertex_array(
                self.program,
                [(bindings.vertex.buffer, VERTEX_FORMAT, 'in_pos', 'in_uv', 'in_nrm')],
                index_buffer=bindings.index.buffer if bindings.index is not None else None,
                index_element_size=4,
            )
            self._vaos[key] = vao
        return vao

    def submit_draw(self, bindings: DrawBindings, count: int, instance_count: int = 1) -> None:
        bindings.transform.buffer.bind_to_uniform_block(BLOCK_TRANSFORM)
        bindings.material.buffer.bind_to_uniform_block(BLOCK_MATERIAL)
        light = bindings.light.buffer if bindings.light is not None else self._no_light
        light.bind_to_uniform_block(BLOCK_LIGHT)
        bindings.camera.buffer.bind_to_uniform_block(BLOCK_CAMERA)
        self.texture(bindings.texture_path).use(location=0)

        self._vertex_array(bindings).render(
            moderngl.TRIANGLES, vertices=count, instances=instance_count
        )

    # -------------------------------------------------------------------------
    # Polling
    # -------------------------------------------------------------------------

    def poll_close_requested(self) -> bool:
        return bool(self.wnd is not None and self.wnd.is_closing)

    def poll_input(self) -> Mapping[str, bool]:
        if self.wnd is None:
            return {}
        keys = self.wnd.keys
        return {name: self.wnd.is_key_pressed(getattr(keys, name)) for name in BOUND_KEYS}

    def present(self) -> None:
        # moderngl-window swaps buffers after on_render returns
        pass

    def cleanup(self):
        for vao in self._vaos.values():
            vao.release()
        self._vaos.clear()
        for tex in self._textures.values():
            tex.release()
        self._textures.clear()
        self._white.release()
        self._no_light.release()
        self.program.release()
