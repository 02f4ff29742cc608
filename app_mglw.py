"""
Lumen - moderngl-window Host

Loads the sound and model assets, builds the default scene and drives
the FrameOrchestrator from the window's render callback.

Usage:
    python app_mglw.py [--config lumen.json]

Keys: W/S/A/D move the model, Q/E rotate it. 1-4 toggle the model,
triangle, sphere and sprite; L toggles lighting on the sphere.
"""

from __future__ import annotations
import argparse
import logging
import os
import sys

import moderngl_window as mglw

from lumen.assets import parse_model
from lumen.audio import AudioEngine, SoundDeviceBackend, load_wave
from lumen.core import AppConfig, AssetError, configure_logging
from lumen.core.orchestrator import FrameOrchestrator
from lumen.render.gl_backend import ModernGLBackend
from lumen.scene import build_default_scene

logger = logging.getLogger("lumen.app")

CONFIG_ENV = "LUMEN_CONFIG"


def load_config() -> AppConfig:
    path = os.environ.get(CONFIG_ENV)
    if path:
        return AppConfig.load(path)
    return AppConfig()


def configure_window(config: AppConfig) -> None:
    """Size the window class from the render config before it is created."""
    render = config.render
    LumenApp.window_size = (render.client_width, render.client_height)
    LumenApp.aspect_ratio = render.aspect


class LumenApp(mglw.WindowConfig):
    """Main application window."""

    gl_version = (3, 3)
    title = "Lumen"
    resource_dir = "."

    def __init__(self, **kwargs):
        super().__init__(**kwargs)

        self.config = load_config()
        assets = self.config.assets

        # Load phase: any AssetError here aborts before the first frame
        self.sound = load_wave(assets.sound_path)
        model = parse_model(assets.model_directory, assets.model_filename)

        self.audio = AudioEngine(SoundDeviceBackend())
        self.audio.play(self.sound)

        self.backend = ModernGLBackend(self.ctx, self.wnd)
        self.orchestrator = FrameOrchestrator(
            self.backend, build_default_scene(model, self.config), self.config
        )
        self.backend.preload_textures(e.texture_path for e in self.orchestrator.entities)

        self._toggle_keys = {
            self.wnd.keys.NUMBER_1: "model",
            self.wnd.keys.NUMBER_2: "triangle",
            self.wnd.keys.NUMBER_3: "sphere",
            self.wnd.keys.NUMBER_4: "sprite",
        }

    def on_render(self, t: float, frame_time: float):
        """Main render loop."""
        self.ctx.clear(0.1, 0.25, 0.5, 1.0, depth=1.0)
        frame = self.orchestrator.update_frame(frame_time)

        if frame.frame_id % 600 == 0:
            logger.debug(f"frame {frame.frame_id}: {frame.draw_count} draws, {frame.fps:.1f} fps")

    def on_key_event(self, key, action, modifiers):
        """Debug toggles; edits land at the start of the next frame."""
        if action != self.wnd.keys.ACTION_PRESS:
            return

        if key in self._toggle_keys:
            name = self._toggle_keys[key]
            entity = self.orchestrator.entity(name)
            self.orchestrator.set_visible(name, not entity.visible)

        elif key == self.wnd.keys.L:
            sphere = self.orchestrator.entity("sphere")
            self.orchestrator.queue_edit("sphere", lighting_enabled=not sphere.lighting_enabled)

        elif key == self.wnd.keys.R:
            sphere = self.orchestrator.entity("sphere")
            self.orchestrator.queue_edit("sphere", transform=sphere.initial_transform)

    def on_close(self):
        self.orchestrator.shutdown()
        self.backend.cleanup()
        self.sound.release()


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Lumen asset viewer")
    parser.add_argument("--config", help="JSON config file")
    args, rest = parser.parse_known_args(argv)

    if args.config:
        os.environ[CONFIG_ENV] = args.config
    config = load_config()
    configure_window(config)
    log_path = configure_logging(config.log_level, config.log_dir)
    if log_path:
        logger.info(f"Logging to {log_path}")

    try:
        mglw.run_window_config(LumenApp, args=rest)
    except AssetError as e:
        logger.critical(f"Asset load failed: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
