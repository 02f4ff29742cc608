# lumen/core/config.py
"""
Application configuration and logging setup.
"""

from __future__ import annotations
from dataclasses import dataclass, field, fields, asdict
from typing import Any, Dict, Optional
import datetime
import json
import logging
import os

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def _known(cls, data: Dict[str, Any]) -> Dict[str, Any]:
    """Keep only keys that are dataclass fields of cls."""
    names = {f.name for f in fields(cls)}
    return {k: v for k, v in data.items() if k in names}


@dataclass
class RenderConfig:
    client_width: int = 1280
    client_height: int = 720
    fov_y: float = 0.45
    near_clip: float = 0.1
    far_clip: float = 100.0
    ortho_near: float = 0.0
    ortho_far: float = 100.0

    @property
    def aspect(self) -> float:
        return float(self.client_width) / float(self.client_height)


@dataclass
class InputConfig:
    move_step: float = 0.01
    rotate_step: float = 0.01
    target: str = "model"


@dataclass
class AssetConfig:
    model_directory: str = "resources/models/plane"
    model_filename: str = "plane.obj"
    sound_path: str = "resources/audio/Alarm02.wav"
    default_texture: str = "resources/textures/monsterBall.png"
    sphere_subdivision: int = 16


@dataclass
class AppConfig:
    render: RenderConfig = field(default_factory=RenderConfig)
    input: InputConfig = field(default_factory=InputConfig)
    assets: AssetConfig = field(default_factory=AssetConfig)
    log_level: str = "INFO"
    log_dir: Optional[str] = "logs"

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> AppConfig:
        return AppConfig(
            render=RenderConfig(**_known(RenderConfig, data.get('render', {}))),
            input=InputConfig(**_known(InputConfig, data.get('input', {}))),
            assets=AssetConfig(**_known(AssetConfig, data.get('assets', {}))),
            log_level=data.get('log_level', 'INFO'),
            log_dir=data.get('log_dir', 'logs'),
        )

    def save(self, path: str):
        with open(path, 'w') as f:
            json.dump(self.to_dict(), f, indent=2)

    @staticmethod
    def load(path: str) -> AppConfig:
        with open(path, 'r') as f:
            data = json.load(f)
        return AppConfig.from_dict(data)


# =============================================================================
# Logging
# =============================================================================

def configure_logging(level: str = "INFO", log_dir: Optional[str] = None) -> Optional[str]:
    """
    Install console logging and, if log_dir is given, a timestamped log file.

    Args:
        level: Level name for the root logger
        log_dir: Directory for ``YYYYmmdd_HHMMSS.log``; created if missing

    Returns:
        Path of the log file, or None when only console logging is set up
    """
    root = logging.getLogger()
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    formatter = logging.Formatter(LOG_FORMAT)

    if not any(getattr(h, '_lumen_console', False) for h in root.handlers):
        console = logging.StreamHandler()
        console.setFormatter(formatter)
        console._lumen_console = True
        root.addHandler(console)

    if log_dir is None:
        return None

    os.makedirs(log_dir, exist_ok=True)
    stamp = datetime.datetime.now().strftime("%Y%m%d_%H%M%S")
    log_path = os.path.join(log_dir, f"{stamp}.log")

    file_handler = logging.FileHandler(log_path, encoding='utf-8')
    file_handler.setFormatter(formatter)
    root.addHandler(file_handler)
    return log_path
