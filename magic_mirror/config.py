"""
Runtime settings for the mirror.
Defaults can be overridden with MAGIC_MIRROR_* environment variables; the
command line overrides the environment.
"""

import os
from dataclasses import dataclass
from typing import Optional


def _env_bool(key: str, default: bool = False) -> bool:
    val = os.getenv(key, "").lower()
    if val in ("true", "1", "yes"):
        return True
    if val in ("false", "0", "no"):
        return False
    return default


def _env_float(key: str, default: float) -> float:
    try:
        return float(os.getenv(key, str(default)))
    except ValueError:
        return default


def _env_int(key: str, default: int) -> int:
    try:
        return int(os.getenv(key, str(default)))
    except ValueError:
        return default


@dataclass
class MirrorConfig:
    device_index: int = 0
    mirror: bool = True            # flip feeds so the user sees a reflection
    seated_mode: bool = False

    sprite_dir: Optional[str] = None
    sprite_alpha: float = 1.0
    video_opacity: float = 0.0     # 0 = plain white backdrop

    show_clipped_edges: bool = True
    show_bones: bool = False
    show_joints: bool = False

    # Joint confidence cut-offs (pose landmark visibility)
    tracked_threshold: float = 0.65
    inferred_threshold: float = 0.3

    # Depth band and blob size for position-only people
    depth_min: int = 914       # mm - 3 feet
    depth_max: int = 4000      # mm
    min_blob_area: int = 5000  # px

    window_name: str = "Magic Mirror"

    @classmethod
    def from_env(cls) -> "MirrorConfig":
        defaults = cls()
        return cls(
            device_index=_env_int("MAGIC_MIRROR_DEVICE", defaults.device_index),
            mirror=_env_bool("MAGIC_MIRROR_MIRROR", defaults.mirror),
            seated_mode=_env_bool("MAGIC_MIRROR_SEATED", defaults.seated_mode),
            sprite_dir=os.getenv("MAGIC_MIRROR_SPRITES") or defaults.sprite_dir,
            sprite_alpha=_clamp01(_env_float("MAGIC_MIRROR_SPRITE_ALPHA", defaults.sprite_alpha)),
            video_opacity=_clamp01(_env_float("MAGIC_MIRROR_VIDEO_OPACITY", defaults.video_opacity)),
            show_clipped_edges=_env_bool("MAGIC_MIRROR_SHOW_EDGES", defaults.show_clipped_edges),
            show_bones=_env_bool("MAGIC_MIRROR_SHOW_BONES", defaults.show_bones),
            show_joints=_env_bool("MAGIC_MIRROR_SHOW_JOINTS", defaults.show_joints),
            tracked_threshold=_env_float("MAGIC_MIRROR_TRACKED_THRESHOLD", defaults.tracked_threshold),
            inferred_threshold=_env_float("MAGIC_MIRROR_INFERRED_THRESHOLD", defaults.inferred_threshold),
            depth_min=_env_int("MAGIC_MIRROR_DEPTH_MIN", defaults.depth_min),
            depth_max=_env_int("MAGIC_MIRROR_DEPTH_MAX", defaults.depth_max),
            min_blob_area=_env_int("MAGIC_MIRROR_MIN_BLOB_AREA", defaults.min_blob_area),
        )


def _clamp01(value: float) -> float:
    return max(0.0, min(1.0, value))
