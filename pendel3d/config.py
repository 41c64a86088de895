"""
Configuration
=============
Physical constants, view settings and environment overrides.

Every value can be overridden with an environment variable prefixed
``PENDEL3D_``, e.g. ``PENDEL3D_FRAME_INTERVAL=0.05`` or
``PENDEL3D_LOG_LEVEL=DEBUG``.
"""
from __future__ import annotations

import logging
import math
import os
from dataclasses import dataclass, field
from typing import Callable, Mapping, Optional, Tuple, TypeVar

ENV_PREFIX = "PENDEL3D_"

T = TypeVar("T")


@dataclass(frozen=True)
class PendulumConfig:
    """Constants of the simulation and of the interaction model."""

    gravity: float = 0.001  # per-frame gravity constant g'
    damping: float = 0.999  # velocity multiplier per tick
    length: float = 2.0  # rod length, world units
    grab_radius: float = 0.5  # pointer-down distance that starts a drag
    free_frequency: float = 0.002  # rad per wall-clock millisecond (gravity off)
    drag_phase: float = math.pi / 2
    label_offset: float = 0.5  # angle scale sits this far outside the bob
    max_samples: Optional[int] = None  # None keeps the full energy history


@dataclass(frozen=True)
class ViewConfig:
    """Viewport and camera of the rendered scene."""

    width: int = 1280
    height: int = 720
    camera_position: Tuple[float, float, float] = (0.0, 2.0, 5.0)
    camera_target: Tuple[float, float, float] = (0.0, 2.0, 0.0)
    fov_y_deg: float = 50.0
    frame_interval: float = 1.0 / 30.0  # seconds between ticks


@dataclass(frozen=True)
class AppConfig:
    pendulum: PendulumConfig = field(default_factory=PendulumConfig)
    view: ViewConfig = field(default_factory=ViewConfig)
    log_level: int = logging.INFO
    log_file: Optional[str] = None


def _read(env: Mapping[str, str], name: str, parse: Callable[[str], T], default: T) -> T:
    key = ENV_PREFIX + name
    raw = env.get(key)
    if raw is None or raw.strip() == "":
        return default
    try:
        return parse(raw.strip())
    except ValueError as exc:
        raise ValueError(f"Invalid value for {key}: {raw!r} ({exc})") from exc


def _positive(parse: Callable[[str], T]) -> Callable[[str], T]:
    def inner(raw: str) -> T:
        value = parse(raw)
        if value <= 0:  # type: ignore[operator]
            raise ValueError("must be positive")
        return value
    return inner


def _log_level(raw: str) -> int:
    if raw.isdigit():
        return int(raw)
    level = logging.getLevelName(raw.upper())
    if not isinstance(level, int):
        raise ValueError("unknown log level")
    return level


def load_config(env: Optional[Mapping[str, str]] = None) -> AppConfig:
    """Build the app configuration, applying ``PENDEL3D_*`` overrides.

    Raises ValueError naming the offending variable if a value cannot be parsed.
    """
    if env is None:
        env = os.environ

    base_p = PendulumConfig()
    pendulum = PendulumConfig(
        gravity=_read(env, "GRAVITY", float, base_p.gravity),
        damping=_read(env, "DAMPING", float, base_p.damping),
        length=_read(env, "LENGTH", _positive(float), base_p.length),
        grab_radius=_read(env, "GRAB_RADIUS", _positive(float), base_p.grab_radius),
        free_frequency=_read(env, "FREE_FREQUENCY", float, base_p.free_frequency),
        label_offset=_read(env, "LABEL_OFFSET", float, base_p.label_offset),
        max_samples=_read(env, "MAX_SAMPLES", _positive(int), base_p.max_samples),
    )

    base_v = ViewConfig()
    view = ViewConfig(
        width=_read(env, "VIEW_WIDTH", _positive(int), base_v.width),
        height=_read(env, "VIEW_HEIGHT", _positive(int), base_v.height),
        fov_y_deg=_read(env, "FOV", _positive(float), base_v.fov_y_deg),
        frame_interval=_read(env, "FRAME_INTERVAL", _positive(float), base_v.frame_interval),
    )

    return AppConfig(
        pendulum=pendulum,
        view=view,
        log_level=_read(env, "LOG_LEVEL", _log_level, logging.INFO),
        log_file=_read(env, "LOG_FILE", str, None),
    )
