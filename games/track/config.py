"""Configuration helpers for the track environment."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path

import yaml

from .env.env_core import TrackConfig


def _parse_centre_line(raw: object, path: Path) -> tuple[tuple[float, float], ...]:
    if not isinstance(raw, list):
        msg = f"'centre_line' must be a list of [x, y] points in {path}"
        raise ValueError(msg)
    points: list[tuple[float, float]] = []
    for item in raw:
        if not isinstance(item, (list, tuple)) or len(item) != 2:
            msg = f"Invalid centre_line point {item!r} in {path}"
            raise ValueError(msg)
        points.append((float(item[0]), float(item[1])))
    return tuple(points)


def load_track_config(path: Path) -> TrackConfig:
    with path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}
    if not isinstance(data, Mapping):
        msg = f"Expected mapping in YAML file: {path}"
        raise ValueError(msg)

    defaults = TrackConfig()
    sensors = data.get("sensors", {})
    physics = data.get("physics", {})
    centre_line = (
        _parse_centre_line(data["centre_line"], path)
        if "centre_line" in data
        else defaults.centre_line
    )
    return TrackConfig(
        centre_line=centre_line,
        half_width=float(data.get("half_width", defaults.half_width)),
        sensor_count=int(sensors.get("count", defaults.sensor_count)),
        sensor_spread=float(sensors.get("spread", defaults.sensor_spread)),
        sensor_range=float(sensors.get("range", defaults.sensor_range)),
        max_speed=float(physics.get("max_speed", defaults.max_speed)),
        acceleration=float(physics.get("acceleration", defaults.acceleration)),
        friction=float(physics.get("friction", defaults.friction)),
        turn_rate=float(physics.get("turn_rate", defaults.turn_rate)),
        idle_timeout_steps=int(
            data.get("idle_timeout_steps", defaults.idle_timeout_steps)
        ),
        max_steps=int(data.get("max_steps", defaults.max_steps)),
    )


__all__ = ["load_track_config"]
