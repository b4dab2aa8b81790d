"""Track driving environment package."""

from __future__ import annotations

from .env_core import Car, Track, TrackConfig, TrackSimulation

__all__ = [
    "Car",
    "Track",
    "TrackConfig",
    "TrackSimulation",
]
