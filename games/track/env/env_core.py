"""Headless top-down track driving simulation used to score agents."""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from evolab.agent import Agent

Point = tuple[float, float]
Segment = tuple[float, float, float, float]


def _default_centre_line() -> tuple[Point, ...]:
    points = 16
    return tuple(
        (
            round(300.0 * math.cos(2.0 * math.pi * index / points), 3),
            round(180.0 * math.sin(2.0 * math.pi * index / points), 3),
        )
        for index in range(points)
    )


@dataclass(frozen=True, slots=True)
class TrackConfig:
    """Geometry, sensor and physics configuration for the track."""

    centre_line: tuple[Point, ...] = field(default_factory=_default_centre_line)
    half_width: float = 40.0
    sensor_count: int = 5
    sensor_spread: float = 1.2
    sensor_range: float = 120.0
    max_speed: float = 8.0
    acceleration: float = 0.5
    friction: float = 0.02
    turn_rate: float = 0.12
    idle_timeout_steps: int = 80
    max_steps: int = 1000

    def __post_init__(self) -> None:
        if len(self.centre_line) < 3:
            msg = "centre_line must contain at least three points."
            raise ValueError(msg)
        for label, value in (
            ("half_width", self.half_width),
            ("sensor_range", self.sensor_range),
            ("max_speed", self.max_speed),
            ("acceleration", self.acceleration),
            ("turn_rate", self.turn_rate),
        ):
            if value <= 0.0:
                msg = f"{label} must be positive."
                raise ValueError(msg)
        if not 0.0 <= self.friction < 1.0:
            msg = "friction must be in [0, 1)."
            raise ValueError(msg)
        if self.sensor_count <= 0:
            msg = "sensor_count must be positive."
            raise ValueError(msg)
        if self.sensor_spread < 0.0:
            msg = "sensor_spread must be >= 0."
            raise ValueError(msg)
        if self.idle_timeout_steps <= 0 or self.max_steps <= 0:
            msg = "idle_timeout_steps and max_steps must be positive."
            raise ValueError(msg)


def _ray_segment_distance(
    origin: Point,
    direction: Point,
    segment: Segment,
) -> float | None:
    ox, oy = origin
    dx, dy = direction
    ax, ay, bx, by = segment
    sx, sy = bx - ax, by - ay
    denom = dx * sy - dy * sx
    if abs(denom) < 1e-9:
        return None
    t = ((ax - ox) * sy - (ay - oy) * sx) / denom
    u = ((ax - ox) * dy - (ay - oy) * dx) / denom
    if t >= 0.0 and 0.0 <= u <= 1.0:
        return t
    return None


def _point_segment_distance(point: Point, start: Point, end: Point) -> float:
    px, py = point
    ax, ay = start
    bx, by = end
    sx, sy = bx - ax, by - ay
    length_sq = sx * sx + sy * sy
    if length_sq == 0.0:
        return math.hypot(px - ax, py - ay)
    t = max(0.0, min(1.0, ((px - ax) * sx + (py - ay) * sy) / length_sq))
    return math.hypot(px - (ax + t * sx), py - (ay + t * sy))


class Track:
    """Closed loop track built from a centre line and a constant half-width.

    Every centre-line point doubles as a checkpoint; checkpoint 0 is the
    spawn point.
    """

    def __init__(self, centre_line: Sequence[Point], half_width: float) -> None:
        self.centre_line = tuple((float(x), float(y)) for x, y in centre_line)
        self.half_width = float(half_width)
        self.walls = self._build_walls()
        start_x, start_y = self.centre_line[0]
        next_x, next_y = self.centre_line[1]
        self.spawn = (start_x, start_y)
        self.spawn_heading = math.atan2(next_y - start_y, next_x - start_x)

    @property
    def checkpoint_count(self) -> int:
        return len(self.centre_line)

    def _build_walls(self) -> tuple[Segment, ...]:
        count = len(self.centre_line)
        left: list[Point] = []
        right: list[Point] = []
        for index, (cx, cy) in enumerate(self.centre_line):
            prev_x, prev_y = self.centre_line[index - 1]
            next_x, next_y = self.centre_line[(index + 1) % count]
            dx, dy = next_x - prev_x, next_y - prev_y
            length = math.hypot(dx, dy) or 1.0
            nx, ny = -dy / length, dx / length
            left.append((cx + nx * self.half_width, cy + ny * self.half_width))
            right.append((cx - nx * self.half_width, cy - ny * self.half_width))

        walls: list[Segment] = []
        for boundary in (left, right):
            for index, (ax, ay) in enumerate(boundary):
                bx, by = boundary[(index + 1) % count]
                walls.append((ax, ay, bx, by))
        return tuple(walls)

    def checkpoint(self, index: int) -> Point:
        return self.centre_line[index % len(self.centre_line)]

    def distance_to_centre(self, point: Point) -> float:
        count = len(self.centre_line)
        return min(
            _point_segment_distance(
                point,
                self.centre_line[index],
                self.centre_line[(index + 1) % count],
            )
            for index in range(count)
        )

    def is_on_track(self, point: Point) -> bool:
        return self.distance_to_centre(point) <= self.half_width

    def cast_ray(self, origin: Point, angle: float, max_range: float) -> float:
        """Return the distance to the nearest wall along ``angle``, capped."""
        direction = (math.cos(angle), math.sin(angle))
        best = max_range
        for wall in self.walls:
            distance = _ray_segment_distance(origin, direction, wall)
            if distance is not None and distance < best:
                best = distance
        return best


class Car:
    """Single car steered by an agent's network."""

    def __init__(self, agent: Agent, track: Track, config: TrackConfig) -> None:
        self.agent = agent
        self.track = track
        self.config = config
        self.x, self.y = track.spawn
        self.heading = track.spawn_heading
        self.speed = 0.0
        self.checkpoints_passed = 0
        self.next_checkpoint = 1
        self.steps_since_checkpoint = 0

    @property
    def position(self) -> Point:
        return (self.x, self.y)

    def sensor_angles(self) -> list[float]:
        count = self.config.sensor_count
        if count == 1:
            return [self.heading]
        spread = self.config.sensor_spread
        step = 2.0 * spread / (count - 1)
        return [self.heading - spread + step * index for index in range(count)]

    def sense(self) -> list[float]:
        """Return wall distances normalized to ``[0, 1]`` by the sensor range."""
        max_range = self.config.sensor_range
        return [
            self.track.cast_ray(self.position, angle, max_range) / max_range
            for angle in self.sensor_angles()
        ]

    def drive(self, outputs: Sequence[float]) -> None:
        """Apply ``(engine, turn)`` outputs, each in ``[-1, 1]``."""
        engine = max(-1.0, min(1.0, float(outputs[0]))) if outputs else 0.0
        turn = max(-1.0, min(1.0, float(outputs[1]))) if len(outputs) > 1 else 0.0

        self.heading += turn * self.config.turn_rate
        self.speed += engine * self.config.acceleration
        self.speed -= self.speed * self.config.friction
        self.speed = max(0.0, min(self.config.max_speed, self.speed))
        self.x += math.cos(self.heading) * self.speed
        self.y += math.sin(self.heading) * self.speed

    @property
    def progress(self) -> float:
        """Checkpoints passed plus the fraction covered toward the next one."""
        previous = self.track.checkpoint(self.next_checkpoint - 1)
        target = self.track.checkpoint(self.next_checkpoint)
        span = math.dist(previous, target)
        if span == 0.0:
            return float(self.checkpoints_passed)
        remaining = math.dist(self.position, target)
        fraction = max(0.0, min(1.0, 1.0 - remaining / span))
        return self.checkpoints_passed + fraction

    def _update_checkpoints(self) -> None:
        target = self.track.checkpoint(self.next_checkpoint)
        if math.dist(self.position, target) <= self.track.half_width:
            self.checkpoints_passed += 1
            self.next_checkpoint = (self.next_checkpoint + 1) % self.track.checkpoint_count
            self.steps_since_checkpoint = 0
        else:
            self.steps_since_checkpoint += 1

    def update(self) -> None:
        """Advance one step: sense, think, move, score and maybe crash."""
        outputs = self.agent.process_inputs(self.sense())
        self.drive(outputs)
        self._update_checkpoints()
        self.agent.genotype.evaluation = self.progress

        if not self.track.is_on_track(self.position):
            self.agent.kill()
        elif self.steps_since_checkpoint > self.config.idle_timeout_steps:
            self.agent.kill()


class TrackSimulation:
    """Agent host that races one car per agent around a :class:`Track`."""

    def __init__(self, config: TrackConfig | None = None) -> None:
        self.config = config or TrackConfig()
        self.track = Track(self.config.centre_line, self.config.half_width)
        self._cars: list[Car] = []
        self._generation_steps = 0
        self.steps_taken = 0

    @property
    def cars(self) -> tuple[Car, ...]:
        return tuple(self._cars)

    @property
    def generation_steps(self) -> int:
        return self._generation_steps

    @property
    def alive_count(self) -> int:
        return sum(1 for car in self._cars if car.agent.is_alive)

    def restart(self, agents: Sequence[Agent]) -> None:
        """Place a fresh car for each agent on the start line."""
        self._cars = [Car(agent, self.track, self.config) for agent in agents]
        self._generation_steps = 0
        for agent in agents:
            agent.reset()

    def step(self) -> None:
        """Advance every live car by one step.

        Killing the last car may restart the simulation with a new set of
        agents before this call returns.
        """
        cars = self._cars
        self._generation_steps += 1
        for car in cars:
            if not car.agent.is_alive:
                continue
            car.update()
            self.steps_taken += 1

        if cars is self._cars and self._generation_steps >= self.config.max_steps:
            for car in cars:
                car.agent.kill()

    def run_generation(self) -> int:
        """Step until every car of the current generation has died.

        Returns:
            The number of simulation steps taken.
        """
        cars = self._cars
        steps = 0
        while cars is self._cars and any(car.agent.is_alive for car in cars):
            self.step()
            steps += 1
        return steps


__all__ = ["Car", "Track", "TrackConfig", "TrackSimulation"]
