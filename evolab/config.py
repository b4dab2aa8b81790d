"""Configuration loading utilities for evolution runs."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from .operators import (
    DEFAULT_CROSS_SWAP_PROB,
    DEFAULT_INIT_PARAM_MAX,
    DEFAULT_INIT_PARAM_MIN,
    DEFAULT_MUTATION_AMOUNT,
    DEFAULT_MUTATION_PERC,
    DEFAULT_MUTATION_PROB,
    OperatorConfig,
)

DEFAULT_TOPOLOGY: tuple[int, ...] = (5, 4, 3, 2)


@dataclass(frozen=True, slots=True)
class EvolutionConfig:
    population_size: int = 30
    topology: tuple[int, ...] = DEFAULT_TOPOLOGY
    max_generations: int = 50
    seed: int | None = None
    init_param_min: float = DEFAULT_INIT_PARAM_MIN
    init_param_max: float = DEFAULT_INIT_PARAM_MAX
    crossover_swap_prob: float = DEFAULT_CROSS_SWAP_PROB
    mutation_prob: float = DEFAULT_MUTATION_PROB
    mutation_amount: float = DEFAULT_MUTATION_AMOUNT
    mutation_perc: float = DEFAULT_MUTATION_PERC
    legacy_swap_draw: bool = False

    def __post_init__(self) -> None:
        if self.population_size <= 0:
            msg = "population_size must be positive."
            raise ValueError(msg)
        if len(self.topology) < 2:
            msg = "topology must list at least an input and an output layer."
            raise ValueError(msg)
        if self.max_generations <= 0:
            msg = "max_generations must be positive."
            raise ValueError(msg)

    def operator_config(self) -> OperatorConfig:
        return OperatorConfig(
            init_param_min=self.init_param_min,
            init_param_max=self.init_param_max,
            crossover_swap_prob=self.crossover_swap_prob,
            mutation_prob=self.mutation_prob,
            mutation_amount=self.mutation_amount,
            mutation_perc=self.mutation_perc,
            legacy_swap_draw=self.legacy_swap_draw,
        )


@dataclass(slots=True)
class RunConfig:
    evolution_config: Path
    track_config: Path
    output_dir: Path = field(default_factory=lambda: Path("runs"))

    def resolve(self, base_path: Path) -> RunConfig:
        return RunConfig(
            evolution_config=(base_path / self.evolution_config).resolve(),
            track_config=(base_path / self.track_config).resolve(),
            output_dir=(base_path / self.output_dir).resolve(),
        )


def _load_yaml(path: Path) -> Mapping[str, Any]:
    with path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}
    if not isinstance(data, Mapping):
        msg = f"Expected mapping in YAML file: {path}"
        raise ValueError(msg)
    return data


def load_evolution_config(path: Path) -> EvolutionConfig:
    data = _load_yaml(path)
    operators = data.get("operators", {})
    if not isinstance(operators, Mapping):
        msg = f"'operators' must be a mapping in {path}"
        raise ValueError(msg)
    return EvolutionConfig(
        population_size=int(data.get("population_size", data.get("pop_size", 30))),
        topology=tuple(int(size) for size in data.get("topology", DEFAULT_TOPOLOGY)),
        max_generations=int(data.get("max_generations", 50)),
        seed=(int(data["seed"]) if data.get("seed") is not None else None),
        init_param_min=float(operators.get("init_param_min", DEFAULT_INIT_PARAM_MIN)),
        init_param_max=float(operators.get("init_param_max", DEFAULT_INIT_PARAM_MAX)),
        crossover_swap_prob=float(
            operators.get("crossover_swap_prob", DEFAULT_CROSS_SWAP_PROB)
        ),
        mutation_prob=float(operators.get("mutation_prob", DEFAULT_MUTATION_PROB)),
        mutation_amount=float(
            operators.get("mutation_amount", DEFAULT_MUTATION_AMOUNT)
        ),
        mutation_perc=float(operators.get("mutation_perc", DEFAULT_MUTATION_PERC)),
        legacy_swap_draw=bool(operators.get("legacy_swap_draw", False)),
    )


def load_run_config(path: Path) -> RunConfig:
    data = _load_yaml(path)
    evolution_path = data.get("evolution_config")
    track_path = data.get("track_config")
    if evolution_path is None or track_path is None:
        msg = "run.yml must specify 'evolution_config' and 'track_config' paths"
        raise ValueError(msg)
    run = RunConfig(
        evolution_config=Path(evolution_path),
        track_config=Path(track_path),
        output_dir=Path(data.get("output_dir", "runs")),
    )
    return run.resolve(path.parent)


__all__ = [
    "DEFAULT_TOPOLOGY",
    "EvolutionConfig",
    "RunConfig",
    "load_evolution_config",
    "load_run_config",
]
