"""Training orchestration for the evolab CLI."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import asdict, dataclass
from datetime import datetime
from pathlib import Path
from time import perf_counter

import yaml

from games.track.config import load_track_config
from games.track.env.env_core import TrackConfig, TrackSimulation

from .agent import Agent
from .config import EvolutionConfig, RunConfig
from .genotype import Genotype
from .manager import EvolutionManager
from .metrics import MetricsRow, MetricsWriter
from .operators import GeneticOperators
from .reporters import EventLogger

# Network outputs consumed by a car: engine and turn.
CONTROL_OUTPUTS = 2


@dataclass(frozen=True, slots=True)
class RunArtifacts:
    """Resolved file locations used for a training run."""

    root: Path
    metrics: Path
    events: Path
    config: Path


@dataclass(frozen=True, slots=True)
class TrainingSummary:
    """Outcome of :func:`run_training`."""

    run_dir: Path
    generations: int
    best_evaluation: float
    best_genotype: Genotype | None


def check_topology(topology: Sequence[int], track_config: TrackConfig) -> None:
    """Ensure a topology fits the car's sensors and controls."""
    if topology[0] != track_config.sensor_count:
        msg = (
            f"Input layer has {topology[0]} neurons but cars have "
            f"{track_config.sensor_count} sensors."
        )
        raise ValueError(msg)
    if topology[-1] != CONTROL_OUTPUTS:
        msg = (
            f"Output layer must have {CONTROL_OUTPUTS} neurons "
            f"(engine, turn), got {topology[-1]}."
        )
        raise ValueError(msg)


def _allocate_run_dir(output_root: Path) -> Path:
    output_root.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y-%m-%d_%H-%M-%S")
    candidate = output_root / timestamp
    suffix = 1
    while candidate.exists():
        candidate = output_root / f"{timestamp}_{suffix:02d}"
        suffix += 1
    candidate.mkdir(parents=True, exist_ok=False)
    return candidate


def _build_artifacts(run_dir: Path) -> RunArtifacts:
    return RunArtifacts(
        root=run_dir,
        metrics=run_dir / "metrics.csv",
        events=run_dir / "events.log",
        config=run_dir / "config.yml",
    )


def _write_config_snapshot(
    artifacts: RunArtifacts,
    run_config: RunConfig,
    evolution_config: EvolutionConfig,
    track_config: TrackConfig,
) -> None:
    evolution = asdict(evolution_config)
    evolution["topology"] = list(evolution_config.topology)
    track = asdict(track_config)
    track["centre_line"] = [list(point) for point in track_config.centre_line]
    snapshot = {
        "run": {
            "evolution_config": str(run_config.evolution_config),
            "track_config": str(run_config.track_config),
            "output_dir": str(run_config.output_dir),
        },
        "evolution": evolution,
        "track": track,
    }
    with artifacts.config.open("w", encoding="utf-8") as handle:
        yaml.safe_dump(snapshot, handle, sort_keys=True)


class _GenerationRecorder:
    """Generation listener writing metrics and tracking the best genotype."""

    def __init__(
        self,
        simulation: TrackSimulation,
        metrics_writer: MetricsWriter,
        logger: EventLogger,
    ) -> None:
        self.simulation = simulation
        self.metrics_writer = metrics_writer
        self.logger = logger
        self.generations = 0
        self.best_evaluation = float("-inf")
        self.best_genotype: Genotype | None = None
        self._restart_clock()

    def _restart_clock(self) -> None:
        self._started = perf_counter()
        self._steps_at_start = self.simulation.steps_taken

    def __call__(self, generation: int, agents: tuple[Agent, ...]) -> None:
        population = [agent.genotype for agent in agents]
        row = MetricsRow.from_population(
            generation,
            population,
            eval_time_s=perf_counter() - self._started,
            steps=self.simulation.steps_taken - self._steps_at_start,
        )
        self.metrics_writer.append(row)
        self.logger.log_generation(row)
        self.generations += 1

        if row.best_evaluation > self.best_evaluation:
            best = max(population, key=lambda genotype: genotype.evaluation)
            self.best_evaluation = row.best_evaluation
            self.best_genotype = best.copy()
            self.logger.log(
                f"New best evaluation {row.best_evaluation:.3f}.",
                generation=generation,
            )

        print(f"Generation {generation}: best evaluation {row.best_evaluation:.2f}")
        self._restart_clock()


def run_training(
    run_config: RunConfig,
    evolution_config: EvolutionConfig,
    *,
    track_config: TrackConfig | None = None,
) -> TrainingSummary:
    """Evolve car controllers until ``max_generations`` have been evaluated."""
    if track_config is None:
        track_config = load_track_config(run_config.track_config)
    check_topology(evolution_config.topology, track_config)

    artifacts = _build_artifacts(_allocate_run_dir(run_config.output_dir))
    _write_config_snapshot(artifacts, run_config, evolution_config, track_config)

    simulation = TrackSimulation(track_config)
    manager = EvolutionManager(
        evolution_config.topology,
        evolution_config.population_size,
        simulation,
        operators=GeneticOperators.from_config(evolution_config.operator_config()),
        seed=evolution_config.seed,
    )
    print(f"[train] run directory: {artifacts.root}")

    with MetricsWriter(artifacts.metrics) as metrics_writer, EventLogger(
        artifacts.events
    ) as logger:
        logger.log(f"Training started at {artifacts.root}")
        logger.log(
            f"Topology {list(evolution_config.topology)} with "
            f"{manager.algorithm.population[0].parameter_count} weights, "
            f"population {evolution_config.population_size}."
        )

        recorder = _GenerationRecorder(simulation, metrics_writer, logger)
        manager.subscribe_generation(recorder)
        manager.start_evolution()

        # The algorithm never stops on its own; stop driving the simulation.
        while manager.generation_count <= evolution_config.max_generations:
            simulation.run_generation()

        logger.log(f"Training stopped after {recorder.generations} generations.")

    return TrainingSummary(
        run_dir=artifacts.root,
        generations=recorder.generations,
        best_evaluation=recorder.best_evaluation,
        best_genotype=recorder.best_genotype,
    )


__all__ = [
    "CONTROL_OUTPUTS",
    "RunArtifacts",
    "TrainingSummary",
    "check_topology",
    "run_training",
]
