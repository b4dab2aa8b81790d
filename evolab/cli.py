"""Command-line interface for evolab workflows."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from games.track.config import load_track_config

from .config import EvolutionConfig, RunConfig, load_evolution_config, load_run_config
from .errors import InvalidArgumentError
from .network import NeuralNetwork
from .training import check_topology, run_training


def _load_bundle(config_path: Path) -> tuple[RunConfig, EvolutionConfig]:
    run_config = load_run_config(config_path)
    evolution_config = load_evolution_config(run_config.evolution_config)
    return run_config, evolution_config


def _cmd_train(args: argparse.Namespace) -> int:
    config_path = Path(args.config)
    run_config, evolution_config = _load_bundle(config_path)
    track_config = load_track_config(run_config.track_config)
    check_topology(evolution_config.topology, track_config)

    if args.dry_run:
        print("[train] configuration validated")
        print(f"  evolution_config: {run_config.evolution_config}")
        print(f"  track_config: {run_config.track_config}")
        print(f"  population_size: {evolution_config.population_size}")
        print(f"  topology: {list(evolution_config.topology)}")
        print(f"  max_generations: {evolution_config.max_generations}")
        return 0

    summary = run_training(run_config, evolution_config, track_config=track_config)
    print(
        f"[train] {summary.generations} generations evaluated, "
        f"best evaluation {summary.best_evaluation:.3f}"
    )
    return 0


def _cmd_topology(args: argparse.Namespace) -> int:
    try:
        network = NeuralNetwork(args.sizes)
    except InvalidArgumentError as error:
        print(f"Invalid topology: {error}", file=sys.stderr)
        return 1

    print(f"[topology] {list(network.topology)}")
    for index, layer in enumerate(network.layers):
        rows = layer.neuron_count + 1
        print(
            f"  layer {index}: {layer.neuron_count} -> {layer.output_count} "
            f"({rows}x{layer.output_count} weights incl. bias)"
        )
    print(f"  weight_count: {network.weight_count}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="evolab",
        description="Fixed-topology neuroevolution command-line interface",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    train = subparsers.add_parser(
        "train",
        help="Evolve car controllers using a YAML configuration bundle",
    )
    train.add_argument(
        "--config",
        required=True,
        help="Path to run configuration YAML",
    )
    train.add_argument(
        "--dry-run",
        action="store_true",
        help="Validate configuration without training",
    )
    train.set_defaults(func=_cmd_train)

    topology = subparsers.add_parser(
        "topology",
        help="Show layer shapes and the genotype size of a topology",
    )
    topology.add_argument(
        "sizes",
        type=int,
        nargs="+",
        help="Neuron count of each layer from input to output",
    )
    topology.set_defaults(func=_cmd_topology)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    result = args.func(args)
    return int(result)


if __name__ == "__main__":  # pragma: no cover - entry point
    raise SystemExit(main())
