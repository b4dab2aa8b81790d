"""Fixed-topology neuroevolution: genotypes, networks and a genetic algorithm."""

from __future__ import annotations

from .agent import Agent, DeathListener, decode_genotype
from .algorithm import AlgorithmState, EvaluationOperator, GeneticAlgorithm
from .errors import (
    DimensionMismatchError,
    EvolabError,
    InvalidArgumentError,
    InvalidStateError,
)
from .genotype import Genotype, compare_fitness_descending, fitness_descending_key
from .manager import AgentHost, EvolutionManager
from .metrics import MetricsRow, MetricsWriter
from .network import NeuralLayer, NeuralNetwork, count_weights, softsign
from .operators import (
    GeneticOperators,
    OperatorConfig,
    calculate_fitness,
    complete_crossover,
    initialize_population,
    mutate_all_but_best_two,
    mutate_genotype,
    random_recombination,
    select_best,
)
from .reporters import EventLogger

__all__ = [
    "Agent",
    "AgentHost",
    "AlgorithmState",
    "DeathListener",
    "DimensionMismatchError",
    "EvaluationOperator",
    "EventLogger",
    "EvolabError",
    "EvolutionManager",
    "GeneticAlgorithm",
    "GeneticOperators",
    "Genotype",
    "InvalidArgumentError",
    "InvalidStateError",
    "MetricsRow",
    "MetricsWriter",
    "NeuralLayer",
    "NeuralNetwork",
    "OperatorConfig",
    "calculate_fitness",
    "compare_fitness_descending",
    "complete_crossover",
    "count_weights",
    "decode_genotype",
    "fitness_descending_key",
    "initialize_population",
    "mutate_all_but_best_two",
    "mutate_genotype",
    "random_recombination",
    "select_best",
    "softsign",
]
