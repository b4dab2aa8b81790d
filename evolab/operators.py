"""Default genetic operators and the pluggable operator bundle."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from functools import partial
from random import Random

from .errors import InvalidArgumentError, InvalidStateError
from .genotype import Genotype

DEFAULT_INIT_PARAM_MIN = -1.0
DEFAULT_INIT_PARAM_MAX = 1.0
DEFAULT_CROSS_SWAP_PROB = 0.6
DEFAULT_MUTATION_PROB = 0.3
DEFAULT_MUTATION_AMOUNT = 2.0
DEFAULT_MUTATION_PERC = 1.0
ELITE_SELECTION_SIZE = 3

# Upper bound of the integer draw used by ``legacy_swap_draw``.
_LEGACY_DRAW_LIMIT = 2**31 - 1

PopulationInitializer = Callable[[Sequence[Genotype], Random], None]
FitnessCalculator = Callable[[Sequence[Genotype]], None]
SelectionOperator = Callable[[Sequence[Genotype]], list[Genotype]]
RecombinationOperator = Callable[[Sequence[Genotype], int, Random], list[Genotype]]
MutationOperator = Callable[[list[Genotype], Random], None]


@dataclass(frozen=True, slots=True)
class OperatorConfig:
    """Probabilities and ranges used by the default operators."""

    init_param_min: float = DEFAULT_INIT_PARAM_MIN
    init_param_max: float = DEFAULT_INIT_PARAM_MAX
    crossover_swap_prob: float = DEFAULT_CROSS_SWAP_PROB
    mutation_prob: float = DEFAULT_MUTATION_PROB
    mutation_amount: float = DEFAULT_MUTATION_AMOUNT
    mutation_perc: float = DEFAULT_MUTATION_PERC
    legacy_swap_draw: bool = False

    def __post_init__(self) -> None:
        for label, value in (
            ("crossover_swap_prob", self.crossover_swap_prob),
            ("mutation_prob", self.mutation_prob),
            ("mutation_perc", self.mutation_perc),
        ):
            if not 0.0 <= value <= 1.0:
                msg = f"{label} must be in [0, 1]."
                raise InvalidArgumentError(msg)
        if self.init_param_min > self.init_param_max:
            msg = "init_param_min may not exceed init_param_max."
            raise InvalidArgumentError(msg)
        if self.mutation_amount < 0.0:
            msg = "mutation_amount must be >= 0."
            raise InvalidArgumentError(msg)


def initialize_population(
    population: Sequence[Genotype],
    rng: Random,
    *,
    min_value: float = DEFAULT_INIT_PARAM_MIN,
    max_value: float = DEFAULT_INIT_PARAM_MAX,
) -> None:
    """Set every gene of every genotype uniformly in ``[min_value, max_value)``."""
    for genotype in population:
        genotype.set_random_parameters(min_value, max_value, rng)


def calculate_fitness(population: Sequence[Genotype]) -> None:
    """Assign ``fitness = evaluation / average evaluation``.

    A population whose evaluations sum to zero gets a fitness of 0.0
    throughout instead of a non-finite value.
    """
    if not population:
        return
    total = sum(genotype.evaluation for genotype in population)
    if total == 0.0:
        for genotype in population:
            genotype.fitness = 0.0
        return
    average = total / len(population)
    for genotype in population:
        genotype.fitness = genotype.evaluation / average


def select_best(population: Sequence[Genotype]) -> list[Genotype]:
    """Return the first three genotypes of a population sorted by fitness."""
    if len(population) < ELITE_SELECTION_SIZE:
        msg = (
            f"Selection requires at least {ELITE_SELECTION_SIZE} genotypes, "
            f"got {len(population)}."
        )
        raise InvalidStateError(msg)
    return list(population[:ELITE_SELECTION_SIZE])


def _should_swap(rng: Random, swap_chance: float, legacy: bool) -> bool:
    if legacy:
        # Integer draw against a fractional threshold: only a draw of 0 swaps.
        return rng.randrange(_LEGACY_DRAW_LIMIT) < swap_chance
    return rng.random() < swap_chance


def complete_crossover(
    parent1: Genotype,
    parent2: Genotype,
    swap_chance: float,
    rng: Random,
    *,
    legacy_swap_draw: bool = False,
) -> tuple[Genotype, Genotype]:
    """Create two offspring by swapping each gene with ``swap_chance``."""
    if parent1.parameter_count != parent2.parameter_count:
        msg = "Parents must have the same parameter count."
        raise InvalidArgumentError(msg)

    genes1: list[float] = []
    genes2: list[float] = []
    for gene1, gene2 in zip(parent1, parent2):
        if _should_swap(rng, swap_chance, legacy_swap_draw):
            genes1.append(gene2)
            genes2.append(gene1)
        else:
            genes1.append(gene1)
            genes2.append(gene2)
    return Genotype(genes1), Genotype(genes2)


def random_recombination(
    intermediate: Sequence[Genotype],
    new_population_size: int,
    rng: Random,
    *,
    swap_chance: float = DEFAULT_CROSS_SWAP_PROB,
    legacy_swap_draw: bool = False,
) -> list[Genotype]:
    """Build a new population from random pairs of the intermediate one.

    The best two genotypes are carried over unmodified; the rest are
    crossover offspring of two distinct, randomly chosen parents.
    """
    if len(intermediate) < 2:
        msg = "The intermediate population has to be at least of size 2."
        raise InvalidArgumentError(msg)

    new_population = [intermediate[0], intermediate[1]]
    while len(new_population) < new_population_size:
        first, second = rng.sample(range(len(intermediate)), 2)
        offspring1, offspring2 = complete_crossover(
            intermediate[first],
            intermediate[second],
            swap_chance,
            rng,
            legacy_swap_draw=legacy_swap_draw,
        )
        new_population.append(offspring1)
        if len(new_population) < new_population_size:
            new_population.append(offspring2)
    return new_population


def mutate_genotype(
    genotype: Genotype,
    mutation_prob: float,
    mutation_amount: float,
    rng: Random,
) -> int:
    """Perturb genes in place with probability ``mutation_prob`` each.

    Returns:
        The number of genes that were changed.
    """
    mutated = 0
    for index in range(genotype.parameter_count):
        if rng.random() < mutation_prob:
            genotype[index] += rng.uniform(-mutation_amount, mutation_amount)
            mutated += 1
    return mutated


def mutate_all_but_best_two(
    population: list[Genotype],
    rng: Random,
    *,
    mutation_perc: float = DEFAULT_MUTATION_PERC,
    mutation_prob: float = DEFAULT_MUTATION_PROB,
    mutation_amount: float = DEFAULT_MUTATION_AMOUNT,
) -> None:
    """Mutate every genotype except the two carried-over elites."""
    for genotype in population[2:]:
        if rng.random() < mutation_perc:
            mutate_genotype(genotype, mutation_prob, mutation_amount, rng)


@dataclass(slots=True)
class GeneticOperators:
    """Replaceable strategies driving one generation of the algorithm."""

    initialization: PopulationInitializer
    fitness: FitnessCalculator
    selection: SelectionOperator
    recombination: RecombinationOperator
    mutation: MutationOperator

    @classmethod
    def from_config(cls, config: OperatorConfig | None = None) -> GeneticOperators:
        """Bind the default operators to the values in ``config``."""
        if config is None:
            config = OperatorConfig()
        return cls(
            initialization=partial(
                initialize_population,
                min_value=config.init_param_min,
                max_value=config.init_param_max,
            ),
            fitness=calculate_fitness,
            selection=select_best,
            recombination=partial(
                random_recombination,
                swap_chance=config.crossover_swap_prob,
                legacy_swap_draw=config.legacy_swap_draw,
            ),
            mutation=partial(
                mutate_all_but_best_two,
                mutation_perc=config.mutation_perc,
                mutation_prob=config.mutation_prob,
                mutation_amount=config.mutation_amount,
            ),
        )


__all__ = [
    "DEFAULT_CROSS_SWAP_PROB",
    "DEFAULT_INIT_PARAM_MAX",
    "DEFAULT_INIT_PARAM_MIN",
    "DEFAULT_MUTATION_AMOUNT",
    "DEFAULT_MUTATION_PERC",
    "DEFAULT_MUTATION_PROB",
    "ELITE_SELECTION_SIZE",
    "FitnessCalculator",
    "GeneticOperators",
    "MutationOperator",
    "OperatorConfig",
    "PopulationInitializer",
    "RecombinationOperator",
    "SelectionOperator",
    "calculate_fitness",
    "complete_crossover",
    "initialize_population",
    "mutate_all_but_best_two",
    "mutate_genotype",
    "random_recombination",
    "select_best",
]
