"""Generational genetic algorithm driven by an external evaluation callback."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from enum import Enum
from random import Random

from .errors import InvalidArgumentError, InvalidStateError
from .genotype import Genotype, fitness_descending_key
from .operators import GeneticOperators

EvaluationOperator = Callable[[Sequence[Genotype]], None]


class AlgorithmState(str, Enum):
    """Lifecycle states of :class:`GeneticAlgorithm`."""

    INITIALIZED = "initialized"
    AWAITING_EVALUATION = "awaiting_evaluation"
    GENERATION_COMPLETE = "generation_complete"


class GeneticAlgorithm:
    """Owns the population and breeds a new one after every evaluation.

    ``start`` hands the population to ``evaluation``. Whoever scores the
    genotypes calls :meth:`evaluation_finished` exactly once per generation,
    which breeds the next population and dispatches it for evaluation again.
    The loop has no terminal state; callers stop by no longer reporting back.
    Without an evaluation operator a bred generation stays in
    ``GENERATION_COMPLETE`` until :meth:`start` dispatches it.
    """

    def __init__(
        self,
        genotype_param_count: int,
        population_size: int,
        *,
        evaluation: EvaluationOperator | None = None,
        operators: GeneticOperators | None = None,
        rng: Random | None = None,
        seed: int | None = None,
    ) -> None:
        if genotype_param_count < 0:
            msg = "genotype_param_count must be >= 0."
            raise InvalidArgumentError(msg)
        if population_size <= 0:
            msg = "population_size must be positive."
            raise InvalidArgumentError(msg)

        self.evaluation = evaluation
        self.operators = operators or GeneticOperators.from_config()
        self.rng = rng if rng is not None else Random(seed)
        self._population_size = population_size
        self._population = [
            Genotype([0.0] * genotype_param_count) for _ in range(population_size)
        ]
        self.operators.initialization(self._population, self.rng)
        self._generation_count = 1
        self._state = AlgorithmState.INITIALIZED

    @property
    def population(self) -> tuple[Genotype, ...]:
        return tuple(self._population)

    @property
    def population_size(self) -> int:
        return self._population_size

    @property
    def generation_count(self) -> int:
        return self._generation_count

    @property
    def state(self) -> AlgorithmState:
        return self._state

    def start(self) -> None:
        """Dispatch the current population for evaluation."""
        if self._state is AlgorithmState.AWAITING_EVALUATION:
            msg = f"Cannot start a genetic algorithm in state {self._state.value!r}."
            raise InvalidStateError(msg)
        self._dispatch()

    def evaluation_finished(self) -> None:
        """Breed the next generation from the evaluated population."""
        if self._state is not AlgorithmState.AWAITING_EVALUATION:
            msg = (
                "evaluation_finished called while not awaiting evaluation "
                f"(state {self._state.value!r})."
            )
            raise InvalidStateError(msg)

        population = self._population
        self.operators.fitness(population)
        population.sort(key=fitness_descending_key)

        intermediate = self.operators.selection(population)
        new_population = self.operators.recombination(
            intermediate,
            self._population_size,
            self.rng,
        )
        self.operators.mutation(new_population, self.rng)

        self._population = new_population
        self._generation_count += 1
        self._state = AlgorithmState.GENERATION_COMPLETE
        if self.evaluation is not None:
            self._dispatch()

    def _dispatch(self) -> None:
        if self.evaluation is None:
            msg = "No evaluation operator has been set."
            raise InvalidStateError(msg)
        self._state = AlgorithmState.AWAITING_EVALUATION
        self.evaluation(self.population)


__all__ = ["AlgorithmState", "EvaluationOperator", "GeneticAlgorithm"]
