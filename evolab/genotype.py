"""Flat real-valued genotype encoding the weights of one network."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from random import Random

from .errors import InvalidArgumentError


class Genotype:
    """Ordered parameter vector plus the scores assigned each generation.

    The gene order is the decode order into network weights, so the length
    is fixed at construction and genes are only ever overwritten in place.
    """

    __slots__ = ("_genes", "evaluation", "fitness")

    def __init__(self, genes: Iterable[float]) -> None:
        self._genes: list[float] = [float(value) for value in genes]
        self.evaluation = 0.0
        self.fitness = 0.0

    def __repr__(self) -> str:
        return (
            f"Genotype(parameter_count={len(self._genes)}, "
            f"evaluation={self.evaluation!r}, fitness={self.fitness!r})"
        )

    @property
    def parameter_count(self) -> int:
        """Return the number of genes stored in this genotype."""
        return len(self._genes)

    @property
    def genes(self) -> tuple[float, ...]:
        """Return a snapshot of the gene vector."""
        return tuple(self._genes)

    def __len__(self) -> int:
        return len(self._genes)

    def __getitem__(self, index: int) -> float:
        return self._genes[index]

    def __setitem__(self, index: int, value: float) -> None:
        if isinstance(index, slice):
            msg = "Genotype genes can only be assigned one index at a time."
            raise TypeError(msg)
        self._genes[index] = float(value)

    def __iter__(self) -> Iterator[float]:
        return iter(self._genes)

    def set_random_parameters(
        self,
        min_value: float,
        max_value: float,
        rng: Random,
    ) -> None:
        """Overwrite every gene with a uniform draw from ``[min_value, max_value)``."""
        if min_value > max_value:
            msg = "Minimum value may not exceed maximum value."
            raise InvalidArgumentError(msg)
        span = max_value - min_value
        for index in range(len(self._genes)):
            self._genes[index] = rng.random() * span + min_value

    def copy(self) -> Genotype:
        """Return an independent copy including the current scores."""
        clone = Genotype(self._genes)
        clone.evaluation = self.evaluation
        clone.fitness = self.fitness
        return clone


def compare_fitness_descending(left: Genotype, right: Genotype) -> int:
    """Order genotypes so that higher fitness comes first."""
    if right.fitness < left.fitness:
        return -1
    if right.fitness > left.fitness:
        return 1
    return 0


def fitness_descending_key(genotype: Genotype) -> float:
    """Sort key equivalent to :func:`compare_fitness_descending`."""
    return -genotype.fitness


__all__ = ["Genotype", "compare_fitness_descending", "fitness_descending_key"]
