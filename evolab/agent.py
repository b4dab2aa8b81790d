"""Binding of a genotype to its decoded network and alive/dead lifecycle."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence

from .errors import InvalidArgumentError
from .genotype import Genotype, compare_fitness_descending
from .network import NeuralNetwork

DeathListener = Callable[["Agent"], None]


def decode_genotype(network: NeuralNetwork, genes: Iterable[float]) -> None:
    """Write ``genes`` into the network weights.

    Genes are consumed layer by layer; within a layer row by row (the bias
    row last) and column by column within a row.
    """
    remaining = iter(genes)
    for layer in network.layers:
        for row in layer.weights:
            for column in range(len(row)):
                try:
                    row[column] = next(remaining)
                except StopIteration as error:
                    msg = (
                        f"Expected {network.weight_count} genes for topology "
                        f"{network.topology!r}."
                    )
                    raise InvalidArgumentError(msg) from error
    if next(remaining, None) is not None:
        msg = f"More than {network.weight_count} genes supplied for decoding."
        raise InvalidArgumentError(msg)


class Agent:
    """A genotype together with the network decoded from it.

    Death listeners fire once per live-to-dead transition, synchronously and
    in subscription order.
    """

    def __init__(self, genotype: Genotype, topology: Sequence[int]) -> None:
        network = NeuralNetwork(topology)
        if network.weight_count != genotype.parameter_count:
            msg = (
                "The genotype's parameter count "
                f"({genotype.parameter_count}) must match the topology's "
                f"weight count ({network.weight_count})."
            )
            raise InvalidArgumentError(msg)
        decode_genotype(network, genotype)
        self._genotype = genotype
        self._network = network
        self._is_alive = False
        self._listeners: list[DeathListener] = []

    @property
    def genotype(self) -> Genotype:
        return self._genotype

    @property
    def network(self) -> NeuralNetwork:
        return self._network

    @property
    def is_alive(self) -> bool:
        return self._is_alive

    def subscribe(self, listener: DeathListener) -> None:
        """Register ``listener`` to be called when this agent dies."""
        self._listeners.append(listener)

    def unsubscribe(self, listener: DeathListener) -> None:
        """Remove a previously registered death listener, if present."""
        try:
            self._listeners.remove(listener)
        except ValueError:
            return

    def reset(self) -> None:
        """Revive the agent and clear the scores of its genotype."""
        self._genotype.evaluation = 0.0
        self._genotype.fitness = 0.0
        self._is_alive = True

    def kill(self) -> None:
        """Mark the agent dead, notifying listeners if it was alive."""
        if not self._is_alive:
            return
        self._is_alive = False
        for listener in list(self._listeners):
            listener(self)

    def process_inputs(self, inputs: Sequence[float]) -> list[float]:
        return self._network.process_inputs(inputs)

    def compare_to(self, other: Agent) -> int:
        return compare_fitness_descending(self._genotype, other._genotype)


__all__ = ["Agent", "DeathListener", "decode_genotype"]
