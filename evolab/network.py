"""Fixed-topology fully connected feed-forward networks."""

from __future__ import annotations

from collections.abc import Sequence

from .errors import DimensionMismatchError, InvalidArgumentError


def softsign(x: float) -> float:
    return x / (1.0 + abs(x))


def _is_size(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


def _validate_topology(topology: Sequence[int]) -> tuple[int, ...]:
    sizes = tuple(topology)
    if len(sizes) < 2:
        msg = "Topology must contain at least an input and an output layer."
        raise InvalidArgumentError(msg)
    if not all(_is_size(size) for size in sizes):
        msg = f"Layer sizes must be non-negative integers, got {sizes!r}."
        raise InvalidArgumentError(msg)
    return sizes


def count_weights(topology: Sequence[int]) -> int:
    """Return the number of weights (bias weights included) of a topology."""
    sizes = _validate_topology(topology)
    return sum(
        (neurons + 1) * outputs for neurons, outputs in zip(sizes, sizes[1:])
    )


class NeuralLayer:
    """Weight matrix mapping ``neuron_count`` inputs plus a bias to outputs.

    ``weights[i][j]`` connects input neuron ``i`` to output ``j``; row
    ``neuron_count`` holds the bias weights. The matrix shape is fixed at
    construction; only individual cells are written.
    """

    __slots__ = ("_neuron_count", "_output_count", "_weights")

    def __init__(self, neuron_count: int, output_count: int) -> None:
        if not (_is_size(neuron_count) and _is_size(output_count)):
            msg = "neuron_count and output_count must be non-negative integers."
            raise InvalidArgumentError(msg)
        self._neuron_count = neuron_count
        self._output_count = output_count
        self._weights: tuple[list[float], ...] = tuple(
            [0.0] * output_count for _ in range(neuron_count + 1)
        )

    @property
    def neuron_count(self) -> int:
        return self._neuron_count

    @property
    def output_count(self) -> int:
        return self._output_count

    @property
    def weights(self) -> tuple[list[float], ...]:
        """Return the weight rows, the bias row last."""
        return self._weights

    def process_inputs(self, inputs: Sequence[float]) -> list[float]:
        """Compute the softsign-activated outputs for ``inputs``."""
        if len(inputs) != self._neuron_count:
            msg = (
                f"Expected {self._neuron_count} inputs "
                f"but received {len(inputs)}."
            )
            raise DimensionMismatchError(msg)

        biased = [*inputs, 1.0]
        outputs: list[float] = []
        for column in range(self._output_count):
            total = 0.0
            for row, value in enumerate(biased):
                total += value * self._weights[row][column]
            outputs.append(softsign(total))
        return outputs


class NeuralNetwork:
    """Sequence of :class:`NeuralLayer` built from a topology."""

    __slots__ = ("_topology", "_layers", "_weight_count")

    def __init__(self, topology: Sequence[int]) -> None:
        sizes = _validate_topology(topology)
        self._topology = sizes
        self._weight_count = count_weights(sizes)
        self._layers = tuple(
            NeuralLayer(neurons, outputs)
            for neurons, outputs in zip(sizes, sizes[1:])
        )

    @property
    def topology(self) -> tuple[int, ...]:
        return self._topology

    @property
    def layers(self) -> tuple[NeuralLayer, ...]:
        return self._layers

    @property
    def weight_count(self) -> int:
        return self._weight_count

    def process_inputs(self, inputs: Sequence[float]) -> list[float]:
        """Propagate ``inputs`` through every layer and return the final outputs."""
        outputs = list(inputs)
        for layer in self._layers:
            outputs = layer.process_inputs(outputs)
        return outputs


__all__ = [
    "NeuralLayer",
    "NeuralNetwork",
    "count_weights",
    "softsign",
]
