from __future__ import annotations

import pytest
from evolab.agent import Agent, decode_genotype
from evolab.errors import InvalidArgumentError
from evolab.genotype import Genotype
from evolab.network import NeuralNetwork


class DeathRecorder:
    def __init__(self) -> None:
        self.deaths: list[Agent] = []

    def __call__(self, agent: Agent) -> None:
        self.deaths.append(agent)


def _agent(topology: list[int] | None = None) -> Agent:
    topology = topology or [2, 3, 1]
    genotype = Genotype([0.1] * NeuralNetwork(topology).weight_count)
    return Agent(genotype, topology)


def test_agent_accepts_matching_parameter_count() -> None:
    agent = Agent(Genotype([0.0] * 13), [2, 3, 1])
    assert agent.network.weight_count == 13


def test_agent_rejects_parameter_count_mismatch() -> None:
    with pytest.raises(InvalidArgumentError):
        Agent(Genotype([0.0] * 12), [2, 3, 1])


def test_decode_assigns_input_weight_then_bias() -> None:
    agent = Agent(Genotype([0.5, -0.25]), [1, 1])
    layer = agent.network.layers[0]

    assert layer.weights[0][0] == 0.5
    assert layer.weights[1][0] == -0.25


def test_decode_is_layer_major_then_row_major() -> None:
    genes = [float(value) for value in range(9)]
    agent = Agent(Genotype(genes), [2, 2, 1])
    first, second = agent.network.layers

    assert first.weights == ([0.0, 1.0], [2.0, 3.0], [4.0, 5.0])
    assert second.weights == ([6.0], [7.0], [8.0])


def test_decode_genotype_rejects_wrong_gene_counts() -> None:
    network = NeuralNetwork([1, 1])
    with pytest.raises(InvalidArgumentError):
        decode_genotype(network, [1.0])
    with pytest.raises(InvalidArgumentError):
        decode_genotype(network, [1.0, 2.0, 3.0])


def test_agent_shares_genotype_with_population() -> None:
    genotype = Genotype([0.0, 0.0])
    agent = Agent(genotype, [1, 1])
    assert agent.genotype is genotype


def test_agent_forward_pass_uses_decoded_weights() -> None:
    agent = Agent(Genotype([2.0, 0.5]), [1, 1])
    assert agent.process_inputs([1.0]) == [pytest.approx(2.5 / 3.5)]


def test_new_agent_is_not_alive_and_kill_does_not_notify() -> None:
    agent = _agent()
    recorder = DeathRecorder()
    agent.subscribe(recorder)

    assert agent.is_alive is False
    agent.kill()
    assert recorder.deaths == []


def test_kill_twice_notifies_once() -> None:
    agent = _agent()
    recorder = DeathRecorder()
    agent.subscribe(recorder)
    agent.reset()

    agent.kill()
    agent.kill()

    assert recorder.deaths == [agent]
    assert agent.is_alive is False


def test_reset_revives_and_clears_scores_without_notifying() -> None:
    agent = _agent()
    recorder = DeathRecorder()
    agent.subscribe(recorder)
    agent.reset()
    agent.kill()
    agent.genotype.evaluation = 7.0
    agent.genotype.fitness = 1.2

    agent.reset()
    agent.reset()

    assert agent.is_alive is True
    assert agent.genotype.evaluation == 0.0
    assert agent.genotype.fitness == 0.0
    assert len(recorder.deaths) == 1


def test_every_death_after_revival_notifies() -> None:
    agent = _agent()
    recorder = DeathRecorder()
    agent.subscribe(recorder)

    for _ in range(3):
        agent.reset()
        agent.kill()

    assert len(recorder.deaths) == 3


def test_listeners_are_called_in_subscription_order() -> None:
    agent = _agent()
    calls: list[str] = []
    agent.subscribe(lambda _agent: calls.append("first"))
    agent.subscribe(lambda _agent: calls.append("second"))

    agent.reset()
    agent.kill()

    assert calls == ["first", "second"]


def test_unsubscribe_stops_notifications() -> None:
    agent = _agent()
    recorder = DeathRecorder()
    agent.subscribe(recorder)
    agent.unsubscribe(recorder)
    agent.unsubscribe(recorder)

    agent.reset()
    agent.kill()

    assert recorder.deaths == []


def test_compare_to_orders_by_descending_fitness() -> None:
    better = _agent()
    worse = _agent()
    better.genotype.fitness = 2.0
    worse.genotype.fitness = 1.0

    assert better.compare_to(worse) == -1
    assert worse.compare_to(better) == 1
    assert better.compare_to(better) == 0
