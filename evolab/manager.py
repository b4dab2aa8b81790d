"""Agent bookkeeping between the genetic algorithm and a simulation host."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from random import Random
from typing import Protocol

from .agent import Agent
from .algorithm import GeneticAlgorithm
from .genotype import Genotype
from .network import count_weights
from .operators import GeneticOperators

GenerationListener = Callable[[int, tuple[Agent, ...]], None]
AllDiedListener = Callable[[], None]


class AgentHost(Protocol):
    """Simulation that drives agents until each of them is killed."""

    def restart(self, agents: Sequence[Agent]) -> None:
        """Take over ``agents``, revive them and begin a new evaluation run."""


class EvolutionManager:
    """Creates one agent per genotype and reports back once all have died.

    Generation listeners see the evaluated agents before the algorithm
    breeds the next population; the scores are reset by the host when the
    next generation starts.
    """

    def __init__(
        self,
        topology: Sequence[int],
        population_size: int,
        host: AgentHost,
        *,
        operators: GeneticOperators | None = None,
        rng: Random | None = None,
        seed: int | None = None,
    ) -> None:
        self.topology = tuple(topology)
        self.host = host
        self.algorithm = GeneticAlgorithm(
            count_weights(self.topology),
            population_size,
            evaluation=self._start_evaluation,
            operators=operators,
            rng=rng,
            seed=seed,
        )
        self._agents: list[Agent] = []
        self._generation_listeners: list[GenerationListener] = []
        self._all_died_listeners: list[AllDiedListener] = []

    @property
    def agents(self) -> tuple[Agent, ...]:
        return tuple(self._agents)

    @property
    def agents_alive_count(self) -> int:
        return sum(1 for agent in self._agents if agent.is_alive)

    @property
    def generation_count(self) -> int:
        return self.algorithm.generation_count

    def subscribe_generation(self, listener: GenerationListener) -> None:
        """Call ``listener(generation, agents)`` when a generation is evaluated."""
        self._generation_listeners.append(listener)

    def subscribe_all_died(self, listener: AllDiedListener) -> None:
        """Call ``listener()`` whenever the last agent of a generation dies."""
        self._all_died_listeners.append(listener)

    def start_evolution(self) -> None:
        """Create the first generation of agents and hand it to the host."""
        self.algorithm.start()

    def _start_evaluation(self, population: Sequence[Genotype]) -> None:
        for agent in self._agents:
            agent.unsubscribe(self._on_agent_died)
        self._agents = [Agent(genotype, self.topology) for genotype in population]
        for agent in self._agents:
            agent.subscribe(self._on_agent_died)
        self.host.restart(self.agents)

    def _on_agent_died(self, agent: Agent) -> None:
        if self.agents_alive_count == 0:
            self._finish_generation()

    def _finish_generation(self) -> None:
        generation = self.algorithm.generation_count
        agents = self.agents
        for listener in list(self._generation_listeners):
            listener(generation, agents)
        for listener in list(self._all_died_listeners):
            listener()
        self.algorithm.evaluation_finished()


__all__ = ["AgentHost", "EvolutionManager", "GenerationListener"]
