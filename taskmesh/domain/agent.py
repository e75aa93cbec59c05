"""Agents, tasks and the fleet arena that owns them.

Callbacks never hold live references to agents or queues; they capture an
integer ``AgentHandle`` and resolve it through ``Fleet.get`` at fire time.
"""

from __future__ import annotations

from collections import deque
from collections.abc import Iterator
from dataclasses import dataclass, field
from random import Random
from typing import TYPE_CHECKING

from taskmesh.config.constants import PUBLISHER_LAYER, WORKER_LAYER

if TYPE_CHECKING:
    from taskmesh.config.types import TaskGenConfig
    from taskmesh.domain.mobility import LevyFlightMobility, Vector

AgentHandle = int


def _check_positive_int(value: object, label: str) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{label} must be an integer, got {value!r}")
    if value < 1:
        raise ValueError(f"{label} must be >= 1")


@dataclass(frozen=True)
class Capacity:
    """Fixed compute capacity of one agent."""

    threads: int
    ram: int

    def __post_init__(self) -> None:
        _check_positive_int(self.threads, "threads")
        _check_positive_int(self.ram, "ram")


@dataclass
class Task:
    """A unit of work with a thread/RAM budget and a bounded duration."""

    task_id: int
    threads: int
    ram: int
    duration: float
    created_at: float = 0.0
    published_at: float | None = None
    """Time of the first publish attempt; set once."""

    def __post_init__(self) -> None:
        _check_positive_int(self.threads, "task threads")
        _check_positive_int(self.ram, "task ram")
        if self.duration <= 0.0:
            raise ValueError("task duration must be > 0")
        if self.created_at < 0.0:
            raise ValueError("task created_at must be >= 0")


@dataclass
class Agent:
    """A mobile agent with fixed capacity and a privately owned task queue."""

    agent_id: AgentHandle
    layer: int
    capacity: Capacity
    mobility: LevyFlightMobility
    queue: deque[Task] = field(default_factory=deque)

    def position(self, now: float) -> Vector:
        return self.mobility.sample(now)


class Fleet:
    """Arena of agents indexed by handle."""

    def __init__(self) -> None:
        self._agents: list[Agent] = []

    def __len__(self) -> int:
        return len(self._agents)

    def __iter__(self) -> Iterator[Agent]:
        return iter(self._agents)

    def add(
        self,
        layer: int,
        capacity: Capacity,
        mobility: LevyFlightMobility,
        tasks: list[Task] | None = None,
    ) -> AgentHandle:
        if layer not in (WORKER_LAYER, PUBLISHER_LAYER):
            raise ValueError(f"layer must be {WORKER_LAYER} or {PUBLISHER_LAYER}")
        handle = len(self._agents)
        self._agents.append(
            Agent(
                agent_id=handle,
                layer=layer,
                capacity=capacity,
                mobility=mobility,
                queue=deque(tasks or ()),
            )
        )
        return handle

    def get(self, handle: AgentHandle) -> Agent:
        return self._agents[handle]

    def others(self, handle: AgentHandle) -> list[Agent]:
        """Candidate pool for ``handle``: every other agent in the fleet."""
        return [agent for agent in self._agents if agent.agent_id != handle]

    def queued_tasks(self) -> int:
        return sum(len(agent.queue) for agent in self._agents)


def generate_task_queue(
    config: TaskGenConfig, rng: Random, first_task_id: int = 0, created_at: float = 0.0
) -> list[Task]:
    """Draw a random queue of tasks; ids are consecutive from ``first_task_id``."""
    n_tasks = rng.randint(config.tasks_min, config.tasks_max)
    return [
        Task(
            task_id=first_task_id + i,
            threads=rng.randint(config.threads_min, config.threads_max),
            ram=rng.randint(config.ram_min, config.ram_max),
            duration=float(rng.randint(config.duration_min, config.duration_max)),
            created_at=created_at,
        )
        for i in range(n_tasks)
    ]
