"""Per-agent publish cycle: dequeue, query neighbors, match, form group, re-arm.

Each firing walks ``IDLE -> QUERYING -> MATCHING -> {MATCHED, UNMATCHED}``
and then re-arms itself after ``base_interval`` plus exponential jitter.
Firings with an empty queue skip straight to re-arming. There is no stop
signal besides the simulation horizon.

Retry policy: an unmatched head task is popped and appended to the tail, so
other pending tasks get a turn before it is tried again.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from enum import Enum
from random import Random

from taskmesh.config.types import PublishConfig
from taskmesh.domain.agent import Agent, AgentHandle, Fleet
from taskmesh.domain.matcher import match_resources
from taskmesh.domain.neighbors import neighbors_within
from taskmesh.io.event_log import EventLog
from taskmesh.simulation.events import EventQueue
from taskmesh.simulation.transport import (
    GroupHandoff,
    Transport,
    address_seed,
    form_group,
    port_seed,
)

logger = logging.getLogger(__name__)

PoolFn = Callable[[AgentHandle], list[Agent]]


class PublishState(Enum):
    IDLE = "idle"
    QUERYING = "querying"
    MATCHING = "matching"
    MATCHED = "matched"
    UNMATCHED = "unmatched"


class PublishCycle:
    """Drives the publish state machine for every registered publisher."""

    def __init__(
        self,
        fleet: Fleet,
        scheduler: EventQueue,
        transport: Transport,
        event_log: EventLog,
        config: PublishConfig,
        rng: Random,
        pool: PoolFn | None = None,
    ) -> None:
        self.fleet = fleet
        self.scheduler = scheduler
        self.transport = transport
        self.event_log = event_log
        self.config = config
        self._rng = rng
        self._pool = pool if pool is not None else fleet.others
        self.states: dict[AgentHandle, PublishState] = {}
        self.last_handoff: GroupHandoff | None = None
        self.attempts = 0
        self.matched = 0
        self.unmatched = 0

    def start(self, handle: AgentHandle, at: float | None = None) -> None:
        """Arm the first firing for ``handle`` (default ``first_publish_at``)."""
        first = self.config.first_publish_at if at is None else at
        self.states[handle] = PublishState.IDLE
        self.scheduler.schedule_at(max(first, self.scheduler.now), self.fire, handle)

    def next_delay(self) -> float:
        """Base interval plus Exp(mean=jitter_mean) jitter."""
        if self.config.jitter_mean == 0.0:
            return self.config.base_interval
        return self.config.base_interval + self._rng.expovariate(1.0 / self.config.jitter_mean)

    def fire(self, handle: AgentHandle) -> PublishState:
        """Run one publish cycle for ``handle`` and re-arm the next one."""
        try:
            outcome = self._publish(handle)
        except Exception:
            # Collaborator failures propagate with the agent left idle.
            self.states[handle] = PublishState.IDLE
            raise
        self.scheduler.schedule(self.next_delay(), self.fire, handle)
        self.states[handle] = outcome
        return outcome

    def _publish(self, handle: AgentHandle) -> PublishState:
        agent = self.fleet.get(handle)
        now = self.scheduler.now
        if not agent.queue:
            return PublishState.IDLE

        task = agent.queue[0]
        if task.published_at is None:
            task.published_at = now
        self.attempts += 1

        self.states[handle] = PublishState.QUERYING
        position = agent.position(now)
        neighbors = neighbors_within(agent, self._pool(handle), self.config.neighbor_radius, now)
        addr = address_seed(position, handle)
        port = port_seed(position, handle)
        for neighbor in neighbors:
            self.event_log.candidate(handle, task.task_id, addr, port, neighbor.agent_id)

        self.states[handle] = PublishState.MATCHING
        result = match_resources(task.threads, task.ram, neighbors)

        if not result.matched:
            agent.queue.append(agent.queue.popleft())
            self.unmatched += 1
            logger.debug(
                "task %d of agent %d unmatched at t=%.3f (%d neighbors)",
                task.task_id,
                handle,
                now,
                len(neighbors),
            )
            return PublishState.UNMATCHED

        handoff = form_group(
            self.transport,
            handle,
            position,
            [member.agent_id for member in result.selected],
            task.duration,
        )
        agent.queue.popleft()
        self.last_handoff = handoff
        for member_i, member_j in handoff.pairs:
            self.event_log.job(
                handle, task.task_id, handoff.address_seed, handoff.port_seed, member_i, member_j
            )
        self.event_log.task(
            layer=agent.layer,
            publisher_id=handle,
            task_id=task.task_id,
            ram=task.ram,
            threads=task.threads,
            duration=task.duration,
            publish_time=task.published_at,
            match_start_time=now,
            match_end_time=now + task.duration,
            covered_ram=result.covered_ram,
            covered_threads=result.covered_threads,
        )
        self.matched += 1
        return PublishState.MATCHED
