"""Spatial neighbor query over the candidate pool."""

from __future__ import annotations

import math
from collections.abc import Iterable

from taskmesh.domain.agent import Agent
from taskmesh.domain.mobility import Vector


def distance(a: Vector, b: Vector) -> float:
    return math.hypot(a[0] - b[0], a[1] - b[1])


def neighbors_within(
    publisher: Agent, pool: Iterable[Agent], radius: float, now: float
) -> list[Agent]:
    """Return pool members within Euclidean ``radius`` of ``publisher`` at ``now``.

    Linear scan; pool order is preserved and the publisher itself is never
    returned. Positions are sampled fresh on every call.
    """
    # TODO: grid or k-d tree index once fleets grow past a few hundred agents
    origin = publisher.position(now)
    result: list[Agent] = []
    for agent in pool:
        if agent.agent_id == publisher.agent_id:
            continue
        if distance(origin, agent.position(now)) <= radius:
            result.append(agent)
    return result
