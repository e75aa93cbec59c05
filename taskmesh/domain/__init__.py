"""Domain layer: agents, mobility, neighbor discovery, and resource matching."""

from taskmesh.domain.agent import (
    Agent,
    AgentHandle,
    Capacity,
    Fleet,
    Task,
    generate_task_queue,
)
from taskmesh.domain.matcher import MatchResult, match_resources, select_subset
from taskmesh.domain.mobility import LevyFlightMobility, MobilityState, reflect_axis
from taskmesh.domain.neighbors import distance, neighbors_within

__all__ = [
    "Agent",
    "AgentHandle",
    "Capacity",
    "Fleet",
    "LevyFlightMobility",
    "MatchResult",
    "MobilityState",
    "Task",
    "distance",
    "generate_task_queue",
    "match_resources",
    "neighbors_within",
    "reflect_axis",
    "select_subset",
]
