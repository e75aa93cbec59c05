"""Simulation engine: event queue, publish cycle, transport, and seeded runs."""

from taskmesh.simulation.engine import build_scenario, run_seed_batch, run_simulation
from taskmesh.simulation.events import EventQueue
from taskmesh.simulation.publisher import PublishCycle, PublishState
from taskmesh.simulation.transport import (
    GroupHandoff,
    MeshTransport,
    Transport,
    address_seed,
    form_group,
    port_seed,
)

__all__ = [
    "EventQueue",
    "GroupHandoff",
    "MeshTransport",
    "PublishCycle",
    "PublishState",
    "Transport",
    "address_seed",
    "build_scenario",
    "form_group",
    "port_seed",
    "run_seed_batch",
    "run_simulation",
]
