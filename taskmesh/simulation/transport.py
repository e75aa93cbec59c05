"""Ephemeral network formation and the transport collaborator boundary.

The scheduling core only computes reproducible labels for the publisher and
the list of mesh pairs; address assignment, link simulation and traffic are
the transport's business. ``MeshTransport`` is the in-process reference
transport: a ``networkx`` graph of live links with expiry times.
"""

from __future__ import annotations

import itertools
from collections.abc import Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

import networkx as nx

from taskmesh.config.constants import ADDRESS_SEED_RANGE, PORT_SEED_MAX, PORT_SEED_MIN
from taskmesh.domain.agent import AgentHandle
from taskmesh.domain.mobility import Vector

if TYPE_CHECKING:
    from taskmesh.simulation.events import EventQueue


class Transport(Protocol):
    def assign_subnet(self, seed: int) -> str: ...

    def create_link(self, a: AgentHandle, b: AgentHandle) -> None: ...

    def install_exchange(self, a: AgentHandle, b: AgentHandle, duration: float) -> None: ...


def _label_hash(position: Vector, agent_id: int) -> int:
    # Multiply-add over centi-unit coordinates; reproducible, not cryptographic.
    x = int(round(position[0] * 100))
    y = int(round(position[1] * 100))
    return abs((x * 73_856_093 + y) * 19_349_663 + agent_id * 83_492_791)


def address_seed(position: Vector, agent_id: int) -> int:
    """Deterministic pseudo-address seed in ``[0, ADDRESS_SEED_RANGE)``."""
    return _label_hash(position, agent_id) % ADDRESS_SEED_RANGE


def port_seed(position: Vector, agent_id: int) -> int:
    """Deterministic port seed in ``[PORT_SEED_MIN, PORT_SEED_MAX]``."""
    span = PORT_SEED_MAX - PORT_SEED_MIN + 1
    return PORT_SEED_MIN + (_label_hash(position, agent_id) * 31 + 7) % span


def mesh_pairs(members: Sequence[AgentHandle]) -> list[tuple[AgentHandle, AgentHandle]]:
    """All unordered pairs of a full mesh, in member order."""
    return list(itertools.combinations(members, 2))


@dataclass(frozen=True)
class GroupHandoff:
    """What the core hands to the transport for one matched task."""

    publisher: AgentHandle
    address_seed: int
    port_seed: int
    subnet: str
    pairs: tuple[tuple[AgentHandle, AgentHandle], ...]
    duration: float


def form_group(
    transport: Transport,
    publisher: AgentHandle,
    publisher_position: Vector,
    members: Sequence[AgentHandle],
    duration: float,
) -> GroupHandoff:
    """Form a temporary full mesh among ``publisher`` and ``members``.

    Transport errors propagate unchanged.
    """
    addr = address_seed(publisher_position, publisher)
    port = port_seed(publisher_position, publisher)
    subnet = transport.assign_subnet(addr)
    pairs = mesh_pairs([publisher, *members])
    for a, b in pairs:
        transport.create_link(a, b)
        transport.install_exchange(a, b, duration)
    return GroupHandoff(
        publisher=publisher,
        address_seed=addr,
        port_seed=port,
        subnet=subnet,
        pairs=tuple(pairs),
        duration=duration,
    )


class MeshTransport:
    """Reference transport keeping live links in a ``networkx.Graph``.

    Edges carry ``expires_at``; a link recreated before expiry is extended.
    """

    def __init__(self, clock: EventQueue) -> None:
        self._clock = clock
        self.graph = nx.Graph()
        self.subnets: set[str] = set()
        self.links_created = 0
        self.exchanges_installed = 0

    def assign_subnet(self, seed: int) -> str:
        subnet = f"10.{(seed >> 8) & 0xFF}.{seed & 0xFF}.0/24"
        self.subnets.add(subnet)
        return subnet

    def create_link(self, a: AgentHandle, b: AgentHandle) -> None:
        if a == b:
            raise ValueError("cannot link an agent to itself")
        if not self.graph.has_edge(a, b):
            self.graph.add_edge(a, b, expires_at=self._now())
        self.links_created += 1

    def install_exchange(self, a: AgentHandle, b: AgentHandle, duration: float) -> None:
        if not self.graph.has_edge(a, b):
            raise KeyError(f"no link between {a} and {b}")
        if duration <= 0.0:
            raise ValueError("exchange duration must be > 0")
        edge = self.graph.edges[a, b]
        edge["expires_at"] = max(edge["expires_at"], self._now() + duration)
        self.exchanges_installed += 1

    def prune_expired(self) -> int:
        """Drop links whose exchange has ended; return how many were removed."""
        now = self._now()
        stale = [(a, b) for a, b, exp in self.graph.edges(data="expires_at") if exp <= now]
        self.graph.remove_edges_from(stale)
        return len(stale)

    def active_groups(self) -> list[set[AgentHandle]]:
        """Connected components of the live-link graph with at least one link."""
        self.prune_expired()
        return [c for c in nx.connected_components(self.graph) if len(c) > 1]

    def _now(self) -> float:
        return self._clock.now
