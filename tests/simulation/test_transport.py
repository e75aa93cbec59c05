"""Tests for taskmesh.simulation.transport."""

from __future__ import annotations

import pytest

from taskmesh.config.constants import ADDRESS_SEED_RANGE, PORT_SEED_MAX, PORT_SEED_MIN
from taskmesh.simulation.events import EventQueue
from taskmesh.simulation.transport import (
    MeshTransport,
    address_seed,
    form_group,
    mesh_pairs,
    port_seed,
)


class TestSeeds:
    def test_seeds_in_range(self) -> None:
        for i in range(200):
            pos = (i * 0.731 % 100.0, i * 1.377 % 100.0)
            assert 0 <= address_seed(pos, i) < ADDRESS_SEED_RANGE
            assert PORT_SEED_MIN <= port_seed(pos, i) <= PORT_SEED_MAX

    def test_seeds_are_deterministic(self) -> None:
        assert address_seed((12.5, 40.25), 3) == address_seed((12.5, 40.25), 3)
        assert port_seed((12.5, 40.25), 3) == port_seed((12.5, 40.25), 3)

    def test_seed_depends_on_agent(self) -> None:
        seeds = {address_seed((10.0, 10.0), agent_id) for agent_id in range(20)}
        assert len(seeds) > 1


class TestMeshPairs:
    def test_full_mesh(self) -> None:
        assert mesh_pairs([0, 4, 2]) == [(0, 4), (0, 2), (4, 2)]

    def test_single_member_has_no_pairs(self) -> None:
        assert mesh_pairs([7]) == []


class TestFormGroup:
    def test_links_every_pair(self) -> None:
        transport = MeshTransport(EventQueue())
        handoff = form_group(transport, 0, (50.0, 50.0), [3, 5], 4.0)
        assert handoff.pairs == ((0, 3), (0, 5), (3, 5))
        assert transport.graph.number_of_edges() == 3
        assert transport.links_created == 3
        assert transport.exchanges_installed == 3
        assert transport.subnets == {handoff.subnet}
        assert handoff.address_seed == address_seed((50.0, 50.0), 0)
        assert handoff.port_seed == port_seed((50.0, 50.0), 0)

    def test_subnet_format(self) -> None:
        transport = MeshTransport(EventQueue())
        assert transport.assign_subnet(0x1234) == "10.18.52.0/24"


class TestMeshTransport:
    def test_self_link_rejected(self) -> None:
        with pytest.raises(ValueError, match="itself"):
            MeshTransport(EventQueue()).create_link(1, 1)

    def test_exchange_requires_link(self) -> None:
        with pytest.raises(KeyError):
            MeshTransport(EventQueue()).install_exchange(0, 1, 1.0)

    def test_exchange_duration_must_be_positive(self) -> None:
        transport = MeshTransport(EventQueue())
        transport.create_link(0, 1)
        with pytest.raises(ValueError, match="duration"):
            transport.install_exchange(0, 1, 0.0)

    def test_links_expire_after_duration(self) -> None:
        clock = EventQueue()
        transport = MeshTransport(clock)
        form_group(transport, 0, (1.0, 1.0), [1, 2], 2.0)
        clock.run(until=1.0)
        assert transport.active_groups() == [{0, 1, 2}]
        clock.run(until=2.0)
        assert transport.active_groups() == []
        assert transport.graph.number_of_edges() == 0

    def test_relink_extends_expiry(self) -> None:
        clock = EventQueue()
        transport = MeshTransport(clock)
        form_group(transport, 0, (1.0, 1.0), [1], 1.0)
        clock.run(until=0.5)
        form_group(transport, 0, (1.0, 1.0), [1], 3.0)
        clock.run(until=2.0)
        assert transport.prune_expired() == 0
        assert transport.graph.edges[0, 1]["expires_at"] == pytest.approx(3.5)
