"""Tests for hazard zones and the repeating damage schedule."""

from __future__ import annotations

import pytest

from evoherd.simulation.hazard import HazardZone
from evoherd.simulation.scheduler import RepeatingTask


class TestRepeatingTask:
    def test_first_firing_after_full_interval(self):
        """The task waits one interval before firing."""
        calls = []
        task = RepeatingTask(1.0, lambda: calls.append(1))
        task.start()

        assert task.advance(0.6) == 0
        assert task.advance(0.6) == 1
        assert task.advance(2.0) == 2
        assert len(calls) == 3

    def test_cancel_drops_partial_interval(self):
        """Cancel forgets accumulated time."""
        calls = []
        task = RepeatingTask(1.0, lambda: calls.append(1))
        task.start()
        task.advance(0.9)
        task.cancel()
        task.start()
        task.advance(0.5)

        assert calls == []

    def test_inactive_task_never_fires(self):
        """advance() is a no-op before start()."""
        calls = []
        task = RepeatingTask(1.0, lambda: calls.append(1))
        assert task.advance(10.0) == 0
        assert calls == []

    def test_callback_can_cancel(self):
        """Cancelling from the callback stops further firings."""
        task = RepeatingTask(1.0, lambda: task.cancel())
        task.start()
        assert task.advance(5.0) == 1

    def test_invalid_interval(self):
        """Non-positive intervals are rejected."""
        with pytest.raises(ValueError):
            RepeatingTask(0.0, lambda: None)


class TestMembership:
    def test_enter_and_exit_are_idempotent(self, zone, agent):
        """Membership edits are idempotent."""
        assert zone.enter(agent) is True
        assert zone.enter(agent) is False
        assert agent in zone

        assert zone.exit(agent) is True
        assert zone.exit(agent) is False
        assert agent not in zone

    def test_schedule_starts_and_stops_once(self, zone, spawn):
        """One schedule per occupied period."""
        a, b = spawn(), spawn()

        zone.enter(a)
        zone.enter(b)
        assert zone.schedule_starts == 1
        assert zone.damaging

        zone.exit(a)
        assert zone.damaging
        assert zone.schedule_stops == 0

        zone.exit(b)
        assert not zone.damaging
        assert zone.schedule_stops == 1

    def test_dead_agent_cannot_enter(self, zone, agent):
        """Dead agents are never admitted."""
        agent.take_damage(100.0)
        assert zone.enter(agent) is False
        assert not zone.occupied

    def test_refresh_adds_agents_inside(self, zone, spawn):
        """refresh() admits agents inside the sphere only."""
        inside = spawn(position=(1.0, 0.0, 1.0))
        outside = spawn(position=(20.0, 0.0, 0.0))

        assert zone.refresh([inside, outside]) == 1
        assert inside in zone
        assert outside not in zone
        assert zone.refresh([inside, outside]) == 0

    def test_clear_empties_zone_and_stops_damage(self, zone, agent):
        """Clearing forgets every occupant and halts the schedule."""
        zone.enter(agent)

        zone.clear()
        zone.tick(5.0)

        assert agent not in zone
        assert not zone.damaging
        assert zone.schedule_stops == 1
        assert agent.health == 100.0

    def test_contains(self, zone):
        """Sphere test includes the boundary."""
        assert zone.contains((3.0, 0.0, 4.0))
        assert not zone.contains((3.0, 0.0, 4.1))


class TestDamage:
    def test_damage_once_per_interval(self, zone, agent):
        """Occupants take damage once per interval."""
        zone.enter(agent)

        zone.tick(0.5)
        assert agent.health == 100.0
        zone.tick(0.5)
        assert agent.health == 80.0
        zone.tick(2.0)
        assert agent.health == 40.0
        assert zone.damage_applications == 3

    def test_no_damage_when_empty(self, zone, agent):
        """An empty zone deals no damage."""
        zone.enter(agent)
        zone.exit(agent)
        zone.tick(5.0)
        assert agent.health == 100.0
        assert zone.damage_applications == 0

    def test_enter_exit_churn_does_not_multiply_damage(self, zone, agent):
        """Leaving and re-entering restarts the interval."""
        for _ in range(5):
            zone.enter(agent)
            zone.tick(0.1)
            zone.exit(agent)
        assert zone.damage_applications == 0

        zone.enter(agent)
        zone.tick(1.0)
        assert zone.damage_applications == 1
        assert agent.health == 80.0

    def test_killed_member_leaves_before_next_tick(self, registry, zone, spawn):
        """Agents killed by the zone drop out of it."""
        weak = spawn(start_health=30.0)
        strong = spawn()
        zone.enter(weak)
        zone.enter(strong)

        zone.tick(1.0)
        zone.tick(1.0)

        assert not weak.alive
        assert registry.get(weak.handle) is None
        assert zone.members == [strong.handle]

        zone.tick(1.0)
        assert weak.health == 0.0
        assert strong.health == 40.0

    def test_schedule_stops_when_last_member_dies(self, zone, spawn):
        """The last death stops the schedule."""
        weak = spawn(start_health=20.0)
        zone.enter(weak)

        zone.tick(1.0)

        assert not weak.alive
        assert not zone.occupied
        assert not zone.damaging
        assert zone.schedule_stops == 1

    def test_destroyed_agent_is_purged_proactively(self, registry, zone, spawn):
        """Registry destroy removes the agent from the zone."""
        a, b = spawn(), spawn()
        zone.enter(a)
        zone.enter(b)

        registry.destroy(a.handle)
        assert zone.members == [b.handle]

        zone.tick(1.0)
        assert a.health == 100.0
        assert b.health == 80.0

    def test_stale_handle_is_never_damaged(self, registry, spawn):
        """Stale handles resolve to nothing and are dropped."""
        unwired = HazardZone(registry.get, radius=5.0, damage_per_tick=20.0)
        agent = spawn()
        unwired.enter(agent)

        registry.destroy(agent.handle)
        unwired.tick(1.0)

        assert agent.health == 100.0
        assert not unwired.occupied
        assert not unwired.damaging
