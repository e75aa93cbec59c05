"""Levy-flight 2D mobility with a reflecting rectangular boundary.

Each agent drifts in a straight line between resamples. Every ``mode_time``
a new heading and speed are drawn, together with a heavy-tailed (Pareto)
step-length multiplier that scales the velocity over the upcoming interval.

Boundary invariant: whenever the drift would leave the bounds, the velocity
component orthogonal to the exited side is inverted and the walk continues
with the reflected velocity. The fold is evaluated in closed form, so
``sample`` is always inside the bounds no matter how long the step is.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from random import Random
from typing import TYPE_CHECKING

from taskmesh.config.types import MobilityConfig, Rectangle

if TYPE_CHECKING:
    from taskmesh.simulation.events import Event, EventQueue

Vector = tuple[float, float]


@dataclass(frozen=True)
class MobilityState:
    """Read-only snapshot of one agent's mobility at a simulated instant."""

    position: Vector
    velocity: Vector
    next_resample_at: float | None
    bounds: Rectangle


def reflect_axis(
    start: float, velocity: float, dt: float, low: float, high: float
) -> tuple[float, float]:
    """Fold a 1D drift into ``[low, high]``; return ``(position, velocity)``.

    Each crossing of ``low`` or ``high`` mirrors the coordinate and flips the
    sign of ``velocity``; an odd number of crossings leaves it inverted.
    """
    width = high - low
    raw = start - low + velocity * dt
    crossings = math.floor(raw / width)
    folded = min(max(raw - crossings * width, 0.0), width)
    if crossings % 2:
        return high - folded, -velocity
    return low + folded, velocity


def pareto_step(rng: Random, alpha: float, scale: float) -> float:
    """Draw a Pareto-shaped step multiplier ``scale * u ** (-1 / alpha)``."""
    u = 1.0 - rng.random()  # (0, 1]
    return scale * u ** (-1.0 / alpha)


class LevyFlightMobility:
    """Mobility process for one agent, driven by callbacks on an ``EventQueue``."""

    def __init__(
        self,
        config: MobilityConfig,
        rng: Random,
        scheduler: EventQueue,
        position: Vector,
    ) -> None:
        if not config.bounds.contains(*position):
            raise ValueError(f"initial position {position} outside bounds {config.bounds}")
        self.config = config
        self._rng = rng
        self._scheduler = scheduler
        self._origin: Vector = (float(position[0]), float(position[1]))
        self._origin_time = scheduler.now
        self._drift: Vector = (0.0, 0.0)
        self._event: Event | None = None

    @property
    def next_resample_at(self) -> float | None:
        if self._event is None or self._event.cancelled:
            return None
        return self._event.time

    def start(self) -> None:
        """Arm the first resample at the current simulated time."""
        self._rearm(0.0)

    def set_position(self, position: Vector) -> None:
        """Teleport to ``position`` and replace any outstanding resample.

        Raises ``ValueError`` before touching the schedule if ``position`` is
        outside the configured bounds.
        """
        if not self.config.bounds.contains(*position):
            raise ValueError(f"position {position} outside bounds {self.config.bounds}")
        self._origin = (float(position[0]), float(position[1]))
        self._origin_time = self._scheduler.now
        self._rearm(0.0)

    def sample(self, now: float) -> Vector:
        """Return the position at ``now``; never outside the bounds."""
        return self._advance(now)[0]

    def velocity(self, now: float) -> Vector:
        """Return the effective (reflected, step-scaled) velocity at ``now``."""
        return self._advance(now)[1]

    def state(self, now: float) -> MobilityState:
        position, velocity = self._advance(now)
        return MobilityState(
            position=position,
            velocity=velocity,
            next_resample_at=self.next_resample_at,
            bounds=self.config.bounds,
        )

    def _advance(self, now: float) -> tuple[Vector, Vector]:
        dt = now - self._origin_time
        if dt < 0.0:
            raise ValueError(f"cannot sample before last settle time {self._origin_time}")
        b = self.config.bounds
        x, vx = reflect_axis(self._origin[0], self._drift[0], dt, b.x_min, b.x_max)
        y, vy = reflect_axis(self._origin[1], self._drift[1], dt, b.y_min, b.y_max)
        return (x, y), (vx, vy)

    def _rearm(self, delay: float) -> None:
        if self._event is not None:
            self._event.cancel()
        self._event = self._scheduler.schedule(delay, self._resample)

    def _resample(self) -> None:
        now = self._scheduler.now
        self._origin = self._advance(now)[0]
        self._origin_time = now

        cfg = self.config
        direction = self._rng.uniform(0.0, 2.0 * math.pi)
        speed = self._rng.uniform(cfg.speed_min, cfg.speed_max)
        step = pareto_step(self._rng, cfg.alpha, cfg.step_scale)
        self._drift = (math.cos(direction) * speed * step, math.sin(direction) * speed * step)

        self._event = self._scheduler.schedule(cfg.mode_time, self._resample)
