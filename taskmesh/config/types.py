"""Configuration dataclasses for fleet scheduling simulations.

All frozen dataclasses that parameterise mobility, publishing, task
generation, fleet construction and whole scenarios live here. Every
dataclass validates itself in ``__post_init__`` so that bad parameters fail
at configuration time rather than mid-simulation.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from taskmesh.config.constants import (
    BOUNDS_X_MAX,
    BOUNDS_X_MIN,
    BOUNDS_Y_MAX,
    BOUNDS_Y_MIN,
    FIRST_PUBLISH_AT,
    LEVY_ALPHA,
    LEVY_STEP_SCALE,
    MODE_TIME,
    NEIGHBOR_RADIUS,
    NUM_PUBLISHERS,
    NUM_WORKERS,
    POSITION_LOG_INTERVAL,
    PUBLISH_BASE_INTERVAL,
    PUBLISH_JITTER_MEAN,
    SIM_DURATION,
    SPEED_MAX,
    SPEED_MIN,
)

__all__ = [
    "FleetConfig",
    "MobilityConfig",
    "PublishConfig",
    "Rectangle",
    "ScenarioConfig",
    "SimulationResult",
    "TaskGenConfig",
]


def _check_int_range(low: int, high: int, label: str, minimum: int = 1) -> None:
    if low < minimum:
        raise ValueError(f"{label} lower bound must be >= {minimum}")
    if high < low:
        raise ValueError(f"{label} upper bound must be >= lower bound")


# ---------------------------------------------------------------------------
# Result container
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SimulationResult:
    """Top-level result for one simulated scenario."""

    run_id: str
    seed: int
    horizon: float
    tasks_total: int
    tasks_matched: int
    tasks_pending: int
    publish_attempts: int
    links_created: int


# ---------------------------------------------------------------------------
# Geometry
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Rectangle:
    """Axis-aligned rectangle, closed on all sides."""

    x_min: float = BOUNDS_X_MIN
    x_max: float = BOUNDS_X_MAX
    y_min: float = BOUNDS_Y_MIN
    y_max: float = BOUNDS_Y_MAX

    def __post_init__(self) -> None:
        if not self.x_min < self.x_max:
            raise ValueError("x_min must be < x_max")
        if not self.y_min < self.y_max:
            raise ValueError("y_min must be < y_max")

    @property
    def width(self) -> float:
        return self.x_max - self.x_min

    @property
    def height(self) -> float:
        return self.y_max - self.y_min

    def contains(self, x: float, y: float) -> bool:
        return self.x_min <= x <= self.x_max and self.y_min <= y <= self.y_max


# ---------------------------------------------------------------------------
# Config dataclasses
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class MobilityConfig:
    """Levy-flight mobility parameters, constructed once per agent."""

    bounds: Rectangle = field(default_factory=Rectangle)
    mode_time: float = MODE_TIME
    """Fixed interval between two velocity resamples."""
    speed_min: float = SPEED_MIN
    speed_max: float = SPEED_MAX
    alpha: float = LEVY_ALPHA
    """Pareto exponent of the step-length distribution."""
    step_scale: float = LEVY_STEP_SCALE
    """Pareto scale, i.e. the smallest step multiplier."""

    def __post_init__(self) -> None:
        if self.mode_time <= 0.0:
            raise ValueError("mode_time must be > 0")
        if self.speed_min < 0.0:
            raise ValueError("speed_min must be >= 0")
        if self.speed_max < self.speed_min:
            raise ValueError("speed_max must be >= speed_min")
        if self.alpha <= 0.0:
            raise ValueError("alpha must be > 0")
        if self.step_scale <= 0.0:
            raise ValueError("step_scale must be > 0")


@dataclass(frozen=True)
class PublishConfig:
    """Publish-cycle timing and neighbor-query settings."""

    base_interval: float = PUBLISH_BASE_INTERVAL
    jitter_mean: float = PUBLISH_JITTER_MEAN
    neighbor_radius: float = NEIGHBOR_RADIUS
    first_publish_at: float = FIRST_PUBLISH_AT

    def __post_init__(self) -> None:
        if self.base_interval <= 0.0:
            raise ValueError("base_interval must be > 0")
        if self.jitter_mean < 0.0:
            raise ValueError("jitter_mean must be >= 0")
        if self.neighbor_radius < 0.0:
            raise ValueError("neighbor_radius must be >= 0")
        if self.first_publish_at < 0.0:
            raise ValueError("first_publish_at must be >= 0")


@dataclass(frozen=True)
class TaskGenConfig:
    """Inclusive integer ranges used to populate publisher queues."""

    tasks_min: int = 5
    tasks_max: int = 10
    threads_min: int = 4
    threads_max: int = 64
    ram_min: int = 12
    ram_max: int = 64
    duration_min: int = 1
    duration_max: int = 10

    def __post_init__(self) -> None:
        _check_int_range(self.tasks_min, self.tasks_max, "tasks", minimum=0)
        _check_int_range(self.threads_min, self.threads_max, "threads")
        _check_int_range(self.ram_min, self.ram_max, "ram")
        _check_int_range(self.duration_min, self.duration_max, "duration")


@dataclass(frozen=True)
class FleetConfig:
    """Fleet composition, capacity ranges and initial placement disc."""

    n_workers: int = NUM_WORKERS
    n_publishers: int = NUM_PUBLISHERS
    threads_min: int = 1
    threads_max: int = 16
    ram_min: int = 4
    ram_max: int = 16
    placement_center: tuple[float, float] = (50.0, 50.0)
    placement_radius: float = 30.0

    def __post_init__(self) -> None:
        if self.n_workers < 0:
            raise ValueError("n_workers must be >= 0")
        if self.n_publishers < 0:
            raise ValueError("n_publishers must be >= 0")
        if self.n_workers + self.n_publishers < 1:
            raise ValueError("fleet must contain at least one agent")
        _check_int_range(self.threads_min, self.threads_max, "capacity threads")
        _check_int_range(self.ram_min, self.ram_max, "capacity ram")
        if self.placement_radius < 0.0:
            raise ValueError("placement_radius must be >= 0")


@dataclass(frozen=True)
class ScenarioConfig:
    """Everything needed to build and run one reproducible scenario."""

    duration: float = SIM_DURATION
    """Simulation horizon; no event fires after it."""
    seed: int = 0
    position_log_interval: float = POSITION_LOG_INTERVAL
    mobility: MobilityConfig = field(default_factory=MobilityConfig)
    publish: PublishConfig = field(default_factory=PublishConfig)
    tasks: TaskGenConfig = field(default_factory=TaskGenConfig)
    fleet: FleetConfig = field(default_factory=FleetConfig)

    def __post_init__(self) -> None:
        if self.duration <= 0.0:
            raise ValueError("duration must be > 0")
        if self.position_log_interval <= 0.0:
            raise ValueError("position_log_interval must be > 0")
        bounds = self.mobility.bounds
        cx, cy = self.fleet.placement_center
        r = self.fleet.placement_radius
        if not (bounds.contains(cx - r, cy - r) and bounds.contains(cx + r, cy + r)):
            raise ValueError("placement disc must lie within mobility bounds")
