"""Configuration layer: constants and typed config dataclasses."""

from taskmesh.config.constants import (
    FLUSH_THRESHOLD,
    LEVY_ALPHA,
    MODE_TIME,
    NEIGHBOR_RADIUS,
    NUM_PUBLISHERS,
    NUM_WORKERS,
    PUBLISHER_LAYER,
    SIM_DURATION,
    WORKER_LAYER,
)
from taskmesh.config.types import (
    FleetConfig,
    MobilityConfig,
    PublishConfig,
    Rectangle,
    ScenarioConfig,
    SimulationResult,
    TaskGenConfig,
)

__all__ = [
    "FLUSH_THRESHOLD",
    "FleetConfig",
    "LEVY_ALPHA",
    "MODE_TIME",
    "MobilityConfig",
    "NEIGHBOR_RADIUS",
    "NUM_PUBLISHERS",
    "NUM_WORKERS",
    "PUBLISHER_LAYER",
    "PublishConfig",
    "Rectangle",
    "SIM_DURATION",
    "ScenarioConfig",
    "SimulationResult",
    "TaskGenConfig",
    "WORKER_LAYER",
]
