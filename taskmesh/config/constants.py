"""Centralized domain constants for fleet scheduling simulations.

All magic numbers that appear across multiple modules are defined here.
Consuming modules should import from this module rather than defining
their own inline literals.
"""

from __future__ import annotations

BOUNDS_X_MIN = 0.0
BOUNDS_X_MAX = 100.0
BOUNDS_Y_MIN = 0.0
BOUNDS_Y_MAX = 100.0
"""Default rectangle the fleet roams in."""

MODE_TIME = 1.0
"""Default interval between mobility resamples."""

SPEED_MIN = 2.0
SPEED_MAX = 4.0
"""Default speed range (distance per time unit) drawn on each resample."""

LEVY_ALPHA = 2.0
"""Default Pareto exponent of the Levy-flight step length."""

LEVY_STEP_SCALE = 10.0
"""Default Pareto scale (minimum step multiplier), the Levy-flight model's StepSize."""

NEIGHBOR_RADIUS = 50.0
"""Default neighbor-query radius."""

PUBLISH_BASE_INTERVAL = 1.0
"""Fixed part of the delay between two publish firings of one agent."""

PUBLISH_JITTER_MEAN = 1.0
"""Mean of the exponential jitter added to the publish interval."""

FIRST_PUBLISH_AT = 1.0
"""Simulated time of the first publish firing."""

SIM_DURATION = 100.0
"""Default simulation horizon."""

POSITION_LOG_INTERVAL = 1.0
"""Interval between two [POSITIONS] sweeps."""

NUM_WORKERS = 4
"""Default number of layer-1 (worker) agents."""

NUM_PUBLISHERS = 2
"""Default number of layer-2 (publisher) agents."""

WORKER_LAYER = 1
PUBLISHER_LAYER = 2

MATCH_TOLERANCE = 1e-9
"""Float tolerance used when reconstructing the knapsack selection."""

ADDRESS_SEED_RANGE = 65_536
"""Address seeds are reduced modulo this range."""

PORT_SEED_MIN = 49_152
PORT_SEED_MAX = 65_535
"""Port seeds land in the dynamic/private port range."""

FLUSH_THRESHOLD = 8_192
"""Flush event-log rows to Parquet once this in-memory row count is reached."""

FLOAT_PRECISION = 6
"""Decimal places used when rendering floats in line-oriented records."""
