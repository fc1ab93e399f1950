"""healthsched configuration constants.

This module contains all configuration defaults and constants used throughout healthsched.
Users can override the tunable values by passing a SchedulerConfig to the Scheduler,
or through HEALTHSCHED_* environment variables and a .env file (see SchedulerConfig).
"""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Tier names
EDGE_TIER = "edge"
"""Low-latency, limited-capacity compute tier."""

CLOUD_TIER = "cloud"
"""Higher-latency, larger-capacity compute tier."""

UNKNOWN_TIER = "unknown"
"""Tier name recorded when neither the task nor the fabric knows where it ran."""

TIERS = (EDGE_TIER, CLOUD_TIER)

# Admission queue
DEFAULT_QUEUE_CAPACITY = 100
"""Maximum number of tasks held per urgency queue."""

NOMINAL_QUEUE_DELAY = 0.1
"""Waiting time (seconds) stamped on a task when it leaves the admission queue."""

# Service levels, keyed by urgency value
SLA_SECONDS = {
    "CRITICAL": 2.0,
    "HIGH": 10.0,
    "NORMAL": 60.0,
}
"""Maximum acceptable arrival-to-completion time per urgency tier."""

BASE_COMPLEXITY = {
    "CRITICAL": 5000,
    "HIGH": 8000,
    "NORMAL": 25000,
}
"""Base computational complexity (work units) per urgency tier."""

PAYLOAD_SIZE = {
    "CRITICAL": 100,
    "HIGH": 250,
    "NORMAL": 1000,
}
"""Payload size units per urgency tier."""

BASE_PRIORITY_SCORE = {
    "CRITICAL": 100.0,
    "HIGH": 50.0,
    "NORMAL": 10.0,
}
"""Base priority score per urgency tier."""

MAX_WAITING_BONUS = 20.0
"""Cap on the waiting-time contribution to the priority score."""

# Placement
EDGE_SLACK_FACTOR = 3
"""Tasks per edge resource that count as full utilization."""

HIGH_ABNORMAL_EDGE_THRESHOLD = 0.9
"""Edge utilization below which abnormal-vitals HIGH tasks still go to edge."""

HIGH_NORMAL_EDGE_THRESHOLD = 0.8
"""Edge utilization below which ordinary HIGH tasks go to edge."""

# Network slices (telemetry only)
NETWORK_SLICES = {
    "CRITICAL": ("URLLC", 1.0),
    "HIGH": ("eMBB", 10.0),
    "NORMAL": ("mIoT", 100.0),
}
"""Slice name and base latency in milliseconds per urgency tier."""

SLICE_JITTER = 0.2
"""Maximum relative jitter applied to a slice's base latency."""

# Reference fabric used by the simulation driver
DEFAULT_EDGE_RATES = [3000.0, 3200.0, 3400.0, 3600.0]
"""Processing rates (work units per second) of the default edge resources."""

DEFAULT_CLOUD_RATES = [2400.0, 2500.0, 2600.0, 2700.0, 1900.0, 1950.0, 2000.0, 2050.0]
"""Processing rates (work units per second) of the default cloud resources."""

# Workload generation
DEFAULT_PATIENTS = 12
"""Default number of synthetic patients."""

DEFAULT_READINGS_PER_PATIENT = 3
"""Default number of readings generated per patient."""

READING_INTERVAL = 30.0
"""Seconds between consecutive readings of the same patient."""

ENV_PREFIX = "HEALTHSCHED_"
"""Prefix of environment variables read by SchedulerConfig."""


class SchedulerConfig(BaseSettings):
    """
    Tunable scheduler settings with validated defaults.

    Unset fields are read from HEALTHSCHED_* environment variables and from a
    .env file in the working directory; keyword arguments take precedence.
    A malformed variable raises ValidationError.
    """

    model_config = SettingsConfigDict(env_prefix=ENV_PREFIX, env_file=".env", extra="ignore")

    queue_capacity: int = Field(
        default=DEFAULT_QUEUE_CAPACITY, gt=0, description="Maximum tasks per urgency queue"
    )
    nominal_queue_delay: float = Field(
        default=NOMINAL_QUEUE_DELAY, ge=0, description="Waiting time stamped at dequeue"
    )
    edge_slack_factor: int = Field(
        default=EDGE_SLACK_FACTOR, gt=0, description="Tasks per edge resource at full load"
    )
    placement_failure_policy: Literal["drop", "hold"] = Field(
        default="drop",
        description="What happens to a task whose target tier has no resources",
    )
    evict_expired: bool = Field(
        default=False, description="Evict queued tasks whose age exceeds their SLA"
    )
    seed: int | None = Field(default=None, description="Seed for network-slice jitter")
