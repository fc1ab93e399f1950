"""In-memory compute fabric used by the simulation driver."""

import logging

from pydantic import BaseModel, Field

from healthsched.config import CLOUD_TIER, DEFAULT_CLOUD_RATES, DEFAULT_EDGE_RATES, EDGE_TIER

logger = logging.getLogger("healthsched.fabric")

LINK_LATENCY = {EDGE_TIER: 0.005, CLOUD_TIER: 0.05}
"""One-way link latency in seconds to each tier."""

BANDWIDTH = {EDGE_TIER: 10000.0, CLOUD_TIER: 5000.0}
"""Payload units transferred per second to each tier."""


class Completion(BaseModel):
    """A finished task as reported back to the scheduler."""

    task_id: int = Field(ge=0)
    tier: str
    resource_index: int = Field(ge=0)
    execution_time: float = Field(ge=0, description="Seconds spent executing")
    completion_time: float = Field(ge=0, description="Simulation time of completion")


class SimulatedFabric:
    """
    Edge and cloud resources with fixed processing rates.

    Execution time is complexity over the resource rate. A task completes at
    its dispatch time plus the tier's link latency, the payload transfer time
    and its execution time. Resources run tasks independently of each other;
    there is no contention between tasks on one resource.
    """

    def __init__(
        self,
        edge_rates: list[float] | None = None,
        cloud_rates: list[float] | None = None,
    ) -> None:
        """
        Initialize the fabric.

        Args:
            edge_rates: Rate of each edge resource (defaults if None)
            cloud_rates: Rate of each cloud resource (defaults if None)
        """
        self.rates = {
            EDGE_TIER: list(DEFAULT_EDGE_RATES if edge_rates is None else edge_rates),
            CLOUD_TIER: list(DEFAULT_CLOUD_RATES if cloud_rates is None else cloud_rates),
        }
        self.clock = 0.0
        self.dispatched: dict[int, str] = {}
        self._pending: list[Completion] = []

        logger.info(
            f"Fabric ready: {len(self.rates[EDGE_TIER])} edge, "
            f"{len(self.rates[CLOUD_TIER])} cloud resources"
        )

    def tier_resource_count(self, tier: str) -> int:
        return len(self.rates.get(tier, []))

    def resource_rates(self, tier: str) -> list[float]:
        return list(self.rates.get(tier, []))

    def dispatch(
        self,
        task_id: int,
        tier: str,
        resource_index: int,
        complexity: int,
        payload_size: int,
    ) -> None:
        """
        Start a task on a resource at the current clock.

        Raises:
            ValueError: If the tier or resource index does not exist
        """
        rates = self.rates.get(tier)
        if not rates or not 0 <= resource_index < len(rates):
            raise ValueError(f"No resource {resource_index} in tier {tier!r}")

        execution_time = complexity / rates[resource_index]
        transfer = LINK_LATENCY[tier] + payload_size / BANDWIDTH[tier]
        completion = Completion(
            task_id=task_id,
            tier=tier,
            resource_index=resource_index,
            execution_time=execution_time,
            completion_time=self.clock + transfer + execution_time,
        )
        self.dispatched[task_id] = tier
        self._pending.append(completion)
        logger.debug(
            f"Task {task_id} running on {tier}[{resource_index}]: "
            f"{execution_time:.3f}s, done at {completion.completion_time:.3f}"
        )

    def resolve_tier(self, task_id: int) -> str | None:
        return self.dispatched.get(task_id)

    def drain_completions(self) -> list[Completion]:
        """
        Hand over every finished task.

        Returns:
            Completions ordered by completion time, then task id
        """
        completions = sorted(self._pending, key=lambda c: (c.completion_time, c.task_id))
        self._pending = []
        return completions
