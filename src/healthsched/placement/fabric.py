"""Compute fabric interface consumed by the placement engine and tracker."""

from typing import Protocol


class ComputeFabric(Protocol):
    """
    The execution backend the scheduler dispatches work to.

    Implementations own the resources of each tier and report completions
    back through Scheduler.on_completion once the work has finished.
    """

    def tier_resource_count(self, tier: str) -> int:
        """Number of resource instances in a tier."""
        ...

    def resource_rates(self, tier: str) -> list[float]:
        """Processing rate (work units per second) of each resource in a tier."""
        ...

    def dispatch(
        self,
        task_id: int,
        tier: str,
        resource_index: int,
        complexity: int,
        payload_size: int,
    ) -> None:
        """Submit a placed task for execution (fire-and-forget)."""
        ...

    def resolve_tier(self, task_id: int) -> str | None:
        """Tier that executed a task, if the fabric knows it."""
        ...
