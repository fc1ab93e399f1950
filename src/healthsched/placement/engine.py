"""Placement engine choosing a tier and resource for each dequeued task."""

import logging
import random
import threading

from healthsched.config import (
    CLOUD_TIER,
    EDGE_SLACK_FACTOR,
    EDGE_TIER,
    HIGH_ABNORMAL_EDGE_THRESHOLD,
    HIGH_NORMAL_EDGE_THRESHOLD,
    NETWORK_SLICES,
    SLICE_JITTER,
    TIERS,
)
from healthsched.data_models.diagnostic import Diagnostic
from healthsched.data_models.result import Placement
from healthsched.data_models.task import Task, Urgency
from healthsched.placement.fabric import ComputeFabric

logger = logging.getLogger("healthsched.placement")


class TierLoad:
    """
    Per-tier assigned-task counters owned by one scheduler instance.

    The counters feed the edge utilization used by HIGH placement, so reads
    and increments go through a lock.
    """

    def __init__(self, counts: dict[str, int] | None = None) -> None:
        self._lock = threading.Lock()
        self._counts = {tier: 0 for tier in TIERS}
        if counts:
            self._counts.update(counts)

    def increment(self, tier: str) -> int:
        with self._lock:
            self._counts[tier] = self._counts.get(tier, 0) + 1
            return self._counts[tier]

    def count(self, tier: str) -> int:
        with self._lock:
            return self._counts.get(tier, 0)

    def snapshot(self) -> dict[str, int]:
        with self._lock:
            return dict(self._counts)


class PlacementEngine:
    """
    Chooses the compute tier and resource instance for a dequeued task.

    Placement rules:
    1. CRITICAL - always edge, on the fastest edge resource
    2. HIGH - edge while edge utilization is below 0.9 (abnormal vitals) or
       0.8 (otherwise), cloud beyond that; round-robin by task id
    3. NORMAL - always cloud; round-robin by task id

    A task whose target tier has no resources is reported as unplaced.
    """

    def __init__(
        self,
        fabric: ComputeFabric,
        load: TierLoad | None = None,
        slack_factor: int = EDGE_SLACK_FACTOR,
        rng: random.Random | None = None,
    ) -> None:
        """
        Initialize the placement engine.

        Args:
            fabric: Compute fabric to query for resources
            load: Shared per-tier counters (creates fresh counters if None)
            slack_factor: Tasks per edge resource that count as full load
            rng: Random source for network-slice jitter
        """
        self.fabric = fabric
        self.load = load or TierLoad()
        self.slack_factor = slack_factor
        self.rng = rng or random.Random()
        self._decision_lock = threading.Lock()

    def tier_utilization(self, tier: str) -> float:
        """
        Assigned tasks over tier capacity, clamped to [0, 1].

        A tier without resources counts as fully utilized.
        """
        resources = self.fabric.tier_resource_count(tier)
        if resources <= 0:
            return 1.0
        return min(1.0, self.load.count(tier) / (resources * self.slack_factor))

    def assigned_count(self, tier: str) -> int:
        return self.load.count(tier)

    def choose_tier(self, task: Task, edge_utilization: float) -> str:
        """
        Pick the tier for a task given the current edge utilization.

        Args:
            task: Task being placed
            edge_utilization: Edge load in [0, 1] (only used for HIGH tasks)

        Returns:
            EDGE_TIER or CLOUD_TIER
        """
        if task.urgency == Urgency.CRITICAL:
            return EDGE_TIER
        if task.urgency == Urgency.NORMAL:
            return CLOUD_TIER

        if task.requires_low_latency_tier and edge_utilization < HIGH_ABNORMAL_EDGE_THRESHOLD:
            return EDGE_TIER
        if edge_utilization < HIGH_NORMAL_EDGE_THRESHOLD:
            return EDGE_TIER
        return CLOUD_TIER

    def select_resource(self, task: Task, tier: str) -> int | None:
        """
        Pick a resource index within a tier.

        CRITICAL tasks get the resource with the highest processing rate;
        everything else is spread round-robin by task id.

        Returns:
            Resource index, or None if the tier has no resources
        """
        count = self.fabric.tier_resource_count(tier)
        if count <= 0:
            return None

        if task.urgency == Urgency.CRITICAL:
            rates = self.fabric.resource_rates(tier)
            if rates:
                return max(range(len(rates)), key=lambda i: rates[i])
            return 0

        return task.task_id % count

    def assign(self, task: Task, now: float = 0.0) -> Placement:
        """
        Place a dequeued task and record the decision on it.

        Args:
            task: Task that has just left the admission queue
            now: Current simulation time (for diagnostics)

        Returns:
            Placement result; placed=False carries a diagnostic
        """
        # Utilization read and counter increment form one decision
        with self._decision_lock:
            utilization = None
            if task.urgency == Urgency.HIGH:
                utilization = self.tier_utilization(EDGE_TIER)
                logger.debug(f"Edge utilization {utilization:.2f} for HIGH task {task.task_id}")

            tier = self.choose_tier(task, utilization or 0.0)
            resource_index = self.select_resource(task, tier)
            if resource_index is not None:
                task.assign_tier(tier)
                self.load.increment(tier)

        if resource_index is None:
            task.status = "unplaced"
            diagnostic = Diagnostic(
                time=now,
                type="placement_failed",
                details={
                    "task_id": task.task_id,
                    "tier": tier,
                    "urgency": task.urgency.value,
                    "reason": "no_resources",
                },
            )
            logger.warning(f"No resource available in {tier} for task {task.task_id}")
            return Placement(
                task_id=task.task_id,
                placed=False,
                tier=tier,
                utilization=utilization,
                diagnostic=diagnostic,
            )

        slice_name, latency = self._network_latency(task)

        logger.info(
            f"{task.urgency.value} task {task.task_id} (patient {task.patient_id}) -> "
            f"{tier}[{resource_index}] via {slice_name} ({latency:.2f}ms)"
        )
        return Placement(
            task_id=task.task_id,
            placed=True,
            tier=tier,
            resource_index=resource_index,
            utilization=utilization,
            network_slice=slice_name,
            network_latency_ms=latency,
        )

    def _network_latency(self, task: Task) -> tuple[str, float]:
        """Slice name and jittered latency (ms) for the task's urgency."""
        slice_name, base = NETWORK_SLICES[task.urgency.value]
        jitter = (self.rng.random() - 0.5) * 2 * SLICE_JITTER * base
        return slice_name, base + jitter
