"""Strict-priority admission queue for healthsched."""

import heapq
import itertools
import logging
import threading

from healthsched.config import DEFAULT_QUEUE_CAPACITY, NOMINAL_QUEUE_DELAY, SLA_SECONDS
from healthsched.data_models.stats import QueueStatistics
from healthsched.data_models.task import Task, Urgency

logger = logging.getLogger("healthsched.queueing")


class _TierQueue:
    """
    Bounded queue for a single urgency tier.

    Entries are kept in a heap keyed by (arrival_time, insertion sequence),
    so the tier drains in arrival order and ties keep enqueue order.
    """

    def __init__(self, urgency: Urgency, capacity: int) -> None:
        self.urgency = urgency
        self.capacity = capacity
        self.lock = threading.Lock()
        self.heap: list[tuple[float, int, Task]] = []
        self.stats = QueueStatistics(tier=urgency.value)

    def __len__(self) -> int:
        return len(self.heap)

    def update_size(self) -> None:
        self.stats.current_size = len(self.heap)
        self.stats.max_size = max(self.stats.max_size, self.stats.current_size)


class AdmissionQueue:
    """
    Three bounded FIFO-within-tier queues drained in strict priority order.

    CRITICAL is always drained before HIGH, and HIGH before NORMAL. Each tier
    is its own container guarded by its own lock, so the cross-tier order does
    not depend on a comparator.
    """

    def __init__(
        self,
        capacity: int = DEFAULT_QUEUE_CAPACITY,
        nominal_delay: float = NOMINAL_QUEUE_DELAY,
    ) -> None:
        """
        Initialize the admission queue.

        Args:
            capacity: Maximum number of tasks held per urgency tier
            nominal_delay: Waiting time stamped on each task at dequeue
        """
        if capacity <= 0:
            raise ValueError(f"capacity must be positive, got {capacity}")

        self.capacity = capacity
        self.nominal_delay = nominal_delay
        self._sequence = itertools.count()
        self._tiers = {urgency: _TierQueue(urgency, capacity) for urgency in Urgency}

        logger.info(
            f"Admission queue initialized: capacity={capacity} per tier, "
            f"SLA critical={SLA_SECONDS['CRITICAL']}s high={SLA_SECONDS['HIGH']}s "
            f"normal={SLA_SECONDS['NORMAL']}s"
        )

    def enqueue(self, task: Task) -> bool:
        """
        Add a task to its urgency tier.

        Args:
            task: Task to admit

        Returns:
            True if admitted, False if the tier is at capacity (task rejected)
        """
        tier = self._tiers[task.urgency]
        with tier.lock:
            if len(tier.heap) >= tier.capacity:
                tier.stats.total_rejected += 1
                logger.warning(
                    f"Queue overflow for {task.urgency.value} task "
                    f"{task.task_id} (patient {task.patient_id})"
                )
                return False

            heapq.heappush(tier.heap, (task.arrival_time, next(self._sequence), task))
            task.status = "queued"
            tier.stats.total_enqueued += 1
            tier.update_size()
            size = len(tier.heap)

        logger.debug(f"{task.urgency.value} task {task.task_id} queued (queue size: {size})")
        return True

    def dequeue_next(self) -> Task | None:
        """
        Pop the next task in strict priority order.

        Stamps the nominal waiting time on the task and runs the queueing-delay
        SLA check for its tier.

        Returns:
            The next task, or None if every tier is empty
        """
        for urgency, tier in self._tiers.items():
            with tier.lock:
                if not tier.heap:
                    continue
                _, _, task = heapq.heappop(tier.heap)
                tier.stats.total_dequeued += 1
                tier.update_size()
                if task.waiting_time is None:
                    task.mark_dequeued(self.nominal_delay)
                self._check_sla(tier, task)
            logger.debug(
                f"Dequeued {urgency.value} task {task.task_id} "
                f"(patient {task.patient_id}, waited {task.waiting_time:.2f}s)"
            )
            return task
        return None

    def dequeue_all(self) -> list[Task]:
        """
        Drain every tier.

        Returns:
            CRITICAL tasks, then HIGH, then NORMAL, each block in arrival order
        """
        tasks = []
        while True:
            task = self.dequeue_next()
            if task is None:
                break
            tasks.append(task)

        logger.info(f"Dequeued {len(tasks)} tasks for placement")
        return tasks

    def has_pending_work(self) -> bool:
        return any(len(tier) > 0 for tier in self._tiers.values())

    def pending_count(self, urgency: Urgency | None = None) -> int:
        """Number of queued tasks, for one tier or across all tiers."""
        if urgency is not None:
            return len(self._tiers[Urgency(urgency)])
        return sum(len(tier) for tier in self._tiers.values())

    def __len__(self) -> int:
        return self.pending_count()

    def evict_expired(self, now: float) -> list[Task]:
        """
        Remove queued tasks whose age already exceeds their tier SLA.

        Evicted tasks count as SLA violations for their tier.

        Args:
            now: Current simulation time

        Returns:
            Evicted tasks, in strict priority then arrival order
        """
        evicted = []
        for urgency, tier in self._tiers.items():
            limit = SLA_SECONDS[urgency.value]
            with tier.lock:
                keep = []
                for entry in tier.heap:
                    task = entry[2]
                    if now - task.arrival_time > limit:
                        evicted.append(task)
                        tier.stats.total_evicted += 1
                        tier.stats.sla_violations += 1
                    else:
                        keep.append(entry)
                if len(keep) != len(tier.heap):
                    heapq.heapify(keep)
                    tier.heap = keep
                    tier.update_size()

        evicted.sort(key=lambda t: (list(Urgency).index(t.urgency), t.arrival_time))
        for task in evicted:
            logger.warning(
                f"Evicted {task.urgency.value} task {task.task_id}: "
                f"age {now - task.arrival_time:.2f}s exceeds SLA {task.expected_sla}s"
            )
        return evicted

    def queue_statistics(self, urgency: Urgency | str) -> QueueStatistics:
        """
        Snapshot of the counters for one tier.

        Args:
            urgency: Urgency member or its name (e.g. "CRITICAL")

        Returns:
            A copy of the tier's QueueStatistics
        """
        tier = self._tiers[Urgency(urgency)]
        with tier.lock:
            return tier.stats.model_copy()

    def all_statistics(self) -> dict[str, QueueStatistics]:
        """Snapshots for every tier, keyed by urgency name."""
        return {urgency.value: self.queue_statistics(urgency) for urgency in Urgency}

    def _check_sla(self, tier: _TierQueue, task: Task) -> None:
        """Queueing-delay SLA check made when a task leaves the queue."""
        limit = SLA_SECONDS[tier.urgency.value]
        if task.waiting_time <= limit:
            tier.stats.sla_compliant += 1
        else:
            tier.stats.sla_violations += 1
            logger.warning(
                f"SLA violation: {tier.urgency.value} task {task.task_id} waited "
                f"{task.waiting_time:.2f}s (limit: {limit:.2f}s)"
            )
