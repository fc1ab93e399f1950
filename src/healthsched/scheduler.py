"""Scheduler - core scheduling facade for healthsched."""

import logging
import random
from typing import Any

from pydantic import ValidationError

from healthsched.config import SchedulerConfig
from healthsched.data_models.diagnostic import Diagnostic
from healthsched.data_models.record import CompletionRecord
from healthsched.data_models.result import MetricsSummary, Placement, Submission
from healthsched.data_models.stats import QueueStatistics
from healthsched.data_models.task import Task, Urgency, VitalSigns
from healthsched.metrics.aggregator import MetricsAggregator
from healthsched.placement.engine import PlacementEngine, TierLoad
from healthsched.placement.fabric import ComputeFabric
from healthsched.queueing.admission import AdmissionQueue
from healthsched.tracking.tracker import CompletionTracker

logger = logging.getLogger("healthsched.scheduler")


class Scheduler:
    """
    Core two-tier healthcare scheduler.

    Owns the full scheduling state of one run: the admission queue, the
    per-tier load counters, the placement engine and the completion tracker.
    Several schedulers can coexist; nothing is shared between instances.

    Flow:
    1. submit() - build a task and offer it to the admission queue
    2. dispatch_pending() - drain the queue in priority order, place each
       task and hand it to the compute fabric
    3. on_completion() - called by the fabric when a task finishes
    4. list_completion_records() / queue_statistics() - read-only snapshots
    """

    def __init__(self, fabric: ComputeFabric, config: SchedulerConfig | None = None) -> None:
        """
        Initialize the scheduler.

        Args:
            fabric: Compute fabric that executes placed tasks
            config: Scheduler settings (defaults if None)
        """
        self.config = config or SchedulerConfig()
        self.fabric = fabric

        self.time = 0.0
        self.tasks: dict[int, Task] = {}
        self.diagnostics: list[Diagnostic] = []
        self.unplaced: list[Task] = []

        self._next_id = 0
        self.load = TierLoad()
        self.queue = AdmissionQueue(
            capacity=self.config.queue_capacity,
            nominal_delay=self.config.nominal_queue_delay,
        )
        self.engine = PlacementEngine(
            fabric,
            load=self.load,
            slack_factor=self.config.edge_slack_factor,
            rng=random.Random(self.config.seed),
        )
        self.tracker = CompletionTracker(fabric, diagnostics=self.diagnostics)

    def submit(
        self,
        patient_id: int,
        urgency: Urgency | str,
        vitals: VitalSigns | dict[str, Any] | None,
        arrival_time: float,
    ) -> Submission:
        """
        Create a task for an arriving reading and offer it to the queue.

        Invalid input is refused before a task exists; a full queue refuses
        the task after it has been given an id.

        Args:
            patient_id: Patient the reading belongs to
            urgency: Urgency classification (member or name)
            vitals: Vital-sign snapshot (model or mapping)
            arrival_time: Simulation-relative arrival time

        Returns:
            Submission with the task id and whether it was admitted
        """
        try:
            if vitals is None:
                raise ValueError("vitals are required")
            task = Task(
                task_id=self._next_id,
                patient_id=patient_id,
                urgency=urgency,
                vitals=vitals,
                arrival_time=arrival_time,
            )
        except (ValidationError, ValueError, TypeError) as e:
            diagnostic = self._report(
                "invalid_input",
                {"patient_id": patient_id, "reason": str(e).splitlines()[0]},
            )
            return Submission(task_id=None, admitted=False, diagnostic=diagnostic)

        self._advance(arrival_time)
        self._next_id += 1
        self.tasks[task.task_id] = task

        if not self.queue.enqueue(task):
            task.status = "rejected"
            diagnostic = self._report(
                "admission_rejected",
                {
                    "task_id": task.task_id,
                    "patient_id": task.patient_id,
                    "urgency": task.urgency.value,
                    "capacity": self.queue.capacity,
                },
            )
            return Submission(task_id=task.task_id, admitted=False, diagnostic=diagnostic)

        self.tracker.register(task)
        return Submission(task_id=task.task_id, admitted=True)

    def dispatch_pending(self, now: float | None = None) -> list[Placement]:
        """
        Drain the admission queue and dispatch every task that can be placed.

        Args:
            now: Current simulation time (defaults to the latest seen time)

        Returns:
            Placement results in dispatch order
        """
        if now is not None:
            self._advance(now)

        if self.config.evict_expired:
            for task in self.queue.evict_expired(self.time):
                task.status = "rejected"
                self.tracker.unregister(task.task_id)
                self._report(
                    "task_evicted",
                    {"task_id": task.task_id, "urgency": task.urgency.value},
                )

        placements = [
            self._place(task) for task in self.queue.dequeue_all() if self._placeable(task)
        ]
        dispatched = sum(1 for p in placements if p.placed)
        logger.info(f"Dispatched {dispatched}/{len(placements)} tasks")
        return placements

    def retry_unplaced(self, now: float | None = None) -> list[Placement]:
        """
        Try again to place tasks held after a placement failure.

        Only used with placement_failure_policy="hold".

        Returns:
            Placement results for every held task
        """
        if now is not None:
            self._advance(now)

        held, self.unplaced = self.unplaced, []
        return [self._place(task) for task in held if self._placeable(task)]

    def on_completion(
        self, task_id: int, execution_time: float, completion_time: float
    ) -> CompletionRecord | None:
        """
        Completion callback invoked by the compute fabric.

        Args:
            task_id: Finished task
            execution_time: Execution time reported by the fabric
            completion_time: Simulation time of completion

        Returns:
            The new CompletionRecord, or None if the signal was not recorded
        """
        record = self.tracker.record(task_id, execution_time, completion_time)
        if record is None:
            return None

        self._advance(completion_time)
        self.unplaced = [task for task in self.unplaced if task.task_id != task_id]
        return record

    def has_pending_work(self) -> bool:
        return self.queue.has_pending_work()

    def list_completion_records(self) -> list[CompletionRecord]:
        return self.tracker.records

    def queue_statistics(self, tier: Urgency | str) -> QueueStatistics:
        return self.queue.queue_statistics(tier)

    def metrics(self) -> MetricsSummary:
        """Aggregate statistics over the records collected so far."""
        return MetricsAggregator(self.tracker.records).summarize()

    def get_state_summary(self) -> dict[str, int]:
        """
        Get a summary of current task counts.

        Returns:
            Dictionary with counts of tasks in each status
        """
        summary = {
            status: 0
            for status in ("created", "queued", "dispatched", "completed", "rejected", "unplaced")
        }
        for task in self.tasks.values():
            summary[task.status] += 1
        summary["total_tasks"] = len(self.tasks)
        summary["records"] = len(self.tracker)
        return summary

    def _place(self, task: Task) -> Placement:
        placement = self.engine.assign(task, now=self.time)

        if not placement.placed:
            self.diagnostics.append(placement.diagnostic)
            if self.config.placement_failure_policy == "hold":
                self.unplaced.append(task)
            else:
                self.tracker.unregister(task.task_id)
            return placement

        self.fabric.dispatch(
            task.task_id,
            placement.tier,
            placement.resource_index,
            task.computational_complexity,
            task.payload_size,
        )
        task.status = "dispatched"
        return placement

    def _placeable(self, task: Task) -> bool:
        if task.assigned_tier is not None or task.status == "completed":
            logger.warning(f"Skipping task {task.task_id}: already placed ({task.status})")
            return False
        return True

    def _report(self, kind: str, details: dict) -> Diagnostic:
        diagnostic = Diagnostic(time=self.time, type=kind, details=details)
        self.diagnostics.append(diagnostic)
        logger.warning(str(diagnostic))
        return diagnostic

    def _advance(self, now: float) -> None:
        if isinstance(now, (int, float)) and now > self.time:
            self.time = float(now)
