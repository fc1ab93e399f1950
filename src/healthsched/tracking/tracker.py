"""SLA and completion tracking for healthsched."""

import logging
import threading

from pydantic import ValidationError

from healthsched.config import UNKNOWN_TIER
from healthsched.data_models.diagnostic import Diagnostic
from healthsched.data_models.record import CompletionRecord
from healthsched.data_models.task import Task
from healthsched.placement.fabric import ComputeFabric

logger = logging.getLogger("healthsched.tracking")

COMPLETABLE_STATUSES = ("dispatched", "unplaced")


class CompletionTracker:
    """
    Turns completion signals from the compute fabric into CompletionRecords.

    Tracks:
    1. Total response time - completion time minus arrival time
    2. End-to-end SLA compliance - response time against the urgency's SLA
    3. Unknown and malformed completions - reported as diagnostics, never fatal

    Each task is recorded at most once; a repeated signal for a completed
    task is reported as an unknown completion.
    """

    def __init__(
        self,
        fabric: ComputeFabric | None = None,
        diagnostics: list[Diagnostic] | None = None,
    ) -> None:
        """
        Initialize the tracker.

        Args:
            fabric: Fabric asked for the executing tier when a task has none
            diagnostics: Shared list that completion diagnostics go to
        """
        self.fabric = fabric
        self.tasks: dict[int, Task] = {}
        self.diagnostics = diagnostics if diagnostics is not None else []
        self._records: list[CompletionRecord] = []
        self._lock = threading.Lock()

    def register(self, task: Task) -> None:
        """Make a task known so its completion can be recorded."""
        self.tasks[task.task_id] = task

    def unregister(self, task_id: int) -> None:
        """Forget a task that left the scheduler without running."""
        self.tasks.pop(task_id, None)

    def record(
        self, task_id: int, execution_time: float, completion_time: float
    ) -> CompletionRecord | None:
        """
        Record the completion of a task.

        Only tasks handed to the fabric (dispatched) or parked after a
        placement failure (unplaced) can complete; a signal for any other
        task is reported as an unknown completion. A signal with malformed
        values is reported as invalid input.

        Args:
            task_id: Task the fabric finished
            execution_time: Execution time reported by the fabric
            completion_time: Simulation time at which the task finished

        Returns:
            The new CompletionRecord, or None if the signal was not recorded
        """
        task = self.tasks.get(task_id)
        if task is None or task.status not in COMPLETABLE_STATUSES:
            details = {"task_id": task_id}
            if task is None:
                logger.warning(f"Completion for unknown task {task_id} ignored")
            else:
                details["status"] = task.status
                logger.warning(f"Completion for {task.status} task {task_id} ignored")
            self._report("unknown_completion", completion_time, details)
            return None

        tier = task.assigned_tier
        backfilled = tier is None
        if backfilled:
            tier = self._resolve_tier(task_id)

        try:
            response_time = completion_time - task.arrival_time
            record = CompletionRecord(
                task_id=task.task_id,
                patient_id=task.patient_id,
                urgency=task.urgency,
                tier=tier,
                waiting_time=task.waiting_time or 0.0,
                execution_time=execution_time,
                response_time=response_time,
                expected_sla=task.expected_sla,
                sla_compliant=response_time <= task.expected_sla,
            )
        except (ValidationError, TypeError) as e:
            self._report(
                "invalid_input",
                completion_time,
                {"task_id": task_id, "reason": str(e).splitlines()[0]},
            )
            logger.warning(f"Malformed completion for task {task_id} ignored")
            return None

        if backfilled:
            task.assign_tier(tier)
            logger.info(f"Task {task_id} had no recorded tier, backfilled as {tier}")
        with self._lock:
            self._records.append(record)
        task.status = "completed"

        logger.debug(
            f"Task {task_id} completed: patient {task.patient_id} ({task.urgency.value}) "
            f"in {tier} - response {response_time:.2f}s (SLA {task.expected_sla:.2f}s)"
            f"{'' if record.sla_compliant else ' VIOLATION'}"
        )
        return record

    @property
    def records(self) -> list[CompletionRecord]:
        """Completion records in recording order (a copy)."""
        with self._lock:
            return list(self._records)

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def _resolve_tier(self, task_id: int) -> str:
        if self.fabric is None:
            return UNKNOWN_TIER
        return self.fabric.resolve_tier(task_id) or UNKNOWN_TIER

    def _report(self, kind: str, completion_time, details: dict) -> None:
        valid_time = isinstance(completion_time, (int, float)) and completion_time >= 0
        diagnostic = Diagnostic(
            time=float(completion_time) if valid_time else 0.0,
            type=kind,
            details=details,
        )
        with self._lock:
            self.diagnostics.append(diagnostic)
