"""Completion record data model."""

from pydantic import BaseModel, ConfigDict, Field

from healthsched.data_models.task import Urgency


class CompletionRecord(BaseModel):
    """
    Immutable outcome of one completed task.

    Created exactly once per completion signal and appended to the tracker's
    history. SLA compliance is end-to-end: total response time against the
    urgency's expected SLA.
    """

    model_config = ConfigDict(frozen=True)

    task_id: int = Field(ge=0, description="Task identifier")
    patient_id: int = Field(ge=0, description="Patient identifier")
    urgency: Urgency = Field(description="Urgency classification")
    tier: str = Field(description="Tier the task executed on")
    waiting_time: float = Field(ge=0, description="Queue-to-dispatch delay in seconds")
    execution_time: float = Field(ge=0, description="Execution time reported by the fabric")
    response_time: float = Field(description="Completion time minus arrival time")
    expected_sla: float = Field(gt=0, description="Response-time budget in seconds")
    sla_compliant: bool = Field(description="True if response_time <= expected_sla")

    def __str__(self) -> str:
        """Human-readable string representation."""
        mark = "ok" if self.sla_compliant else "VIOLATION"
        return (
            f"Record(task={self.task_id}, {self.urgency.value}, {self.tier}, "
            f"response={self.response_time:.2f}s/{self.expected_sla:.1f}s {mark})"
        )
