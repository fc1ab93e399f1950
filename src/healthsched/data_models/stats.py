"""Queue statistics data model."""

from pydantic import BaseModel, Field


class QueueStatistics(BaseModel):
    """
    Counters for one urgency queue.

    The SLA counters track the queueing-delay check made at dequeue time,
    not the end-to-end check made when the task completes.
    """

    tier: str = Field(description="Urgency tier the counters belong to")
    total_enqueued: int = Field(default=0, ge=0, description="Tasks accepted into the queue")
    total_dequeued: int = Field(default=0, ge=0, description="Tasks that left the queue")
    total_rejected: int = Field(default=0, ge=0, description="Tasks refused at capacity")
    total_evicted: int = Field(default=0, ge=0, description="Tasks evicted past their SLA")
    current_size: int = Field(default=0, ge=0, description="Tasks waiting right now")
    max_size: int = Field(default=0, ge=0, description="Largest size observed")
    sla_compliant: int = Field(default=0, ge=0, description="Dequeues within the SLA")
    sla_violations: int = Field(default=0, ge=0, description="Dequeues or evictions past the SLA")

    @property
    def sla_compliance_rate(self) -> float:
        """Share of SLA checks that passed (1.0 when nothing was checked)."""
        checked = self.sla_compliant + self.sla_violations
        return self.sla_compliant / checked if checked > 0 else 1.0

    def __str__(self) -> str:
        """Human-readable string representation."""
        return (
            f"QueueStatistics({self.tier}: in={self.total_enqueued}, "
            f"out={self.total_dequeued}, size={self.current_size}/{self.max_size}, "
            f"sla={self.sla_compliant}/{self.sla_compliant + self.sla_violations})"
        )
