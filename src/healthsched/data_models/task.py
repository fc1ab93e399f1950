"""Task data model for healthsched."""

from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr

from healthsched.config import (
    BASE_COMPLEXITY,
    BASE_PRIORITY_SCORE,
    MAX_WAITING_BONUS,
    PAYLOAD_SIZE,
    SLA_SECONDS,
)


class Urgency(str, Enum):
    """Task criticality, in strict-priority drain order."""

    CRITICAL = "CRITICAL"
    HIGH = "HIGH"
    NORMAL = "NORMAL"


class TaskStateError(RuntimeError):
    """Raised when set-once scheduling state is written a second time."""


class VitalSigns(BaseModel):
    """Immutable vital-sign snapshot attached to a task."""

    model_config = ConfigDict(frozen=True)

    heart_rate: int = Field(ge=0, le=300, description="Heart rate in beats per minute")
    systolic_bp: int = Field(ge=0, le=300, description="Systolic blood pressure in mmHg")
    temperature: float = Field(ge=25.0, le=45.0, description="Body temperature in Celsius")
    spo2: int = Field(ge=0, le=100, description="Blood-oxygen saturation in percent")

    def __str__(self) -> str:
        return (
            f"HR:{self.heart_rate}, BP:{self.systolic_bp}, "
            f"Temp:{self.temperature:.1f}C, SpO2:{self.spo2}%"
        )


class Task(BaseModel):
    """
    A unit of healthcare IoT work moving through the scheduler.

    Identity, urgency, vitals and arrival time are fixed at construction.
    Complexity, payload size, SLA and priority score are derived from them on
    every access, so the waiting-time term of the priority score is always
    current. Waiting time and assigned tier are written exactly once, when the
    task leaves the admission queue and when it is placed.
    """

    model_config = ConfigDict(validate_assignment=True)

    task_id: int = Field(ge=0, frozen=True, description="Unique task identifier")
    patient_id: int = Field(ge=0, frozen=True, description="Patient the reading belongs to")
    urgency: Urgency = Field(frozen=True, description="Urgency classification")
    vitals: VitalSigns = Field(frozen=True, description="Vital signs at creation")
    arrival_time: float = Field(ge=0, frozen=True, description="Simulation-relative arrival time")
    status: Literal["created", "queued", "dispatched", "completed", "rejected", "unplaced"] = Field(
        default="created", description="Lifecycle state of the task"
    )

    _waiting_time: float | None = PrivateAttr(default=None)
    _assigned_tier: str | None = PrivateAttr(default=None)

    @property
    def waiting_time(self) -> float | None:
        """Queue-to-dispatch delay, None while the task is still queued."""
        return self._waiting_time

    @property
    def assigned_tier(self) -> str | None:
        """Tier the task was placed on, None until placement."""
        return self._assigned_tier

    def mark_dequeued(self, waiting_time: float) -> None:
        """Record the waiting time when the task leaves the admission queue."""
        if self._waiting_time is not None:
            raise TaskStateError(f"Task {self.task_id} waiting time already set")
        if waiting_time < 0:
            raise ValueError(f"Waiting time must be non-negative, got {waiting_time}")
        self._waiting_time = waiting_time

    def assign_tier(self, tier: str) -> None:
        """Record the tier the task was placed on."""
        if self._assigned_tier is not None:
            raise TaskStateError(
                f"Task {self.task_id} already assigned to {self._assigned_tier}"
            )
        self._assigned_tier = tier

    # Derived attributes

    @property
    def has_abnormal_vitals(self) -> bool:
        v = self.vitals
        return (
            v.heart_rate > 120 or v.heart_rate < 60
            or v.systolic_bp > 160 or v.systolic_bp < 100
            or v.temperature > 38.5
            or v.spo2 < 92
        )

    @property
    def requires_low_latency_tier(self) -> bool:
        """True for CRITICAL tasks and HIGH tasks with abnormal vitals."""
        return self.urgency == Urgency.CRITICAL or (
            self.urgency == Urgency.HIGH and self.has_abnormal_vitals
        )

    @property
    def computational_complexity(self) -> int:
        """Work units needed to process the task."""
        v = self.vitals
        complexity = BASE_COMPLEXITY[self.urgency.value]
        if self.urgency == Urgency.CRITICAL:
            if v.heart_rate > 150 or v.spo2 < 85:
                complexity += 2000
        elif self.urgency == Urgency.HIGH:
            if v.systolic_bp > 160 or v.temperature > 38.5:
                complexity += 1000
        return complexity

    @property
    def payload_size(self) -> int:
        return PAYLOAD_SIZE[self.urgency.value]

    @property
    def expected_sla(self) -> float:
        """Response-time budget in seconds."""
        return SLA_SECONDS[self.urgency.value]

    @property
    def severity_bonus(self) -> float:
        """Priority bonus from how far each vital sign deviates from normal."""
        v = self.vitals
        bonus = 0.0

        if v.heart_rate > 150 or v.heart_rate < 50:
            bonus += 10.0
        elif v.heart_rate > 120 or v.heart_rate < 60:
            bonus += 5.0

        if v.systolic_bp > 180 or v.systolic_bp < 90:
            bonus += 10.0
        elif v.systolic_bp > 160 or v.systolic_bp < 100:
            bonus += 5.0

        if v.temperature > 40.0:
            bonus += 8.0
        elif v.temperature > 38.5:
            bonus += 4.0

        if v.spo2 < 85:
            bonus += 12.0
        elif v.spo2 < 92:
            bonus += 6.0

        return bonus

    @property
    def priority_score(self) -> float:
        """Base score per urgency plus capped waiting bonus plus severity bonus."""
        waiting = self._waiting_time or 0.0
        waiting_bonus = min(waiting * 2, MAX_WAITING_BONUS)
        return BASE_PRIORITY_SCORE[self.urgency.value] + waiting_bonus + self.severity_bonus

    def __str__(self) -> str:
        """Human-readable string representation."""
        return (
            f"Task({self.task_id}, patient={self.patient_id}, {self.urgency.value}, "
            f"priority={self.priority_score:.1f}, status={self.status})"
        )

    def __repr__(self) -> str:
        """Developer-friendly representation."""
        return (
            f"Task(task_id={self.task_id}, patient_id={self.patient_id}, "
            f"urgency={self.urgency.value!r}, arrival_time={self.arrival_time}, "
            f"status={self.status!r}, waiting_time={self._waiting_time}, "
            f"assigned_tier={self._assigned_tier!r})"
        )
