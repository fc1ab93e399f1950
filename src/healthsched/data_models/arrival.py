"""Arrival data model for healthsched workloads."""

from pydantic import BaseModel, Field, model_validator

from healthsched.data_models.task import Urgency, VitalSigns


def classify_urgency(vitals: VitalSigns) -> Urgency:
    """
    Derive the urgency of a reading from its vital signs.

    Args:
        vitals: Vital-sign snapshot

    Returns:
        CRITICAL for the outer deviation bands, HIGH for the inner bands,
        NORMAL otherwise
    """
    if (
        vitals.heart_rate > 150 or vitals.heart_rate < 50
        or vitals.systolic_bp > 180 or vitals.systolic_bp < 90
        or vitals.temperature > 40.0
        or vitals.spo2 < 85
    ):
        return Urgency.CRITICAL

    if (
        vitals.heart_rate > 120 or vitals.heart_rate < 60
        or vitals.systolic_bp > 160 or vitals.systolic_bp < 100
        or vitals.temperature > 38.5
        or vitals.spo2 < 92
    ):
        return Urgency.HIGH

    return Urgency.NORMAL


class Arrival(BaseModel):
    """
    A sensor reading waiting to be submitted to the scheduler.

    When no urgency is given it is derived from the vital signs.
    """

    patient_id: int = Field(ge=0, description="Patient the reading belongs to")
    vitals: VitalSigns = Field(description="Vital signs of the reading")
    arrival_time: float = Field(ge=0, description="Simulation-relative arrival time")
    urgency: Urgency | None = Field(default=None, description="Urgency (derived if omitted)")
    condition: str = Field(default="Unknown", description="Patient condition label")

    @model_validator(mode="after")
    def fill_urgency(self) -> "Arrival":
        if self.urgency is None:
            self.urgency = classify_urgency(self.vitals)
        return self

    def __str__(self) -> str:
        return (
            f"Arrival(patient={self.patient_id}, t={self.arrival_time:.1f}, "
            f"{self.urgency.value}, {self.vitals})"
        )
