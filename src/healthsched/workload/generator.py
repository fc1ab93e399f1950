"""Synthetic healthcare IoT workload generator."""

import logging
import random

from pydantic import BaseModel, Field

from healthsched.config import DEFAULT_PATIENTS, DEFAULT_READINGS_PER_PATIENT, READING_INTERVAL
from healthsched.data_models.arrival import Arrival
from healthsched.data_models.task import Urgency, VitalSigns

logger = logging.getLogger("healthsched.workload")

CONDITIONS = ("Healthy", "Hypertension", "Diabetes", "Cardiac", "Post-Surgery")

EMERGENCY_RATE = 0.05
"""Share of readings replaced by an emergency reading."""


class PatientProfile(BaseModel):
    """Baseline description of a monitored patient."""

    patient_id: int = Field(ge=0)
    age: int = Field(ge=0, le=130)
    condition: str

    def __str__(self) -> str:
        return f"Patient {self.patient_id} ({self.age}y, {self.condition})"


class WorkloadGenerator:
    """
    Generates seeded synthetic vital-sign readings.

    Each patient gets a random condition which skews the distribution of their
    vitals (elevated heart rate for cardiac patients, raised blood pressure for
    hypertension, fever after surgery). A small share of readings fall into
    emergency ranges, and about 5% of all readings are then replaced by full
    emergency readings. Urgency is derived from the vitals.
    """

    def __init__(
        self,
        seed: int | None = None,
        reading_interval: float = READING_INTERVAL,
    ) -> None:
        """
        Initialize the generator.

        Args:
            seed: Random seed (None for a non-reproducible workload)
            reading_interval: Seconds between readings of one patient
        """
        self.rng = random.Random(seed)
        self.reading_interval = reading_interval

    def generate(
        self,
        patients: int = DEFAULT_PATIENTS,
        readings_per_patient: int = DEFAULT_READINGS_PER_PATIENT,
    ) -> list[Arrival]:
        """
        Generate readings for a patient population.

        Args:
            patients: Number of patients
            readings_per_patient: Readings generated for each patient

        Returns:
            Arrivals sorted by arrival time, then patient id
        """
        if patients < 0 or readings_per_patient < 0:
            raise ValueError("patients and readings_per_patient must be non-negative")

        arrivals = []
        for patient_id in range(1, patients + 1):
            profile = self.profile(patient_id)
            for reading in range(readings_per_patient):
                vitals = self.vitals(profile)
                arrivals.append(
                    Arrival(
                        patient_id=patient_id,
                        vitals=vitals,
                        arrival_time=reading * self.reading_interval,
                        condition=profile.condition,
                    )
                )

        injected = self._inject_emergencies(arrivals)
        arrivals.sort(key=lambda a: (a.arrival_time, a.patient_id))

        counts = {u.value: 0 for u in Urgency}
        for arrival in arrivals:
            counts[arrival.urgency.value] += 1
        logger.info(
            f"Generated {len(arrivals)} readings for {patients} patients "
            f"({injected} emergencies injected): {counts}"
        )
        return arrivals

    def profile(self, patient_id: int) -> PatientProfile:
        return PatientProfile(
            patient_id=patient_id,
            age=25 + self.rng.randrange(65),
            condition=self.rng.choice(CONDITIONS),
        )

    def vitals(self, profile: PatientProfile) -> VitalSigns:
        """Draw one vital-sign reading for a patient."""
        return VitalSigns(
            heart_rate=self._heart_rate(profile.condition),
            systolic_bp=self._systolic_bp(profile.condition),
            temperature=self._temperature(profile.condition),
            spo2=self._spo2(profile.condition),
        )

    def _heart_rate(self, condition: str) -> int:
        rate = 60 + self.rng.randrange(40)
        if condition == "Cardiac":
            rate += self.rng.randrange(40)
        elif condition == "Post-Surgery":
            rate += self.rng.randrange(30)
        elif condition == "Hypertension":
            rate += self.rng.randrange(20)

        if self.rng.random() < 0.05:
            rate = 140 + self.rng.randrange(60)
        return min(200, rate)

    def _systolic_bp(self, condition: str) -> int:
        bp = 110 + self.rng.randrange(30)
        if condition == "Hypertension":
            bp += 20 + self.rng.randrange(30)
        elif condition == "Post-Surgery" and self.rng.random() < 0.5:
            # Medication can lower it
            bp -= self.rng.randrange(20)

        if self.rng.random() < 0.03:
            bp = 180 + self.rng.randrange(40)
        return max(80, min(250, bp))

    def _temperature(self, condition: str) -> float:
        temp = 36.0 + self.rng.random() * 2.0
        if condition == "Post-Surgery" and self.rng.random() < 0.15:
            temp += 1.0 + self.rng.random() * 2.0

        if self.rng.random() < 0.02:
            temp = 39.0 + self.rng.random() * 2.0
        return round(temp, 1)

    def _spo2(self, condition: str) -> int:
        spo2 = 95 + self.rng.randrange(5)
        if condition == "Cardiac" and self.rng.random() < 0.1:
            spo2 -= self.rng.randrange(10)

        if self.rng.random() < 0.03:
            spo2 = 80 + self.rng.randrange(10)
        return max(70, min(100, spo2))

    def _inject_emergencies(self, arrivals: list[Arrival]) -> int:
        """Replace a share of readings with emergency readings, in place."""
        if not arrivals:
            return 0

        count = max(1, int(len(arrivals) * EMERGENCY_RATE))
        for _ in range(count):
            index = self.rng.randrange(len(arrivals))
            original = arrivals[index]
            arrivals[index] = Arrival(
                patient_id=original.patient_id,
                vitals=VitalSigns(
                    heart_rate=180 + self.rng.randrange(20),
                    systolic_bp=200 + self.rng.randrange(30),
                    temperature=round(41.0 + self.rng.random() * 2.0, 1),
                    spo2=75 + self.rng.randrange(10),
                ),
                arrival_time=original.arrival_time,
                urgency=Urgency.CRITICAL,
                condition="Emergency",
            )
        return count
