"""Tests for Task data model."""

import pytest
from pydantic import ValidationError

from healthsched.data_models.task import Task, TaskStateError, Urgency, VitalSigns

NORMAL_VITALS = {"heart_rate": 75, "systolic_bp": 120, "temperature": 36.8, "spo2": 98}


def make_task(urgency, task_id=1, **vitals) -> Task:
    return Task(
        task_id=task_id,
        patient_id=7,
        urgency=urgency,
        vitals={**NORMAL_VITALS, **vitals},
        arrival_time=0.0,
    )


def test_task_creation():
    """Test basic task creation."""
    task = make_task("HIGH")
    assert task.urgency == Urgency.HIGH
    assert task.status == "created"
    assert task.waiting_time is None
    assert task.assigned_tier is None
    assert isinstance(task.vitals, VitalSigns)


def test_critical_task_with_extreme_vitals():
    """Test CRITICAL task with very high heart rate and low SpO2."""
    task = make_task(Urgency.CRITICAL, heart_rate=160, spo2=80)
    assert task.computational_complexity == 7000
    assert task.payload_size == 100
    assert task.expected_sla == 2.0
    assert task.requires_low_latency_tier


def test_critical_task_base_complexity():
    """Test CRITICAL task without the extreme-vitals surcharge."""
    assert make_task("CRITICAL").computational_complexity == 5000


def test_high_task_complexity():
    """Test HIGH complexity surcharge for high blood pressure or fever."""
    assert make_task("HIGH").computational_complexity == 8000
    assert make_task("HIGH", systolic_bp=170).computational_complexity == 9000
    assert make_task("HIGH", temperature=39.0).computational_complexity == 9000
    assert make_task("HIGH").payload_size == 250
    assert make_task("HIGH").expected_sla == 10.0


def test_normal_task_attributes():
    """Test NORMAL task ignores vitals for complexity."""
    task = make_task("NORMAL", heart_rate=170, spo2=80)
    assert task.computational_complexity == 25000
    assert task.payload_size == 1000
    assert task.expected_sla == 60.0
    assert not task.requires_low_latency_tier


@pytest.mark.parametrize(
    "vitals",
    [
        {"heart_rate": 121},
        {"heart_rate": 59},
        {"systolic_bp": 161},
        {"systolic_bp": 99},
        {"temperature": 38.6},
        {"spo2": 91},
    ],
)
def test_abnormal_vitals(vitals):
    """Test each abnormal-vitals threshold on its own."""
    task = make_task("HIGH", **vitals)
    assert task.has_abnormal_vitals
    assert task.requires_low_latency_tier


def test_boundary_vitals_are_normal():
    """Test the threshold values themselves count as normal."""
    task = make_task(
        "HIGH", heart_rate=120, systolic_bp=160, temperature=38.5, spo2=92
    )
    assert not task.has_abnormal_vitals
    assert not task.requires_low_latency_tier


def test_severity_bonus():
    """Test severity bonus bands."""
    assert make_task("NORMAL").severity_bonus == 0.0
    assert make_task("NORMAL", heart_rate=130).severity_bonus == 5.0
    assert make_task("NORMAL", heart_rate=160).severity_bonus == 10.0
    assert make_task("NORMAL", heart_rate=45).severity_bonus == 10.0
    assert make_task("NORMAL", systolic_bp=185).severity_bonus == 10.0
    assert make_task("NORMAL", temperature=39.0).severity_bonus == 4.0
    assert make_task("NORMAL", temperature=40.5).severity_bonus == 8.0
    assert make_task("NORMAL", spo2=90).severity_bonus == 6.0
    assert make_task("NORMAL", spo2=80).severity_bonus == 12.0


def test_priority_score_before_dequeue():
    """Test priority score is base plus severity while the task waits."""
    task = make_task("CRITICAL", heart_rate=160, spo2=80)
    assert task.priority_score == 122.0
    assert make_task("HIGH").priority_score == 50.0
    assert make_task("NORMAL").priority_score == 10.0


def test_priority_score_monotonic_in_waiting_time():
    """Test priority score grows with waiting time up to the cap."""
    scores = []
    for wait in [0.0, 0.5, 1.0, 5.0, 9.9, 10.0, 15.0, 100.0]:
        task = make_task("HIGH", temperature=39.0)
        task.mark_dequeued(wait)
        scores.append(task.priority_score)

    assert scores == sorted(scores)
    assert scores[0] == 54.0
    assert scores[2] == 56.0
    # Waiting bonus is capped at 20
    assert scores[5] == scores[6] == scores[7] == 74.0


def test_waiting_time_set_once():
    """Test waiting time cannot be written twice."""
    task = make_task("NORMAL")
    task.mark_dequeued(0.1)
    assert task.waiting_time == 0.1

    with pytest.raises(TaskStateError):
        task.mark_dequeued(0.2)
    assert task.waiting_time == 0.1


def test_negative_waiting_time_rejected():
    """Test negative waiting time is refused."""
    task = make_task("NORMAL")
    with pytest.raises(ValueError):
        task.mark_dequeued(-1.0)
    assert task.waiting_time is None


def test_assigned_tier_set_once():
    """Test placement cannot be overwritten."""
    task = make_task("HIGH")
    task.assign_tier("edge")

    with pytest.raises(TaskStateError):
        task.assign_tier("cloud")
    assert task.assigned_tier == "edge"


def test_identity_fields_are_frozen():
    """Test urgency and vitals cannot change after creation."""
    task = make_task("NORMAL")
    with pytest.raises(ValidationError):
        task.urgency = Urgency.CRITICAL
    with pytest.raises(ValidationError):
        task.vitals = VitalSigns(**NORMAL_VITALS)


def test_status_validation():
    """Test status only accepts known lifecycle states."""
    task = make_task("NORMAL")
    task.status = "queued"
    assert task.status == "queued"
    with pytest.raises(ValidationError):
        task.status = "lost"


def test_invalid_vitals():
    """Test out-of-range vital signs are rejected."""
    with pytest.raises(ValidationError):
        make_task("NORMAL", heart_rate=400)
    with pytest.raises(ValidationError):
        make_task("NORMAL", spo2=120)


def test_invalid_urgency():
    """Test unknown urgency is rejected."""
    with pytest.raises(ValidationError):
        make_task("URGENT")


def test_negative_arrival_time_rejected():
    """Test arrival time must be non-negative."""
    with pytest.raises(ValidationError):
        Task(task_id=1, patient_id=1, urgency="NORMAL", vitals=NORMAL_VITALS, arrival_time=-1.0)


def test_task_str():
    """Test string representation."""
    task = make_task("CRITICAL", task_id=3)
    assert "Task(3" in str(task)
    assert "CRITICAL" in str(task)
    assert "assigned_tier=None" in repr(task)
