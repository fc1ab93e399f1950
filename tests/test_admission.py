"""Tests for AdmissionQueue."""

import concurrent.futures
import threading

import pytest

from healthsched.data_models.task import Task, Urgency
from healthsched.queueing.admission import AdmissionQueue

VITALS = {"heart_rate": 75, "systolic_bp": 120, "temperature": 36.8, "spo2": 98}


def make_task(task_id, urgency, arrival_time=0.0) -> Task:
    return Task(
        task_id=task_id,
        patient_id=task_id,
        urgency=urgency,
        vitals=VITALS,
        arrival_time=arrival_time,
    )


@pytest.fixture
def queue():
    """Create an admission queue with small capacity."""
    return AdmissionQueue(capacity=3)


def test_queue_initialization(queue):
    """Test queue starts empty."""
    assert len(queue) == 0
    assert not queue.has_pending_work()
    assert queue.dequeue_next() is None
    for urgency in Urgency:
        stats = queue.queue_statistics(urgency)
        assert stats.total_enqueued == 0
        assert stats.current_size == 0


def test_invalid_capacity():
    """Test capacity must be positive."""
    with pytest.raises(ValueError):
        AdmissionQueue(capacity=0)


def test_enqueue_marks_task_queued(queue):
    """Test a successful enqueue."""
    task = make_task(1, "HIGH")
    assert queue.enqueue(task)
    assert task.status == "queued"
    assert queue.pending_count(Urgency.HIGH) == 1
    assert queue.has_pending_work()


def test_strict_priority_order(queue):
    """Test one task per tier dequeues CRITICAL, HIGH, NORMAL."""
    queue.enqueue(make_task(1, "NORMAL"))
    queue.enqueue(make_task(2, "HIGH"))
    queue.enqueue(make_task(3, "CRITICAL"))

    tasks = queue.dequeue_all()
    assert [t.urgency for t in tasks] == [Urgency.CRITICAL, Urgency.HIGH, Urgency.NORMAL]
    assert not queue.has_pending_work()


def test_critical_drained_before_later_tiers(queue):
    """Test no HIGH or NORMAL task leaves while a CRITICAL one is queued."""
    queue.enqueue(make_task(1, "NORMAL", arrival_time=0.0))
    queue.enqueue(make_task(2, "HIGH", arrival_time=1.0))
    queue.enqueue(make_task(3, "CRITICAL", arrival_time=5.0))
    queue.enqueue(make_task(4, "CRITICAL", arrival_time=6.0))

    order = [t.task_id for t in queue.dequeue_all()]
    assert order == [3, 4, 2, 1]


def test_fifo_within_tier(queue):
    """Test earlier arrivals leave first within one tier."""
    queue.enqueue(make_task(1, "HIGH", arrival_time=2.0))
    queue.enqueue(make_task(2, "HIGH", arrival_time=0.5))
    queue.enqueue(make_task(3, "HIGH", arrival_time=1.0))

    assert [t.task_id for t in queue.dequeue_all()] == [2, 3, 1]


def test_equal_arrival_keeps_enqueue_order(queue):
    """Test ties on arrival time keep enqueue order."""
    for task_id in (5, 3, 4):
        queue.enqueue(make_task(task_id, "NORMAL", arrival_time=1.0))

    assert [t.task_id for t in queue.dequeue_all()] == [5, 3, 4]


def test_capacity_rejection(queue):
    """Test enqueue fails once a tier is full and leaves state unchanged."""
    for task_id in range(3):
        assert queue.enqueue(make_task(task_id, "CRITICAL"))

    extra = make_task(99, "CRITICAL")
    assert not queue.enqueue(extra)
    assert extra.status == "created"
    assert queue.pending_count(Urgency.CRITICAL) == 3

    stats = queue.queue_statistics("CRITICAL")
    assert stats.total_enqueued == 3
    assert stats.total_rejected == 1
    assert stats.current_size == 3


def test_capacity_is_per_tier(queue):
    """Test a full tier does not block other tiers."""
    for task_id in range(3):
        queue.enqueue(make_task(task_id, "NORMAL"))

    assert queue.enqueue(make_task(10, "CRITICAL"))
    assert queue.enqueue(make_task(11, "HIGH"))
    assert len(queue) == 5


def test_dequeue_sets_waiting_time(queue):
    """Test dequeue stamps the nominal waiting time."""
    task = make_task(1, "NORMAL")
    queue.enqueue(task)
    assert task.waiting_time is None

    assert queue.dequeue_next() is task
    assert task.waiting_time == pytest.approx(0.1)


def test_dequeue_sla_check(queue):
    """Test the dequeue-time SLA check counts a compliant dequeue."""
    queue.enqueue(make_task(1, "CRITICAL"))
    queue.dequeue_next()

    stats = queue.queue_statistics(Urgency.CRITICAL)
    assert stats.total_dequeued == 1
    assert stats.sla_compliant == 1
    assert stats.sla_violations == 0
    assert stats.sla_compliance_rate == 1.0


def test_dequeue_sla_violation():
    """Test a nominal delay above the tier SLA counts as a violation."""
    queue = AdmissionQueue(capacity=5, nominal_delay=3.0)
    queue.enqueue(make_task(1, "CRITICAL"))
    queue.enqueue(make_task(2, "HIGH"))
    queue.dequeue_all()

    assert queue.queue_statistics("CRITICAL").sla_violations == 1
    assert queue.queue_statistics("HIGH").sla_compliant == 1


def test_max_size_high_water_mark(queue):
    """Test max size keeps the largest size seen."""
    queue.enqueue(make_task(1, "HIGH"))
    queue.enqueue(make_task(2, "HIGH"))
    queue.dequeue_all()
    queue.enqueue(make_task(3, "HIGH"))

    stats = queue.queue_statistics("HIGH")
    assert stats.max_size == 2
    assert stats.current_size == 1


def test_statistics_are_snapshots(queue):
    """Test returned statistics do not change with the queue."""
    stats = queue.queue_statistics("NORMAL")
    queue.enqueue(make_task(1, "NORMAL"))
    assert stats.total_enqueued == 0
    assert queue.queue_statistics("NORMAL").total_enqueued == 1


def test_all_statistics(queue):
    """Test statistics for every tier, keyed by urgency name."""
    stats = queue.all_statistics()
    assert list(stats) == ["CRITICAL", "HIGH", "NORMAL"]


def test_evict_expired():
    """Test tasks older than their SLA are evicted."""
    queue = AdmissionQueue(capacity=5)
    queue.enqueue(make_task(1, "CRITICAL", arrival_time=0.0))
    queue.enqueue(make_task(2, "CRITICAL", arrival_time=4.0))
    queue.enqueue(make_task(3, "NORMAL", arrival_time=0.0))

    evicted = queue.evict_expired(now=5.0)
    assert [t.task_id for t in evicted] == [1]
    assert queue.pending_count(Urgency.CRITICAL) == 1

    stats = queue.queue_statistics("CRITICAL")
    assert stats.total_evicted == 1
    assert stats.sla_violations == 1
    assert stats.current_size == 1

    assert [t.task_id for t in queue.dequeue_all()] == [2, 3]


def test_concurrent_producers_and_consumer():
    """Test counters balance and no task is lost under concurrent use."""
    queue = AdmissionQueue(capacity=1000)
    producers, per_producer = 4, 150
    urgencies = list(Urgency)
    drained = []
    stop = threading.Event()

    def produce(offset):
        admitted = 0
        for i in range(per_producer):
            task_id = offset * per_producer + i
            if queue.enqueue(make_task(task_id, urgencies[task_id % 3], arrival_time=float(i))):
                admitted += 1
        return admitted

    def consume():
        while not stop.is_set():
            task = queue.dequeue_next()
            if task is not None:
                drained.append(task)

    consumer = threading.Thread(target=consume)
    consumer.start()
    with concurrent.futures.ThreadPoolExecutor(max_workers=producers) as executor:
        admitted = sum(executor.map(produce, range(producers)))
    stop.set()
    consumer.join()

    assert admitted == producers * per_producer
    for urgency in Urgency:
        stats = queue.queue_statistics(urgency)
        assert stats.total_enqueued == stats.total_dequeued + stats.current_size
        assert stats.current_size == queue.pending_count(urgency)

    remaining = queue.dequeue_all()
    ids = [task.task_id for task in drained + remaining]
    assert len(ids) == len(set(ids))
    assert set(ids) == set(range(producers * per_producer))
