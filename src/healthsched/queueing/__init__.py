"""healthsched admission queueing.

Strict-priority, bounded admission queues with per-tier statistics.
"""

from healthsched.queueing.admission import AdmissionQueue

__all__ = [
    "AdmissionQueue",
]
