"""healthsched completion tracking.

Records end-to-end response times and SLA compliance of finished tasks.
"""

from healthsched.tracking.tracker import CompletionTracker

__all__ = [
    "CompletionTracker",
]
