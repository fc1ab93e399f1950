"""healthsched metrics.

Derives percentile, throughput, SLA and tier-comparison statistics from
completion records.
"""

from healthsched.metrics.aggregator import MetricsAggregator, percentile

__all__ = [
    "MetricsAggregator",
    "percentile",
]
