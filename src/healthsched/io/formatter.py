"""Report formatter for converting run results to console text."""

from healthsched.data_models.result import MetricsSummary, RunResult
from healthsched.data_models.stats import QueueStatistics
from healthsched.data_models.task import Urgency


class ReportFormatter:
    """
    Converts metrics and queue counters to a human-readable report.

    Format includes:
    - Queue counters per urgency
    - Response-time percentiles and throughput
    - SLA compliance overall, by urgency and by tier
    - Placement by urgency and execution efficiency
    - Edge versus cloud comparison
    - Time windows, load quarters, resource and quality indicators
    """

    def format(self, summary: MetricsSummary, stats: dict[str, QueueStatistics]) -> str:
        """
        Convert a metrics summary and queue counters to formatted text.

        Args:
            summary: Aggregated metrics of a run
            stats: Queue statistics keyed by urgency name

        Returns:
            Human-readable report
        """
        lines = []

        lines.append("=" * 70)
        lines.append(f"HEALTHCARE SCHEDULER REPORT - {summary.total_completed} tasks completed")
        lines.append("=" * 70)
        lines.append("")

        # Queues
        lines.append("ADMISSION QUEUES:")
        for urgency in Urgency:
            queue = stats.get(urgency.value)
            if queue is None:
                continue
            lines.append(
                f"  {urgency.value:<8} in: {queue.total_enqueued:4d}  out: {queue.total_dequeued:4d}  "
                f"rejected: {queue.total_rejected:3d}  evicted: {queue.total_evicted:3d}  "
                f"peak: {queue.max_size:3d}  queue SLA: {queue.sla_compliance_rate:.1%}"
            )
        lines.append("")

        # Latency
        if summary.total_completed:
            percentiles = "  ".join(f"{k}: {v:.3f}s" for k, v in summary.percentiles.items())
            lines.append(f"RESPONSE TIME: {percentiles}")
            by_tier = ", ".join(f"{t}: {v:.2f}" for t, v in summary.throughput_by_tier.items())
            lines.append(f"THROUGHPUT: {summary.throughput:.2f} tasks/s ({by_tier})")
        else:
            lines.append("RESPONSE TIME: no completed tasks")
        lines.append("")

        # SLA
        lines.append(f"SLA COMPLIANCE: {summary.sla_compliance:.1%}")
        for urgency, rate in summary.sla_by_urgency.items():
            latency = summary.latency_by_urgency.get(urgency)
            detail = f"  ({latency})" if latency is not None else ""
            lines.append(f"  {urgency:<8} {rate:.1%}{detail}")
        for tier, rate in summary.sla_by_tier.items():
            share = summary.load_distribution.get(tier, 0.0)
            lines.append(f"  {tier:<8} {rate:.1%}  (share of load: {share:.1%})")
        lines.append("")

        # Placement
        if summary.tier_distribution_by_urgency:
            lines.append("PLACEMENT BY URGENCY:")
            for urgency, counts in summary.tier_distribution_by_urgency.items():
                tiers = "  ".join(f"{tier}: {count}" for tier, count in counts.items())
                efficiency = summary.efficiency_by_urgency.get(urgency, 0.0)
                lines.append(f"  {urgency:<8} {tiers}  (efficiency: {efficiency:.1%})")
            lines.append("")

        # Tiers
        comparison = summary.tier_comparison
        if comparison.edge_mean_latency or comparison.cloud_mean_latency:
            lines.append("EDGE VS CLOUD:")
            lines.append(
                f"  mean latency  edge: {comparison.edge_mean_latency:.3f}s  "
                f"cloud: {comparison.cloud_mean_latency:.3f}s  "
                f"(cloud/edge x{comparison.latency_ratio:.2f})"
            )
            lines.append(
                f"  SLA           edge: {comparison.edge_sla_rate:.1%}  "
                f"cloud: {comparison.cloud_sla_rate:.1%}"
            )
        else:
            lines.append("EDGE VS CLOUD: needs records on both tiers")
        lines.append("")

        # Load trends
        if summary.time_windows:
            lines.append("TIME WINDOWS:")
            for window in summary.time_windows:
                lines.append(f"  {window}")
            lines.append("")
        if summary.load_quarters:
            lines.append("LOAD QUARTERS:")
            for quarter in summary.load_quarters:
                lines.append(
                    f"  Q{quarter.index} ({quarter.count} tasks)  "
                    f"latency: {quarter.mean_latency:.2f}s  waiting: {quarter.mean_waiting:.2f}s  "
                    f"SLA: {quarter.sla_compliance:.1%}"
                )
            lines.append(f"  scalability ratio: {summary.scalability_ratio:.2f}")
            lines.append("")

        # Resources and quality
        resources = summary.resources
        lines.append(
            f"RESOURCES: efficiency {resources.system_efficiency:.1%}  "
            f"utilization {resources.avg_resource_utilization:.1%}  "
            f"compute {resources.total_execution_time:.2f}s  wait {resources.total_waiting_time:.2f}s"
        )
        lines.append(
            f"QUALITY: reliability {summary.quality.reliability:.2%}  "
            f"performance index {summary.quality.performance_index:.2f}"
        )
        lines.append("")

        lines.append("=" * 70)

        return "\n".join(lines)

    def format_result(self, result: RunResult) -> str:
        """
        Format a full run result, including its diagnostics.

        Args:
            result: RunResult of a simulation

        Returns:
            Report text followed by a diagnostics section
        """
        lines = [self.format(result.metrics, result.queue_statistics)]
        lines.append(
            f"SUBMITTED: {result.submitted}  ADMITTED: {result.admitted}  "
            f"DISPATCHED: {result.dispatched}"
        )
        if result.diagnostics:
            lines.append(f"DIAGNOSTICS ({len(result.diagnostics)}):")
            for diagnostic in result.diagnostics:
                lines.append(f"  {diagnostic}")
        else:
            lines.append("DIAGNOSTICS: none")
        return "\n".join(lines)
