"""Simulation driver feeding a workload through the scheduler."""

import itertools
import logging
import time

from healthsched.config import SchedulerConfig
from healthsched.data_models.arrival import Arrival
from healthsched.data_models.result import RunResult
from healthsched.runner.fabric import SimulatedFabric
from healthsched.scheduler import Scheduler
from healthsched.workload.generator import WorkloadGenerator
from healthsched.workload.loader import ScenarioConfig

logger = logging.getLogger("healthsched.runner")


class SimulationRunner:
    """
    Runs workloads through a scheduler and a simulated fabric.

    Orchestrates the interaction between:
    - Scheduler (admission, placement, tracking)
    - SimulatedFabric (execution and completion times)
    - MetricsAggregator (through Scheduler.metrics)

    Arrivals sharing an arrival time form one batch: the batch is submitted,
    then the queue is drained and every task dispatched. Completions are fed
    back once all batches have been dispatched.

    Every run starts from a fresh scheduler and fabric.
    """

    def __init__(
        self,
        config: SchedulerConfig | None = None,
        edge_rates: list[float] | None = None,
        cloud_rates: list[float] | None = None,
    ) -> None:
        """
        Initialize the runner.

        Args:
            config: Scheduler settings (defaults if None)
            edge_rates: Edge resource rates (default fleet if None)
            cloud_rates: Cloud resource rates (default fleet if None)
        """
        self.config = config or SchedulerConfig()
        self.edge_rates = edge_rates
        self.cloud_rates = cloud_rates
        self.fabric: SimulatedFabric | None = None
        self.scheduler: Scheduler | None = None

    def run(self, arrivals: list[Arrival], scenario: str | None = None) -> RunResult:
        """
        Run a complete simulation.

        Args:
            arrivals: Readings to submit, in any order
            scenario: Optional scenario name for the result

        Returns:
            RunResult with records, queue statistics, diagnostics and metrics
        """
        start_time = time.time()
        self.fabric = SimulatedFabric(edge_rates=self.edge_rates, cloud_rates=self.cloud_rates)
        self.scheduler = scheduler = Scheduler(self.fabric, self.config)

        submitted = 0
        admitted = 0
        dispatched = 0

        ordered = sorted(arrivals, key=lambda a: a.arrival_time)
        for arrival_time, batch in itertools.groupby(ordered, key=lambda a: a.arrival_time):
            for arrival in batch:
                submitted += 1
                submission = scheduler.submit(
                    arrival.patient_id, arrival.urgency, arrival.vitals, arrival.arrival_time
                )
                if submission.admitted:
                    admitted += 1

            # Dispatch happens once the nominal queueing delay has passed
            self.fabric.clock = arrival_time + self.config.nominal_queue_delay
            placements = scheduler.dispatch_pending(now=arrival_time)
            dispatched += sum(1 for p in placements if p.placed)

        for completion in self.fabric.drain_completions():
            scheduler.on_completion(
                completion.task_id, completion.execution_time, completion.completion_time
            )

        execution_time = time.time() - start_time
        result = RunResult(
            scenario=scenario,
            submitted=submitted,
            admitted=admitted,
            dispatched=dispatched,
            records=scheduler.list_completion_records(),
            queue_statistics=scheduler.queue.all_statistics(),
            tier_assignments=scheduler.load.snapshot(),
            diagnostics=list(scheduler.diagnostics),
            metrics=scheduler.metrics(),
            execution_time=execution_time,
        )

        logger.info(
            f"Run {scenario or 'unnamed'} finished: {len(result.records)}/{submitted} "
            f"completed, SLA {result.metrics.sla_compliance:.1%}, "
            f"{len(result.diagnostics)} diagnostics ({execution_time:.2f}s)"
        )
        return result


def run_generated(
    patients: int,
    readings_per_patient: int,
    config: SchedulerConfig | None = None,
    seed: int | None = None,
) -> RunResult:
    """
    Generate a workload and run it on the default fleet.

    Args:
        patients: Number of synthetic patients
        readings_per_patient: Readings per patient
        config: Scheduler settings (defaults if None)
        seed: Workload seed

    Returns:
        RunResult of the run
    """
    arrivals = WorkloadGenerator(seed=seed).generate(patients, readings_per_patient)
    return SimulationRunner(config).run(arrivals, scenario="generated")


def run_scenario(scenario: ScenarioConfig, config: SchedulerConfig | None = None) -> RunResult:
    """
    Run a loaded scenario.

    The scenario's fleet replaces the default fleet and its queue capacity,
    when set, overrides the config.

    Args:
        scenario: Validated scenario
        config: Base scheduler settings (defaults if None)

    Returns:
        RunResult of the run
    """
    config = config or SchedulerConfig()
    if scenario.queue_capacity is not None:
        config = config.model_copy(update={"queue_capacity": scenario.queue_capacity})

    arrivals = list(scenario.arrivals)
    if scenario.generate is not None:
        generator = WorkloadGenerator(seed=scenario.generate.seed)
        arrivals.extend(
            generator.generate(scenario.generate.patients, scenario.generate.readings_per_patient)
        )

    runner = SimulationRunner(
        config, edge_rates=scenario.edge_rates, cloud_rates=scenario.cloud_rates
    )
    return runner.run(arrivals, scenario=scenario.name)
