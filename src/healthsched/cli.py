"""Command-line interface for healthsched."""

import argparse
import json
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv

from healthsched.config import DEFAULT_PATIENTS, DEFAULT_READINGS_PER_PATIENT, SchedulerConfig

load_dotenv()

logging.basicConfig(level=logging.INFO, format='%(levelname)s: %(message)s')
logger = logging.getLogger("healthsched.cli")


def build_config(args) -> SchedulerConfig:
    """Environment settings, overridden by command-line flags."""
    overrides = {}
    if getattr(args, "queue_capacity", None) is not None:
        overrides["queue_capacity"] = args.queue_capacity
    if getattr(args, "seed", None) is not None:
        overrides["seed"] = args.seed
    if getattr(args, "evict_expired", False):
        overrides["evict_expired"] = True
    return SchedulerConfig(**overrides)


def cmd_simulate(args):
    """Run a generated workload or a scenario file and print the report."""
    from healthsched.io.formatter import ReportFormatter
    from healthsched.runner.simulation import run_generated, run_scenario
    from healthsched.workload.loader import ScenarioLoader

    config = build_config(args)

    if args.scenario:
        logger.info(f"Loading scenario: {args.scenario}")
        scenario = ScenarioLoader().load(args.scenario)
        result = run_scenario(scenario, config)
    else:
        logger.info(
            f"Generating workload: {args.patients} patients, "
            f"{args.readings} readings each"
        )
        result = run_generated(args.patients, args.readings, config=config, seed=args.seed)

    if not args.quiet:
        print(ReportFormatter().format_result(result))

    if args.output:
        output_path = Path(args.output)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with open(output_path, "w") as f:
            f.write(result.model_dump_json(indent=2))
        logger.info(f"Results saved to: {output_path}")


def cmd_show_config(args):
    """Print the effective configuration."""
    config = build_config(args)
    print(json.dumps(config.model_dump(), indent=2))


def main(argv: list[str] | None = None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="healthsched - Two-tier healthcare IoT task scheduler",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Generated workload
  healthsched simulate --patients 20 --readings 5 --seed 42

  # Scenario file
  healthsched simulate --scenario scenarios/edge_outage.json --output results.json

  # Effective settings (HEALTHSCHED_* variables and .env applied)
  healthsched show-config
"""
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # ========== simulate command ==========
    sim_parser = subparsers.add_parser(
        "simulate",
        help="Run a simulation",
        description="Feed a generated or scenario workload through the scheduler"
    )
    sim_parser.add_argument(
        "--patients",
        type=int,
        default=DEFAULT_PATIENTS,
        metavar="N",
        help=f"Number of synthetic patients (default: {DEFAULT_PATIENTS})"
    )
    sim_parser.add_argument(
        "--readings",
        type=int,
        default=DEFAULT_READINGS_PER_PATIENT,
        metavar="N",
        help=f"Readings per patient (default: {DEFAULT_READINGS_PER_PATIENT})"
    )
    sim_parser.add_argument(
        "--seed",
        type=int,
        metavar="S",
        help="Seed for the workload and network jitter"
    )
    sim_parser.add_argument(
        "--scenario",
        type=str,
        metavar="FILE",
        help="Scenario JSON file (replaces the generated workload)"
    )
    sim_parser.add_argument(
        "--queue-capacity",
        type=int,
        metavar="N",
        help="Tasks held per urgency queue"
    )
    sim_parser.add_argument(
        "--evict-expired",
        action="store_true",
        help="Evict queued tasks whose age exceeds their SLA"
    )
    sim_parser.add_argument(
        "--output",
        type=str,
        metavar="FILE",
        help="Save the full run result to a JSON file"
    )
    sim_parser.add_argument(
        "--verbose",
        action="store_true",
        help="Show per-task logs"
    )
    sim_parser.add_argument(
        "--quiet",
        action="store_true",
        help="Only warnings, no report"
    )
    sim_parser.set_defaults(func=cmd_simulate)

    # ========== show-config command ==========
    config_parser = subparsers.add_parser(
        "show-config",
        help="Print the effective configuration"
    )
    config_parser.set_defaults(func=cmd_show_config)

    # Parse and execute
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        sys.exit(1)

    if getattr(args, "verbose", False):
        logging.getLogger().setLevel(logging.DEBUG)
    elif getattr(args, "quiet", False):
        logging.getLogger().setLevel(logging.WARNING)

    try:
        args.func(args)
    except Exception as e:
        logger.error(f"Error: {e}")
        if getattr(args, "verbose", False):
            import traceback
            traceback.print_exc()
        sys.exit(1)


if __name__ == "__main__":
    main()
