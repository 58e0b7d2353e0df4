#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Operation-replay OS simulator - main entry point
"""

import argparse
import logging
import sys
import time
from contextlib import ExitStack
from typing import Dict, IO, Iterable, List, Optional

from ossim.core.arrival import ArrivalFeed
from ossim.core.config import Configuration, LogTarget
from ossim.core.engine import ExecutionEngine
from ossim.core.errors import SimulationError
from ossim.core.operation import Operation
from ossim.core.sync import OperationQueue
from ossim.core.timer import Clock
from ossim.schedulers import create_scheduler
from ossim.utils.input_parser import InputParser
from ossim.utils.visualization import Visualizer

logger = logging.getLogger(__name__)


def open_sinks(config: Configuration, stack: ExitStack,
               log_path: Optional[str] = None) -> List[IO[str]]:
    """Pick the log sinks the configuration asks for; `log_path` overrides the configured file"""
    sinks: List[IO[str]] = []
    if config.log_target in (LogTarget.MONITOR, LogTarget.BOTH):
        sinks.append(sys.stdout)
    if config.log_target in (LogTarget.FILE, LogTarget.BOTH):
        sinks.append(stack.enter_context(open(log_path or config.log_path, 'w', encoding='utf-8')))
    return sinks


def simulate(config: Configuration, operations: List[Operation],
             sinks: Iterable[IO[str]] = (), arrivals: Optional[Iterable[str]] = None,
             arrival_rounds: int = 10, arrival_interval_ms: int = 100,
             describe: bool = False, clock: Clock = time.monotonic) -> Dict:
    """
    Schedule and run one simulation

    Args:
        config: validated configuration
        operations: meta-data operations in arrival order
        sinks: text streams receiving the log
        arrivals: meta-data lines fed into the live queue during the run
        arrival_rounds: maximum number of arrival lines read
        arrival_interval_ms: pause between arrival rounds
        describe: write the configuration and metrics reports first
        clock: monotonic clock for the engine and timer

    Returns:
        engine results dictionary
    """
    scheduler = create_scheduler(config.scheduling_code, config.quantum)
    plan = scheduler.schedule(operations)
    logger.info("%s scheduling: %d processes, run order %s",
                scheduler.name, len(plan.identity), plan.identity)

    engine = ExecutionEngine(config, plan.identity, sinks, clock=clock, algorithm=scheduler.name)

    if describe:
        report = (Visualizer.configuration_report(config) + [""]
                  + Visualizer.metrics_report(config, plan.operations) + [""])
        engine.log.write_raw("\n".join(report) + "\n")

    queue = OperationQueue(plan.operations)
    feed = None
    if arrivals is not None:
        feed = ArrivalFeed(arrivals, queue, InputParser.parse_meta_line,
                           rounds=arrival_rounds, interval_ms=arrival_interval_ms)
        feed.start()
    else:
        queue.close()

    try:
        results = engine.run(queue)
    finally:
        if feed is not None:
            feed.join()

    if feed is not None:
        if feed.error is not None:
            raise feed.error
        results['arrivals'] = len(feed.arrived)
    results['identity'] = plan.identity
    return results


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog='ossim', description='Operation-replay OS simulator')
    parser.add_argument('config', help='Path to the .conf configuration file')
    parser.add_argument('--arrivals', help='Meta-data file whose lines arrive while the simulation runs')
    parser.add_argument('--arrival-rounds', type=int, default=10,
                        help='Maximum number of arrival lines read (default 10)')
    parser.add_argument('--arrival-interval', type=int, default=100,
                        help='Milliseconds between arrival rounds (default 100)')
    parser.add_argument('--describe', action='store_true',
                        help='Log the configuration and per-operation metrics before running')
    parser.add_argument('--summary', action='store_true', help='Print a per-process summary table')
    parser.add_argument('--chart', help='Save the timeline chart to this image file')
    parser.add_argument('-v', '--verbose', action='store_true', help='Enable debug logging')
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
        stream=sys.stderr,
    )

    try:
        config, operations = InputParser.load(args.config)
        with ExitStack() as stack:
            sinks = open_sinks(config, stack, InputParser.resolve_log_path(config, args.config))
            arrivals = None
            if args.arrivals:
                arrivals = stack.enter_context(open(args.arrivals, 'r', encoding='utf-8'))
            results = simulate(config, operations, sinks, arrivals=arrivals,
                               arrival_rounds=args.arrival_rounds,
                               arrival_interval_ms=args.arrival_interval,
                               describe=args.describe)
    except (SimulationError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    visualizer = Visualizer()
    if args.summary:
        visualizer.print_process_summary(results)
    if args.chart:
        visualizer.draw_timeline(results['timeline'], results['algorithm'],
                                 save_path=args.chart, show=False)
    return 0


if __name__ == "__main__":
    sys.exit(main())
