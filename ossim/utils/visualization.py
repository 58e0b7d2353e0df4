"""
Visualisation module: timeline chart and run reports
"""

import matplotlib.pyplot as plt
import matplotlib.patches as mpatches
from typing import Dict, List

from ossim.core.config import Configuration, LogTarget
from ossim.core.engine import TimelineEntry
from ossim.core.operation import DeviceClass, Operation, OperationKind
from ossim.core.process import ProcessState


class Visualizer:
    """Simulation result visualisation"""

    def __init__(self):
        # per-process colours
        self.colors = plt.cm.Set3.colors
        self.waiting_color = '#FFE5E5'

    def draw_timeline(self, timeline: List[TimelineEntry], algorithm_name: str,
                      save_path: str = None, show: bool = True):
        """
        Draw the timeline of timed operations per process

        Args:
            timeline: timeline entries from the engine results
            algorithm_name: scheduler name for the title
            save_path: output image path (None to skip saving)
            show: whether to open a window
        """
        if not timeline:
            print(f"No timeline data for {algorithm_name}")
            return

        fig, ax = plt.subplots(figsize=(16, 6))

        ordinals = sorted(set(entry.ordinal for entry in timeline))
        ordinal_to_y = {ordinal: idx for idx, ordinal in enumerate(ordinals)}

        for entry in timeline:
            y_pos = ordinal_to_y[entry.ordinal]

            if entry.state == ProcessState.WAITING:
                color = self.waiting_color
                alpha = 0.7
            else:
                color = self.colors[entry.ordinal % len(self.colors)]
                alpha = 1.0 if entry.kind == OperationKind.PROCESS else 0.6

            ax.barh(y_pos, entry.duration, left=entry.start_time, height=0.8,
                    color=color, alpha=alpha, edgecolor='black', linewidth=0.5)

            # label only spans wide enough to read
            if entry.duration > 0.05:
                ax.text(entry.start_time + entry.duration / 2, y_pos, entry.label,
                        ha='center', va='center', fontsize=7)

        ax.set_yticks(range(len(ordinals)))
        ax.set_yticklabels([f'Process {ordinal}' for ordinal in ordinals])
        ax.set_xlabel('Elapsed time (s)', fontsize=12)
        ax.set_ylabel('Process', fontsize=12)
        ax.set_title(f'Timeline - {algorithm_name}', fontsize=14, fontweight='bold')
        ax.grid(axis='x', alpha=0.3)

        legend_elements = [
            mpatches.Patch(color=self.colors[1], label='Processing / Memory'),
            mpatches.Patch(color=self.waiting_color, alpha=0.7, label='I/O (Waiting)')
        ]
        ax.legend(handles=legend_elements, loc='upper right')

        plt.tight_layout()

        if save_path:
            plt.savefig(save_path, dpi=150, bbox_inches='tight')
            print(f"Timeline chart saved to {save_path}")

        if show:
            plt.show()
        else:
            plt.close(fig)

    @staticmethod
    def configuration_report(config: Configuration) -> List[str]:
        """Configuration dump, one entry per line"""
        lines = ["Configuration File Data"]
        for device in DeviceClass:
            lines.append(f"{device.value} = {config.cycle_time(device)} ms/cycle")

        if config.log_target == LogTarget.MONITOR:
            lines.append("Logged to: monitor")
        elif config.log_target == LogTarget.FILE:
            lines.append(f"Logged to: {config.log_path}")
        else:
            lines.append(f"Logged to: monitor and {config.log_path}")
        return lines

    @staticmethod
    def metrics_report(config: Configuration, operations: List[Operation]) -> List[str]:
        """Simulated time of each operation; begin/finish markers are skipped"""
        lines = ["Meta-Data Metrics"]
        for op in operations:
            if op.device is None:
                continue
            lines.append(f"{op} - {config.cycle_time(op.device) * op.cycles} ms")
        return lines

    @staticmethod
    def print_process_summary(results: Dict):
        """
        Print per-process details for one run

        Args:
            results: engine run results
        """
        print(f"\n{'='*80}")
        print(f"Process summary - {results['algorithm']}")
        print(f"{'='*80}")
        print(f"{'Process':<10} {'Run order':>10} {'State':>10} {'Operations':>12} "
              f"{'I/O':>6} {'Turnaround (s)':>16}")
        print(f"{'-'*80}")

        for pcb in results['processes']:
            turnaround = pcb.turnaround_time
            turnaround_str = f"{turnaround:.6f}" if turnaround is not None else 'N/A'
            print(f"{pcb.ordinal:<10} "
                  f"{pcb.position + 1:>10} "
                  f"{pcb.state.value:>10} "
                  f"{pcb.operations_run:>12} "
                  f"{pcb.io_operations:>6} "
                  f"{turnaround_str:>16}")

        print(f"{'='*80}\n")
