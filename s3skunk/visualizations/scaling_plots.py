"""
Plots of throughput and latency against worker count, one series per file set.
"""

import logging
import os

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import pandas as pd
import seaborn as sns

logger = logging.getLogger(__name__)


class ScalingPlotter:
    """Plotter for how a file set scales with the number of download workers."""

    def __init__(self, data: pd.DataFrame, output_dir: str):
        self.data = data
        self.output_dir = output_dir
        os.makedirs(output_dir, exist_ok=True)

    def _ordered_sets(self):
        ordered = self.data.sort_values('file_size_bytes')['file_size_label']
        return list(dict.fromkeys(ordered))

    def _plot_against_workers(self, column: str, ylabel: str, title: str, filename: str,
                              scale: float = 1.0):
        if self.data is None or len(self.data) == 0:
            logger.warning(f"No data available for {filename}")
            return None

        plot_data = self.data.assign(value=self.data[column] * scale)

        plt.figure(figsize=(12, 7))
        sns.lineplot(
            data=plot_data,
            x='workers',
            y='value',
            hue='file_size_label',
            hue_order=self._ordered_sets(),
            estimator='median',
            errorbar=('pi', 50),
            marker='o',
        )
        plt.xscale('log', base=2)
        plt.title(title, fontsize=14)
        plt.xlabel('Workers', fontsize=12)
        plt.ylabel(ylabel, fontsize=12)
        plt.grid(True, alpha=0.3)
        plt.legend(title='File set')
        plt.tight_layout()

        output_file = os.path.join(self.output_dir, filename)
        plt.savefig(output_file, dpi=150, bbox_inches='tight')
        plt.close()

        logger.info(f"Created plot: {output_file}")
        return output_file

    def create_throughput_vs_workers(self):
        return self._plot_against_workers(
            'throughput_mibs', 'Throughput (MiB/s)',
            'Download throughput vs workers', 'throughput_vs_workers.png')

    def create_latency_vs_workers(self):
        return self._plot_against_workers(
            'p99_latency', 'p99 latency (ms)',
            'p99 time-to-response vs workers', 'p99_latency_vs_workers.png', scale=1000.0)

    def create_all_plots(self):
        plots = [
            self.create_throughput_vs_workers(),
            self.create_latency_vs_workers(),
        ]
        return [p for p in plots if p is not None]
