"""
Parameter sweep: run the benchmark across file sets and worker counts.
"""

import logging
import os
from typing import Dict, List, Optional, Sequence

from s3skunk.cli.benchmark import BenchmarkRunner
from s3skunk.common.errors import ConfigurationError
from s3skunk.common.run_config import RunConfig, build_run_config
from s3skunk.configuration import (
    SWEEP_DOWNLOAD_MIB_KIB_SETS,
    SWEEP_DOWNLOAD_MIB_MIB_SETS,
    SWEEP_WORKERS,
)
from s3skunk.persistence.record import Datapoint

logger = logging.getLogger(__name__)


def sweep_download_mib(label: str) -> int:
    if label.startswith("M"):
        return SWEEP_DOWNLOAD_MIB_MIB_SETS
    return SWEEP_DOWNLOAD_MIB_KIB_SETS


def plan_sweep(
    count: int,
    environment: str,
    sets: Optional[Sequence[str]] = None,
    table: Optional[Dict[str, List[int]]] = None,
    **config_kwargs,
) -> List[RunConfig]:
    """Expand the sweep table into validated run configs.

    File sets run largest first; worker counts run in table order. Every
    config is validated before any of them runs.
    """
    table = table or SWEEP_WORKERS
    labels = list(sets) if sets else list(table)
    unknown = [label for label in labels if label not in table]
    if unknown:
        raise ConfigurationError(f"no sweep worker counts for file sets: {', '.join(unknown)}")

    plan = []
    for label in sorted(labels, reverse=True):
        for workers in table[label]:
            plan.append(build_run_config(
                file_set_label=label,
                download_mib=sweep_download_mib(label),
                workers=workers,
                count=count,
                environment=environment,
                **config_kwargs,
            ))
    return plan


class SweepRunner:
    """Runs each planned config and appends its records to ``<SET>.out``."""

    def __init__(self, plan: List[RunConfig], storage_system, output_dir: str):
        self.plan = plan
        self.storage_system = storage_system
        self.output_dir = output_dir

        os.makedirs(output_dir, exist_ok=True)
        logger.info(f"Initialized sweep of {len(plan)} configurations into {output_dir}")

    def output_path(self, label: str) -> str:
        return os.path.join(self.output_dir, f"{label}.out")

    async def run(self) -> List[Datapoint]:
        datapoints = []
        for i, config in enumerate(self.plan, start=1):
            logger.info(
                f"Sweep step {i}/{len(self.plan)}: set={config.file_set.label} "
                f"workers={config.workers} download={config.download_size_bytes} bytes"
            )
            runner = BenchmarkRunner(config, self.storage_system)
            with open(self.output_path(config.file_set.label), "a") as out:
                for _ in range(config.count):
                    datapoint = await runner.run_once()
                    runner.emit(datapoint)
                    out.write(datapoint.to_json() + "\n")
                    out.flush()
                    datapoints.append(datapoint)
        return datapoints
