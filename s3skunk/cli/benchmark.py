"""
Benchmark run coordination: one work list, one worker pool, one summary record.
"""

import asyncio
import logging
import sys
import time
from typing import List, Optional, TextIO

from s3skunk.algorithms.quantile import TDigest
from s3skunk.algorithms.work_list import build_work_list
from s3skunk.common.run_config import RunConfig
from s3skunk.common.worker_pool import DownloadWorkerPool
from s3skunk.configuration import MAX_QUEUE_SIZE, MiB
from s3skunk.persistence.record import Datapoint

logger = logging.getLogger(__name__)


def calculate_throughput_mibs(total_bytes: int, elapsed_seconds: float) -> float:
    """Throughput in MiB per second."""
    if elapsed_seconds <= 0:
        raise ValueError(f"elapsed time must be positive, got {elapsed_seconds}")
    return total_bytes / MiB / elapsed_seconds


def relay_queue_size(workers: int) -> int:
    """Relay queues follow the worker count, capped to bound memory."""
    return max(1, min(workers, MAX_QUEUE_SIZE))


async def feed_work(work_queue: asyncio.Queue, work_list: List[str], workers: int):
    """Push every key, then one shutdown signal per worker."""
    for key in work_list:
        await work_queue.put(key)
    for _ in range(workers):
        await work_queue.put(None)


async def collect_latencies(latency_queue: asyncio.Queue, digest: TDigest) -> int:
    """Drain latency samples into the digest until the shutdown signal."""
    samples = 0
    while True:
        latency = await latency_queue.get()
        if latency is None:  # Shutdown signal
            return samples
        digest.add(latency)
        samples += 1


class BenchmarkRunner:
    """Runs the download benchmark ``config.count`` times.

    The storage system must already be entered as an async context manager.
    """

    def __init__(self, config: RunConfig, storage_system, out: Optional[TextIO] = None):
        self.config = config
        self.storage_system = storage_system
        self.out = out

        logger.info(
            f"Initialized benchmark runner: {config.file_set.label} x {config.files_needed} "
            f"files with {config.workers} workers on {config.storage.upper()}"
        )

    async def run_once(self) -> Datapoint:
        """Run one benchmark repetition and return its summary record."""
        config = self.config

        work_list = await build_work_list(self.storage_system, config)

        queue_size = relay_queue_size(config.workers)
        work_queue: asyncio.Queue = asyncio.Queue(maxsize=queue_size)
        latency_queue: asyncio.Queue = asyncio.Queue(maxsize=queue_size)
        digest = TDigest(config.compression)

        feeder = asyncio.create_task(feed_work(work_queue, work_list, config.workers))
        collector = asyncio.create_task(collect_latencies(latency_queue, digest))
        pool = DownloadWorkerPool(self.storage_system, config.workers)

        try:
            start_time = time.perf_counter()
            await pool.run(work_queue, latency_queue)
            elapsed = time.perf_counter() - start_time

            await latency_queue.put(None)
            samples = await collector
            await feeder
        finally:
            for task in (feeder, collector):
                if not task.done():
                    task.cancel()
            await asyncio.gather(feeder, collector, return_exceptions=True)

        if samples != len(work_list):
            raise RuntimeError(f"collected {samples} latency samples for {len(work_list)} downloads")

        datapoint = Datapoint(
            environment=config.environment,
            file_size_bytes=config.file_set.size,
            file_size_label=config.file_set.label,
            workers=config.workers,
            total_size_bytes=config.download_size_bytes,
            elapsed_secs=elapsed,
            p50_latency=digest.quantile(0.50),
            p95_latency=digest.quantile(0.95),
            p99_latency=digest.quantile(0.99),
            throughput_mibs=calculate_throughput_mibs(config.download_size_bytes, elapsed),
        )
        logger.info(
            f"Run finished: {datapoint.throughput_mibs:.1f} MiB/s in {elapsed:.2f}s, "
            f"p50={datapoint.p50_latency * 1000:.1f}ms p99={datapoint.p99_latency * 1000:.1f}ms"
        )
        return datapoint

    def emit(self, datapoint: Datapoint):
        """Write one record as a JSON line."""
        out = self.out or sys.stdout
        print(datapoint.to_json(), file=out, flush=True)

    async def run(self) -> List[Datapoint]:
        """Run every repetition, emitting each record as soon as it exists."""
        datapoints = []
        for i in range(self.config.count):
            logger.info(f"=== Repetition {i + 1}/{self.config.count} ===")
            datapoint = await self.run_once()
            self.emit(datapoint)
            datapoints.append(datapoint)
        return datapoints
