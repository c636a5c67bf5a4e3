"""
Async download worker pool: N workers draining a shared bounded work queue.
"""

import asyncio
import logging
from typing import List, Optional

from s3skunk.common.errors import DownloadError

logger = logging.getLogger(__name__)


class DownloadWorkerPool:
    """Fixed-size pool of download workers.

    Workers take keys from ``work_queue`` until they receive a ``None``
    shutdown signal, fetch each object in full, and push the request latency
    into ``latency_queue``. Workers start as soon as they are scheduled; their
    first requests are deliberately not synchronized.
    """

    def __init__(self, storage_system, workers: int):
        """Initialize the pool.

        Args:
            storage_system: Async storage system shared by all workers
            workers: Number of concurrent workers
        """
        if workers < 1:
            raise ValueError(f"workers must be at least 1, got {workers}")
        self.storage_system = storage_system
        self.workers = workers
        self.completed = 0

    async def run(self, work_queue: asyncio.Queue, latency_queue: asyncio.Queue) -> int:
        """Run all workers until the work queue is closed and drained.

        Returns:
            Number of downloads completed.

        Raises:
            DownloadError: On the first failed download. The remaining workers
                are cancelled; no partial result survives.
        """
        self.completed = 0

        tasks: List[asyncio.Task] = [
            asyncio.create_task(self._worker_task(i, work_queue, latency_queue))
            for i in range(self.workers)
        ]
        logger.debug(f"Started {len(tasks)} download workers")

        try:
            await asyncio.gather(*tasks)
        except BaseException:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

        logger.debug(f"All {self.workers} workers finished after {self.completed} downloads")
        return self.completed

    async def _worker_task(self, worker_id: int, work_queue: asyncio.Queue,
                           latency_queue: asyncio.Queue):
        """Download keys from the work queue until the shutdown signal."""
        downloads = 0
        while True:
            key: Optional[str] = await work_queue.get()
            if key is None:  # Shutdown signal
                break

            latency = await self._download(worker_id, key)
            downloads += 1
            self.completed += 1
            await latency_queue.put(latency)

        logger.debug(f"Worker {worker_id} stopping after {downloads} downloads")

    async def _download(self, worker_id: int, key: str) -> float:
        try:
            return await self.storage_system.fetch_object(key)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.error(f"Worker {worker_id}: error downloading {key}: {e}")
            raise DownloadError(key, e) from e
