"""
Dataset generation: upload the random objects that make up each file set.
"""

import asyncio
import logging
import time
from typing import List, Optional

import numpy as np

from s3skunk.common.run_config import FileSetSpec, lookup_file_set
from s3skunk.configuration import (
    DATASET_BYTES_KIB_SETS,
    DATASET_BYTES_MIB_SETS,
    DEFAULT_UPLOAD_CONCURRENCY,
    MiB,
    UPLOAD_MEMORY_BUDGET,
)

logger = logging.getLogger(__name__)


def dataset_size_for(file_set: FileSetSpec) -> int:
    """Default dataset volume: 1 GiB for KiB-sized sets, 10 GiB for MiB-sized sets."""
    if file_set.label.startswith("M"):
        return DATASET_BYTES_MIB_SETS
    return DATASET_BYTES_KIB_SETS


def object_key(prefix: str, label: str, index: int) -> str:
    """Key of the ``index``-th object in a file set.

    Objects are spread over 256 sub-prefixes by the last two hex digits of
    their index.
    """
    base = f"{index:08x}"
    parts = [prefix.rstrip("/")] if prefix else []
    parts.extend([label, base[-2:], base])
    return "/".join(parts)


class Uploader:
    """Uploads random objects of a file set's size."""

    def __init__(self, storage_system, prefix: str, concurrency: int = DEFAULT_UPLOAD_CONCURRENCY,
                 seed: Optional[int] = None):
        self.storage_system = storage_system
        self.prefix = prefix
        self.concurrency = concurrency
        self.rng = np.random.default_rng(seed)

        logger.info(f"Initialized uploader with concurrency {concurrency}")

    def plan(self, label: str, dataset_bytes: Optional[int] = None) -> List[str]:
        """Keys to upload for one file set."""
        file_set = lookup_file_set(label)
        dataset_bytes = dataset_bytes or dataset_size_for(file_set)
        files_to_make = dataset_bytes // file_set.size
        return [object_key(self.prefix, label, i) for i in range(files_to_make)]

    async def upload_file_set(self, label: str, dataset_bytes: Optional[int] = None) -> int:
        """Upload one file set; returns the number of objects written."""
        file_set = lookup_file_set(label)
        keys = self.plan(label, dataset_bytes)

        # Never hold more than the memory budget in random payloads at once
        concurrency = max(1, min(self.concurrency, UPLOAD_MEMORY_BUDGET // file_set.size, len(keys)))
        pending = iter(keys)

        logger.info(f"{label}: Making {len(keys)} files of {file_set.size} bytes")
        start_time = time.time()

        async def upload_worker():
            # Workers share one iterator, so each key is taken exactly once
            for key in pending:
                data = self.rng.bytes(file_set.size)
                await self.storage_system.put_object(key, data)

        workers = [asyncio.create_task(upload_worker()) for _ in range(concurrency)]
        try:
            await asyncio.gather(*workers)
        except BaseException:
            for worker in workers:
                worker.cancel()
            await asyncio.gather(*workers, return_exceptions=True)
            raise

        upload_time = time.time() - start_time
        total_mib = len(keys) * file_set.size / MiB
        logger.info(
            f"{label}: Uploaded {len(keys)} objects ({total_mib:.0f} MiB) in {upload_time:.2f} seconds"
        )
        return len(keys)

    async def upload_file_sets(self, labels: List[str], dataset_bytes: Optional[int] = None) -> int:
        total = 0
        for label in labels:
            total += await self.upload_file_set(label, dataset_bytes)
        return total
