"""
Work list construction: which object keys a run downloads, in which order.
"""

import logging
import random
from typing import List, Optional, Sequence

from s3skunk.common.errors import ConfigurationError, DiscoveryError, EmptyDatasetError
from s3skunk.common.run_config import RunConfig

logger = logging.getLogger(__name__)


async def list_file_set_keys(storage_system, prefix: str) -> List[str]:
    """List the keys of one file set.

    Raises:
        DiscoveryError: If the listing call fails.
        EmptyDatasetError: If no objects exist under the prefix.
    """
    try:
        keys = await storage_system.list_keys(prefix)
    except Exception as e:
        raise DiscoveryError(f"failed to list objects under '{prefix}': {e}") from e

    if not keys:
        raise EmptyDatasetError(f"no objects found for file set under '{prefix}'")
    return keys


def expand_work_list(
    keys: Sequence[str], files_needed: int, rng: Optional[random.Random] = None
) -> List[str]:
    """Shuffle ``keys`` once and cycle through them until ``files_needed`` are taken.

    Random order keeps caches on either side from favouring a fixed access
    pattern. The last pass is truncated, so every key appears at least
    ``files_needed // len(keys)`` times.
    """
    if files_needed < 1:
        raise ConfigurationError(f"configuration results in {files_needed} files to download")
    if not keys:
        raise EmptyDatasetError("cannot build a work list from an empty key set")

    shuffled = list(keys)
    (rng or random).shuffle(shuffled)

    passes, remainder = divmod(files_needed, len(shuffled))
    work = shuffled * passes + shuffled[:remainder]

    if passes > 1 or (passes == 1 and remainder):
        logger.info(
            f"Key set of {len(shuffled)} objects reused across "
            f"{passes + (1 if remainder else 0)} passes"
        )
    return work


async def build_work_list(storage_system, config: RunConfig) -> List[str]:
    """Build the randomized, volume-matched download list for one run."""
    keys = await list_file_set_keys(storage_system, config.file_set_prefix)
    work = expand_work_list(keys, config.files_needed)
    logger.info(
        f"Built work list of {len(work)} downloads from {len(keys)} "
        f"{config.file_set.label} objects"
    )
    return work
