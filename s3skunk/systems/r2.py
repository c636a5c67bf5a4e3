"""
Cloudflare R2 object storage system implementation.
"""

import logging

from s3skunk.configuration import R2_ENDPOINT
from s3skunk.systems.base import ObjectStorageSystem

logger = logging.getLogger(__name__)


class R2System(ObjectStorageSystem):
    """Cloudflare R2 object storage system."""

    def __init__(self, bucket_name: str, credentials: dict = None, max_connections: int = 10):
        if credentials is None:
            credentials = {}

        super().__init__(
            endpoint=R2_ENDPOINT,
            bucket_name=bucket_name,
            credentials=credentials,
            max_connections=max_connections,
        )
        logger.info("Initialized R2 system")
