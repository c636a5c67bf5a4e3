"""
AWS S3 object storage system implementation.
"""

import logging

from s3skunk.configuration import S3_ENDPOINT
from s3skunk.systems.base import ObjectStorageSystem

logger = logging.getLogger(__name__)


class AWSSystem(ObjectStorageSystem):
    """AWS S3 object storage system."""

    def __init__(self, bucket_name: str, credentials: dict = None, max_connections: int = 10):
        if credentials is None:
            credentials = {}

        super().__init__(
            endpoint=S3_ENDPOINT,
            bucket_name=bucket_name,
            credentials=credentials,
            max_connections=max_connections,
        )
        logger.info("Initialized AWS S3 system")
