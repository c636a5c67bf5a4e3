"""
Factory module for creating storage system instances.
"""

import logging

# Quiet the AWS client stack before anything imports it
logging.getLogger('botocore').setLevel(logging.CRITICAL)
logging.getLogger('botocore.credentials').setLevel(logging.CRITICAL)
logging.getLogger('boto3').setLevel(logging.CRITICAL)
logging.getLogger('aioboto3').setLevel(logging.CRITICAL)
logging.getLogger('aiobotocore').setLevel(logging.CRITICAL)
logging.getLogger('urllib3').setLevel(logging.CRITICAL)

from s3skunk.common.errors import ConfigurationError
from s3skunk.configuration import (
    AWS_ACCESS_KEY_ID,
    AWS_REGION,
    AWS_SECRET_ACCESS_KEY,
    R2_ACCESS_KEY_ID,
    R2_SECRET_ACCESS_KEY,
)
from s3skunk.systems.aws import AWSSystem
from s3skunk.systems.r2 import R2System

logger = logging.getLogger(__name__)


def create_storage_system(storage_type: str, bucket_name: str, max_connections: int = 10):
    """Create and return the appropriate storage system based on type.

    Args:
        storage_type: Storage type ('r2' or 's3')
        bucket_name: Bucket holding the file sets
        max_connections: Expected request concurrency, used to size the connection pool

    Returns:
        Storage system instance (R2System or AWSSystem)

    Raises:
        ConfigurationError: If storage_type is not supported
    """
    storage_type = storage_type.lower()

    if storage_type == "r2":
        credentials = {
            "access_key_id": R2_ACCESS_KEY_ID,
            "secret_access_key": R2_SECRET_ACCESS_KEY,
            "region_name": "auto",
        }
        return R2System(bucket_name, credentials, max_connections=max_connections)

    elif storage_type == "s3":
        credentials = {
            "access_key_id": AWS_ACCESS_KEY_ID,
            "secret_access_key": AWS_SECRET_ACCESS_KEY,
            "region_name": AWS_REGION,
        }
        return AWSSystem(bucket_name, credentials, max_connections=max_connections)

    else:
        raise ConfigurationError(f"Unsupported storage type: {storage_type}. Must be 'r2' or 's3'.")
