"""
Async base class for S3-compatible object storage systems.
"""

import logging
import time
from typing import List

import aioboto3
from botocore.config import Config

from s3skunk.configuration import (
    BODY_CHUNK_BYTES,
    CONNECT_TIMEOUT_SECONDS,
    MAX_POOL_CONNECTIONS,
    MAX_RETRY_ATTEMPTS,
    READ_TIMEOUT_SECONDS,
)

logger = logging.getLogger(__name__)


class ObjectStorageSystem:
    """Async object storage client shared read-only by all download workers.

    Retries for transient errors are handled entirely by botocore's standard
    retry mode; callers see only the final outcome of each request.
    """

    def __init__(
        self,
        endpoint: str,
        bucket_name: str,
        credentials: dict,
        max_connections: int = 10,
    ):
        self.endpoint = endpoint or None
        self.bucket_name = bucket_name
        self.credentials = credentials
        self.max_connections = max_connections

        self._config = self._create_config()

        # Empty credentials fall through to the default provider chain
        self.session = aioboto3.Session(
            aws_access_key_id=credentials.get("access_key_id") or None,
            aws_secret_access_key=credentials.get("secret_access_key") or None,
            region_name=credentials.get("region_name", "auto"),
        )

        self.client = None
        self._client_context = None

        logger.info(
            f"Initialized async storage for {endpoint or 'default endpoint'} "
            f"(bucket={bucket_name}, max_pool_connections={self._config.max_pool_connections})"
        )

    def _create_config(self) -> Config:
        """Create the botocore config: pool sized to concurrency, standard retries."""
        pool_size = min(max(self.max_connections, 10), MAX_POOL_CONNECTIONS)

        return Config(
            max_pool_connections=pool_size,
            connect_timeout=CONNECT_TIMEOUT_SECONDS,
            read_timeout=READ_TIMEOUT_SECONDS,
            # Standard mode backs off exponentially with a cap and, unlike
            # adaptive mode, applies no client-side rate limiting
            retries={
                "max_attempts": MAX_RETRY_ATTEMPTS,
                "mode": "standard",
            },
            tcp_keepalive=True,
        )

    async def __aenter__(self):
        """Async context manager entry."""
        self._client_context = self.session.client(
            "s3",
            endpoint_url=self.endpoint,
            config=self._config,
        )
        self.client = await self._client_context.__aenter__()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        if self._client_context is not None:
            await self._client_context.__aexit__(exc_type, exc_val, exc_tb)
        self._client_context = None
        self.client = None

    def _require_client(self):
        if not self.client:
            raise RuntimeError("Storage client not initialized. Use async context manager.")
        return self.client

    async def list_keys(self, prefix: str) -> List[str]:
        """List every object key under ``prefix``.

        Errors from the listing call propagate unchanged.
        """
        client = self._require_client()
        keys: List[str] = []

        paginator = client.get_paginator("list_objects_v2")
        pages = 0
        async for page in paginator.paginate(Bucket=self.bucket_name, Prefix=prefix):
            pages += 1
            for obj in page.get("Contents", []):
                keys.append(obj["Key"])

        logger.info(f"Listed {len(keys)} objects under {prefix} ({pages} pages)")
        return keys

    async def fetch_object(self, key: str) -> float:
        """Download a whole object, discarding its body.

        Returns:
            Seconds from issuing the request until the response headers
            arrived. Reading the body is not included.
        """
        client = self._require_client()

        start = time.perf_counter()
        response = await client.get_object(Bucket=self.bucket_name, Key=key)
        latency = time.perf_counter() - start

        # Drain fully so the connection goes back to the pool
        async with response["Body"] as body:
            while await body.read(BODY_CHUNK_BYTES):
                pass

        return latency

    async def put_object(self, key: str, data: bytes) -> None:
        """Upload a small object in a single request."""
        client = self._require_client()
        await client.put_object(Bucket=self.bucket_name, Key=key, Body=data)

