"""
In-memory stand-in for the object storage collaborator.
"""

import asyncio
from collections import Counter


class FakeStorage:
    """Serves a fixed key listing and records every fetch."""

    def __init__(self, keys, latency=0.01, fail_keys=(), list_error=None, delay=0.0):
        self.keys = list(keys)
        self.latency = latency
        self.fail_keys = set(fail_keys)
        self.list_error = list_error
        self.delay = delay
        self.fetches = Counter()
        self.listed_prefixes = []
        self.uploads = {}
        self.uploads_in_flight = 0
        self.max_uploads_in_flight = 0

    async def list_keys(self, prefix):
        self.listed_prefixes.append(prefix)
        if self.list_error is not None:
            raise self.list_error
        return [key for key in self.keys if key.startswith(prefix)]

    async def fetch_object(self, key):
        await asyncio.sleep(self.delay)
        if key in self.fail_keys:
            raise ConnectionError(f"connection reset fetching {key}")
        self.fetches[key] += 1
        return self.latency

    async def put_object(self, key, data):
        self.uploads_in_flight += 1
        self.max_uploads_in_flight = max(self.max_uploads_in_flight, self.uploads_in_flight)
        await asyncio.sleep(self.delay)
        self.uploads_in_flight -= 1
        self.uploads[key] = len(data)

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        return None
