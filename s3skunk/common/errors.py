"""
Error taxonomy for benchmark runs.

Every error here aborts the current run; none is converted into a partial
result.
"""


class BenchmarkError(Exception):
    """Base class for errors that abort a benchmark run."""


class ConfigurationError(BenchmarkError):
    """Run parameters are invalid or inconsistent."""


class DiscoveryError(BenchmarkError):
    """Listing the object keys of a file set failed."""


class EmptyDatasetError(BenchmarkError):
    """Listing succeeded but the file set holds no objects."""


class DownloadError(BenchmarkError):
    """An object fetch failed after the client's own retries."""

    def __init__(self, key: str, cause: Exception):
        super().__init__(f"error downloading {key}: {cause}")
        self.key = key
        self.cause = cause
