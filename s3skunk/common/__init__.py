"""
Common utilities for the download benchmark.
"""

from .errors import (
    BenchmarkError,
    ConfigurationError,
    DiscoveryError,
    DownloadError,
    EmptyDatasetError,
)
from .run_config import FileSetSpec, RunConfig, build_run_config, lookup_file_set
from .worker_pool import DownloadWorkerPool

__all__ = [
    'BenchmarkError', 'ConfigurationError', 'DiscoveryError', 'DownloadError',
    'EmptyDatasetError', 'FileSetSpec', 'RunConfig', 'build_run_config',
    'lookup_file_set', 'DownloadWorkerPool',
]
