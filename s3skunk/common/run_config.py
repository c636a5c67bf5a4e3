"""
Validated, immutable run configuration.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from s3skunk.common.errors import ConfigurationError
from s3skunk.configuration import (
    BUCKET_NAME,
    DEFAULT_COMPRESSION,
    DEFAULT_ENVIRONMENT,
    FILE_SET_SIZES,
    MiB,
    S3_PREFIX,
)

logger = logging.getLogger(__name__)

SUPPORTED_STORAGE = ("s3", "r2")


@dataclass(frozen=True)
class FileSetSpec:
    """A labeled bucket of objects that all have the same size."""

    label: str
    size: int


def lookup_file_set(label: str) -> FileSetSpec:
    """Resolve a file set label such as ``K064`` to its size entry."""
    size = FILE_SET_SIZES.get(label)
    if size is None:
        known = ", ".join(sorted(FILE_SET_SIZES))
        raise ConfigurationError(f"unknown file set '{label}' (expected one of: {known})")
    return FileSetSpec(label=label, size=size)


@dataclass(frozen=True)
class RunConfig:
    count: int
    download_size_bytes: int
    file_set: FileSetSpec
    workers: int
    environment: str
    bucket: str
    prefix: str
    storage: str = "s3"
    compression: float = DEFAULT_COMPRESSION

    @property
    def files_needed(self) -> int:
        """Number of downloads that add up to the requested volume."""
        return self.download_size_bytes // self.file_set.size

    @property
    def file_set_prefix(self) -> str:
        """Key prefix under which the file set's objects live."""
        if not self.prefix:
            return self.file_set.label
        return f"{self.prefix.rstrip('/')}/{self.file_set.label}"


def build_run_config(
    file_set_label: str,
    download_mib: int,
    workers: int,
    count: int = 1,
    environment: str = DEFAULT_ENVIRONMENT,
    bucket: Optional[str] = None,
    prefix: Optional[str] = None,
    storage: str = "s3",
    compression: float = DEFAULT_COMPRESSION,
) -> RunConfig:
    """Validate raw run parameters and build a RunConfig.

    Raises:
        ConfigurationError: If any parameter is invalid or the parameters are
            inconsistent with each other. Nothing touches the network before
            this succeeds.
    """
    file_set = lookup_file_set(file_set_label)

    if count < 1:
        raise ConfigurationError(f"count ({count}) must be at least 1")
    if workers < 1:
        raise ConfigurationError(f"workers ({workers}) must be at least 1")
    if download_mib < 1:
        raise ConfigurationError(f"download size ({download_mib} MiB) must be at least 1 MiB")
    if compression <= 0:
        raise ConfigurationError(f"compression ({compression}) must be positive")
    if storage.lower() not in SUPPORTED_STORAGE:
        raise ConfigurationError(f"unsupported storage type '{storage}' (expected 's3' or 'r2')")

    download_size_bytes = download_mib * MiB
    if download_size_bytes % file_set.size != 0:
        raise ConfigurationError(
            f"download size ({download_mib} MiB) must be a multiple of the "
            f"file set size ({file_set.size})"
        )

    files_needed = download_size_bytes // file_set.size
    if workers > files_needed:
        raise ConfigurationError(
            f"workers ({workers}) is greater than files to download ({files_needed})"
        )

    bucket = BUCKET_NAME if bucket is None else bucket
    if not bucket:
        raise ConfigurationError("no bucket configured (use --bucket or set BUCKET_NAME)")

    config = RunConfig(
        count=count,
        download_size_bytes=download_size_bytes,
        file_set=file_set,
        workers=workers,
        environment=environment,
        bucket=bucket,
        prefix=S3_PREFIX if prefix is None else prefix,
        storage=storage.lower(),
        compression=compression,
    )
    logger.debug(f"Built run config: {config}")
    return config
