"""
Configuration constants for the s3skunk download benchmark.

This module contains all configuration parameters including:
- Cloud credentials and storage coordinates
- File set definitions (labeled object-size buckets)
- Pipeline parameters (queue bounds, digest compression)
- Client retry and timeout settings
- Sweep and dataset generation tables
"""

import os
from typing import Dict, List

# =============================================================================
# FILE SIZE CONSTANTS
# =============================================================================

KiB: int = 1024
MiB: int = 1024 * KiB
GiB: int = 1024 * MiB

# =============================================================================
# CLOUD STORAGE CONFIGURATION
# =============================================================================

# Object storage configuration
BUCKET_NAME: str = os.getenv("BUCKET_NAME", "")
S3_PREFIX: str = os.getenv("S3_PREFIX", "randomdata")

# AWS S3 credentials and configuration
S3_ENDPOINT: str = os.getenv("S3_ENDPOINT", "")
AWS_ACCESS_KEY_ID: str = os.getenv("AWS_ACCESS_KEY_ID", "")
AWS_SECRET_ACCESS_KEY: str = os.getenv("AWS_SECRET_ACCESS_KEY", "")
AWS_REGION: str = os.getenv("AWS_REGION", "us-east-1")

# Cloudflare R2 credentials and configuration
R2_ENDPOINT: str = os.getenv("R2_ENDPOINT", "")
R2_ACCESS_KEY_ID: str = os.getenv("R2_ACCESS_KEY_ID", "")
R2_SECRET_ACCESS_KEY: str = os.getenv("R2_SECRET_ACCESS_KEY", "")

# =============================================================================
# FILE SETS
# =============================================================================

# Every object in a file set has exactly this many bytes
FILE_SET_SIZES: Dict[str, int] = {
    "K001": KiB,
    "K004": 4 * KiB,
    "K016": 16 * KiB,
    "K064": 64 * KiB,
    "K256": 256 * KiB,
    "M001": MiB,
    "M004": 4 * MiB,
    "M016": 16 * MiB,
    "M032": 32 * MiB,
    "M064": 64 * MiB,
    "M128": 128 * MiB,
    "M256": 256 * MiB,
}

DEFAULT_FILE_SET: str = "M001"

# =============================================================================
# RUN DEFAULTS
# =============================================================================

DEFAULT_COUNT: int = 1
DEFAULT_DOWNLOAD_MIB: int = 256
DEFAULT_ENVIRONMENT: str = "unknown"

# =============================================================================
# PIPELINE PARAMETERS
# =============================================================================

# Relay queues are sized to the worker count but never beyond this
MAX_QUEUE_SIZE: int = 1024

# t-digest compression: higher is more accurate and uses more memory
DEFAULT_COMPRESSION: float = 1000.0

# Unmerged samples held per unit of compression before a merge
DIGEST_BUFFER_FACTOR: int = 5

# Body is read and discarded in chunks of this size
BODY_CHUNK_BYTES: int = MiB

# =============================================================================
# CLIENT RETRIES AND TIMEOUTS
# =============================================================================

MAX_RETRY_ATTEMPTS: int = 10
CONNECT_TIMEOUT_SECONDS: int = 10
READ_TIMEOUT_SECONDS: int = 120

# Connection pool is sized to the worker count, capped here
MAX_POOL_CONNECTIONS: int = 4096

# =============================================================================
# DIAGNOSTICS
# =============================================================================

DIAGNOSTICS_ADDRESS: str = "127.0.0.1"
DEFAULT_DIAGNOSTICS_PORT: int = 6060

EC2_METADATA_URL: str = "http://169.254.169.254/latest/meta-data/instance-type"
EC2_METADATA_TIMEOUT_SECONDS: float = 1.0

# =============================================================================
# SWEEP CONFIGURATION
# =============================================================================

DEFAULT_SWEEP_COUNT: int = 20

# Worker counts per file set; small files run out of memory past 512 workers
SWEEP_WORKERS: Dict[str, List[int]] = {
    "K001": [8, 16, 32, 64, 128, 256, 512],
    "K004": [8, 16, 32, 64, 128, 256, 512, 1024, 2048, 4096],
    "K016": [8, 16, 32, 64, 128, 256, 512, 1024, 2048, 4096],
    "K064": [8, 16, 32, 64, 128, 256, 512, 1024, 2048, 4096],
    "K256": [8, 16, 32, 64, 128, 256, 512, 1024, 2048, 4096],
    "M001": [8, 16, 32, 64, 128, 256, 512, 1024, 2048, 4096],
    "M004": [8, 16, 32, 64, 128, 256, 512, 1024, 2048, 2560],
    "M016": [8, 16, 32, 64, 128, 256, 512, 640],
    "M032": [8, 16, 32, 64, 128, 256, 320],
    "M064": [8, 16, 32, 64, 128, 160],
    "M128": [8, 16, 32, 64, 80],
    "M256": [8, 16, 32, 40],
}

# Download volume per datapoint in a sweep
SWEEP_DOWNLOAD_MIB_KIB_SETS: int = 1024
SWEEP_DOWNLOAD_MIB_MIB_SETS: int = 10 * 1024

# =============================================================================
# DATASET GENERATION
# =============================================================================

DATASET_BYTES_KIB_SETS: int = GiB
DATASET_BYTES_MIB_SETS: int = 10 * GiB
DEFAULT_UPLOAD_CONCURRENCY: int = 32

# Bytes of object data allowed in memory across concurrent uploads
UPLOAD_MEMORY_BUDGET: int = GiB

# =============================================================================
# CLI DEFAULTS
# =============================================================================

DEFAULT_OUTPUT_DIR: str = "results"
DEFAULT_PLOTS_DIR: str = "plots"
