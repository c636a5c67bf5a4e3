"""
Execution environment detection for labeling datapoints.
"""

import logging

import psutil
import requests

from s3skunk.configuration import (
    DEFAULT_ENVIRONMENT,
    EC2_METADATA_TIMEOUT_SECONDS,
    EC2_METADATA_URL,
)

logger = logging.getLogger(__name__)


def detect_instance_type() -> str:
    """Ask the EC2 metadata service for the instance type, or 'unknown'."""
    try:
        response = requests.get(EC2_METADATA_URL, timeout=EC2_METADATA_TIMEOUT_SECONDS)
        response.raise_for_status()
        instance_type = response.text.strip()
    except requests.RequestException as e:
        logger.warning(f"Could not detect EC2 instance type: {e}")
        return DEFAULT_ENVIRONMENT

    logger.info(f"Detected EC2 instance type: {instance_type}")
    return instance_type or DEFAULT_ENVIRONMENT


def resolve_environment(label: str) -> str:
    """Return the environment label, resolving 'auto' via instance metadata."""
    if label == "auto":
        return detect_instance_type()
    return label


def default_worker_count() -> int:
    """One worker per logical CPU."""
    return psutil.cpu_count(logical=True) or 1
