"""
Summary record produced by one benchmark run.
"""

import json
from dataclasses import dataclass
from typing import Any, Dict

# Serialized key for each field; collectors ingest records with these keys
FIELD_KEYS: Dict[str, str] = {
    "environment": "EC2Instance",
    "file_size_bytes": "FileSizeBytes",
    "file_size_label": "FileSizeLabel",
    "workers": "Goroutines",
    "total_size_bytes": "TotalSizeBytes",
    "elapsed_secs": "ElapsedSecs",
    "p50_latency": "P50Latency",
    "p95_latency": "P95Latency",
    "p99_latency": "P99Latency",
    "throughput_mibs": "ThroughputMiBs",
}


@dataclass(frozen=True)
class Datapoint:
    """One run's fixed parameters and measured results."""

    # Fixed at run time by config
    environment: str
    file_size_bytes: int
    file_size_label: str
    workers: int
    total_size_bytes: int

    # Calculated during execution
    elapsed_secs: float
    p50_latency: float  # Request to response headers, body not included
    p95_latency: float
    p99_latency: float
    throughput_mibs: float  # total_size_bytes / MiB / elapsed_secs

    def to_dict(self) -> Dict[str, Any]:
        return {key: getattr(self, name) for name, key in FIELD_KEYS.items()}

    def to_json(self) -> str:
        """Serialize as a single-line JSON object."""
        return json.dumps(self.to_dict(), separators=(",", ":"))

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Datapoint":
        return cls(**{name: data[key] for name, key in FIELD_KEYS.items()})
