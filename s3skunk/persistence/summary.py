"""
Loading and aggregating datapoint files for analysis.
"""

import json
import logging
from typing import Iterable, Optional

import pandas as pd

from s3skunk.persistence.record import FIELD_KEYS

logger = logging.getLogger(__name__)

# Column names in analysis frames
COLUMNS = list(FIELD_KEYS)


def load_datapoints(paths: Iterable[str]) -> pd.DataFrame:
    """Load JSON-lines datapoint files into one DataFrame.

    Lines that are not datapoint records (blank lines, stray log output) are
    skipped with a warning.
    """
    rows = []
    rename = {key: name for name, key in FIELD_KEYS.items()}

    for path in paths:
        with open(path) as f:
            for line_no, line in enumerate(f, start=1):
                line = line.strip()
                if not line:
                    continue
                try:
                    record = json.loads(line)
                except json.JSONDecodeError:
                    logger.warning(f"Skipping non-JSON line {path}:{line_no}")
                    continue
                if not isinstance(record, dict) or not set(rename).issubset(record):
                    logger.warning(f"Skipping non-datapoint line {path}:{line_no}")
                    continue
                rows.append({rename[key]: record[key] for key in rename})

    data = pd.DataFrame(rows, columns=COLUMNS)
    logger.info(f"Loaded {len(data)} datapoints")
    return data


def summarize_datapoints(data: pd.DataFrame) -> pd.DataFrame:
    """Aggregate repetitions per (environment, file set, workers).

    Returns one row per group with the number of runs, median and mean
    throughput, and median latency percentiles, ordered by file size then
    worker count.
    """
    if data is None or len(data) == 0:
        return pd.DataFrame(columns=[
            'environment', 'file_size_label', 'file_size_bytes', 'workers', 'runs',
            'throughput_median_mibs', 'throughput_mean_mibs',
            'p50_median', 'p95_median', 'p99_median',
        ])

    grouped = data.groupby(
        ['environment', 'file_size_label', 'file_size_bytes', 'workers'], as_index=False
    ).agg(
        runs=('throughput_mibs', 'size'),
        throughput_median_mibs=('throughput_mibs', 'median'),
        throughput_mean_mibs=('throughput_mibs', 'mean'),
        p50_median=('p50_latency', 'median'),
        p95_median=('p95_latency', 'median'),
        p99_median=('p99_latency', 'median'),
    )
    return grouped.sort_values(['file_size_bytes', 'workers']).reset_index(drop=True)


def save_summary(summary: pd.DataFrame, parquet_path: Optional[str]) -> Optional[str]:
    """Write the summary to Parquet if a path is given."""
    if not parquet_path:
        return None
    summary.to_parquet(parquet_path, index=False)
    logger.info(f"Saved summary of {len(summary)} groups to {parquet_path}")
    return parquet_path
