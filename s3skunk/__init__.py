"""
s3skunk: download throughput and latency benchmark for S3-compatible object storage.
"""

__version__ = "0.1.0"
