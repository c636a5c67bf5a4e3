"""
Tests for dataset generation.
"""

import asyncio
import unittest
from unittest.mock import patch

from fake_storage import FakeStorage
from s3skunk.cli.uploader import Uploader, dataset_size_for, object_key
from s3skunk.common.errors import ConfigurationError
from s3skunk.common.run_config import lookup_file_set
from s3skunk.configuration import GiB, KiB, MiB


class TestUploader(unittest.TestCase):
    """Test cases for Uploader."""

    def test_object_key_layout(self):
        self.assertEqual(object_key("randomdata", "K001", 0), "randomdata/K001/00/00000000")
        self.assertEqual(object_key("randomdata", "K001", 0x1ab), "randomdata/K001/ab/000001ab")
        self.assertEqual(object_key("", "M256", 5), "M256/05/00000005")

    def test_dataset_sizes(self):
        self.assertEqual(dataset_size_for(lookup_file_set("K256")), GiB)
        self.assertEqual(dataset_size_for(lookup_file_set("M016")), 10 * GiB)

    def test_plan_counts(self):
        uploader = Uploader(FakeStorage([]), "randomdata")
        self.assertEqual(len(uploader.plan("M256")), 40)
        self.assertEqual(len(uploader.plan("K004", dataset_bytes=MiB)), 256)

    def test_plan_rejects_unknown_set(self):
        uploader = Uploader(FakeStorage([]), "randomdata")
        with self.assertRaises(ConfigurationError):
            uploader.plan("X999")

    def test_upload_file_set(self):
        storage = FakeStorage([])
        uploader = Uploader(storage, "randomdata", concurrency=4, seed=1)

        written = asyncio.run(uploader.upload_file_set("K004", dataset_bytes=64 * KiB))

        self.assertEqual(written, 16)
        self.assertEqual(len(storage.uploads), 16)
        self.assertTrue(all(size == 4 * KiB for size in storage.uploads.values()))
        self.assertIn("randomdata/K004/0f/0000000f", storage.uploads)

    def test_memory_budget_limits_concurrent_uploads(self):
        storage = FakeStorage([], delay=0.001)
        uploader = Uploader(storage, "randomdata", concurrency=8, seed=1)

        with patch("s3skunk.cli.uploader.UPLOAD_MEMORY_BUDGET", 8 * KiB):
            written = asyncio.run(uploader.upload_file_set("K004", dataset_bytes=64 * KiB))

        self.assertEqual(written, 16)
        self.assertEqual(storage.max_uploads_in_flight, 2)

    def test_upload_concurrency_without_budget_pressure(self):
        storage = FakeStorage([], delay=0.001)
        uploader = Uploader(storage, "randomdata", concurrency=4, seed=1)

        asyncio.run(uploader.upload_file_set("K004", dataset_bytes=64 * KiB))

        self.assertEqual(storage.max_uploads_in_flight, 4)


if __name__ == '__main__':
    unittest.main()
