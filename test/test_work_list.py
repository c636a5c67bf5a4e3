"""
Tests for work list construction.
"""

import asyncio
import random
from collections import Counter

import pytest
from botocore.exceptions import ClientError

from fake_storage import FakeStorage
from s3skunk.algorithms.work_list import build_work_list, expand_work_list, list_file_set_keys
from s3skunk.common.errors import ConfigurationError, DiscoveryError, EmptyDatasetError
from s3skunk.common.run_config import build_run_config
from s3skunk.configuration import KiB


def make_keys(label, count):
    return [f"randomdata/{label}/{i % 256:02x}/{i:08x}" for i in range(count)]


def test_length_matches_files_needed():
    keys = make_keys("K064", 10)
    for files_needed in (1, 3, 10, 11, 25, 1000):
        assert len(expand_work_list(keys, files_needed)) == files_needed


def test_cycles_key_set_when_more_files_needed():
    keys = make_keys("K001", 7)
    files_needed = 52

    work = expand_work_list(keys, files_needed)
    counts = Counter(work)

    assert len(work) == files_needed
    assert set(counts) == set(keys)
    assert min(counts.values()) >= files_needed // len(keys)
    assert max(counts.values()) <= files_needed // len(keys) + 1


def test_subset_when_fewer_files_needed():
    keys = make_keys("M001", 100)
    work = expand_work_list(keys, 40)

    assert len(work) == 40
    assert len(set(work)) == 40
    assert set(work) <= set(keys)


def test_each_pass_repeats_the_same_shuffle():
    keys = make_keys("K004", 5)
    work = expand_work_list(keys, 12, rng=random.Random(3))

    assert work[0:5] == work[5:10]
    assert work[10:12] == work[0:2]


def test_order_is_shuffled():
    keys = make_keys("K004", 200)
    work = expand_work_list(keys, 200, rng=random.Random(11))

    assert sorted(work) == sorted(keys)
    assert work != keys


def test_does_not_mutate_input():
    keys = make_keys("K004", 20)
    original = list(keys)
    expand_work_list(keys, 50)
    assert keys == original


def test_rejects_empty_key_set():
    with pytest.raises(EmptyDatasetError):
        expand_work_list([], 10)


def test_rejects_zero_files_needed():
    with pytest.raises(ConfigurationError):
        expand_work_list(make_keys("K001", 3), 0)


def test_listing_failure_is_discovery_error():
    error = ClientError({"Error": {"Code": "AccessDenied", "Message": "denied"}}, "ListObjectsV2")
    storage = FakeStorage([], list_error=error)

    with pytest.raises(DiscoveryError):
        asyncio.run(list_file_set_keys(storage, "randomdata/K001"))


@pytest.mark.parametrize("error", [RuntimeError("client gone"), ValueError("bad page")])
def test_any_listing_failure_is_discovery_error(error):
    storage = FakeStorage([], list_error=error)

    with pytest.raises(DiscoveryError) as excinfo:
        asyncio.run(list_file_set_keys(storage, "randomdata/K001"))

    assert excinfo.value.__cause__ is error


def test_empty_listing_is_empty_dataset_error():
    storage = FakeStorage(make_keys("K064", 5))

    with pytest.raises(EmptyDatasetError):
        asyncio.run(list_file_set_keys(storage, "randomdata/K001"))


def test_build_work_list_uses_file_set_prefix():
    keys = make_keys("K064", 16) + make_keys("K256", 16)
    storage = FakeStorage(keys)
    config = build_run_config("K064", download_mib=1, workers=4, bucket="bench", prefix="randomdata")

    work = asyncio.run(build_work_list(storage, config))

    assert storage.listed_prefixes == ["randomdata/K064"]
    assert len(work) == (1024 * KiB) // (64 * KiB)
    assert all("/K064/" in key for key in work)
