"""Tests for cache key derivation."""

import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent))

from keys import result_key, results_storage_key, round3, saved_key


def test_round3_pads_and_rounds():
    assert round3(40.0) == "40.000"
    assert round3(40.0004) == "40.000"
    assert round3(40.0006) == "40.001"
    assert round3(-73.9999) == "-74.000"


def test_key_format():
    assert result_key("cafe", 40.0001, -73.9999) == "cafe:40.000,-74.000"


def test_same_bucket_same_key():
    assert result_key("cafe", 40.0001, -73.9999) == result_key("cafe", 40.0004, -73.9996)


def test_neighbouring_bucket_differs():
    assert result_key("cafe", 40.0001, -73.9999) != result_key("cafe", 40.0016, -73.9999)


def test_type_is_part_of_key():
    assert result_key("cafe", 40.0, -74.0) != result_key("bar", 40.0, -74.0)


def test_storage_keys():
    assert results_storage_key("park", 1.23456, 2.0) == "nearby:park:1.235,2.000"
    assert saved_key("bakery") == "saved:bakery"
