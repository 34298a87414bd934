"""Timestamp formatting tests."""

from datetime import datetime

import pytest

from annotator.core.clock import local_timestamp, utc_isoformat
from tests.conftest import assert_iso_timestamp


@pytest.mark.unit
@pytest.mark.parametrize("moment,expected", [
    (datetime(2025, 3, 7, 9, 5, 1), "2025/3/7 09:05:01"),
    (datetime(2024, 12, 31, 23, 59, 59), "2024/12/31 23:59:59"),
    (datetime(2025, 1, 1, 0, 0, 0), "2025/1/1 00:00:00"),
])
def test_local_timestamp(moment, expected):
    assert local_timestamp(moment) == expected


@pytest.mark.unit
def test_utc_isoformat():
    assert_iso_timestamp(utc_isoformat())
