# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

from __future__ import annotations

import math

import pytest
from pydantic import ValidationError

from ghgcalc.core.indicators import MONTHS, MonthRecord, TimeSeries, month_index


class TestTimeSeries:
    """Fixed 12-slot monthly storage."""

    def test_starts_filled(self):
        series = TimeSeries(fill=98.0)
        assert len(series) == 12
        assert series.to_list() == [98.0] * 12

    def test_set_reports_change(self):
        series = TimeSeries()
        assert series.set(3, 10.0) is True
        assert series.set(3, 10.0) is False
        assert series.get(3) == 10.0
        assert series.get(4) == 0.0

    def test_fill_reports_change(self):
        series = TimeSeries()
        assert series.fill(5.0) is True
        assert series.fill(5.0) is False
        assert series.to_list() == [5.0] * 12

    def test_yearly_total_counts_each_month_once(self):
        values = [0.1 * m for m in MONTHS]
        series = TimeSeries.from_lists(values)
        assert series.yearly_total() == math.fsum(values)
        assert series.yearly_total() == pytest.approx(sum(series.get(m) for m in MONTHS))

    def test_values_view_is_read_only(self):
        series = TimeSeries()
        with pytest.raises(ValueError):
            series.values[0] = 1.0

    def test_data_source_and_evidence(self):
        series = TimeSeries()
        series.set_data_source(2, "Meter readings")
        series.set_evidence(2, "file-123")
        record = series.record(2)
        assert record == MonthRecord(month=2, value=0.0, data_source="Meter readings", evidence="file-123")
        series.set_data_source(2, None)
        assert series.data_source(2) == ""

    def test_from_lists_requires_twelve_values(self):
        with pytest.raises(ValueError):
            TimeSeries.from_lists([1.0] * 11)

    def test_records_cover_all_months(self):
        records = TimeSeries(fill=1.0).records()
        assert [r.month for r in records] == list(MONTHS)


@pytest.mark.parametrize("month", [0, 13, -1])
def test_month_out_of_range(month):
    with pytest.raises(ValueError):
        month_index(month)


@pytest.mark.parametrize("month", [1.0, "1", True, None])
def test_month_must_be_int(month):
    with pytest.raises(TypeError):
        month_index(month)


def test_month_record_validates_month():
    with pytest.raises(ValidationError):
        MonthRecord(month=13)
