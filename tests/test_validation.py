#!/usr/bin/env python3
"""Tests for vehicle and service record validation."""

import math

import pytest

from models import (
    Invalid,
    MaintenanceItemConfig,
    Reason,
    ServiceLineItem,
    ServiceRecord,
    validate_service_record,
    validate_vehicle_creation,
)
from models.validation import is_valid_distance, is_valid_interval


def make_record(**overrides):
    fields = dict(
        id="r1",
        date="2025-01-15",
        odometer=10000,
        line_items=[ServiceLineItem("oil", "Engine oil")],
        special_work=None,
    )
    fields.update(overrides)
    return ServiceRecord(**fields)


class TestIsValidDistance:
    """Tests for is_valid_distance helper."""

    @pytest.mark.parametrize("value", [0, 1, 250000, 12000.0])
    def test_accepts_whole_non_negative(self, value):
        assert is_valid_distance(value)

    @pytest.mark.parametrize(
        "value", [-1, -0.5, 12.5, math.inf, math.nan, "100", None, True]
    )
    def test_rejects_everything_else(self, value):
        assert not is_valid_distance(value)

    def test_interval_must_be_positive(self):
        assert is_valid_interval(1)
        assert not is_valid_interval(0)


class TestValidateServiceRecord:
    """Tests for validate_service_record."""

    def test_valid_record(self):
        assert validate_service_record(make_record()) is None

    def test_special_work_only_is_valid(self):
        record = make_record(line_items=[], special_work="Front brake pads")
        assert validate_service_record(record) is None

    def test_vacuous_record_rejected(self):
        """No items and blank special work."""
        result = validate_service_record(make_record(line_items=[], special_work="  "))
        assert isinstance(result, Invalid)
        assert result.reason == Reason.VACUOUS_RECORD

    def test_negative_odometer_rejected(self):
        result = validate_service_record(make_record(odometer=-5))
        assert result.reason == Reason.INVALID_ODOMETER

    def test_non_finite_odometer_rejected(self):
        result = validate_service_record(make_record(odometer=math.inf))
        assert result.reason == Reason.INVALID_ODOMETER

    def test_bad_date_rejected(self):
        result = validate_service_record(make_record(date="15/01/2025"))
        assert result.reason == Reason.INVALID_DATE

    def test_message_is_str(self):
        result = validate_service_record(make_record(odometer=-5))
        assert str(result) == result.message


class TestValidateVehicleCreation:
    """Tests for validate_vehicle_creation."""

    @pytest.fixture
    def configs(self):
        return [MaintenanceItemConfig("c1", "Engine oil", 10000)]

    def test_valid(self, configs):
        assert validate_vehicle_creation("Hilux", 85000, configs) is None

    def test_blank_name(self, configs):
        result = validate_vehicle_creation("   ", 85000, configs)
        assert result.reason == Reason.BLANK_NAME

    @pytest.mark.parametrize("odometer", [-1, 10.5, "85000", None])
    def test_bad_odometer(self, configs, odometer):
        result = validate_vehicle_creation("Hilux", odometer, configs)
        assert result.reason == Reason.INVALID_ODOMETER

    def test_empty_configs_allowed(self):
        assert validate_vehicle_creation("Hilux", 0, []) is None

    def test_only_blank_configs_rejected(self):
        configs = [
            MaintenanceItemConfig("c1", "", 10000),
            MaintenanceItemConfig("c2", " ", 5000),
        ]
        result = validate_vehicle_creation("Hilux", 0, configs)
        assert result.reason == Reason.NO_ITEMS

    def test_blank_configs_ignored_when_others_remain(self, configs):
        # The blank row has a bad interval, but it is discarded anyway
        configs.append(MaintenanceItemConfig("c2", "", 0))
        assert validate_vehicle_creation("Hilux", 0, configs) is None

    def test_bad_interval(self):
        configs = [MaintenanceItemConfig("c1", "Engine oil", 0)]
        result = validate_vehicle_creation("Hilux", 0, configs)
        assert result.reason == Reason.INVALID_INTERVAL
