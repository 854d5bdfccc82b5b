#!/usr/bin/env python3
"""Tests for calculation helper functions."""
from models import calc_due_distance, check_status, Status


class TestCalcDueDistance:
    """Tests for calc_due_distance helper function."""

    def test_with_history(self):
        """last_service + interval when the item was serviced."""
        assert calc_due_distance(10000, 10000, 19500) == 20000

    def test_without_history_uses_current(self):
        """current + interval when the item was never serviced."""
        assert calc_due_distance(0, 5000, 3000) == 8000

    def test_with_history_ignores_current(self):
        assert calc_due_distance(50000, 7500, 90000) == 57500


class TestCheckStatus:
    """Tests for check_status helper function."""

    def test_overdue(self):
        """OVERDUE when remaining is negative."""
        assert check_status(-1) == Status.OVERDUE
        assert check_status(-1000) == Status.OVERDUE

    def test_due_soon(self):
        """DUE_SOON when 0 <= remaining < 1000."""
        assert check_status(0) == Status.DUE_SOON
        assert check_status(500) == Status.DUE_SOON
        assert check_status(999) == Status.DUE_SOON

    def test_ok(self):
        """OK from 1000 remaining upwards."""
        assert check_status(1000) == Status.OK
        assert check_status(5000) == Status.OK

    def test_custom_threshold(self):
        assert check_status(1500, soon_threshold=2000) == Status.DUE_SOON
