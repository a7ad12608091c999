"""Tests for courier-history risk classification."""
from storefront.domain.risk import (
    CourierStats,
    RiskBand,
    RiskThresholds,
    classify_risk,
)
from conftest import courier_record


def test_many_cancellations_are_high_risk():
    assert classify_risk(courier_record("017", 10, 4, 6, 40)) is RiskBand.HIGH


def test_low_ratio_alone_is_high_risk():
    assert classify_risk(courier_record("017", 10, 4, 1, 45)) is RiskBand.HIGH


def test_cancelled_count_dominates_a_good_ratio():
    assert classify_risk(courier_record("017", 20, 18, 2, 90)) is RiskBand.MEDIUM


def test_good_history_is_low():
    assert classify_risk(courier_record("017", 20, 17, 0, 85)) is RiskBand.LOW


def test_neutral_history_is_none():
    assert classify_risk(courier_record("017", 20, 15, 1, 75)) is RiskBand.NONE


def test_no_parcels_is_none():
    assert classify_risk(courier_record("017", 0, 0, 0, 0)) is RiskBand.NONE
    assert classify_risk(None) is RiskBand.NONE


def test_thresholds_are_configurable():
    strict = RiskThresholds(high_cancelled=1)
    assert classify_risk(courier_record("017", 20, 19, 1, 95), strict) is RiskBand.HIGH

    from_config = RiskThresholds.from_config({"RISK_LOW_RATIO": 95})
    assert from_config.low_ratio == 95
    assert from_config.high_cancelled == 5
    assert classify_risk(courier_record("017", 20, 18, 0, 90), from_config) is RiskBand.NONE


def test_stats_from_upstream_payload():
    stats = CourierStats.from_payload(
        {"total_parcel": "12", "success_parcel": 10, "cancelled_parcel": None, "success_ratio": "83.3"}
    )
    assert stats == CourierStats(12, 10, 0, 83.3)
