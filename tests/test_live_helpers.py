# -*- coding: utf-8 -*-
"""Tests for live comment parsing, phases and session index prediction."""

from datetime import datetime, timedelta, timezone

import pytest

from src.live.comments import extract_product_codes
from src.live.phases import (
    EVENING,
    MORNING,
    LivePhaseKey,
    determine_live_phase,
    parse_facebook_time,
)
from src.live.session_index import (
    SessionIndexPrediction,
    predict_session_index,
    prediction_accuracy,
    reconcile_session_index,
)

NOW = datetime(2025, 10, 18, 5, 0, 0, tzinfo=timezone.utc)


class TestExtractProductCodes:
    """Test bracketed code extraction."""

    def test_bracketed_codes(self):
        assert extract_product_codes("chốt [N217] size M, thêm [n55L] nha") == ["N217", "N55L"]

    def test_bare_codes_ignored(self):
        assert extract_product_codes("N217 giá bao nhiêu") == []

    def test_duplicates_removed(self):
        assert extract_product_codes("[N1] [N2] [n1]") == ["N1", "N2"]

    @pytest.mark.parametrize("text", [None, "", "[P12]", "[N]"])
    def test_no_codes(self, text):
        assert extract_product_codes(text) == []


class TestLivePhase:
    """Test morning/evening phase assignment in UTC+7."""

    def test_morning(self):
        # 03:40 UTC is 10:40 local
        assert determine_live_phase("2025-10-18T03:40:00+0000") == LivePhaseKey(
            "2025-10-18", MORNING
        )

    def test_cutoff_is_morning(self):
        assert determine_live_phase("2025-10-18T05:30:00+0000").phase_type == MORNING

    def test_after_cutoff_is_evening(self):
        assert determine_live_phase("2025-10-18T05:31:00+0000").phase_type == EVENING

    def test_local_date_rolls_over(self):
        # 18:00 UTC is 01:00 local the next day
        phase = determine_live_phase("2025-10-18T18:00:00+0000")
        assert phase == LivePhaseKey("2025-10-19", MORNING)

    def test_iso_format_with_colon_offset(self):
        parsed = parse_facebook_time("2025-10-18T10:40:00+07:00")
        assert parsed == datetime(2025, 10, 18, 3, 40, tzinfo=timezone.utc)

    def test_naive_datetime_is_utc(self):
        parsed = parse_facebook_time(datetime(2025, 10, 18, 3, 40))
        assert parsed.tzinfo is not None
        assert parsed.hour == 3

    def test_invalid_time(self):
        with pytest.raises(ValueError):
            parse_facebook_time("không phải thời gian")


class TestPredictSessionIndex:
    """Test provisional session index prediction."""

    def test_first_order(self):
        prediction = predict_session_index([], now=NOW)
        assert prediction.predicted == 1
        assert prediction.confidence == "high"

    def test_next_after_max(self):
        orders = [
            {"session_index": 2, "created_time": NOW - timedelta(hours=1)},
            {"session_index": "3", "created_time": NOW - timedelta(minutes=30)},
        ]
        prediction = predict_session_index(orders, now=NOW)
        assert prediction.predicted == 4
        assert prediction.confidence == "high"

    def test_concurrent_orders_low_confidence(self):
        orders = [
            {"session_index": 2, "created_time": NOW - timedelta(seconds=1)},
            {"session_index": 3, "created_time": NOW - timedelta(seconds=2)},
        ]
        prediction = predict_session_index(orders, now=NOW)
        assert prediction.predicted == 4
        assert prediction.confidence == "low"
        assert "2 orders" in prediction.reasoning

    def test_orders_without_index_ignored(self):
        orders = [{"session_index": None, "created_time": NOW}, {"session_index": "abc"}]
        assert predict_session_index(orders, now=NOW).predicted == 1


class TestReconcileSessionIndex:
    """Test reconciliation with the order system's index."""

    def test_correct_prediction(self):
        result = reconcile_session_index("c1", "u1", SessionIndexPrediction(4, "high"), "4")
        assert result.is_correct
        assert result.session_index == 4
        assert result.correction is None

    def test_wrong_prediction_recorded(self):
        result = reconcile_session_index(
            "c1", "u1", SessionIndexPrediction(4, "low"), 5, now=NOW
        )
        assert not result.is_correct
        assert result.session_index == 5
        assert result.correction.predicted == 4
        assert result.correction.actual == 5
        assert result.correction.confidence == "low"
        assert result.correction.created_at == NOW

    def test_invalid_actual(self):
        with pytest.raises(ValueError):
            reconcile_session_index("c1", "u1", SessionIndexPrediction(1, "high"), "x")

    def test_accuracy(self):
        results = [
            reconcile_session_index("c1", "u1", SessionIndexPrediction(1, "high"), 1),
            reconcile_session_index("c2", "u1", SessionIndexPrediction(2, "high"), 3),
        ]
        assert prediction_accuracy(results) == 0.5
        assert prediction_accuracy([]) == 1.0
