# -*- coding: utf-8 -*-
"""Session index prediction and reconciliation.

Creating an order in TPOS takes a few seconds, and TPOS assigns each
customer's orders an increasing session index. To show the order at once,
the index is predicted locally (highest known index + 1) and written as a
provisional value. When TPOS answers, the prediction is compared with the
real index:

    prediction = predict_session_index(recent_orders, now)
    ... insert provisional row with prediction.predicted ...
    result = reconcile_session_index(comment_id, user_id, prediction, actual)
    ... update row with result.session_index ...
    if result.correction: ... insert correction record ...

Mismatches are expected when a customer comments several times within a
few seconds; they are recorded for monitoring, not prevented.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Iterable, List, Mapping, Optional

import pandas as pd

logger = logging.getLogger(__name__)

PREDICTION_WINDOW_SECONDS = 5
RECENT_ORDERS_LIMIT = 5

HIGH = "high"
LOW = "low"


@dataclass
class SessionIndexPrediction:
    predicted: int
    confidence: str  # "high" or "low"
    reasoning: str = ""


@dataclass
class SessionIndexCorrection:
    """Monitoring record for a wrong prediction."""

    comment_id: str
    facebook_user_id: str
    predicted: int
    actual: int
    confidence: str
    created_at: datetime


@dataclass
class ReconciliationResult:
    session_index: int
    is_correct: bool
    correction: Optional[SessionIndexCorrection] = None


def _to_utc(value: Any) -> Optional[datetime]:
    if value is None:
        return None
    timestamp = pd.to_datetime(value, utc=True, errors="coerce")
    if pd.isna(timestamp):
        return None
    return timestamp.to_pydatetime()


def _to_index(value: Any) -> Optional[int]:
    if value is None:
        return None
    try:
        return int(float(str(value).strip()))
    except (ValueError, OverflowError):
        return None


def _recent_indexes(recent_orders: Iterable[Mapping[str, Any]]) -> List[Mapping[str, Any]]:
    orders = []
    for order in recent_orders:
        index = _to_index(order.get("session_index"))
        if index is None:
            continue
        orders.append({"session_index": index, "created_time": order.get("created_time")})
    orders.sort(key=lambda o: o["session_index"], reverse=True)
    return orders[:RECENT_ORDERS_LIMIT]


def predict_session_index(
    recent_orders: Iterable[Mapping[str, Any]],
    now: Optional[datetime] = None,
    window_seconds: float = PREDICTION_WINDOW_SECONDS,
) -> SessionIndexPrediction:
    """Predict the next session index of one customer.

    Args:
        recent_orders: The customer's known orders, each with `session_index`
            and `created_time`. Orders without an index are ignored.
        now: Current time (UTC); defaults to the system clock.
        window_seconds: Orders created this recently count as concurrent.

    Returns:
        SessionIndexPrediction. Confidence is "low" when more than one of the
        most recent orders was created within the window.
    """
    orders = _recent_indexes(recent_orders)

    if not orders:
        return SessionIndexPrediction(
            predicted=1, confidence=HIGH, reasoning="First order for this user"
        )

    if now is None:
        now = datetime.now(timezone.utc)
    elif now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)

    max_index = orders[0]["session_index"]
    window = timedelta(seconds=window_seconds)

    concurrent = 0
    for order in orders:
        created = _to_utc(order["created_time"])
        if created is not None and now - created < window:
            concurrent += 1

    if concurrent > 1:
        confidence = LOW
        reasoning = (
            f"{concurrent} orders created within {window_seconds:g}s "
            "(race condition risk)"
        )
    else:
        confidence = HIGH
        reasoning = "Normal prediction"

    logger.info(f"Predicted session index {max_index + 1} (confidence: {confidence})")
    return SessionIndexPrediction(
        predicted=max_index + 1, confidence=confidence, reasoning=reasoning
    )


def reconcile_session_index(
    comment_id: str,
    facebook_user_id: str,
    prediction: SessionIndexPrediction,
    actual: Any,
    now: Optional[datetime] = None,
) -> ReconciliationResult:
    """Compare the provisional index with the one TPOS assigned.

    Args:
        comment_id: Facebook comment that produced the order.
        facebook_user_id: Commenting customer.
        prediction: Value written provisionally.
        actual: SessionIndex returned by TPOS (int or numeric string).

    Returns:
        ReconciliationResult holding the authoritative index and, on mismatch,
        a correction record to store.

    Raises:
        ValueError: If `actual` is not a number.
    """
    actual_index = _to_index(actual)
    if actual_index is None:
        raise ValueError(f"Invalid SessionIndex from order system: {actual!r}")

    is_correct = actual_index == prediction.predicted
    if is_correct:
        return ReconciliationResult(session_index=actual_index, is_correct=True)

    logger.warning(
        f"Session index mismatch for comment {comment_id}: "
        f"predicted {prediction.predicted}, actual {actual_index}"
    )
    correction = SessionIndexCorrection(
        comment_id=comment_id,
        facebook_user_id=facebook_user_id,
        predicted=prediction.predicted,
        actual=actual_index,
        confidence=prediction.confidence,
        created_at=now or datetime.now(timezone.utc),
    )
    return ReconciliationResult(
        session_index=actual_index, is_correct=False, correction=correction
    )


def prediction_accuracy(results: Iterable[ReconciliationResult]) -> float:
    """Share of correct predictions (1.0 when there is nothing to measure)."""
    results = list(results)
    if not results:
        return 1.0
    return sum(1 for r in results if r.is_correct) / len(results)
