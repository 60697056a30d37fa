"""Facebook live comment → order pipeline (pure planning functions)."""

from .comments import extract_product_codes
from .orders import (
    CommentOrderPlan,
    LiveOrderPlan,
    LiveProductPlan,
    is_oversell,
    plan_comment_orders,
    plan_live_product,
)
from .phases import LivePhaseKey, determine_live_phase, parse_facebook_time
from .session_index import (
    ReconciliationResult,
    SessionIndexCorrection,
    SessionIndexPrediction,
    predict_session_index,
    prediction_accuracy,
    reconcile_session_index,
)

__all__ = [
    "CommentOrderPlan",
    "LiveOrderPlan",
    "LivePhaseKey",
    "LiveProductPlan",
    "ReconciliationResult",
    "SessionIndexCorrection",
    "SessionIndexPrediction",
    "determine_live_phase",
    "extract_product_codes",
    "is_oversell",
    "parse_facebook_time",
    "plan_comment_orders",
    "plan_live_product",
    "predict_session_index",
    "prediction_accuracy",
    "reconcile_session_index",
]
