"""Haptic and speech feedback routing."""

from feedback.dispatcher import DispatchResult, FeedbackDispatcher
from feedback.patterns import HapticPattern, TtsPriority
from feedback.rate_limiter import FeedbackChannel, FeedbackRateLimiter, RateLimiterState

__all__ = [
    "DispatchResult",
    "FeedbackChannel",
    "FeedbackDispatcher",
    "FeedbackRateLimiter",
    "HapticPattern",
    "RateLimiterState",
    "TtsPriority",
]
