"""Sign-language gesture stabilization and conversation history."""

from signs.history import ConversationHistory, Transcription, TranscriptionSource
from signs.stability import (
    ConfirmedGesture,
    GestureObservation,
    GestureStabilityFilter,
    SignLanguage,
    StabilityState,
)

__all__ = [
    "ConfirmedGesture",
    "ConversationHistory",
    "GestureObservation",
    "GestureStabilityFilter",
    "SignLanguage",
    "StabilityState",
    "Transcription",
    "TranscriptionSource",
]
