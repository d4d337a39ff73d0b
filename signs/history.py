"""Bounded in-memory conversation history."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Deque, Mapping

from signs.stability import ConfirmedGesture


class TranscriptionSource(str, Enum):
    """Where a transcription came from."""

    SPEECH = "speech"
    SIGN_LANGUAGE = "sign_language"
    TEXT = "text"


@dataclass(frozen=True)
class Transcription:
    """One conversational utterance shown to a deaf user."""

    text: str
    confidence: float
    is_final: bool
    timestamp_ms: int
    source: TranscriptionSource

    @classmethod
    def from_gesture(cls, gesture: ConfirmedGesture) -> "Transcription":
        return cls(
            text=gesture.meaning,
            confidence=gesture.confidence,
            is_final=True,
            timestamp_ms=gesture.timestamp_ms,
            source=TranscriptionSource.SIGN_LANGUAGE,
        )


class ConversationHistory:
    """Keeps the most recent final transcriptions, oldest dropped first."""

    def __init__(self, max_entries: int = 50) -> None:
        self._max_entries = max(1, int(max_entries))
        self._entries: Deque[Transcription] = deque(maxlen=self._max_entries)

    @classmethod
    def from_config(cls, config: Mapping[str, object]) -> "ConversationHistory":
        signs_cfg = config.get("signs") if isinstance(config, Mapping) else None
        if not isinstance(signs_cfg, Mapping):
            return cls()
        return cls(max_entries=int(signs_cfg.get("history_size", 50)))

    @property
    def max_entries(self) -> int:
        return self._max_entries

    def add(self, transcription: Transcription) -> bool:
        """Append a final transcription; interim results are ignored."""

        if not transcription.is_final:
            return False
        self._entries.append(transcription)
        return True

    def entries(self) -> list[Transcription]:
        return list(self._entries)

    def latest(self) -> Transcription | None:
        return self._entries[-1] if self._entries else None

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
