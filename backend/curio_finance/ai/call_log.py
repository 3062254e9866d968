"""Audit trail of LLM calls."""

import logging
import threading
from collections import deque
from dataclasses import dataclass, field, asdict
from datetime import datetime, timezone
from typing import Any, Deque, Dict, List, Optional

logger = logging.getLogger(__name__)


@dataclass
class LLMLogEntry:
    """One analyze/chat call, successful or not."""
    provider: str
    operation: str  # "analyze" or "chat"
    prompt: str
    duration_ms: int
    success: bool
    response: Optional[Any] = None
    error: Optional[str] = None
    timestamp: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class LLMCallLog:
    """
    Bounded, thread-safe sink for LLM call records.

    One instance lives on the FastAPI app and is handed to providers through
    the factory; tests create their own.
    """

    def __init__(self, capacity: int = 200):
        self._entries: Deque[LLMLogEntry] = deque(maxlen=capacity)
        self._lock = threading.Lock()

    def record(self, entry: LLMLogEntry) -> None:
        with self._lock:
            self._entries.append(entry)

        status = "Success" if entry.success else "Failed"
        if entry.success:
            logger.info("[LLM %s] %s %s (%dms)", entry.provider, entry.operation, status, entry.duration_ms)
        else:
            logger.error(
                "[LLM %s] %s %s (%dms): %s",
                entry.provider, entry.operation, status, entry.duration_ms, entry.error,
            )
        logger.debug("[LLM %s] prompt=%r response=%r", entry.provider, entry.prompt, entry.response)

    def entries(self) -> List[LLMLogEntry]:
        with self._lock:
            return list(self._entries)

    def drain(self) -> List[LLMLogEntry]:
        """Return every entry and empty the log."""
        with self._lock:
            drained = list(self._entries)
            self._entries.clear()
        return drained

    def __len__(self) -> int:
        return len(self._entries)
