"""
Conversation Log
Append-only chat messages for all datasets
"""

import itertools
import threading
from datetime import datetime, timezone
from typing import Iterable, List, Optional

from datachat.models.chat_message import ChartSpec, ChatMessage, MessageRole
from datachat.models.value import Row


class ConversationLog:
    """
    Stores chat messages

    Ids come from one process-wide counter. Timestamps never go backwards,
    so a dataset's history is ordered the same way it was written.
    """

    def __init__(self):
        self._messages: List[ChatMessage] = []
        self._ids = itertools.count(1)
        self._last_timestamp: Optional[datetime] = None
        self._lock = threading.Lock()

    def append(
        self,
        dataset_id: int,
        role: MessageRole,
        content: str,
        generated_query: Optional[str] = None,
        result_rows: Optional[Iterable[Row]] = None,
        chart_spec: Optional[ChartSpec] = None
    ) -> ChatMessage:
        """Create and store a message"""
        rows = tuple(dict(row) for row in result_rows) if result_rows is not None else None

        with self._lock:
            timestamp = datetime.now(timezone.utc)
            if self._last_timestamp is not None and timestamp < self._last_timestamp:
                timestamp = self._last_timestamp
            self._last_timestamp = timestamp

            message = ChatMessage(
                id=next(self._ids),
                dataset_id=dataset_id,
                role=MessageRole(role),
                content=content,
                timestamp=timestamp,
                generated_query=generated_query,
                result_rows=rows,
                chart_spec=chart_spec
            )
            self._messages.append(message)

        return message

    def history(self, dataset_id: int) -> List[ChatMessage]:
        """Messages of one dataset, oldest first"""
        with self._lock:
            messages = [m for m in self._messages if m.dataset_id == dataset_id]
        return sorted(messages, key=lambda m: (m.timestamp, m.id))

    def __len__(self):
        with self._lock:
            return len(self._messages)
