"""
Chat Message Model
One question or answer in a dataset conversation
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from datachat.models.value import Row, row_to_json


class MessageRole(str, Enum):
    USER = "user"
    SYSTEM = "system"


DEFAULT_CHART_KIND = "bar"


@dataclass(frozen=True)
class ChartSpec:
    """Visualization kind paired with the rows to plot"""

    kind: str
    rows: Tuple[Row, ...]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind,
            "rows": [row_to_json(row) for row in self.rows]
        }


@dataclass(frozen=True)
class ChatMessage:
    """
    Chat message - append-only

    User messages carry only the question. System messages also carry
    the generated query, its result rows and an optional chart.
    """

    id: int
    dataset_id: int
    role: MessageRole
    content: str
    timestamp: datetime
    generated_query: Optional[str] = None
    result_rows: Optional[Tuple[Row, ...]] = None
    chart_spec: Optional[ChartSpec] = None

    def __repr__(self):
        return f"<ChatMessage(id={self.id}, dataset_id={self.dataset_id}, role='{self.role.value}')>"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "id": self.id,
            "dataset_id": self.dataset_id,
            "role": self.role.value,
            "content": self.content,
            "timestamp": self.timestamp.isoformat(),
            "generated_query": self.generated_query,
            "result_rows": [row_to_json(row) for row in self.result_rows] if self.result_rows is not None else None,
            "chart_spec": self.chart_spec.to_dict() if self.chart_spec else None
        }

    @property
    def result_list(self) -> List[Row]:
        return list(self.result_rows or ())
