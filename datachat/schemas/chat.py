"""
Chat schemas for request/response validation
"""

from pydantic import BaseModel, Field
from typing import Optional, List, Dict, Any
from datetime import datetime


class AskRequest(BaseModel):
    """Question about a dataset"""
    question: Optional[str] = Field(None, description="Natural language question")


class ChartSpecResponse(BaseModel):
    kind: str
    rows: List[Dict[str, Any]]


class ChatMessageResponse(BaseModel):
    """One chat message"""
    id: int
    dataset_id: int
    role: str  # "user" | "system"
    content: str
    timestamp: datetime
    generated_query: Optional[str] = None
    result_rows: Optional[List[Dict[str, Any]]] = None
    chart_spec: Optional[ChartSpecResponse] = None


class ChatHistoryResponse(BaseModel):
    """Chat history of a dataset, oldest first"""
    dataset_id: int
    total: int
    messages: List[ChatMessageResponse]
