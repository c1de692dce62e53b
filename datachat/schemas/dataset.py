"""
Dataset schemas for response validation
"""

from pydantic import BaseModel, Field
from typing import Optional, List, Dict, Any
from datetime import datetime


class DatasetResponse(BaseModel):
    """Dataset metadata"""
    id: int
    name: str
    original_filename: str
    file_type: str
    table_name: str
    column_schema: Dict[str, str] = Field(..., alias="schema")  # column -> integer | float | boolean | date | text | null | nested
    row_count: int
    column_count: int
    uploaded_at: Optional[datetime] = None

    class Config:
        populate_by_name = True


class DatasetListResponse(BaseModel):
    """All datasets, newest first"""
    total: int
    datasets: List[DatasetResponse]


class DatasetUploadResponse(BaseModel):
    """Upload result: the new dataset and its first rows"""
    dataset: DatasetResponse
    preview: List[Dict[str, Any]] = []


class DatasetPreviewResponse(BaseModel):
    """First N rows of a dataset"""
    dataset_id: int
    table_name: str
    columns: List[str]
    column_types: Dict[str, str]
    preview_data: List[Dict[str, Any]]
    total_rows: int
