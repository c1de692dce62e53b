"""
Dataset Model
Metadata of one ingested table
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Dict, Any

from datachat.models.value import ColumnType


class FileType(str, Enum):
    """Supported upload formats"""
    CSV = "csv"
    JSON = "json"
    SQL = "sql"


@dataclass(frozen=True)
class Dataset:
    """
    Dataset model - one uploaded file

    Created once the file parsed successfully, never changed afterwards.
    The rows themselves live in the table store under `table_name`.
    """

    # ==========================================
    # COLUMNS
    # ==========================================

    id: int
    name: str
    original_filename: str
    file_type: FileType
    table_name: str
    schema: Dict[str, ColumnType] = field(default_factory=dict)
    row_count: int = 0
    column_count: int = 0
    uploaded_at: datetime = None

    # ==========================================
    # METHODS
    # ==========================================

    def __repr__(self):
        return f"<Dataset(id={self.id}, filename='{self.original_filename}')>"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            "id": self.id,
            "name": self.name,
            "original_filename": self.original_filename,
            "file_type": self.file_type.value,
            "table_name": self.table_name,
            "schema": {column: column_type.value for column, column_type in self.schema.items()},
            "row_count": self.row_count,
            "column_count": self.column_count,
            "uploaded_at": self.uploaded_at.isoformat() if self.uploaded_at else None
        }
