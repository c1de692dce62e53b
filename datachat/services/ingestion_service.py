"""
Ingestion Service
Upload bytes -> parsed table -> registered dataset + stored rows
"""

import os
from dataclasses import dataclass, field
from typing import List

from datachat.core.config import settings
from datachat.core.exceptions import FileTooLarge, UnsupportedFileType
from datachat.core.file_parser import parse_file
from datachat.core.logger import get_logger
from datachat.db.session import Store
from datachat.models.dataset import Dataset, FileType
from datachat.models.value import Row

logger = get_logger(__name__)


@dataclass
class IngestionResult:
    dataset: Dataset
    preview: List[Row] = field(default_factory=list)


class IngestionService:
    """Turns one uploaded file into a queryable dataset"""

    def __init__(self, store: Store, max_upload_size: int = None, preview_rows: int = None):
        self.store = store
        self.max_upload_size = max_upload_size or settings.MAX_UPLOAD_SIZE
        self.preview_rows = preview_rows if preview_rows is not None else settings.PREVIEW_ROWS

    @staticmethod
    def file_type_for(original_filename: str) -> FileType:
        """
        Map the filename extension to a FileType

        Raises:
            UnsupportedFileType: extension is not .csv, .json or .sql
        """
        file_ext = os.path.splitext(original_filename or "")[1].lower()
        if file_ext not in settings.ALLOWED_EXTENSIONS:
            raise UnsupportedFileType(file_ext or original_filename or "")
        return FileType(file_ext.lstrip("."))

    def ingest(self, data: bytes, original_filename: str) -> IngestionResult:
        """
        Parse, register and store an uploaded file

        Args:
            data: Raw file content
            original_filename: Filename as uploaded (extension decides the parser)

        Returns:
            IngestionResult with the new dataset and its first rows

        Raises:
            UnsupportedFileType, FileTooLarge, EmptyOrMalformedFile, UnsupportedJsonShape
        """
        file_type = self.file_type_for(original_filename)

        if len(data) > self.max_upload_size:
            raise FileTooLarge(len(data), self.max_upload_size)

        logger.info(f"📥 Ingesting {original_filename} ({len(data)} bytes, {file_type.value})")
        parsed = parse_file(data, file_type.value, original_filename)

        # Rows first: a registered dataset must never point at a missing table
        self.store.tables.put(parsed.table_name, parsed.rows)

        dataset = self.store.datasets.create(
            name=os.path.splitext(os.path.basename(original_filename))[0],
            original_filename=original_filename,
            file_type=file_type,
            table_name=parsed.table_name,
            schema=parsed.schema,
            row_count=parsed.row_count
        )

        logger.info(
            f"✅ Dataset {dataset.id} ready: table '{dataset.table_name}', "
            f"{dataset.row_count} rows, {dataset.column_count} columns"
        )
        return IngestionResult(
            dataset=dataset,
            preview=self.store.tables.preview(parsed.table_name, self.preview_rows)
        )
