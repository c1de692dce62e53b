"""
Dataset Registry
Dataset metadata keyed by auto-incrementing id
"""

import itertools
import threading
from datetime import datetime, timezone
from typing import Dict, List, Mapping, Optional

from datachat.core.logger import get_logger
from datachat.models.dataset import Dataset, FileType
from datachat.models.value import ColumnType

logger = get_logger(__name__)


class DatasetRegistry:
    """Creates and looks up Dataset records"""

    def __init__(self):
        self._datasets: Dict[int, Dataset] = {}
        self._ids = itertools.count(1)
        self._lock = threading.Lock()

    def create(
        self,
        name: str,
        original_filename: str,
        file_type: FileType,
        table_name: str,
        schema: Mapping[str, ColumnType],
        row_count: int
    ) -> Dataset:
        """Register a new dataset and assign the next id"""
        with self._lock:
            dataset = Dataset(
                id=next(self._ids),
                name=name,
                original_filename=original_filename,
                file_type=FileType(file_type),
                table_name=table_name,
                schema=dict(schema),
                row_count=row_count,
                column_count=len(schema),
                uploaded_at=datetime.now(timezone.utc)
            )
            self._datasets[dataset.id] = dataset

        logger.info(f"Created dataset with ID {dataset.id}: {name}")
        return dataset

    def get(self, dataset_id: int) -> Optional[Dataset]:
        with self._lock:
            return self._datasets.get(dataset_id)

    def list(self) -> List[Dataset]:
        """All datasets, newest first"""
        with self._lock:
            datasets = list(self._datasets.values())
        return sorted(datasets, key=lambda d: (d.uploaded_at, d.id), reverse=True)

    def __len__(self):
        with self._lock:
            return len(self._datasets)
