"""
Dataset API Endpoints
Upload, list, detail, preview datasets
"""

from fastapi import APIRouter, Depends, HTTPException, status, UploadFile, File

from datachat.core.config import settings
from datachat.core.exceptions import FileTooLarge, IngestionError
from datachat.core.logger import get_logger
from datachat.db.session import Store, get_store
from datachat.models.dataset import Dataset
from datachat.models.value import row_to_json
from datachat.schemas.dataset import (
    DatasetListResponse,
    DatasetPreviewResponse,
    DatasetResponse,
    DatasetUploadResponse,
)
from datachat.services.ingestion_service import IngestionService

logger = get_logger(__name__)

router = APIRouter(prefix="/datasets", tags=["Datasets"])


def get_dataset_or_404(dataset_id: int, store: Store) -> Dataset:
    dataset = store.datasets.get(dataset_id)
    if not dataset:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Dataset not found"
        )
    return dataset


# ==========================================
# UPLOAD DATASET
# ==========================================

@router.post("/upload", response_model=DatasetUploadResponse)
async def upload_dataset(
    file: UploadFile = File(...),
    store: Store = Depends(get_store)
):
    """
    Upload CSV, JSON or SQL file

    - Validates file type and size
    - Infers the schema and stores the rows
    - Returns the dataset and a preview of its first rows
    """
    file_content = await file.read()

    try:
        result = IngestionService(store).ingest(file_content, file.filename)
    except FileTooLarge as e:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=str(e)
        )
    except IngestionError as e:
        logger.warning(f"⚠️ Upload rejected ({file.filename}): {e}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Failed to read file: {str(e)}"
        )

    return {
        "dataset": result.dataset.to_dict(),
        "preview": [row_to_json(row) for row in result.preview]
    }


# ==========================================
# LIST DATASETS
# ==========================================

@router.get("/", response_model=DatasetListResponse)
def list_datasets(store: Store = Depends(get_store)):
    """List all datasets, newest first"""

    datasets = store.datasets.list()

    return {
        "total": len(datasets),
        "datasets": [d.to_dict() for d in datasets]
    }


# ==========================================
# GET DATASET DETAIL
# ==========================================

@router.get("/{dataset_id}", response_model=DatasetResponse)
def get_dataset(dataset_id: int, store: Store = Depends(get_store)):
    """Get dataset details by ID"""

    return get_dataset_or_404(dataset_id, store).to_dict()


# ==========================================
# DATASET PREVIEW - First N rows
# ==========================================

@router.get("/{dataset_id}/preview", response_model=DatasetPreviewResponse)
def get_dataset_preview(
    dataset_id: int,
    rows: int = settings.PREVIEW_ROWS,
    store: Store = Depends(get_store)
):
    """
    Get dataset preview with headers and first N rows

    Args:
        dataset_id: Dataset ID
        rows: Number of rows to preview (max MAX_PREVIEW_ROWS)

    Returns:
        - columns: List of column names
        - column_types: Dict of column name -> data type
        - preview_data: First N rows as list of dicts
        - total_rows: Total row count
    """

    # Limit rows to prevent abuse
    rows = max(min(rows, settings.MAX_PREVIEW_ROWS), 0)

    dataset = get_dataset_or_404(dataset_id, store)
    preview = store.tables.preview(dataset.table_name, rows)

    return {
        "dataset_id": dataset.id,
        "table_name": dataset.table_name,
        "columns": list(dataset.schema.keys()),
        "column_types": {column: column_type.value for column, column_type in dataset.schema.items()},
        "preview_data": [row_to_json(row) for row in preview],
        "total_rows": dataset.row_count
    }
