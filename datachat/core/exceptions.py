"""
Custom exceptions for the DataChat backend.
"""


class DataChatException(Exception):
    """Base exception for DataChat."""
    pass


# ==========================================
# INGESTION
# ==========================================

class IngestionError(DataChatException):
    """Uploaded file was rejected. Never retried automatically."""
    pass


class UnsupportedFileType(IngestionError):
    """File extension / declared type is not csv, json or sql."""

    def __init__(self, file_type: str):
        self.file_type = file_type
        super().__init__(
            f"Unsupported file type: '{file_type}'. Allowed: csv, json, sql"
        )


class EmptyOrMalformedFile(IngestionError):
    """File could not be parsed or contains no data rows."""
    pass


class UnsupportedJsonShape(IngestionError):
    """JSON is neither an array of objects nor an object holding one."""

    def __init__(self, message: str = None):
        super().__init__(
            message or "JSON file must contain an array of objects or an object with an array property"
        )


class FileTooLarge(IngestionError):
    """Upload exceeds MAX_UPLOAD_SIZE."""

    def __init__(self, size: int, limit: int):
        self.size = size
        self.limit = limit
        super().__init__(
            f"File too large ({size} bytes). Max size: {limit / (1024 * 1024):.0f}MB"
        )


# ==========================================
# CLIENT INPUT
# ==========================================

class ClientInputError(DataChatException):
    """Request refers to something that doesn't exist or is incomplete."""
    pass


class DatasetNotFound(ClientInputError):
    """No dataset with the given id."""

    def __init__(self, dataset_id: int):
        self.dataset_id = dataset_id
        super().__init__(f"Dataset {dataset_id} not found")


class QuestionMissing(ClientInputError):
    """Ask request without question text."""

    def __init__(self):
        super().__init__("Question is required")


# ==========================================
# LANGUAGE MODEL
# ==========================================

class ModelError(DataChatException):
    """Language model problems. Absorbed by the query bridge fallback chain."""
    pass


class ExternalModelUnavailable(ModelError):
    """Model is unreachable, timed out or not configured."""
    pass


class ModelResponseUnparseable(ModelError):
    """Model answered, but no query could be extracted from the text."""
    pass
