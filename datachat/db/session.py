"""
In-memory store
All process state in one object, built once at startup
"""

from dataclasses import dataclass, field

from fastapi import Request

from datachat.core.config import settings
from datachat.db.conversation_log import ConversationLog
from datachat.db.registry import DatasetRegistry
from datachat.db.table_store import TableStore


# ==========================================
# STORE
# ==========================================

@dataclass
class Store:
    """
    Datasets, table rows and chat messages

    Nothing survives a restart.
    """

    datasets: DatasetRegistry = field(default_factory=DatasetRegistry)
    tables: TableStore = field(
        default_factory=lambda: TableStore(synthetic_row_count=settings.SYNTHETIC_ROW_COUNT)
    )
    messages: ConversationLog = field(default_factory=ConversationLog)


# ==========================================
# STORE DEPENDENCY
# ==========================================

def get_store(request: Request) -> Store:
    """
    Store dependency for FastAPI

    Usage:
        @router.get("/items")
        def get_items(store: Store = Depends(get_store)):
            ...
    """
    return request.app.state.store


__all__ = [
    "Store",
    "get_store"
]
