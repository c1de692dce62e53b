from datachat.models.value import ColumnType, Value, Row
from datachat.models.dataset import Dataset, FileType
from datachat.models.chat_message import ChatMessage, ChartSpec, MessageRole

__all__ = ["ColumnType", "Value", "Row", "Dataset", "FileType", "ChatMessage", "ChartSpec", "MessageRole"]
