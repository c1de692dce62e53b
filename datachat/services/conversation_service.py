"""
Conversation Service
Question -> query -> rows -> chat messages
"""

from typing import List

from datachat.core.config import settings
from datachat.core.exceptions import DatasetNotFound, QuestionMissing
from datachat.core.logger import get_logger
from datachat.core.query_bridge import QueryBridge
from datachat.core.query_interpreter import QueryInterpreter
from datachat.db.session import Store
from datachat.models.chat_message import DEFAULT_CHART_KIND, ChartSpec, ChatMessage, MessageRole
from datachat.models.dataset import Dataset

logger = get_logger(__name__)


class ConversationService:
    """
    Answers questions about a dataset and keeps the chat history

    Every ask() writes two messages: the user's question and the
    system's answer (explanation, query, rows, optional chart).
    """

    def __init__(
        self,
        store: Store,
        bridge: QueryBridge,
        interpreter: QueryInterpreter = None,
        sample_rows: int = None,
        chart_max_rows: int = None
    ):
        self.store = store
        self.bridge = bridge
        self.interpreter = interpreter or QueryInterpreter(
            store.tables, default_limit=settings.DEFAULT_QUERY_LIMIT
        )
        self.sample_rows = sample_rows if sample_rows is not None else settings.PROMPT_SAMPLE_ROWS
        self.chart_max_rows = chart_max_rows if chart_max_rows is not None else settings.CHART_MAX_ROWS

    def _dataset(self, dataset_id: int) -> Dataset:
        dataset = self.store.datasets.get(dataset_id)
        if dataset is None:
            raise DatasetNotFound(dataset_id)
        return dataset

    def ask(self, dataset_id: int, question: str) -> ChatMessage:
        """
        Answer a question about a dataset

        Args:
            dataset_id: Dataset to ask about
            question: Natural language question

        Returns:
            The system message holding the answer

        Raises:
            DatasetNotFound: unknown dataset id
            QuestionMissing: question is empty or whitespace
        """
        dataset = self._dataset(dataset_id)

        if not question or not question.strip():
            raise QuestionMissing()
        question = question.strip()

        self.store.messages.append(dataset.id, MessageRole.USER, question)

        sample = self.store.tables.preview(dataset.table_name, self.sample_rows)
        translation = self.bridge.translate(question, dataset.schema, sample, dataset.table_name)
        rows = self.interpreter.execute(translation.query)

        chart_spec = None
        if 0 < len(rows) <= self.chart_max_rows:
            chart_spec = ChartSpec(kind=DEFAULT_CHART_KIND, rows=tuple(rows))

        logger.info(f"💬 Dataset {dataset.id}: {len(rows)} rows for '{question}'")

        return self.store.messages.append(
            dataset.id,
            MessageRole.SYSTEM,
            translation.explanation,
            generated_query=translation.query,
            result_rows=rows,
            chart_spec=chart_spec
        )

    def history(self, dataset_id: int) -> List[ChatMessage]:
        """Chat messages of a dataset, oldest first"""
        dataset = self._dataset(dataset_id)
        return self.store.messages.history(dataset.id)
