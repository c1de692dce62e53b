"""
Claude Service - communication with the Claude API
"""

import anthropic

from datachat.core.config import settings
from datachat.core.exceptions import ExternalModelUnavailable
from datachat.core.logger import get_logger

logger = get_logger(__name__)


class ClaudeService:
    """Service for talking to the Claude API"""

    def __init__(
        self,
        api_key: str,
        model: str = None,
        max_tokens: int = None,
        timeout: float = None,
        max_retries: int = None
    ):
        """
        Initialize Claude service

        Args:
            api_key: Anthropic API key
            model: Model name (default from settings)
            max_tokens: Answer token limit (default from settings)
            timeout: Request timeout in seconds (default from settings)
            max_retries: SDK retry count (default from settings)

        Raises:
            ExternalModelUnavailable: API key is empty
        """
        if not api_key:
            raise ExternalModelUnavailable("ANTHROPIC_API_KEY is not configured")

        self.model = model or settings.ANTHROPIC_MODEL
        self.max_tokens = max_tokens or settings.ANTHROPIC_MAX_TOKENS
        self.client = anthropic.Anthropic(
            api_key=api_key,
            timeout=timeout if timeout is not None else settings.ANTHROPIC_TIMEOUT,
            max_retries=max_retries if max_retries is not None else settings.ANTHROPIC_MAX_RETRIES
        )
        logger.info(f"ClaudeService initialized (model={self.model})")

    @classmethod
    def from_settings(cls) -> "ClaudeService":
        return cls(api_key=settings.ANTHROPIC_API_KEY)

    def complete(self, prompt: str, max_tokens: int = None) -> str:
        """
        Send a single-message prompt and return the answer text

        Args:
            prompt: Prompt for Claude
            max_tokens: Override of the answer token limit

        Returns:
            Answer text

        Raises:
            ExternalModelUnavailable: timeout, connection or API error
        """
        try:
            message = self.client.messages.create(
                model=self.model,
                max_tokens=max_tokens or self.max_tokens,
                messages=[{"role": "user", "content": prompt}]
            )
        except anthropic.APITimeoutError as e:
            raise ExternalModelUnavailable(f"Claude request timed out: {e}") from e
        except anthropic.APIError as e:
            raise ExternalModelUnavailable(f"Claude API error: {e}") from e

        return "".join(
            block.text for block in message.content if getattr(block, "type", None) == "text"
        )
