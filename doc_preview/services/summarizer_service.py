"""
Service for generating document summaries using LiteLLM.
"""
import logging
from typing import List

import litellm
from langchain_community.chat_models import ChatLiteLLM
from langchain_core.messages import BaseMessage, HumanMessage, SystemMessage
from litellm import RateLimitError
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from doc_preview.config.settings import (
    OPENAI_API_KEY,
    CHAT_MODEL,
    TEMPERATURE,
    REQUEST_TIMEOUT,
    MAX_RETRIES,
    RETRY_DELAY,
    LANGFUSE_PUBLIC_KEY,
    LANGFUSE_SECRET_KEY
)
from doc_preview.models.errors import RemoteError

logger = logging.getLogger(__name__)

# Trace summarization calls in Langfuse when it is configured
if LANGFUSE_PUBLIC_KEY and LANGFUSE_SECRET_KEY:
    litellm.success_callback = ['langfuse']
    litellm.failure_callback = ['langfuse']

SYSTEM_PROMPT = (
    "You are a helpful assistant that writes short, accurate summaries of documents. "
    "Answer in the language of the document."
)

SUMMARY_PROMPT = """Please summarize the content of the following document "{file_name}".
Focus on the main points and be concise. If the content looks like XML or Markdown code, explain what it does.

Content:
{content}"""


class SummarizerService:
    """Service for summarizing documents using LiteLLM."""

    def __init__(self):
        """Initialize the SummarizerService with LiteLLM."""
        if not OPENAI_API_KEY:
            logger.warning("OPENAI_API_KEY is not set; summarization requests will fail")
        self.llm = ChatLiteLLM(
            model=CHAT_MODEL,
            api_key=OPENAI_API_KEY,
            temperature=TEMPERATURE,
            request_timeout=REQUEST_TIMEOUT
        )

    @retry(
        stop=stop_after_attempt(MAX_RETRIES),
        wait=wait_exponential(multiplier=RETRY_DELAY),
        retry=retry_if_exception_type(RateLimitError),
        reraise=True
    )
    def _invoke(self, messages: List[BaseMessage]) -> str:
        response = self.llm.invoke(messages)
        return response.content or ""

    def summarize(self, file_name: str, content: str) -> str:
        """
        Generate a summary of a document.

        Args:
            file_name: Name of the document, included in the prompt
            content: Text to summarize, already truncated by the caller

        Returns:
            str: The summary, possibly empty if the model returned nothing

        Raises:
            RemoteError: If the model call fails after retries
        """
        try:
            summary = self._invoke([
                SystemMessage(content=SYSTEM_PROMPT),
                HumanMessage(content=SUMMARY_PROMPT.format(file_name=file_name, content=content))
            ])
        except Exception as e:
            logger.error("Error summarizing document %s: %s", file_name, e)
            raise RemoteError(f"Summarization of {file_name} failed: {str(e)}") from e

        return summary.strip()
