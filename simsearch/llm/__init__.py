"""Text completion client module."""

from simsearch.llm.client import OpenAICompatibleClient, TextCompletionClient
from simsearch.llm.prompts import RAGPromptTemplate

__all__ = [
    "OpenAICompatibleClient",
    "RAGPromptTemplate",
    "TextCompletionClient",
]
