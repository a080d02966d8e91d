"""Prompt templates for retrieval-augmented answers."""

from typing import Any


class RAGPromptTemplate:
    """Formats retrieved context and a question into a prompt pair."""

    DEFAULT_SYSTEM_PROMPT = """You are a helpful travel assistant that answers questions using the provided documents.

Rules:
- Answer ONLY based on the provided documents
- If the documents do not contain enough information, say so
- Be concise and direct
- Cite documents as [Source: Document Title]"""

    DEFAULT_USER_TEMPLATE = """Travel documents:
{context}

Question: {question}

Answer:"""

    DIRECT_SYSTEM_PROMPT = "You are a travel assistant. Answer from your own knowledge."

    EXPANSION_TEMPLATE = """Given this travel query: "{question}"

Generate 2-3 related queries that would help find relevant travel information. Focus on:
- Different aspects of the same topic
- Related activities or experiences
- Alternative ways to phrase the request

Return only the expanded queries, one per line, without numbering or explanations."""

    def __init__(
        self,
        system_prompt: str | None = None,
        user_template: str | None = None,
    ) -> None:
        """Initialize the template.

        Args:
            system_prompt: Custom system prompt.
            user_template: Custom user template with {context} and {question}.
        """
        self.system_prompt = system_prompt or self.DEFAULT_SYSTEM_PROMPT
        self.user_template = user_template or self.DEFAULT_USER_TEMPLATE

    def format(self, **kwargs: Any) -> str:
        """Format the user template."""
        return self.user_template.format(**kwargs)

    def build_prompt(self, question: str, context: str) -> tuple[str, str]:
        """Build (system_prompt, user_prompt) for a question and its context."""
        return self.system_prompt, self.format(context=context, question=question)

    def build_direct_prompt(self, question: str) -> tuple[str, str]:
        """Build a prompt pair that asks the question without any context."""
        return self.DIRECT_SYSTEM_PROMPT, question

    def build_expansion_prompt(self, question: str) -> str:
        """Prompt asking for related queries, one per line."""
        return self.EXPANSION_TEMPLATE.format(question=question)
