"""RAG pipeline data models."""

from pydantic import BaseModel, Field

from simsearch.retrieval.models import SearchOptions
from simsearch.similarity.models import SearchResult


class RAGQuery(BaseModel):
    """Input for a retrieval-augmented answer.

    Attributes:
        question: The user's question.
        search: Options for the retrieval step.
        max_context_length: Character budget for the assembled context.
        include_citations: Whether to extract cited titles from the answer.
    """

    question: str = Field(description="User question")
    search: SearchOptions = Field(
        default_factory=SearchOptions,
        description="Retrieval options",
    )
    max_context_length: int = Field(
        default=3000,
        ge=200,
        description="Context character budget",
    )
    include_citations: bool = Field(default=True, description="Extract citations")


class RetrievalStats(BaseModel):
    """Statistics about the context handed to the completion service."""

    documents_retrieved: int = Field(description="Documents retrieved")
    average_similarity: float = Field(description="Mean score, rounded to 2 places")
    context_length: int = Field(description="Characters of assembled context")


class RAGResponse(BaseModel):
    """Answer with the documents that grounded it."""

    query: str = Field(description="Question as asked")
    answer: str = Field(description="Generated answer")
    documents: list[SearchResult] = Field(
        default_factory=list,
        description="Retrieved documents",
    )
    citations: list[str] = Field(
        default_factory=list,
        description="Document titles cited in the answer",
    )
    stats: RetrievalStats = Field(description="Retrieval statistics")


class AdvancedRAGQuery(RAGQuery):
    """A question answered with optional query expansion and per-query steps.

    Attributes:
        expand_query: Ask the completion service for related queries first.
        multi_step: Answer each related query (or the question itself)
            separately before the final answer.
        step_top_k: Documents retrieved for each step.
    """

    expand_query: bool = Field(default=True, description="Generate related queries")
    multi_step: bool = Field(default=False, description="Answer each query separately")
    step_top_k: int = Field(default=2, gt=0, description="Documents per step")


class AdvancedRAGResponse(BaseModel):
    """Final answer with the expansions and steps that led to it."""

    query: str = Field(description="Question as asked")
    expanded_queries: list[str] = Field(
        default_factory=list,
        description="Related queries from the completion service",
    )
    steps: list[RAGResponse] = Field(
        default_factory=list,
        description="Answers for each step query",
    )
    final: RAGResponse = Field(description="Answer to the enriched question")


class RAGComparison(BaseModel):
    """A retrieval-grounded answer next to one generated without documents."""

    query: str = Field(description="Question as asked")
    rag: RAGResponse = Field(description="Answer grounded in retrieved documents")
    direct_answer: str = Field(description="Answer generated without retrieval")
    documents_used: int = Field(description="Documents behind the grounded answer")
    citations_count: int = Field(description="Citations in the grounded answer")
