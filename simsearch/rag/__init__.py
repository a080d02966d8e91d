"""RAG pipeline module."""

from simsearch.rag.models import (
    AdvancedRAGQuery,
    AdvancedRAGResponse,
    RAGComparison,
    RAGQuery,
    RAGResponse,
    RetrievalStats,
)
from simsearch.rag.pipeline import RAGPipeline, extract_citations, prepare_context

__all__ = [
    "AdvancedRAGQuery",
    "AdvancedRAGResponse",
    "RAGComparison",
    "RAGPipeline",
    "RAGQuery",
    "RAGResponse",
    "RetrievalStats",
    "extract_citations",
    "prepare_context",
]
