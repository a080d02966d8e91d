"""Embedding service module."""

from simsearch.embeddings.documents import DocumentEmbedder
from simsearch.embeddings.models import EmbeddingResult, RawDocument
from simsearch.embeddings.service import EmbeddingService, HTTPEmbeddingService

__all__ = [
    "DocumentEmbedder",
    "EmbeddingResult",
    "EmbeddingService",
    "HTTPEmbeddingService",
    "RawDocument",
]
