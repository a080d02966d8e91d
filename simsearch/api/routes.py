"""API routes for search, documents and retrieval-augmented answers."""

from typing import Any

from fastapi import APIRouter, Request, Response, status
from pydantic import BaseModel, Field, FiniteFloat

from simsearch.documents.models import Document, NewDocument
from simsearch.embeddings.documents import DocumentEmbedder
from simsearch.embeddings.models import RawDocument
from simsearch.exceptions import DocumentNotFoundError
from simsearch.logging_config import get_logger
from simsearch.rag.models import (
    AdvancedRAGQuery,
    AdvancedRAGResponse,
    RAGComparison,
    RAGQuery,
    RAGResponse,
)
from simsearch.rag.pipeline import RAGPipeline
from simsearch.retrieval.coordinator import RetrievalCoordinator
from simsearch.retrieval.models import (
    ScoringComparison,
    SearchOptions,
    SearchResultSet,
    StrategyComparison,
)
from simsearch.store.document_store import DocumentStore
from simsearch.store.models import BatchInsertResult, StoreStats

logger = get_logger(__name__)


# Create router
router = APIRouter(prefix="/api/v1", tags=["Search"])


class SearchRequest(SearchOptions):
    """Request body for a search."""

    query: str = Field(description="Query text")


class CompareRequest(BaseModel):
    """Request body for a strategy comparison."""

    query: str = Field(description="Query text")
    filters: dict[str, list[Any]] = Field(
        default_factory=dict,
        description="Filters for the filtered strategy",
    )
    metadata_boost: dict[str, FiniteFloat] = Field(
        default_factory=dict,
        description="Boosts for the hybrid strategy",
    )
    top_k: int = Field(default=5, description="Results per strategy")


class ScoringCompareRequest(BaseModel):
    """Request body for a dot product against cosine comparison."""

    query: str = Field(description="Query text")
    top_k: int = Field(default=5, description="Results per strategy")
    threshold: FiniteFloat | None = Field(default=None, description="Minimum score")


def _store(request: Request) -> DocumentStore:
    return request.app.state.store


def _coordinator(request: Request) -> RetrievalCoordinator:
    return request.app.state.coordinator


@router.post("/search", response_model=SearchResultSet)
async def search_endpoint(body: SearchRequest, request: Request) -> SearchResultSet:
    """Embed the query and rank stored documents."""
    options = SearchOptions.model_validate(body.model_dump(exclude={"query"}))
    return await _coordinator(request).search(body.query, options)


@router.post("/search/compare", response_model=StrategyComparison)
async def compare_endpoint(body: CompareRequest, request: Request) -> StrategyComparison:
    """Run similarity, hybrid and filtered scoring side by side."""
    return await _coordinator(request).compare_strategies(
        body.query,
        filters=body.filters,
        metadata_boost=body.metadata_boost,
        top_k=body.top_k,
    )


@router.post("/search/compare-dot", response_model=ScoringComparison)
async def compare_dot_endpoint(body: ScoringCompareRequest, request: Request) -> ScoringComparison:
    """Rank by normalized dot product and by cosine side by side."""
    return await _coordinator(request).compare_dot_product_vs_cosine(
        body.query,
        top_k=body.top_k,
        threshold=body.threshold,
    )


@router.post("/rag", response_model=RAGResponse)
async def rag_endpoint(body: RAGQuery, request: Request) -> RAGResponse:
    """Answer a question from retrieved documents."""
    pipeline: RAGPipeline = request.app.state.rag_pipeline
    return await pipeline.answer(body)


@router.post("/rag/advanced", response_model=AdvancedRAGResponse)
async def advanced_rag_endpoint(body: AdvancedRAGQuery, request: Request) -> AdvancedRAGResponse:
    """Answer with query expansion and optional per-query steps."""
    pipeline: RAGPipeline = request.app.state.rag_pipeline
    return await pipeline.answer_advanced(body)


@router.post("/rag/compare", response_model=RAGComparison)
async def compare_rag_endpoint(body: RAGQuery, request: Request) -> RAGComparison:
    """Answer from retrieved documents and without them, side by side."""
    pipeline: RAGPipeline = request.app.state.rag_pipeline
    return await pipeline.compare_with_direct(body)


@router.post("/documents", status_code=status.HTTP_201_CREATED, response_model=Document)
async def insert_document(body: NewDocument, request: Request) -> Document:
    """Store a pre-embedded document, stamped with its insertion time."""
    doc = _store(request).insert(body.to_document())
    logger.info("Document inserted", extra={"document_id": doc.id})
    return doc


@router.post("/documents/batch", response_model=BatchInsertResult)
async def insert_documents(body: list[NewDocument], request: Request) -> BatchInsertResult:
    """Store pre-embedded documents, reporting per-item failures."""
    return _store(request).insert_batch(new.to_document() for new in body)


@router.post("/documents/embed", response_model=BatchInsertResult)
async def embed_documents(body: list[RawDocument], request: Request) -> BatchInsertResult:
    """Embed raw documents and store them."""
    embedder: DocumentEmbedder = request.app.state.embedder
    return await embedder.index_documents(_store(request), body)


@router.get("/documents/{document_id}", response_model=Document)
async def get_document(document_id: str, request: Request) -> Document:
    """Fetch a stored document by id."""
    doc = _store(request).get(document_id)
    if doc is None:
        raise DocumentNotFoundError(document_id)
    return doc


@router.delete("/documents/{document_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_document(document_id: str, request: Request) -> Response:
    """Remove a stored document."""
    if not _store(request).remove(document_id):
        raise DocumentNotFoundError(document_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.delete("/documents", status_code=status.HTTP_204_NO_CONTENT)
async def clear_documents(request: Request) -> Response:
    """Remove every stored document."""
    _store(request).clear()
    logger.info("Document store cleared")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/stats", response_model=StoreStats)
async def store_stats(request: Request) -> StoreStats:
    """Summary statistics over the stored documents."""
    return _store(request).stats()
