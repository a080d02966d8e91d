"""Turn raw documents into embedded, storable documents."""

from collections.abc import Sequence

from simsearch.documents.models import Document
from simsearch.embeddings.models import RawDocument
from simsearch.embeddings.service import EmbeddingService
from simsearch.exceptions import EmbeddingError
from simsearch.logging_config import get_logger
from simsearch.store.document_store import DocumentStore
from simsearch.store.models import BatchInsertResult
from simsearch.vectors.ops import is_finite

logger = get_logger(__name__)


class DocumentEmbedder:
    """Embeds documents for the store.

    The main vector covers title, content and tags together. With
    `field_vectors` enabled, title, content, tags and category are also
    embedded one by one for weighted search.
    """

    def __init__(
        self,
        embedding_service: EmbeddingService,
        field_vectors: bool = True,
    ) -> None:
        """Initialize the embedder.

        Args:
            embedding_service: Service used to embed texts.
            field_vectors: Also embed each sub-field separately.
        """
        self._embedding_service = embedding_service
        self._field_vectors = field_vectors

    async def embed_documents(self, raw_docs: Sequence[RawDocument]) -> list[Document]:
        """Embed raw documents in a single batched request.

        Documents whose main embedding comes back empty or non-finite are
        still returned, without a vector, so they can be stored and embedded
        later.

        Raises:
            EmbeddingError: If the embedding service fails.
        """
        texts: list[str] = []
        slots: list[tuple[int, str]] = []

        for position, raw in enumerate(raw_docs):
            texts.append(raw.searchable_text())
            slots.append((position, "vector"))
            if self._field_vectors:
                for field, text in self._field_texts(raw):
                    texts.append(text)
                    slots.append((position, field))

        embeddings = await self._embedding_service.embed_batch(texts) if texts else []
        if len(embeddings) != len(texts):
            raise EmbeddingError(
                f"Expected {len(texts)} embeddings, got {len(embeddings)}",
                details={"expected": len(texts), "actual": len(embeddings)},
            )

        vectors: list[list[float] | None] = [None] * len(raw_docs)
        field_vectors: list[dict[str, list[float]]] = [{} for _ in raw_docs]
        for (position, slot), result in zip(slots, embeddings, strict=True):
            usable = bool(result.embedding) and is_finite(result.embedding)
            if slot == "vector":
                vectors[position] = result.embedding if usable else None
            elif usable:
                field_vectors[position][slot] = result.embedding

        documents = []
        for raw, vector, fields in zip(raw_docs, vectors, field_vectors, strict=True):
            if vector is None:
                logger.warning(
                    f"No embedding for document {raw.id}; stored without a vector",
                    extra={"document_id": raw.id},
                )
            documents.append(
                Document(
                    id=raw.id,
                    vector=vector,
                    metadata=self._metadata(raw),
                    field_vectors=fields,
                )
            )

        return documents

    async def index_documents(
        self,
        store: DocumentStore,
        raw_docs: Sequence[RawDocument],
    ) -> BatchInsertResult:
        """Embed raw documents and batch-insert them into a store."""
        documents = await self.embed_documents(raw_docs)
        return store.insert_batch(documents)

    @staticmethod
    def _field_texts(raw: RawDocument) -> list[tuple[str, str]]:
        candidates = [
            ("title", raw.title),
            ("content", raw.content),
            ("tags", " ".join(raw.tags)),
            ("category", raw.category or ""),
        ]
        return [(field, text) for field, text in candidates if text.strip()]

    @staticmethod
    def _metadata(raw: RawDocument) -> dict[str, object]:
        metadata: dict[str, object] = {
            "title": raw.title,
            "content": raw.content,
            "tags": list(raw.tags),
        }
        if raw.category is not None:
            metadata["category"] = raw.category
        metadata.update(raw.metadata)
        return metadata
