"""In-memory document store with an attached metadata index."""

from collections import Counter
from collections.abc import Iterable, Iterator
from contextlib import AbstractContextManager
from datetime import UTC, datetime

from simsearch.documents.models import Document
from simsearch.exceptions import (
    DimensionMismatchError,
    DocumentExistsError,
    SimSearchError,
)
from simsearch.logging_config import get_logger
from simsearch.observability.metrics import track_store_operation
from simsearch.store.index import MetadataIndex
from simsearch.store.locks import ReadWriteLock
from simsearch.store.models import BatchInsertFailure, BatchInsertResult, StoreStats

logger = get_logger(__name__)


class DocumentStore:
    """Canonical set of indexed documents.

    The store and its MetadataIndex change together under one exclusive
    lock, so the index never refers to a document the store no longer
    holds. Readers that need a consistent view across several calls (the
    retrieval coordinator) hold `read_locked()` for their whole pass.

    Iterating `all()` while another call on the same thread mutates the
    store is undefined; the lock refuses the write rather than deadlock.
    """

    def __init__(
        self,
        index: MetadataIndex | None = None,
        dimension: int | None = None,
    ) -> None:
        """Initialize the store.

        Args:
            index: Metadata index to maintain. A default index is created
                when omitted.
            dimension: Pin the vector dimension up front. Otherwise the
                first stored vector sets it.
        """
        self._index = index or MetadataIndex()
        self._dimension = dimension
        self._documents: dict[str, Document] = {}
        self._order: dict[str, int] = {}
        self._sequence = 0
        self._lock = ReadWriteLock()

    @property
    def index(self) -> MetadataIndex:
        """The metadata index kept in step with this store."""
        return self._index

    @property
    def dimension(self) -> int | None:
        """Vector length shared by every stored document, once known."""
        return self._dimension

    def read_locked(self) -> AbstractContextManager[None]:
        """Shared access to the store and its index for the block's duration."""
        return self._lock.read_locked()

    def insert(self, doc: Document) -> Document:
        """Store a document and index its metadata.

        The stored copy carries the insertion time as `created_at`; any
        timestamp already on `doc` is replaced.

        Returns:
            The document as stored.

        Raises:
            DocumentExistsError: If the id is already stored.
            DimensionMismatchError: If any of its vectors disagrees with
                the store dimension. Nothing is stored in that case.
        """
        with self._lock.write_locked():
            try:
                if doc.id in self._documents:
                    raise DocumentExistsError(doc.id)
                dimension = self._check_dimensions(doc)

                doc = doc.model_copy(update={"created_at": datetime.now(UTC)})
                self._documents[doc.id] = doc
                self._order[doc.id] = self._sequence
                self._sequence += 1
                self._index.update(doc)
                self._dimension = dimension
            except SimSearchError:
                track_store_operation("insert", success=False)
                raise

        track_store_operation("insert")
        logger.debug(
            f"Inserted document {doc.id}",
            extra={"document_id": doc.id, "dimension": self._dimension},
        )
        return doc

    def insert_batch(self, docs: Iterable[Document]) -> BatchInsertResult:
        """Insert documents one at a time.

        A failure does not undo earlier inserts or stop later ones; each
        rejection is logged and reported in the result.
        """
        result = BatchInsertResult()

        for position, doc in enumerate(docs):
            try:
                self.insert(doc)
            except SimSearchError as e:
                logger.warning(
                    f"Batch insert skipped document {doc.id}: {e.message}",
                    extra={"document_id": doc.id, "position": position, "error_code": e.code.value},
                )
                result.failures.append(
                    BatchInsertFailure(
                        position=position,
                        document_id=doc.id,
                        code=e.code.value,
                        message=e.message,
                    )
                )
            else:
                result.inserted.append(doc.id)

        logger.info(
            f"Batch insert stored {len(result.inserted)} documents",
            extra={"inserted": len(result.inserted), "failed": len(result.failures)},
        )
        return result

    def get(self, doc_id: str) -> Document | None:
        """Look up a document; None when it is not stored."""
        with self._lock.read_locked():
            return self._documents.get(doc_id)

    def all(self) -> Iterator[Document]:
        """Lazily iterate documents in insertion order.

        The set of documents is fixed when iteration starts.
        """
        with self._lock.read_locked():
            snapshot = list(self._documents.values())
        return iter(snapshot)

    def iter_ids(self, ids: Iterable[str]) -> Iterator[Document]:
        """Lazily yield the stored documents among `ids`, in insertion order.

        Unknown ids are skipped. Callers should hold `read_locked()` so the
        set does not change underneath them.
        """
        order = self._order
        for doc_id in sorted((i for i in ids if i in order), key=order.__getitem__):
            doc = self._documents.get(doc_id)
            if doc is not None:
                yield doc

    def remove(self, doc_id: str) -> bool:
        """Remove a document and its index entries.

        Returns:
            True if a document was removed, False if the id was unknown.
        """
        with self._lock.write_locked():
            doc = self._documents.pop(doc_id, None)
            if doc is None:
                return False
            del self._order[doc_id]
            self._index.discard(doc)

        track_store_operation("remove")
        logger.debug(f"Removed document {doc_id}", extra={"document_id": doc_id})
        return True

    def clear(self) -> None:
        """Empty the store and its index in one exclusive operation.

        The established dimension is kept.
        """
        with self._lock.write_locked():
            count = len(self._documents)
            self._documents.clear()
            self._order.clear()
            self._index.clear()

        track_store_operation("clear")
        logger.info("Cleared document store", extra={"removed": count})

    def size(self) -> int:
        """Number of stored documents."""
        return len(self._documents)

    def __len__(self) -> int:
        return self.size()

    def __contains__(self, doc_id: object) -> bool:
        return doc_id in self._documents

    def is_consistent(self) -> bool:
        """Whether the index records exactly the stored documents."""
        with self._lock.read_locked():
            return self._index.document_ids() == set(self._documents)

    def stats(self) -> StoreStats:
        """Counts by category, location and type plus vector statistics."""
        with self._lock.read_locked():
            documents = list(self._documents.values())
            index_size = self._index.size()

        categories: Counter[str] = Counter()
        locations: Counter[str] = Counter()
        types: Counter[str] = Counter()
        vector_lengths: list[int] = []

        for doc in documents:
            for counter, field in (
                (categories, "category"),
                (locations, "location"),
                (types, "type"),
            ):
                value = doc.metadata.get(field)
                if value is not None:
                    counter[str(value)] += 1
            if doc.vector:
                vector_lengths.append(len(doc.vector))

        return StoreStats(
            total_documents=len(documents),
            categories=dict(categories),
            locations=dict(locations),
            types=dict(types),
            dimension=self._dimension,
            average_vector_dimension=(
                sum(vector_lengths) / len(vector_lengths) if vector_lengths else 0.0
            ),
            index_size=index_size,
        )

    def _check_dimensions(self, doc: Document) -> int | None:
        """Validate all of a document's vectors against the store dimension.

        Returns the dimension the store will have after the insert.
        """
        expected = self._dimension
        for name, vector in doc.all_vectors():
            if expected is None:
                expected = len(vector)
            elif len(vector) != expected:
                raise DimensionMismatchError(
                    expected=expected,
                    actual=len(vector),
                    details={"document_id": doc.id, "vector": name},
                )
        return expected
