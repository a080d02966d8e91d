"""Tests for the document store."""

from datetime import UTC, datetime

import pytest

from simsearch.documents.models import Document
from simsearch.exceptions import DimensionMismatchError, DocumentExistsError, ErrorCode
from simsearch.store.document_store import DocumentStore


def _doc(doc_id: str, vector: list[float] | None = None, **metadata: object) -> Document:
    return Document(id=doc_id, vector=vector, metadata=metadata)


class TestInsert:
    """Tests for single inserts and lookups."""

    def test_insert_and_get(self, store: DocumentStore) -> None:
        """Inserted documents can be looked up by id."""
        doc = _doc("a", [1.0, 0.0], category="beach")
        stored = store.insert(doc)

        assert store.get("a") == stored
        assert stored.vector == doc.vector
        assert stored.metadata == doc.metadata
        assert "a" in store
        assert len(store) == 1

    def test_insert_stamps_created_at(self, store: DocumentStore) -> None:
        """The insertion time replaces any timestamp the caller set."""
        stale = datetime(2001, 1, 1, tzinfo=UTC)
        before = datetime.now(UTC)

        stored = store.insert(Document(id="a", vector=[1.0, 0.0], created_at=stale))

        assert stored.created_at >= before
        assert store.get("a").created_at == stored.created_at

    def test_get_missing(self, store: DocumentStore) -> None:
        """Missing ids return None."""
        assert store.get("nope") is None

    def test_duplicate_rejected(self, store: DocumentStore) -> None:
        """A second document with the same id is refused; the first stays."""
        store.insert(_doc("a", [1.0, 0.0], category="beach"))

        with pytest.raises(DocumentExistsError) as exc_info:
            store.insert(_doc("a", [0.0, 1.0], category="city"))

        assert exc_info.value.code == ErrorCode.DOCUMENT_EXISTS
        assert store.get("a").metadata["category"] == "beach"
        assert store.index.ids_matching("category", "city") == set()

    def test_first_vector_sets_dimension(self, store: DocumentStore) -> None:
        """The first stored vector fixes the store dimension."""
        assert store.dimension is None
        store.insert(_doc("a", [1.0, 0.0, 0.0]))
        assert store.dimension == 3

    def test_dimension_mismatch_rejected(self, store: DocumentStore) -> None:
        """Vectors of another length are refused and nothing is stored."""
        store.insert(_doc("a", [1.0, 0.0]))

        with pytest.raises(DimensionMismatchError) as exc_info:
            store.insert(_doc("b", [1.0, 0.0, 0.0], category="beach"))

        assert exc_info.value.details["document_id"] == "b"
        assert "b" not in store
        assert store.index.ids_matching("category", "beach") == set()

    def test_field_vector_mismatch_rejected(self, store: DocumentStore) -> None:
        """Field vectors must share the store dimension too."""
        store.insert(_doc("a", [1.0, 0.0]))
        doc = Document(id="b", vector=[0.0, 1.0], field_vectors={"title": [1.0]})

        with pytest.raises(DimensionMismatchError) as exc_info:
            store.insert(doc)

        assert exc_info.value.details["vector"] == "field_vectors.title"

    def test_pinned_dimension(self) -> None:
        """A dimension given up front is enforced from the first insert."""
        store = DocumentStore(dimension=3)
        with pytest.raises(DimensionMismatchError):
            store.insert(_doc("a", [1.0, 0.0]))

    def test_document_without_vector(self, store: DocumentStore) -> None:
        """Documents awaiting embedding are stored and indexed."""
        store.insert(_doc("a", None, category="beach"))

        assert "a" in store
        assert store.dimension is None
        assert store.index.ids_matching("category", "beach") == {"a"}


class TestInsertBatch:
    """Tests for batch inserts."""

    def test_partial_failure(self, store: DocumentStore) -> None:
        """Failures are reported per item and do not undo other inserts."""
        result = store.insert_batch(
            [
                _doc("a", [1.0, 0.0]),
                _doc("a", [0.0, 1.0]),
                _doc("b", [1.0, 0.0, 0.0]),
                _doc("c", [0.0, 1.0]),
            ]
        )

        assert result.inserted == ["a", "c"]
        assert not result.ok
        assert [(f.position, f.document_id, f.code) for f in result.failures] == [
            (1, "a", ErrorCode.DOCUMENT_EXISTS.value),
            (2, "b", ErrorCode.DIMENSION_MISMATCH.value),
        ]
        assert len(store) == 2

    def test_all_inserted(self, store: DocumentStore) -> None:
        """A clean batch reports ok."""
        result = store.insert_batch([_doc("a", [1.0]), _doc("b", [2.0])])
        assert result.ok
        assert result.inserted == ["a", "b"]


class TestRemoveAndClear:
    """Tests for removal."""

    def test_remove(self, store: DocumentStore) -> None:
        """Removing drops the document and its index entries."""
        store.insert(_doc("a", [1.0, 0.0], category="beach"))

        assert store.remove("a") is True
        assert "a" not in store
        assert store.index.ids_matching("category", "beach") == set()

    def test_remove_missing(self, store: DocumentStore) -> None:
        """Removing an unknown id reports False."""
        assert store.remove("nope") is False

    def test_clear_keeps_dimension(self, store: DocumentStore) -> None:
        """Clearing empties store and index but keeps the dimension."""
        store.insert(_doc("a", [1.0, 0.0], category="beach"))
        store.clear()

        assert len(store) == 0
        assert store.index.size() == 0
        assert store.dimension == 2
        with pytest.raises(DimensionMismatchError):
            store.insert(_doc("b", [1.0]))

    def test_reinsert_after_remove(self, store: DocumentStore) -> None:
        """A removed id can be inserted again."""
        store.insert(_doc("a", [1.0, 0.0]))
        store.remove("a")
        store.insert(_doc("a", [0.0, 1.0]))
        assert store.get("a").vector == [0.0, 1.0]


class TestIteration:
    """Tests for iteration order."""

    def test_all_in_insertion_order(self, store: DocumentStore) -> None:
        """all() yields documents in insertion order."""
        for doc_id in ("c", "a", "b"):
            store.insert(_doc(doc_id, [1.0]))
        assert [d.id for d in store.all()] == ["c", "a", "b"]

    def test_all_is_a_snapshot(self, store: DocumentStore) -> None:
        """Documents inserted after iteration starts are not seen."""
        store.insert(_doc("a", [1.0]))
        docs = store.all()
        store.insert(_doc("b", [1.0]))
        assert [d.id for d in docs] == ["a"]

    def test_iter_ids_in_insertion_order(self, store: DocumentStore) -> None:
        """iter_ids follows insertion order and skips unknown ids."""
        for doc_id in ("a", "b", "c"):
            store.insert(_doc(doc_id, [1.0]))

        with store.read_locked():
            ids = [d.id for d in store.iter_ids({"c", "a", "zzz"})]

        assert ids == ["a", "c"]


class TestStats:
    """Tests for store statistics."""

    def test_stats(self, store: DocumentStore) -> None:
        """Counts by category, location and type plus vector stats."""
        store.insert(_doc("a", [1.0, 0.0], category="beach", location="Bali", type="resort"))
        store.insert(_doc("b", [0.0, 1.0], category="beach", location="Nice"))
        store.insert(_doc("c", None, category="city"))

        stats = store.stats()

        assert stats.total_documents == 3
        assert stats.categories == {"beach": 2, "city": 1}
        assert stats.locations == {"Bali": 1, "Nice": 1}
        assert stats.types == {"resort": 1}
        assert stats.dimension == 2
        assert stats.average_vector_dimension == 2.0
        assert stats.index_size == 5

    def test_empty_stats(self, store: DocumentStore) -> None:
        """An empty store reports zeros."""
        stats = store.stats()
        assert stats.total_documents == 0
        assert stats.average_vector_dimension == 0.0
        assert stats.dimension is None


class TestConsistency:
    """Tests for store and index agreement."""

    def test_consistent_through_changes(self, store: DocumentStore) -> None:
        """Inserts, removals and clears keep the index in step."""
        assert store.is_consistent()
        store.insert(_doc("a", [1.0], category="beach"))
        store.insert(_doc("b", [1.0]))
        store.remove("a")
        assert store.is_consistent()
        store.clear()
        assert store.is_consistent()

    def test_drift_detected(self, store: DocumentStore) -> None:
        """An index entry for an unknown document is reported."""
        store.index.update(_doc("ghost", None, category="beach"))
        assert not store.is_consistent()
