"""Document store and metadata index module."""

from simsearch.store.document_store import DocumentStore
from simsearch.store.index import MetadataIndex
from simsearch.store.locks import ReadWriteLock
from simsearch.store.models import BatchInsertFailure, BatchInsertResult, StoreStats

__all__ = [
    "BatchInsertFailure",
    "BatchInsertResult",
    "DocumentStore",
    "MetadataIndex",
    "ReadWriteLock",
    "StoreStats",
]
