"""Inverted metadata index used to narrow candidates before scoring."""

from collections.abc import Hashable, Iterable, Mapping
from typing import Any

from simsearch.config import DEFAULT_INDEXED_FIELDS
from simsearch.documents.models import Document, metadata_members
from simsearch.exceptions import ConfigurationError, InvalidArgumentError


class MetadataIndex:
    """Field -> value -> document ids.

    The index is owned by a DocumentStore, which calls `update` and
    `discard` inside the same locked operation that changes its documents.
    Nothing else should mutate it.
    """

    def __init__(self, fields: Iterable[str] | None = None) -> None:
        """Initialize the index.

        Args:
            fields: Metadata fields to index. Defaults to category,
                location, type, price and season.

        Raises:
            ConfigurationError: If a field name is blank or repeated.
        """
        self._fields = tuple(fields if fields is not None else DEFAULT_INDEXED_FIELDS)
        if any(not field.strip() for field in self._fields) or len(set(self._fields)) != len(self._fields):
            raise ConfigurationError(
                "Indexed fields must be unique, non-blank names",
                details={"fields": list(self._fields)},
            )
        self._entries: dict[str, dict[Any, set[str]]] = {
            field: {} for field in self._fields
        }
        self._ids: set[str] = set()

    @property
    def fields(self) -> tuple[str, ...]:
        """Indexed field names."""
        return self._fields

    def update(self, doc: Document) -> None:
        """Record every indexed value of a document."""
        self._ids.add(doc.id)
        for field, value in self._indexable_values(doc):
            self._entries[field].setdefault(value, set()).add(doc.id)

    def discard(self, doc: Document) -> None:
        """Remove every entry recorded for a document."""
        self._ids.discard(doc.id)
        for field, value in self._indexable_values(doc):
            ids = self._entries[field].get(value)
            if ids is None:
                continue
            ids.discard(doc.id)
            if not ids:
                del self._entries[field][value]

    def clear(self) -> None:
        """Drop all entries."""
        for values in self._entries.values():
            values.clear()
        self._ids.clear()

    def ids_matching(self, field: str, value: Any) -> set[str]:
        """Ids whose `field` equals (or, for collections, contains) `value`.

        Unknown fields and values yield an empty set.
        """
        if not isinstance(value, Hashable):
            return set()
        return set(self._entries.get(field, {}).get(value, ()))

    def ids_matching_filters(self, filters: Mapping[str, Iterable[Any]]) -> set[str]:
        """Ids matching every constrained field.

        Values listed for one field are alternatives (OR); separate fields
        must all match (AND). A document lacking a constrained field never
        matches. An empty value list places no constraint on its field.

        Raises:
            InvalidArgumentError: If a filter names a field that is not
                indexed or its values are not a list.
        """
        self.validate_filters(filters)
        result: set[str] | None = None

        for field, accepted in filters.items():
            accepted = list(accepted)
            if not accepted:
                continue

            matched: set[str] = set()
            for value in accepted:
                matched |= self.ids_matching(field, value)

            result = matched if result is None else result & matched
            if not result:
                return set()

        return set(self._ids) if result is None else result

    def validate_filters(self, filters: Mapping[str, Iterable[Any]]) -> None:
        """Reject filters on non-indexed fields or with non-list values.

        Raises:
            InvalidArgumentError: If a filter is malformed.
        """
        for field, accepted in filters.items():
            if field not in self._entries:
                raise InvalidArgumentError(
                    f"Cannot filter on non-indexed field: {field}",
                    details={"field": field, "indexed_fields": list(self._fields)},
                )
            if isinstance(accepted, str | bytes) or not isinstance(accepted, Iterable):
                raise InvalidArgumentError(
                    f"Filter values for '{field}' must be a list",
                    details={"field": field},
                )

    def document_ids(self) -> frozenset[str]:
        """Ids of every document the index has recorded."""
        return frozenset(self._ids)

    def values(self, field: str) -> dict[Any, int]:
        """Observed values of a field with the number of documents holding each."""
        return {value: len(ids) for value, ids in self._entries.get(field, {}).items()}

    def size(self) -> int:
        """Number of distinct (field, value) keys."""
        return sum(len(values) for values in self._entries.values())

    def _indexable_values(self, doc: Document) -> Iterable[tuple[str, Any]]:
        for field in self._fields:
            for member in metadata_members(doc.metadata.get(field)):
                if isinstance(member, Hashable):
                    yield field, member
