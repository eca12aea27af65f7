"""Value types exchanged with the remote document database."""

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional, Tuple


@dataclass(frozen=True)
class QueryFilter:
    """A single field comparison, e.g. ``status == "PENDING"``."""

    field: str
    op: str
    value: Any


@dataclass(frozen=True)
class RemoteQuery:
    """Query against a collection or a single document.

    A path with an odd number of segments (``users/u1/history``) addresses a
    collection; an even number (``users/u1/profile/settings``) a document.
    Queries are immutable and hashable so they can be compared when deciding
    whether an existing subscription can be reused.
    """

    path: str
    filters: Tuple[QueryFilter, ...] = ()
    order_by: Optional[str] = None
    descending: bool = False
    limit: Optional[int] = None
    start_after: Any = None

    @property
    def segments(self) -> Tuple[str, ...]:
        return tuple(part for part in self.path.split("/") if part)

    @property
    def is_document(self) -> bool:
        return len(self.segments) % 2 == 0

    def where(self, field_name: str, op: str, value: Any) -> "RemoteQuery":
        return replace(self, filters=self.filters + (QueryFilter(field_name, op, value),))

    def ordered(self, field_name: str, descending: bool = False) -> "RemoteQuery":
        return replace(self, order_by=field_name, descending=descending)

    def limited(self, limit: Optional[int]) -> "RemoteQuery":
        return replace(self, limit=limit)

    def after(self, value: Any) -> "RemoteQuery":
        return replace(self, start_after=value)


@dataclass(frozen=True)
class Snapshot:
    """Point-in-time result set for a query.

    Attributes:
        documents: Document payloads in query order, each carrying an ``id`` key
        read_time: When the server produced the result
    """

    documents: Tuple[Dict[str, Any], ...] = ()
    read_time: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def __len__(self) -> int:
        return len(self.documents)

    @property
    def is_empty(self) -> bool:
        return not self.documents


class WriteKind(Enum):
    """Kind of a batched write."""

    SET = "set"
    UPDATE = "update"
    DELETE = "delete"


@dataclass(frozen=True)
class WriteOperation:
    """One operation of an atomic batch.

    Attributes:
        kind: set, update or delete
        path: Document path
        data: Fields to write (ignored for delete)
        merge: For set, merge into the existing document instead of replacing it
    """

    kind: WriteKind
    path: str
    data: Dict[str, Any] = field(default_factory=dict)
    merge: bool = False

    @classmethod
    def set(cls, path: str, data: Dict[str, Any], merge: bool = False) -> "WriteOperation":
        return cls(WriteKind.SET, path, dict(data), merge)

    @classmethod
    def update(cls, path: str, data: Dict[str, Any]) -> "WriteOperation":
        return cls(WriteKind.UPDATE, path, dict(data))

    @classmethod
    def delete(cls, path: str) -> "WriteOperation":
        return cls(WriteKind.DELETE, path)
