"""
Sample store boundary.

The hosted document store keeps two per-user collections:
- features_sessions: precomputed feature records, keyed by createdAt
- gameSessions: raw game sessions, keyed by timestamp

The estimators only need two awaitable reads returning plain dict documents,
newest first. Errors raised by a store are wrapped in UpstreamFetchFailure by
the ingestion layer.
"""

from collections.abc import Iterable, Mapping
from typing import Any, Protocol

from .science.normalizer import parse_timestamp

FEATURES_COLLECTION = "features_sessions"
SESSIONS_COLLECTION = "gameSessions"


class SampleStore(Protocol):
    """Read access to a user's performance documents."""

    async def fetch_features(self, user_id: str, limit: int) -> list[dict[str, Any]]:
        """Up to `limit` feature records, newest first."""
        ...

    async def fetch_sessions(self, user_id: str, limit: int) -> list[dict[str, Any]]:
        """Up to `limit` raw sessions, newest first."""
        ...


def _sort_key(document: Mapping[str, Any], fields: tuple[str, ...]) -> float:
    for name in fields:
        moment = parse_timestamp(document.get(name))
        if moment is not None:
            return moment.timestamp()
    return float("-inf")


class InMemorySampleStore:
    """
    Dict-backed SampleStore for tests and local runs.

    Documents are held per user and collection, and returned newest first
    the way the hosted store's ordered queries return them.
    """

    def __init__(self) -> None:
        self._collections: dict[tuple[str, str], list[dict[str, Any]]] = {}

    def add_documents(
        self, user_id: str, collection: str, documents: Iterable[Mapping[str, Any]]
    ) -> None:
        self._collections.setdefault((user_id, collection), []).extend(
            dict(doc) for doc in documents
        )

    def add_features(self, user_id: str, documents: Iterable[Mapping[str, Any]]) -> None:
        self.add_documents(user_id, FEATURES_COLLECTION, documents)

    def add_sessions(self, user_id: str, documents: Iterable[Mapping[str, Any]]) -> None:
        self.add_documents(user_id, SESSIONS_COLLECTION, documents)

    def _newest_first(
        self, user_id: str, collection: str, limit: int, order_fields: tuple[str, ...]
    ) -> list[dict[str, Any]]:
        documents = self._collections.get((user_id, collection), [])
        ordered = sorted(documents, key=lambda doc: _sort_key(doc, order_fields), reverse=True)
        return [dict(doc) for doc in ordered[: max(limit, 0)]]

    async def fetch_features(self, user_id: str, limit: int) -> list[dict[str, Any]]:
        return self._newest_first(user_id, FEATURES_COLLECTION, limit, ("createdAt",))

    async def fetch_sessions(self, user_id: str, limit: int) -> list[dict[str, Any]]:
        return self._newest_first(
            user_id, SESSIONS_COLLECTION, limit, ("timestamp", "gameStartAt")
        )

