"""Key-value stores for booking drafts.

Drafts are short-lived: one per listing, written before the sign-in
redirect and consumed once when the renter comes back. ``pop`` is the
read-then-delete primitive the continuation relies on.
"""

from abc import ABC, abstractmethod

from rental_core.services.dynamodb import DynamoDBService, get_dynamodb_service


class DraftStore(ABC):
    """Store of serialized drafts keyed by listing identifier."""

    @abstractmethod
    def get(self, listing_id: str) -> str | None:
        raise NotImplementedError

    @abstractmethod
    def put(self, listing_id: str, payload: str, expires_at: int) -> None:
        raise NotImplementedError

    @abstractmethod
    def delete(self, listing_id: str) -> None:
        raise NotImplementedError

    def pop(self, listing_id: str) -> str | None:
        """Return the stored payload and remove it."""
        payload = self.get(listing_id)
        if payload is not None:
            self.delete(listing_id)
        return payload


class InMemoryDraftStore(DraftStore):
    """Per-browser-session store; lives as long as the owning process."""

    def __init__(self) -> None:
        self._drafts: dict[str, str] = {}

    def get(self, listing_id: str) -> str | None:
        return self._drafts.get(listing_id)

    def put(self, listing_id: str, payload: str, expires_at: int) -> None:
        self._drafts[listing_id] = payload

    def delete(self, listing_id: str) -> None:
        self._drafts.pop(listing_id, None)

    def pop(self, listing_id: str) -> str | None:
        return self._drafts.pop(listing_id, None)

    def __len__(self) -> int:
        return len(self._drafts)


class DynamoDBDraftStore(DraftStore):
    """Drafts in the ``drafts`` table, expired by DynamoDB TTL on ``expires_at``.

    Keys are prefixed with a browser-session identifier so drafts from
    different renters never collide.
    """

    TABLE = "drafts"

    def __init__(self, session_key: str, db: DynamoDBService | None = None) -> None:
        """Initialize draft store.

        Args:
            session_key: Identifier of the renter's browser session
            db: DynamoDB service instance (defaults to the shared singleton)
        """
        self.session_key = session_key
        self.db = db or get_dynamodb_service()

    def _key(self, listing_id: str) -> dict[str, str]:
        return {"draft_key": f"{self.session_key}#{listing_id}"}

    def get(self, listing_id: str) -> str | None:
        item = self.db.get_item(self.TABLE, self._key(listing_id))
        if not item:
            return None
        payload = item.get("payload")
        return payload if isinstance(payload, str) else None

    def put(self, listing_id: str, payload: str, expires_at: int) -> None:
        self.db.put_item(
            self.TABLE,
            {**self._key(listing_id), "payload": payload, "expires_at": expires_at},
        )

    def delete(self, listing_id: str) -> None:
        self.db.delete_item(self.TABLE, self._key(listing_id))

    def pop(self, listing_id: str) -> str | None:
        """Delete and return in one call so two tabs cannot both consume it."""
        item = self.db.delete_item(self.TABLE, self._key(listing_id), return_old=True)
        if not item:
            return None
        payload = item.get("payload")
        return payload if isinstance(payload, str) else None
