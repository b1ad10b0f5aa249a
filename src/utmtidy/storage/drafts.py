"""In-memory draft storage with time-to-live.

Drafts hold unsaved input and ruleset while the caller goes through an
external redirect such as sign-in. Expiry is lazy: an expired draft is
evicted when it is next looked up, there is no background sweep.
"""

import logging
import secrets
import time
from dataclasses import dataclass
from typing import Callable, Optional

from utmtidy.core.constants import DEFAULTS
from utmtidy.core.exceptions import DraftNotFoundError
from utmtidy.core.models import DraftPayload

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StoredDraft:
    """Draft payload with its creation time (seconds since epoch)."""
    payload: DraftPayload
    created_at: float


class DraftStore:
    """Map opaque draft ids to payloads for a limited time.

    Example:
        >>> store = DraftStore()
        >>> draft_id = store.save(payload)
        >>> store.load(draft_id)
    """

    def __init__(
        self,
        ttl_seconds: float = DEFAULTS["draft_ttl_seconds"],
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize draft store.

        Args:
            ttl_seconds: Lifetime of a draft
            clock: Time source, injectable for tests
        """
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._drafts: dict[str, StoredDraft] = {}

    def __len__(self) -> int:
        return len(self._drafts)

    def save(self, payload: DraftPayload) -> str:
        """Store a payload and return its new id."""
        draft_id = secrets.token_urlsafe(16)
        self._drafts[draft_id] = StoredDraft(payload=payload, created_at=self._clock())
        logger.debug(f"Saved draft {draft_id}")
        return draft_id

    def load(self, draft_id: str) -> Optional[DraftPayload]:
        """Look up a draft, evicting it if it has expired.

        Returns:
            The payload, or None if unknown or expired
        """
        entry = self._drafts.get(draft_id)
        if entry is None:
            return None

        if self._clock() - entry.created_at > self.ttl_seconds:
            del self._drafts[draft_id]
            logger.debug(f"Draft {draft_id} expired")
            return None

        return entry.payload

    def require(self, draft_id: str) -> DraftPayload:
        """Look up a draft that must exist.

        Raises:
            DraftNotFoundError: If the draft is unknown or expired
        """
        payload = self.load(draft_id)
        if payload is None:
            raise DraftNotFoundError(f"Draft not found or expired: {draft_id}")
        return payload

    def clear(self, draft_id: str) -> None:
        """Remove a draft; unknown ids are ignored."""
        self._drafts.pop(draft_id, None)
