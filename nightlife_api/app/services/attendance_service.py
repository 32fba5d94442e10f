"""
Business logic for venue attendance.

A user either plans to attend a venue or does not.  Adding and removing
run inside one transaction together with the venue lookup/creation, so
a failed ledger write never leaves a freshly created venue behind.
The ``UNIQUE(user_id, venue_id)`` constraint makes repeated adds
idempotent.  The SQLite work runs in Starlette's threadpool.
"""

import logging
from typing import List

from starlette.concurrency import run_in_threadpool

from nightlife_api.app.core.db import get_cursor, transaction
from nightlife_api.app.services.venue_service import VenueService


logger = logging.getLogger(__name__)


class AttendanceService:
    """Service for the user ↔ venue attendance ledger."""

    @classmethod
    async def add_attendance(cls, user_id: int, venue_yelp_id: str) -> bool:
        """Mark ``user_id`` as attending ``venue_yelp_id``.

        Returns ``True`` if a new pairing was stored and ``False`` if the
        user was already attending.  Raises ``StorageError`` (after
        rolling back) if the user does not exist or the write fails.
        """
        inserted = await run_in_threadpool(cls._add, user_id, venue_yelp_id)
        logger.info(
            "User %s attending venue %s (new=%s)", user_id, venue_yelp_id, inserted
        )
        return inserted

    @classmethod
    async def remove_attendance(cls, user_id: int, venue_yelp_id: str) -> bool:
        """Remove ``venue_yelp_id`` from the user's plans.

        Unknown venues and missing pairings are a no-op.  Returns
        ``True`` if a row was deleted.
        """
        removed = await run_in_threadpool(cls._remove, user_id, venue_yelp_id)
        logger.info(
            "User %s no longer attending venue %s (removed=%s)",
            user_id,
            venue_yelp_id,
            removed,
        )
        return removed

    @classmethod
    async def list_attendance_ids(cls, user_id: int) -> List[str]:
        """Return the Yelp ids of every venue the user is attending."""
        return await run_in_threadpool(cls._list_ids, user_id)

    @classmethod
    async def count_attendees(cls, venue_yelp_id: str) -> int:
        """Return how many users attend ``venue_yelp_id`` (0 for unknown venues)."""
        return await run_in_threadpool(cls._count, venue_yelp_id)

    @staticmethod
    def _add(user_id: int, venue_yelp_id: str) -> bool:
        with transaction() as cursor:
            venue_id = VenueService.resolve_or_create(cursor, venue_yelp_id)
            cursor.execute(
                "INSERT OR IGNORE INTO users_venues (user_id, venue_id) VALUES (?, ?)",
                (user_id, venue_id),
            )
            return cursor.rowcount == 1

    @staticmethod
    def _remove(user_id: int, venue_yelp_id: str) -> bool:
        with transaction() as cursor:
            venue_id = VenueService.find_venue_id(cursor, venue_yelp_id)
            if venue_id is None:
                return False
            cursor.execute(
                "DELETE FROM users_venues WHERE user_id = ? AND venue_id = ?",
                (user_id, venue_id),
            )
            return cursor.rowcount > 0

    @staticmethod
    def _list_ids(user_id: int) -> List[str]:
        with get_cursor() as cursor:
            rows = cursor.execute(
                "SELECT venues.venue_yelp_id FROM venues "
                "JOIN users_venues ON venues.venue_id = users_venues.venue_id "
                "WHERE users_venues.user_id = ?",
                (user_id,),
            ).fetchall()
        return [row["venue_yelp_id"] for row in rows]

    @staticmethod
    def _count(venue_yelp_id: str) -> int:
        with get_cursor() as cursor:
            row = cursor.execute(
                "SELECT COUNT(*) AS count FROM users_venues "
                "JOIN venues ON venues.venue_id = users_venues.venue_id "
                "WHERE venues.venue_yelp_id = ?",
                (venue_yelp_id,),
            ).fetchone()
        return row["count"] if row else 0
