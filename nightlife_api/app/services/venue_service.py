"""
Venue directory.

Venues are created lazily the first time a user references a Yelp
business id.  Both helpers run on a cursor supplied by the caller so
that they take part in the caller's transaction.
"""

import sqlite3
from typing import Optional


class VenueService:
    """Maps external (Yelp) business ids to internal venue ids."""

    @staticmethod
    def find_venue_id(cursor: sqlite3.Cursor, venue_yelp_id: str) -> Optional[int]:
        row = cursor.execute(
            "SELECT venue_id FROM venues WHERE venue_yelp_id = ?",
            (venue_yelp_id,),
        ).fetchone()
        return row["venue_id"] if row else None

    @staticmethod
    def resolve_or_create(cursor: sqlite3.Cursor, venue_yelp_id: str) -> int:
        """Return the venue id for ``venue_yelp_id``, inserting it if unseen.

        ``INSERT OR IGNORE`` against the unique ``venue_yelp_id`` makes
        concurrent first references collapse onto a single row.
        """
        cursor.execute(
            "INSERT OR IGNORE INTO venues (venue_yelp_id) VALUES (?)",
            (venue_yelp_id,),
        )
        venue_id = VenueService.find_venue_id(cursor, venue_yelp_id)
        if venue_id is None:
            raise sqlite3.IntegrityError(f"Venue {venue_yelp_id} could not be resolved")
        return venue_id
