"""
Endpoint subpackage.

Each module in this package defines an APIRouter for a specific
domain (session, GitHub login, venues, Yelp proxy).  The routers are
aggregated in ``router.py`` and included in the main application.
"""
