"""
Top‑level package for the Nightlife API.

All functionality lives in the ``app`` subpackage; import the ASGI
application as ``nightlife_api.app.main:app``.
"""

__all__ = []
