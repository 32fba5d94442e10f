"""
Dependency wiring for upstream HTTP clients.

Routes receive the clients through ``Depends`` so tests can swap them
with ``app.dependency_overrides``.
"""

from __future__ import annotations

from nightlife_api.app.core.config import settings
from nightlife_api.app.services.github_service import GitHubOAuthClient
from nightlife_api.app.services.yelp_service import YelpClient

_yelp_client: YelpClient | None = None
_github_client: GitHubOAuthClient | None = None


def get_yelp_client() -> YelpClient:
    global _yelp_client
    if _yelp_client:
        return _yelp_client
    _yelp_client = YelpClient(
        api_key=settings.yelp_api_key,
        base_url=settings.yelp_api_base_url,
        timeout=settings.upstream_timeout,
    )
    return _yelp_client


def get_github_client() -> GitHubOAuthClient:
    global _github_client
    if _github_client:
        return _github_client
    _github_client = GitHubOAuthClient(
        client_id=settings.github_client_id,
        client_secret=settings.github_client_secret,
        callback_url=settings.github_callback_url,
        timeout=settings.upstream_timeout,
    )
    return _github_client
