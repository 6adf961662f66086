"""Shared ``httpx.AsyncClient`` factory — credentials, timeout and retries."""

from __future__ import annotations

import logging

import httpx

from repo_ranker.infrastructure.config import Settings

logger = logging.getLogger(__name__)

USER_AGENT = "repo-ranker/1.0"


def create_http_client(
    settings: Settings,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    """Build the process-wide GitHub HTTP client.

    A personal access token takes precedence over OAuth app credentials;
    with neither, requests are unauthenticated (60 requests / hour).
    Connection failures are retried by the transport ``http_retries`` times;
    nothing above this layer retries.
    """
    headers = {"User-Agent": USER_AGENT}
    auth: httpx.Auth | None = None

    if settings.github_token:
        headers["Authorization"] = f"Bearer {settings.github_token.get_secret_value()}"
    elif settings.github_client_id and settings.github_client_secret:
        auth = httpx.BasicAuth(
            settings.github_client_id,
            settings.github_client_secret.get_secret_value(),
        )
    else:
        logger.warning("No GitHub credentials configured; using unauthenticated rate limits")

    if transport is None:
        transport = httpx.AsyncHTTPTransport(retries=settings.http_retries)

    return httpx.AsyncClient(
        headers=headers,
        auth=auth,
        timeout=httpx.Timeout(settings.request_timeout),
        transport=transport,
    )
