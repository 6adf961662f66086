"""Domain exception hierarchy.

Each exception maps to a specific HTTP status code (or CLI exit status) at
the interface layer.  Inner layers raise these; the outermost layer
translates them.
"""

from __future__ import annotations


class RepoRankerError(Exception):
    """Base exception for the entire application."""


# ── Input validation ────────────────────────────────────────────────────────


class InvalidRankingQueryError(RepoRankerError):
    """The caller-supplied ranking parameters are not usable."""


class StrategyUnavailableError(RepoRankerError):
    """The requested retrieval strategy has no adapter wired in."""


# ── GitHub API errors ───────────────────────────────────────────────────────


class OrganizationNotFoundError(RepoRankerError):
    """The organization does not exist or cannot be searched."""


class RepositoryNotFoundError(RepoRankerError):
    """A repository vanished between search and pull-request lookup (404)."""


class GitHubAccessDeniedError(RepoRankerError):
    """GitHub refused the credentials or the request (401 / 403)."""


class GitHubRateLimitError(RepoRankerError):
    """GitHub API rate limit exceeded (429 / 403 with rate-limit header)."""


class GitHubRequestError(RepoRankerError):
    """The request could not be completed (network error or unexpected status)."""


class ResponseDecodeError(RepoRankerError):
    """GitHub answered with a payload of an unexpected shape."""


# ── Ranking errors ──────────────────────────────────────────────────────────


class UnenrichedRepositoryError(RepoRankerError):
    """Ranking by pull requests was attempted before enrichment finished."""
