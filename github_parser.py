"""
github_parser.py
----------------
Fetches public GitHub statistics for the profile owner.

Returns the normalised record the chatbot renders:

    {
        "username":  str,
        "repos":     int,            # public repositories
        "stars":     int,            # stars across the recently updated repos
        "followers": int,
        "languages": str,            # "Go, Python, TypeScript"
        "top_repos": [{"name", "description", "url", "stars", "language"}, ...],
    }

or None when the user does not exist, the API is unavailable, rate-limited
or returns something unexpected.  Never raises.
"""

import logging
from collections import Counter
from typing import Optional

import requests

logger = logging.getLogger(__name__)

# GitHub REST API v3 base
_GH_API = "https://api.github.com"

_TIMEOUT = 10

# How many recently updated repos feed the language / star stats
_RECENT_REPOS = 10
_TOP_LANGUAGES = 3
_TOP_REPOS = 2


# --------------------------------------------------------------------------- #
#  Internal helpers                                                            #
# --------------------------------------------------------------------------- #

def _get_headers(token: Optional[str]) -> dict:
    headers = {"Accept": "application/vnd.github+json"}
    if token:
        headers["Authorization"] = f"Bearer {token}"
    return headers


def _safe_get(url: str, headers: dict, timeout: int = _TIMEOUT):
    """GET request with error handling; returns parsed JSON or None."""
    try:
        response = requests.get(url, headers=headers, timeout=timeout)
        if response.status_code == 200:
            return response.json()
        logger.warning("GitHub API %s → %s", url, response.status_code)
        return None
    except requests.RequestException as exc:
        logger.warning("GitHub request failed: %s", exc)
        return None
    except ValueError as exc:
        logger.warning("GitHub returned invalid JSON for %s: %s", url, exc)
        return None


def _top_languages(repos: list) -> str:
    counts = Counter(r.get("language") for r in repos if r.get("language"))
    return ", ".join(lang for lang, _ in counts.most_common(_TOP_LANGUAGES))


def _summarise_repo(repo: dict) -> dict:
    return {
        "name":        repo.get("name", ""),
        "description": repo.get("description"),
        "url":         repo.get("html_url", ""),
        "stars":       repo.get("stargazers_count", 0) or 0,
        "language":    repo.get("language"),
    }


# --------------------------------------------------------------------------- #
#  Public API                                                                  #
# --------------------------------------------------------------------------- #

def get_github_stats(username: str, token: Optional[str] = None) -> Optional[dict]:
    """
    Fetch profile and recent-repository stats for *username*.

    Parameters
    ----------
    username : str           – GitHub username
    token    : str, optional – personal access token (avoids rate limits)

    Returns
    -------
    dict | None – see module docstring.
    """
    username = (username or "").strip()
    if not username:
        logger.warning("get_github_stats called with empty username")
        return None

    headers = _get_headers(token)

    # ── 1. Profile ───────────────────────────────────────────────────────────
    user = _safe_get(f"{_GH_API}/users/{username}", headers)
    if not isinstance(user, dict) or not user.get("login"):
        logger.info("GitHub user '%s' not found or API unavailable.", username)
        return None

    # ── 2. Recently updated repositories ─────────────────────────────────────
    repos = _safe_get(
        f"{_GH_API}/users/{username}/repos?sort=updated&per_page={_RECENT_REPOS}",
        headers,
    )
    if not isinstance(repos, list):
        logger.info("Could not fetch repositories for '%s'.", username)
        return None
    repos = [r for r in repos if isinstance(r, dict)]

    return {
        "username":  user["login"],
        "repos":     user.get("public_repos", len(repos)) or 0,
        "stars":     sum(r.get("stargazers_count", 0) or 0 for r in repos),
        "followers": user.get("followers", 0) or 0,
        "languages": _top_languages(repos),
        "top_repos": [_summarise_repo(r) for r in repos[:_TOP_REPOS]],
    }
