"""
leetcode_parser.py
------------------
Fetches LeetCode solved-problem statistics via the public GraphQL API.

Primary function
----------------
get_leetcode_stats(username: str)
    -> {"username": str, "total": int, "easy": int, "medium": int, "hard": int}
    -> None on any error (invalid username, null data, network failure)

The GraphQL endpoint wants a CSRF cookie, so a module-level session is
primed from the homepage once and rebuilt whenever a query is rejected.
"""

import logging
from typing import Optional

import requests

logger = logging.getLogger(__name__)

_LC_GRAPHQL  = "https://leetcode.com/graphql"
_LC_HOMEPAGE = "https://leetcode.com/"

_TIMEOUT = 10

_BASE_HEADERS = {
    "Content-Type": "application/json",
    "Origin":       "https://leetcode.com",
    "Referer":      "https://leetcode.com",
    "User-Agent":   (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
        "AppleWebKit/537.36 (KHTML, like Gecko) "
        "Chrome/122.0.0.0 Safari/537.36"
    ),
    "Accept":          "application/json",
    "Accept-Language": "en-US,en;q=0.9",
}

# Module-level session, reused across calls so the CSRF token is fetched once.
_session: Optional[requests.Session] = None

# matchedUser -> submitStatsGlobal -> acSubmissionNum
_STATS_QUERY = """
query getUserStats($username: String!) {
  matchedUser(username: $username) {
    username
    submitStats: submitStatsGlobal {
      acSubmissionNum {
        difficulty
        count
      }
    }
  }
}
"""


# --------------------------------------------------------------------------- #
#  Internal helpers                                                            #
# --------------------------------------------------------------------------- #

def _get_session() -> requests.Session:
    """Return a live requests.Session with a LeetCode CSRF cookie if obtainable."""
    global _session
    if _session is not None:
        return _session
    sess = requests.Session()
    sess.headers.update(_BASE_HEADERS)
    try:
        sess.get(_LC_HOMEPAGE, timeout=_TIMEOUT)
        csrf = sess.cookies.get("csrftoken", "")
        if csrf:
            sess.headers.update({"x-csrftoken": csrf})
            logger.debug("LeetCode CSRF token acquired (len=%d)", len(csrf))
        else:
            logger.warning("LeetCode homepage did not return a csrftoken cookie")
    except requests.RequestException as exc:
        logger.warning("Failed to fetch LeetCode homepage for CSRF: %s", exc)
    _session = sess
    return _session


def _reset_session() -> None:
    global _session
    _session = None


def _gql_post(query: str, variables: dict, timeout: int = _TIMEOUT) -> Optional[dict]:
    """POST a GraphQL query using the CSRF-primed session.

    Retries once with a fresh session on a non-200 reply (usually an expired
    CSRF token).  Returns parsed JSON or None.
    """
    for attempt in range(2):
        sess = _get_session()
        try:
            resp = sess.post(
                _LC_GRAPHQL,
                json={"query": query, "variables": variables},
                timeout=timeout,
            )
            if resp.status_code == 200:
                return resp.json()
            logger.warning(
                "LeetCode GraphQL HTTP %s (attempt %d/2)",
                resp.status_code, attempt + 1,
            )
            _reset_session()
        except requests.Timeout:
            logger.warning("LeetCode request timed out (variables=%s)", variables)
            return None
        except requests.RequestException as exc:
            logger.warning("LeetCode request failed: %s", exc)
            return None
        except ValueError as exc:
            logger.warning("LeetCode returned invalid JSON: %s", exc)
            return None
    return None


def _parse_ac_counts(ac_list) -> dict:
    """Map acSubmissionNum entries to {"All": n, "Easy": n, ...}; bad entries are skipped."""
    counts: dict = {}
    for entry in (ac_list or []):
        if not isinstance(entry, dict):
            continue
        diff = (entry.get("difficulty") or "").strip()
        try:
            counts[diff] = int(entry.get("count", 0))
        except (TypeError, ValueError):
            counts[diff] = 0
    return counts


# --------------------------------------------------------------------------- #
#  Public API                                                                  #
# --------------------------------------------------------------------------- #

def get_leetcode_stats(username: str) -> Optional[dict]:
    """
    Fetch solved-problem counts for a LeetCode user.

    Parameters
    ----------
    username : str
        LeetCode username.  Leading/trailing whitespace is stripped.

    Returns
    -------
    dict | None
        "username", "total", "easy", "medium", "hard".  ``total`` is the
        API's "All" bucket when present, otherwise the sum of the three.
    """
    username = (username or "").strip()
    if not username:
        logger.warning("get_leetcode_stats called with empty username")
        return None

    raw = _gql_post(_STATS_QUERY, {"username": username})

    if not isinstance(raw, dict):
        logger.info("LeetCode API unavailable for '%s'.", username)
        return None

    if raw.get("errors"):
        msg = raw["errors"][0].get("message", "unknown")
        logger.info("LeetCode GraphQL error for '%s': %s", username, msg)
        return None

    matched = (raw.get("data") or {}).get("matchedUser")
    if not matched:
        logger.info("LeetCode user '%s' not found or profile is private.", username)
        return None

    counts = _parse_ac_counts((matched.get("submitStats") or {}).get("acSubmissionNum"))
    easy   = counts.get("Easy", 0)
    medium = counts.get("Medium", 0)
    hard   = counts.get("Hard", 0)

    return {
        "username": matched.get("username") or username,
        "total":    counts.get("All", easy + medium + hard),
        "easy":     easy,
        "medium":   medium,
        "hard":     hard,
    }
