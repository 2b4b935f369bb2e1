"""
medium_parser.py
----------------
Fetches the latest Medium articles through the rss2json feed proxy.

get_medium_posts(username) -> {"posts": [{"title", "link", "date"}, ...], "latest": {...}}
                           -> None when the feed is unavailable or malformed
"""

import logging
from typing import Optional

import requests

logger = logging.getLogger(__name__)

_RSS2JSON = "https://api.rss2json.com/v1/api.json"
_FEED_URL = "https://medium.com/feed/{username}"

_TIMEOUT   = 10
_MAX_POSTS = 5


def get_medium_posts(username: str) -> Optional[dict]:
    """
    Return up to five recent posts for *username* (with or without the leading "@").
    """
    username = (username or "").strip()
    if not username:
        logger.warning("get_medium_posts called with empty username")
        return None

    try:
        resp = requests.get(
            _RSS2JSON,
            params={"rss_url": _FEED_URL.format(username=username)},
            timeout=_TIMEOUT,
        )
        if resp.status_code != 200:
            logger.warning("Medium feed HTTP %s for '%s'", resp.status_code, username)
            return None
        data = resp.json()
    except requests.RequestException as exc:
        logger.warning("Medium request failed: %s", exc)
        return None
    except ValueError as exc:
        logger.warning("Medium feed returned invalid JSON: %s", exc)
        return None

    items = data.get("items") if isinstance(data, dict) else None
    if not isinstance(items, list):
        logger.info("Medium feed for '%s' has no items.", username)
        return None

    posts = [
        {"title": item.get("title", ""), "link": item.get("link", ""), "date": item.get("pubDate")}
        for item in items[:_MAX_POSTS]
        if isinstance(item, dict)
    ]
    return {
        "posts":  posts,
        "latest": posts[0] if posts else None,
    }
