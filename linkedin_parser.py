"""
linkedin_parser.py
------------------
LinkedIn activity for the profile owner.

LinkedIn's API needs OAuth and app approval, so activity is maintained by
hand in the knowledge base under ``social.linkedin_data``.  When that block
is absent the record degrades to the bare profile URL.
"""

import logging
from typing import Optional

logger = logging.getLogger(__name__)


def get_linkedin_activity(social: dict) -> Optional[dict]:
    """
    Build the LinkedIn record from the knowledge-base ``social`` section.

    Returns
    -------
    dict | None
        profile_url, connections, followers, latest_post.  None when no
        LinkedIn handle is configured at all.
    """
    social   = social or {}
    handle   = (social.get("linkedin") or "").strip()
    manual   = social.get("linkedin_data")
    fallback = f"https://linkedin.com/in/{handle}" if handle else None

    if isinstance(manual, dict):
        profile_url = manual.get("profile_url") or fallback
        if not profile_url:
            logger.warning("linkedin_data has no profile_url and no handle is set")
            return None
        return {
            "profile_url": profile_url,
            "connections": manual.get("connections"),
            "followers":   manual.get("followers"),
            "latest_post": manual.get("latest_post") if isinstance(manual.get("latest_post"), dict) else None,
        }

    if not fallback:
        return None
    return {
        "profile_url": fallback,
        "connections": None,
        "followers":   None,
        "latest_post": None,
    }
