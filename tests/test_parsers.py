from unittest.mock import MagicMock, patch

import pytest
import requests

import github_parser
import leetcode_parser
from github_parser import get_github_stats
from leetcode_parser import get_leetcode_stats
from linkedin_parser import get_linkedin_activity
from medium_parser import get_medium_posts


def _response(status_code=200, payload=None):
    resp = MagicMock()
    resp.status_code = status_code
    resp.json.return_value = payload
    return resp


# ── GitHub ───────────────────────────────────────────────────────────────────

_GH_USER  = {"login": "abc", "public_repos": 5, "followers": 3}
_GH_REPOS = [
    {"name": "one", "description": "First", "html_url": "https://github.com/abc/one", "stargazers_count": 7, "language": "Go"},
    {"name": "two", "description": None, "html_url": "https://github.com/abc/two", "stargazers_count": 4, "language": "Python"},
    {"name": "three", "description": None, "html_url": "https://github.com/abc/three", "stargazers_count": 1, "language": "Go"},
]


def _github_get(url, headers=None, timeout=None):
    if url.endswith("/users/abc"):
        return _response(payload=_GH_USER)
    if "/users/abc/repos" in url:
        return _response(payload=_GH_REPOS)
    return _response(status_code=404)


def test_github_stats_record() -> None:
    with patch.object(github_parser.requests, "get", side_effect=_github_get) as get:
        stats = get_github_stats("abc")

    assert stats == {
        "username":  "abc",
        "repos":     5,
        "stars":     12,
        "followers": 3,
        "languages": "Go, Python",
        "top_repos": [
            {"name": "one", "description": "First", "url": "https://github.com/abc/one", "stars": 7, "language": "Go"},
            {"name": "two", "description": None, "url": "https://github.com/abc/two", "stars": 4, "language": "Python"},
        ],
    }
    for call in get.call_args_list:
        assert call.kwargs["timeout"] == 10
        assert "Authorization" not in call.kwargs["headers"]


def test_github_token_is_sent() -> None:
    with patch.object(github_parser.requests, "get", side_effect=_github_get) as get:
        get_github_stats("abc", token="t0k")
    assert get.call_args.kwargs["headers"]["Authorization"] == "Bearer t0k"


def test_github_unknown_user() -> None:
    with patch.object(github_parser.requests, "get", side_effect=_github_get):
        assert get_github_stats("nobody") is None


def test_github_network_error() -> None:
    with patch.object(github_parser.requests, "get", side_effect=requests.ConnectionError("down")):
        assert get_github_stats("abc") is None


def test_github_empty_username() -> None:
    assert get_github_stats("  ") is None


# ── LeetCode ─────────────────────────────────────────────────────────────────

def _leetcode_payload(counts):
    return {
        "data": {
            "matchedUser": {
                "username": "abc_lc",
                "submitStats": {
                    "acSubmissionNum": [{"difficulty": d, "count": c} for d, c in counts.items()],
                },
            },
        },
    }


@pytest.fixture
def lc_session(monkeypatch):
    session = MagicMock()
    monkeypatch.setattr(leetcode_parser, "_get_session", lambda: session)
    return session


def test_leetcode_stats_uses_all_bucket(lc_session) -> None:
    lc_session.post.return_value = _response(
        payload=_leetcode_payload({"All": 200, "Easy": 90, "Medium": 80, "Hard": 20})
    )
    assert get_leetcode_stats("abc_lc") == {
        "username": "abc_lc", "total": 200, "easy": 90, "medium": 80, "hard": 20,
    }
    assert lc_session.post.call_args.kwargs["json"]["variables"] == {"username": "abc_lc"}


def test_leetcode_total_falls_back_to_sum(lc_session) -> None:
    lc_session.post.return_value = _response(payload=_leetcode_payload({"Easy": 5, "Medium": 3, "Hard": 1}))
    assert get_leetcode_stats("abc_lc")["total"] == 9


def test_leetcode_unknown_user(lc_session) -> None:
    lc_session.post.return_value = _response(payload={"data": {"matchedUser": None}})
    assert get_leetcode_stats("ghost") is None


def test_leetcode_graphql_error(lc_session) -> None:
    lc_session.post.return_value = _response(payload={"errors": [{"message": "That user does not exist."}]})
    assert get_leetcode_stats("ghost") is None


def test_leetcode_retries_once_on_rejection(lc_session) -> None:
    lc_session.post.return_value = _response(status_code=403)
    assert get_leetcode_stats("abc_lc") is None
    assert lc_session.post.call_count == 2


def test_leetcode_timeout(lc_session) -> None:
    lc_session.post.side_effect = requests.Timeout("slow")
    assert get_leetcode_stats("abc_lc") is None
    assert lc_session.post.call_count == 1


# ── Medium ───────────────────────────────────────────────────────────────────

def test_medium_posts() -> None:
    items = [{"title": f"Post {i}", "link": f"https://medium.com/@abc/{i}", "pubDate": "2024-01-0%d" % i} for i in range(1, 8)]
    with patch("medium_parser.requests.get", return_value=_response(payload={"status": "ok", "items": items})) as get:
        feed = get_medium_posts("@abc")

    assert len(feed["posts"]) == 5
    assert feed["latest"] == {"title": "Post 1", "link": "https://medium.com/@abc/1", "date": "2024-01-01"}
    assert get.call_args.kwargs["params"] == {"rss_url": "https://medium.com/feed/@abc"}
    assert get.call_args.kwargs["timeout"] == 10


def test_medium_http_error() -> None:
    with patch("medium_parser.requests.get", return_value=_response(status_code=500)):
        assert get_medium_posts("@abc") is None


def test_medium_missing_items() -> None:
    with patch("medium_parser.requests.get", return_value=_response(payload={"status": "error"})):
        assert get_medium_posts("@abc") is None


# ── LinkedIn ─────────────────────────────────────────────────────────────────

def test_linkedin_from_manual_data() -> None:
    social = {
        "linkedin": "abc-in",
        "linkedin_data": {"connections": 500, "followers": 1240, "latest_post": {"text": "hi"}},
    }
    assert get_linkedin_activity(social) == {
        "profile_url": "https://linkedin.com/in/abc-in",
        "connections": 500,
        "followers":   1240,
        "latest_post": {"text": "hi"},
    }


def test_linkedin_handle_only() -> None:
    assert get_linkedin_activity({"linkedin": "abc-in"})["profile_url"] == "https://linkedin.com/in/abc-in"


def test_linkedin_not_configured() -> None:
    assert get_linkedin_activity({}) is None
    assert get_linkedin_activity(None) is None
