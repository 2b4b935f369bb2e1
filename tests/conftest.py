"""Shared pytest fixtures: a small, fully controlled knowledge base and cache helpers."""

import copy
import random
from datetime import datetime, timedelta, timezone

import pytest

from knowledge_base import validate_knowledge_base

SAMPLE_KB = {
    "bot": {"name": "Kiwi"},
    "personal": {
        "name": "Arjun Rao",
        "title": "Backend Engineer",
        "experience": "2+ years",
        "current_company": "Acme Corp",
        "skills": ["Go", "Python"],
        "projects": [{"name": "Event Ingestor", "stack": "Go, Kafka"}],
        "links": {"site": "https://example.com"},
    },
    "social": {
        "github": "abc",
        "leetcode": "abc_lc",
        "medium": "@abc",
        "linkedin": "abc-in",
    },
    "education": [
        {"level": "Bachelor of Engineering", "field": "Computer Science", "year": 2023, "cgpa": 8.7},
        {"level": "12th Grade", "year": 2019, "percentage": 92.4},
    ],
    "responses": {
        "greeting": ["Hello from Kiwi!", "Hi there, Kiwi here."],
        "tech_stack": "Go and Python on AWS.",
        "projects_latest": "Recent repos:\n[GITHUB_REPOS]\nAt [COMPANY_NAME] on [PROJECT_DETAILS].[MYSTERY]",
        "blog_frequency": "About once a month.",
        "inappropriate_hacking": "No hacking help.",
        "homework": "No homework.",
        "dating": "Keep it professional.",
        "api_keys": "Secrets stay secret.",
        "favorite_food": "Arjun loves masala dosa with filter coffee.",
        "default": "I don't know that one.",
        "fallback": "Sorry, something went wrong.",
    },
}

GITHUB_RECORD = {
    "username": "abc",
    "repos": 5,
    "stars": 12,
    "followers": 3,
    "languages": "Go, Rust",
    "top_repos": [
        {"name": "repo-one", "description": "First repo", "url": "https://github.com/abc/repo-one", "stars": 7, "language": "Go"},
        {"name": "repo-two", "description": None, "url": "https://github.com/abc/repo-two", "stars": 5, "language": None},
    ],
}

LEETCODE_RECORD = {"username": "abc_lc", "total": 150, "easy": 80, "medium": 60, "hard": 10}


class FixedRng:
    """Always picks the last variation."""

    def randrange(self, n):
        return n - 1


class FakeClock:
    def __init__(self):
        self.now = datetime(2024, 1, 1, tzinfo=timezone.utc)

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += timedelta(seconds=seconds)


@pytest.fixture
def kb() -> dict:
    """A validated deep copy of SAMPLE_KB."""
    return validate_knowledge_base(copy.deepcopy(SAMPLE_KB))


@pytest.fixture
def rng() -> random.Random:
    return random.Random(0)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()
