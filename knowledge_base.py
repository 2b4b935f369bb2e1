"""
knowledge_base.py
-----------------
Loads and validates data/knowledge_base.json.

The knowledge base is read once at startup and treated as read-only for the
life of the process.  Unlike every other data source in this service, a
missing or malformed knowledge base is fatal: load_knowledge_base() raises
KnowledgeBaseError and the app refuses to start.

Sections
--------
    bot        {name, ...}
    personal   flat key -> str | number | list[...]  (name, title, experience, ...)
    social     platform usernames (github, leetcode, medium, linkedin, ...)
    education  list of {level, institution, field, year, cgpa | percentage}
    responses  intent key -> str | list[str]   (list = interchangeable variations)
"""

import json
import logging
import os

logger = logging.getLogger(__name__)

DEFAULT_KB_PATH = os.path.join(os.path.dirname(__file__), "data", "knowledge_base.json")

_REQUIRED_SECTIONS = ("bot", "personal", "social", "responses")
_REQUIRED_RESPONSES = ("default", "fallback")


class KnowledgeBaseError(ValueError):
    """The knowledge base is missing, unreadable or structurally invalid."""


def _check_response(key: str, value) -> None:
    if isinstance(value, str):
        if not value.strip():
            raise KnowledgeBaseError(f"responses.{key} is empty")
        return
    if isinstance(value, list) and value and all(isinstance(v, str) and v.strip() for v in value):
        return
    raise KnowledgeBaseError(
        f"responses.{key} must be a non-empty string or a list of non-empty strings"
    )


def validate_knowledge_base(data) -> dict:
    """
    Check the structure of an already-parsed knowledge base.

    Returns the same dict with ``education`` guaranteed to be a list
    (it may live under ``personal.education`` in older files).
    Raises KnowledgeBaseError on any structural problem.
    """
    if not isinstance(data, dict):
        raise KnowledgeBaseError("knowledge base root must be a JSON object")

    for section in _REQUIRED_SECTIONS:
        if not isinstance(data.get(section), dict):
            raise KnowledgeBaseError(f"section '{section}' is missing or not an object")

    responses = data["responses"]
    for key in _REQUIRED_RESPONSES:
        if key not in responses:
            raise KnowledgeBaseError(f"responses.{key} is required")
    for key, value in responses.items():
        _check_response(key, value)

    education = data.get("education")
    if education is None:
        education = data["personal"].get("education", [])
    if not isinstance(education, list):
        raise KnowledgeBaseError("section 'education' must be a list")
    data["education"] = [e for e in education if isinstance(e, dict)]

    return data


def load_knowledge_base(path: str = DEFAULT_KB_PATH) -> dict:
    """
    Read and validate the knowledge base at *path*.

    Raises
    ------
    KnowledgeBaseError
        File missing, not valid JSON, or structurally invalid.
    """
    try:
        with open(path, "r", encoding="utf-8") as fh:
            data = json.load(fh)
    except FileNotFoundError as exc:
        raise KnowledgeBaseError(f"knowledge base not found: {path}") from exc
    except (OSError, json.JSONDecodeError) as exc:
        raise KnowledgeBaseError(f"could not read knowledge base {path}: {exc}") from exc

    kb = validate_knowledge_base(data)
    logger.info(
        "Knowledge base loaded from %s (%d response keys)", path, len(kb["responses"])
    )
    return kb
