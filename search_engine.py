"""
search_engine.py
----------------
Fuzzy fallback search over the knowledge base.

When no intent matches, the chat pipeline asks FuzzySearchIndex for the
knowledge-base entry closest to the raw question, then double-checks the hit
with validate_result() before trusting it.

Index entries
-------------
    {"type": "response", "key": <intent key>,   "content": <variation>,  "keywords": "tech stack"}
    {"type": "personal", "key": "projects[1]",  "content": <json item>,  "keywords": "projects"}

Scores
------
rapidfuzz similarities (0-100, higher is better) are turned into a raw
distance in [0, 1] (0 = perfect).  A hit is accepted only when the raw
distance is strictly below ACCEPT_BELOW; confidence = round((1 - raw) * 100).
"""

import json
import logging
from typing import Optional

from rapidfuzz import fuzz, utils

logger = logging.getLogger(__name__)

# Fields / queries shorter than this never match
MIN_MATCH_CHARS = 3

# Raw distance must be strictly below this
ACCEPT_BELOW = 0.6

# Query words longer than this count as significant terms
_MIN_TERM_LEN = 3

_MIN_TERM_RATIO     = 0.4
_TRUSTED_CONFIDENCE = 70


# --------------------------------------------------------------------------- #
#  Index construction                                                          #
# --------------------------------------------------------------------------- #

def build_entries(knowledge_base: dict) -> list:
    """
    Flatten the knowledge base into searchable entries.

    One entry per response variation and one per personal scalar or list
    element.  Nested objects inside ``personal`` are skipped.
    """
    entries: list = []

    for key, value in (knowledge_base.get("responses") or {}).items():
        variations = value if isinstance(value, list) else [value]
        for text in variations:
            entries.append({
                "type":     "response",
                "key":      key,
                "content":  text,
                "keywords": " ".join(key.split("_")),
            })

    for key, value in (knowledge_base.get("personal") or {}).items():
        if isinstance(value, str):
            entries.append({"type": "personal", "key": key, "content": value, "keywords": key})
        elif isinstance(value, (int, float)) and not isinstance(value, bool):
            entries.append({"type": "personal", "key": key, "content": str(value), "keywords": key})
        elif isinstance(value, list):
            for idx, item in enumerate(value):
                content = item if isinstance(item, str) else json.dumps(item, ensure_ascii=False)
                entries.append({
                    "type":     "personal",
                    "key":      f"{key}[{idx}]",
                    "content":  content,
                    "keywords": key,
                })

    return entries


def _similarity(query: str, field: str) -> float:
    """
    Position-independent similarity (0-100) of a processed query and field.

    A query is aligned inside longer fields (partial matching, with a
    token-sorted variant for reordered words).  Fields shorter than the
    query are compared whole so a short keyword cannot win just by being
    a substring of the question.
    """
    if len(field) < MIN_MATCH_CHARS:
        return 0.0
    if len(field) >= len(query):
        return max(fuzz.partial_ratio(query, field), fuzz.partial_token_sort_ratio(query, field))
    return max(fuzz.ratio(query, field), fuzz.token_sort_ratio(query, field))


class FuzzySearchIndex:
    """
    Immutable fuzzy index over knowledge-base entries.

    Build once at startup with from_knowledge_base(); rebuild if the
    knowledge base ever changes.
    """

    def __init__(self, entries: list):
        self.entries = tuple(entries)
        # processed (keywords, content) per entry, computed once
        self._fields = tuple(
            (utils.default_process(e["keywords"]), utils.default_process(e["content"]))
            for e in self.entries
        )

    @classmethod
    def from_knowledge_base(cls, knowledge_base: dict) -> "FuzzySearchIndex":
        index = cls(build_entries(knowledge_base))
        logger.info("Fuzzy index built with %d entries", len(index))
        return index

    def __len__(self) -> int:
        return len(self.entries)

    def _distance(self, processed: str, position: int) -> float:
        """Raw distance (0 = perfect, 1 = nothing in common) of one entry."""
        best = max(_similarity(processed, field) for field in self._fields[position])
        return 1.0 - best / 100.0

    def search(self, query) -> Optional[dict]:
        """
        Return the best entry for *query* as a match result, or None.

        Result: {"key", "content", "confidence" (0-100), "type"}.
        Earlier entries win ties.
        """
        if not self.entries or not isinstance(query, str):
            return None
        processed = utils.default_process(query)
        if len(processed) < MIN_MATCH_CHARS:
            return None

        best_pos   = None
        best_score = 1.0
        for pos in range(len(self.entries)):
            score = self._distance(processed, pos)
            if best_pos is None or score < best_score:
                best_pos, best_score = pos, score

        if best_pos is None or not best_score < ACCEPT_BELOW:
            return None

        entry = self.entries[best_pos]
        return {
            "key":        entry["key"],
            "content":    entry["content"],
            "confidence": round((1 - best_score) * 100),
            "type":       entry["type"],
        }


# --------------------------------------------------------------------------- #
#  Validation                                                                  #
# --------------------------------------------------------------------------- #

def validate_result(query: str, result: dict) -> dict:
    """
    Second, lexical gate for a fuzzy hit.

    Significant terms are the query's lower-cased words longer than three
    characters.  The hit is valid when at least 40% of them occur in its
    content, or when the search confidence alone is 70 or more.

    Returns {"is_valid": bool, "validation_score": int 0-100, "matched_terms": list}.
    """
    terms   = [w for w in (query or "").lower().split() if len(w) > _MIN_TERM_LEN]
    content = str(result.get("content", "")).lower()
    matched = [t for t in terms if t in content]

    ratio = len(matched) / len(terms) if terms else 0.0

    return {
        "is_valid":         ratio >= _MIN_TERM_RATIO or result.get("confidence", 0) >= _TRUSTED_CONFIDENCE,
        "validation_score": round(ratio * 100),
        "matched_terms":    matched,
    }
