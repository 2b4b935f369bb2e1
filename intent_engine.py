"""
intent_engine.py
================
Maps a free-text chat message to exactly one intent name.

Classification pipeline (first strategy that answers wins):
  1. Profile-term override   – "profile" + a platform name → that platform
  2. Weighted keyword scoring – top intent if it reaches MIN_KEYWORD_SCORE
  3. Ordered pattern matching – first intent in priority order with a firing rule
  4. DEFAULT_INTENT

The override and the scorer exist so that loose patterns ("background",
"profile") cannot capture a message that is really about one platform.
The pattern matcher remains the exhaustive, final arbiter.
"""

import logging
import re
from typing import Optional

from intent_rules import (
    DEFAULT_INTENT,
    DISAMBIGUATOR,
    DISAMBIGUATOR_BONUS,
    MIN_KEYWORD_SCORE,
    PLATFORM_OVERRIDES,
    RAW_TEXT_INTENTS,
    WEIGHTED_KEYWORDS,
    compile_rules,
)
from text_normalizer import normalize

logger = logging.getLogger(__name__)

_DISAMBIGUATOR_WORD = re.compile(r"\b" + re.escape(DISAMBIGUATOR) + r"\b")

_OVERRIDES = [(intent, re.compile(pattern)) for intent, pattern in PLATFORM_OVERRIDES]


# --------------------------------------------------------------------------- #
#  Stateless strategies                                                        #
# --------------------------------------------------------------------------- #

def score_intents(normalized: str, table: Optional[dict] = None) -> Optional[str]:
    """
    Score intents by counting trigger-phrase substrings in *normalized*.

    Each trigger present adds one point.  When the disambiguator ("profile")
    and the intent's own name both occur, DISAMBIGUATOR_BONUS is added.
    Ties go to the intent defined first in the table.

    Returns the winning intent, or None if the best score is below
    MIN_KEYWORD_SCORE.
    """
    table = WEIGHTED_KEYWORDS if table is None else table
    if not normalized:
        return None

    has_disambiguator = DISAMBIGUATOR in normalized

    best_intent = None
    best_score  = 0
    for intent, words in table.items():
        score = sum(1 for w in words if w in normalized)
        if has_disambiguator and intent in normalized:
            score += DISAMBIGUATOR_BONUS
        if score > best_score:
            best_intent, best_score = intent, score

    if best_score < MIN_KEYWORD_SCORE:
        return None
    return best_intent


def resolve_override(normalized: str) -> Optional[str]:
    """Resolve a bare "profile" to the platform named alongside it, if any."""
    if not normalized or not _DISAMBIGUATOR_WORD.search(normalized):
        return None
    for intent, pattern in _OVERRIDES:
        if pattern.search(normalized):
            return intent
    return None


# --------------------------------------------------------------------------- #
#  Classifier                                                                  #
# --------------------------------------------------------------------------- #

class IntentClassifier:
    """
    Holds the compiled rule table and composes the three strategies.

    Parameters
    ----------
    rules : list[tuple[str, list[Rule]]], optional
        Output of intent_rules.compile_rules().  Built with placeholder
        names when omitted.
    """

    def __init__(self, rules: Optional[list] = None):
        self.rules = rules if rules is not None else compile_rules()
        self._by_intent = dict(self.rules)
        self.priority_order = tuple(intent for intent, _ in self.rules)

    @classmethod
    def for_profile(cls, knowledge_base: dict) -> "IntentClassifier":
        """Build a classifier whose {owner}/{bot} tokens come from the knowledge base."""
        personal = knowledge_base.get("personal") or {}
        bot      = knowledge_base.get("bot") or {}
        parts    = str(personal.get("name", "")).split()
        return cls(compile_rules(
            owner      = parts[0] if parts else "owner",
            owner_last = parts[-1] if len(parts) > 1 else "",
            bot        = str(bot.get("name", "")) or "bot",
        ))

    def match_patterns(
        self,
        normalized: str,
        raw: Optional[str] = None,
        priority_order: Optional[tuple] = None,
    ) -> Optional[str]:
        """
        Return the first intent (in *priority_order*) with a firing rule.

        Raw-text intents are also tried against *raw*.  Evaluation stops at
        the first firing rule.
        """
        order = priority_order if priority_order is not None else self.priority_order
        for intent in order:
            rules = self._by_intent.get(intent)
            if not rules:
                continue
            variants = [normalized]
            if raw is not None and intent in RAW_TEXT_INTENTS:
                variants.append(raw)
            for rule in rules:
                if any(rule.fires(text) for text in variants):
                    return intent
        return None

    def classify_with_method(self, message) -> tuple:
        """
        Classify *message* and report which strategy decided.

        Returns (intent, method) where method is one of
        "override", "keywords", "patterns" or "none".
        """
        normalized = normalize(message)
        raw        = message if isinstance(message, str) else ""

        intent = resolve_override(normalized)
        if intent:
            return intent, "override"

        intent = score_intents(normalized)
        if intent:
            return intent, "keywords"

        intent = self.match_patterns(normalized, raw)
        if intent:
            return intent, "patterns"

        return DEFAULT_INTENT, "none"

    def classify(self, message) -> str:
        """Return the intent for *message*; DEFAULT_INTENT when nothing matches."""
        intent, method = self.classify_with_method(message)
        logger.debug("classify: intent=%s method=%s", intent, method)
        return intent
