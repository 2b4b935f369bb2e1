"""
chatbot_engine.py  –  profile Q&A chatbot
=========================================
Answers questions about one person's skills, education, projects and links.

Matching pipeline (highest → lowest priority):
  1. Intent classification  (override → weighted keywords → ordered patterns)
  2. Fuzzy knowledge-base search, accepted only if validate_result() agrees
  3. The knowledge base's default response

The bot holds no per-conversation state.  Live profile data arrives as a
cache snapshot on every call, so the same message with the same snapshot
always takes the same path.
"""

import logging
from typing import Optional

from intent_engine import IntentClassifier
from intent_rules import DEFAULT_INTENT, intent_names
from response_engine import ResponseGenerator
from search_engine import FuzzySearchIndex, validate_result

logger = logging.getLogger(__name__)


class ChatBot:
    """
    Parameters
    ----------
    knowledge_base : dict                       – validated knowledge base
    rng            : random.Random, optional    – variation picker
    classifier     : IntentClassifier, optional – built from the knowledge base when omitted
    index          : FuzzySearchIndex, optional – built from the knowledge base when omitted

    Raises ValueError if any classifiable intent has no response handler.
    """

    def __init__(
        self,
        knowledge_base: dict,
        rng=None,
        classifier: Optional[IntentClassifier] = None,
        index: Optional[FuzzySearchIndex] = None,
    ):
        self.kb         = knowledge_base
        self.classifier = classifier if classifier is not None else IntentClassifier.for_profile(knowledge_base)
        self.index      = index if index is not None else FuzzySearchIndex.from_knowledge_base(knowledge_base)
        self.generator  = ResponseGenerator(knowledge_base, rng=rng)

        unhandled = [name for name in intent_names() if not self.generator.handles(name)]
        if unhandled:
            raise ValueError(f"No response handler for intents: {unhandled}")

    def reply(self, message: str, snapshot: Optional[dict] = None) -> dict:
        """
        Answer one message.

        Returns
        -------
        dict
            response   (str)  – reply text, never empty
            intent     (str)  – classified intent ("default" when nothing matched)
            used_fuzzy (bool) – True when the reply came from fuzzy search
            method     (str)  – "fuzzy" or "intent"
        """
        snapshot = snapshot or {}

        intent, strategy = self.classifier.classify_with_method(message)
        logger.info("Intent: %s (via %s)", intent, strategy)

        if intent != DEFAULT_INTENT:
            return self._result(self.generator.generate(intent, message, snapshot), intent, False)

        # ── No intent: try the knowledge base ───────────────────────────────
        hit = self.index.search(message)
        if hit is None:
            logger.info("No fuzzy results")
            return self._result(self.generator.generate(DEFAULT_INTENT, message, snapshot), intent, False)

        validation = validate_result(message, hit)
        logger.info(
            "Fuzzy: key=%s confidence=%s%% validation=%s%%",
            hit["key"], hit["confidence"], validation["validation_score"],
        )
        if not validation["is_valid"]:
            logger.info("Fuzzy validation failed")
            return self._result(self.generator.generate(DEFAULT_INTENT, message, snapshot), intent, False)

        return self._result(self.generator.generate_fuzzy(hit), intent, True)

    @staticmethod
    def _result(response: str, intent: str, used_fuzzy: bool) -> dict:
        return {
            "response":   response,
            "intent":     intent,
            "used_fuzzy": used_fuzzy,
            "method":     "fuzzy" if used_fuzzy else "intent",
        }
