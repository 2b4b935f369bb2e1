"""
app.py
------
Flask entry point for the profile Q&A chatbot.

Routes
------
POST /api/chat     → Classify a message and answer it
POST /api/refresh  → Re-fetch GitHub / LeetCode / Medium / LinkedIn data
GET  /api/data     → Snapshot of the cached profile data
GET  /api/kb-info  → Who the bot answers about
GET  /health       → Health check with per-source data presence

Configuration (environment or .env)
-----------------------------------
PORT, FLASK_DEBUG, LOG_LEVEL, KNOWLEDGE_BASE_PATH, GITHUB_TOKEN,
CACHE_TTL_SECONDS, FETCH_TIMEOUT, MAX_MESSAGE_LENGTH, PRESERVE_STALE_SLOTS
"""

import logging
import os
from functools import partial
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, jsonify, request

from chatbot_engine import ChatBot
from github_parser import get_github_stats
from knowledge_base import DEFAULT_KB_PATH, load_knowledge_base
from leetcode_parser import get_leetcode_stats
from linkedin_parser import get_linkedin_activity
from medium_parser import get_medium_posts
from profile_cache import DEFAULT_FETCH_TIMEOUT, DEFAULT_TTL_SECONDS, ProfileCache

load_dotenv()

# --------------------------------------------------------------------------- #
#  Configuration                                                               #
# --------------------------------------------------------------------------- #

LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO").upper()

logging.basicConfig(
    level  = getattr(logging, LOG_LEVEL, logging.INFO),
    format = "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

KNOWLEDGE_BASE_PATH: str = os.environ.get("KNOWLEDGE_BASE_PATH", DEFAULT_KB_PATH)

# Optional GitHub token for higher API rate limits
GITHUB_TOKEN: Optional[str] = os.environ.get("GITHUB_TOKEN")

CACHE_TTL_SECONDS    = int(os.environ.get("CACHE_TTL_SECONDS", DEFAULT_TTL_SECONDS))
FETCH_TIMEOUT        = float(os.environ.get("FETCH_TIMEOUT", DEFAULT_FETCH_TIMEOUT))
MAX_MESSAGE_LENGTH   = int(os.environ.get("MAX_MESSAGE_LENGTH", 500))
PRESERVE_STALE_SLOTS = os.environ.get("PRESERVE_STALE_SLOTS", "false").lower() == "true"

_EMPTY_MESSAGE_REPLY = "Please type a question. You can ask about skills, projects, education or contact details!"
_LONG_MESSAGE_REPLY  = "That message is a bit long for me. Could you ask it in fewer than {limit} characters?"


# --------------------------------------------------------------------------- #
#  Helpers                                                                     #
# --------------------------------------------------------------------------- #

def build_fetchers(knowledge_base: dict, github_token: Optional[str] = None) -> dict:
    """Zero-argument fetchers for each cache slot, bound to the profile's handles."""
    social = knowledge_base.get("social") or {}
    return {
        "github":   partial(get_github_stats, social.get("github", ""), github_token),
        "leetcode": partial(get_leetcode_stats, social.get("leetcode", "")),
        "medium":   partial(get_medium_posts, social.get("medium", "")),
        "linkedin": partial(get_linkedin_activity, social),
    }


def _serialise_snapshot(snapshot: dict) -> dict:
    data = dict(snapshot)
    last = data.get("last_fetch")
    data["last_fetch"] = last.isoformat() if last is not None else None
    return data


# --------------------------------------------------------------------------- #
#  Application factory                                                         #
# --------------------------------------------------------------------------- #

def create_app(
    knowledge_base: Optional[dict] = None,
    cache: Optional[ProfileCache] = None,
    rng=None,
    max_message_length: int = MAX_MESSAGE_LENGTH,
) -> Flask:
    """
    Build the Flask app.

    The knowledge base is loaded from KNOWLEDGE_BASE_PATH when not given;
    a KnowledgeBaseError from that load propagates to the caller.
    """
    kb = knowledge_base if knowledge_base is not None else load_knowledge_base(KNOWLEDGE_BASE_PATH)

    if cache is None:
        cache = ProfileCache(
            build_fetchers(kb, GITHUB_TOKEN),
            ttl_seconds         = CACHE_TTL_SECONDS,
            fetch_timeout       = FETCH_TIMEOUT,
            preserve_on_failure = PRESERVE_STALE_SLOTS,
        )

    bot = ChatBot(kb, rng=rng)

    app = Flask(__name__)
    app.extensions["profile_cache"] = cache
    app.extensions["chatbot"]       = bot

    # ── Chat ────────────────────────────────────────────────────────────────

    @app.route("/api/chat", methods=["POST"])
    def chat():
        payload = request.get_json(silent=True)
        message = payload.get("message") if isinstance(payload, dict) else None

        if not isinstance(message, str) or not message.strip():
            return jsonify({
                "success":  False,
                "error":    "Message required",
                "response": _EMPTY_MESSAGE_REPLY,
            }), 400

        if len(message) > max_message_length:
            return jsonify({
                "success":  False,
                "error":    f"Message exceeds {max_message_length} characters",
                "response": _LONG_MESSAGE_REPLY.format(limit=max_message_length),
            }), 400

        logger.info("Query: %r", message[:120])

        try:
            snapshot = cache.ensure_fresh()
            result   = bot.reply(message, snapshot)
        except Exception as exc:
            logger.exception("Chat pipeline error: %s", exc)
            return jsonify({"success": False, "response": bot.generator.fallback()}), 500

        return jsonify({
            "success":  True,
            "response": result["response"],
            "debug": {
                "intent":          result["intent"],
                "usedFuzzySearch": result["used_fuzzy"],
                "method":          result["method"],
            },
        })

    # ── Profile data ─────────────────────────────────────────────────────────

    @app.route("/api/refresh", methods=["POST"])
    def refresh():
        try:
            cache.refresh()
        except Exception as exc:
            logger.exception("Refresh failed: %s", exc)
            return jsonify({"success": False}), 500
        return jsonify({"success": True, "data": cache.status()})

    @app.route("/api/data", methods=["GET"])
    def data():
        return jsonify({"success": True, "cache": _serialise_snapshot(cache.snapshot())})

    @app.route("/api/kb-info", methods=["GET"])
    def kb_info():
        personal = kb.get("personal") or {}
        return jsonify({
            "name":             personal.get("name"),
            "title":            personal.get("title"),
            "experience":       personal.get("experience"),
            "availableIntents": len(bot.classifier.priority_order),
        })

    @app.route("/health", methods=["GET"])
    def health():
        return jsonify({
            "status": "ok",
            "bot":    (kb.get("bot") or {}).get("name"),
            "data":   cache.status(),
        })

    # ── Error handlers ───────────────────────────────────────────────────────

    @app.errorhandler(404)
    def not_found(e):
        return jsonify({"error": "Endpoint not found."}), 404

    @app.errorhandler(405)
    def method_not_allowed(e):
        return jsonify({"error": "Method not allowed."}), 405

    @app.errorhandler(500)
    def server_error(e):
        return jsonify({"success": False, "response": bot.generator.fallback()}), 500

    return app


# --------------------------------------------------------------------------- #
#  Entry point                                                                 #
# --------------------------------------------------------------------------- #

if __name__ == "__main__":
    application = create_app()
    bot_name    = application.extensions["chatbot"].kb["bot"].get("name", "bot")
    logger.info("Starting %s", bot_name)
    application.extensions["profile_cache"].refresh()

    port  = int(os.environ.get("PORT", 5000))
    debug = os.environ.get("FLASK_DEBUG", "false").lower() == "true"
    application.run(host="0.0.0.0", port=port, debug=debug)
