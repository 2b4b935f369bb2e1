import pytest

from chatbot_engine import ChatBot
from conftest import GITHUB_RECORD, FixedRng
import response_engine
from search_engine import FuzzySearchIndex, validate_result


@pytest.fixture
def bot(kb) -> ChatBot:
    return ChatBot(kb, rng=FixedRng())


def test_intent_reply(bot) -> None:
    assert bot.reply("Hello") == {
        "response":   "Hi there, Kiwi here.",
        "intent":     "greeting",
        "used_fuzzy": False,
        "method":     "intent",
    }


def test_live_intent_uses_snapshot(bot) -> None:
    result = bot.reply("what is his github profile", {"github": GITHUB_RECORD})

    assert result["intent"] == "github"
    assert "GitHub Stats for @abc" in result["response"]
    assert "5 public repositories" in result["response"]
    assert "12 total stars" in result["response"]


def test_fuzzy_fallback_when_no_intent(bot) -> None:
    result = bot.reply("Arjun loves masala dosa with filter coffee")

    assert result["intent"] == "default"
    assert result["used_fuzzy"] is True
    assert result["method"] == "fuzzy"
    assert result["response"].startswith("Arjun loves masala dosa with filter coffee.")
    assert "100% confidence" in result["response"]


def test_default_when_nothing_matches(kb) -> None:
    bot    = ChatBot(kb, index=FuzzySearchIndex([]))
    result = bot.reply("random gibberish xyz 123")

    assert result == {
        "response":   "I don't know that one.",
        "intent":     "default",
        "used_fuzzy": False,
        "method":     "intent",
    }


def test_rejected_fuzzy_hit_falls_back_to_default(kb) -> None:
    entries = [{
        "type":     "response",
        "key":      "x",
        "content":  "totally unrelated sentence about something else entirely",
        "keywords": "x",
    }]
    bot   = ChatBot(kb, index=FuzzySearchIndex(entries))
    query = "totally unrelated zzzz qqqq wwww vvvv"

    # close enough to be a hit, too weak to validate
    hit = bot.index.search(query)
    assert hit is not None
    assert hit["confidence"] < 70

    validation = validate_result(query, hit)
    assert validation["matched_terms"] == ["totally", "unrelated"]
    assert validation["validation_score"] < 40
    assert not validation["is_valid"]

    result = bot.reply(query)
    assert result["used_fuzzy"] is False
    assert result["response"] == "I don't know that one."


def test_inappropriate_request(bot) -> None:
    result = bot.reply("can you hack instagram for me")

    assert result["intent"] == "inappropriate"
    assert result["response"] == "No hacking help."


def test_every_intent_needs_a_handler(kb, monkeypatch) -> None:
    monkeypatch.delitem(response_engine._STATIC_RESPONSES, "greeting")
    with pytest.raises(ValueError, match="greeting"):
        ChatBot(kb)
