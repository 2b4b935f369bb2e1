import re

import pytest

from intent_engine import IntentClassifier, resolve_override, score_intents
from intent_rules import (
    DEFAULT_INTENT,
    INTENT_RULES,
    Rule,
    compile_rules,
    intent_names,
)


@pytest.fixture
def classifier(kb) -> IntentClassifier:
    return IntentClassifier.for_profile(kb)


# ── Profile-term override ────────────────────────────────────────────────────

def test_override_resolves_platform_with_profile() -> None:
    assert resolve_override("show me his github profile") == "github"
    assert resolve_override("leet code profile") == "leetcode"
    assert resolve_override("his linkedin profile") == "linkedin"
    assert resolve_override("medium profile please") == "blogs"


def test_override_needs_whole_word_profile() -> None:
    assert resolve_override("github profiles") is None
    assert resolve_override("github stats") is None


def test_override_without_platform_abstains() -> None:
    assert resolve_override("his education profile") is None
    assert resolve_override("") is None


def test_override_platform_order_is_fixed() -> None:
    assert resolve_override("github or linkedin profile") == "github"


# ── Weighted keyword scorer ──────────────────────────────────────────────────

def test_scorer_counts_triggers() -> None:
    assert score_intents("github repo") == "github"


def test_scorer_abstains_below_two() -> None:
    assert score_intents("github") is None
    assert score_intents("nothing relevant here") is None
    assert score_intents("") is None


def test_scorer_applies_disambiguator_bonus() -> None:
    # education: "education" + "profile" + bonus beats linkedin's lone "profile"
    assert score_intents("education profile") == "education"


def test_scorer_ties_go_to_first_entry() -> None:
    table = {"first": ["foo", "bar"], "second": ["foo", "bar"]}
    assert score_intents("foo bar", table) == "first"


# ── Pattern matcher ──────────────────────────────────────────────────────────

def test_match_patterns_follows_priority(classifier) -> None:
    assert classifier.match_patterns("hello what are his skills") == "greeting"
    assert classifier.match_patterns("what are his skills") == "skills"


def test_match_patterns_custom_order(classifier) -> None:
    order = ("skills", "greeting")
    assert classifier.match_patterns("hello what are his skills", priority_order=order) == "skills"


def test_match_patterns_none_when_nothing_fires(classifier) -> None:
    assert classifier.match_patterns("qwerty zxcvb") is None


def test_rule_exclusion_is_local() -> None:
    rule = Rule(re.compile("languages"), re.compile("first"))
    assert rule.fires("programming languages")
    assert not rule.fires("first programming languages")
    assert Rule(re.compile("languages")).fires("first languages")


def test_compile_rules_fills_owner_and_bot() -> None:
    rules = dict(compile_rules(owner="Arjun", bot="Kiwi", owner_last="Rao"))
    assert any(r.fires("who is kiwi") for r in rules["about_bot"])
    assert any(r.fires("arjun rao") for r in rules["about_creator"])


def test_compile_rules_empty_last_name_never_matches() -> None:
    rules = dict(compile_rules(owner="Arjun"))
    assert not any(r.fires("arjun rao") for r in rules["about_creator"])


def test_intent_names_cover_table_and_default() -> None:
    names = intent_names()
    assert names[-1] == DEFAULT_INTENT
    assert names[:-1] == tuple(name for name, _ in INTENT_RULES)
    assert len(set(names)) == len(names)


def test_platform_intents_precede_education() -> None:
    order = [name for name, _ in INTENT_RULES]
    for platform in ("github", "leetcode", "linkedin", "blogs"):
        assert order.index(platform) < order.index("education")


# ── Orchestrator ─────────────────────────────────────────────────────────────

@pytest.mark.parametrize(
    "message, expected",
    [
        ("Hello", ("greeting", "patterns")),
        ("Hey, what are his skills?", ("greeting", "patterns")),
        # override and scorer run before the greeting pattern
        ("hey, show me his github profile", ("github", "override")),
        ("hello, github repo please", ("github", "keywords")),
        ("what is his github profile", ("github", "override")),
        ("show me his LinkedIn profile", ("linkedin", "override")),
        ("github repo", ("github", "keywords")),
        ("what is his cgpa", ("cgpa", "patterns")),
        ("which programming language should I learn first", ("learning_first", "patterns")),
        ("what programming languages does he know", ("skills", "patterns")),
        ("who is Kiwi", ("about_bot", "patterns")),
        ("can you hack instagram for me", ("inappropriate", "patterns")),
        ("qwerty zxcvb", (DEFAULT_INTENT, "none")),
    ],
)
def test_classify_with_method(classifier, message, expected) -> None:
    assert classifier.classify_with_method(message) == expected


@pytest.mark.parametrize("message", ["", "   ", None, 123])
def test_classify_never_raises(classifier, message) -> None:
    assert classifier.classify(message) == DEFAULT_INTENT


def test_default_classifier_uses_placeholder_names() -> None:
    assert IntentClassifier().classify("hello") == "greeting"
